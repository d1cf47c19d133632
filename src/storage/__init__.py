from .data_sink import DataSink
from .mysql_sink import MySQLSink, parse_dsn
from .neo4j_sink import Neo4jSink

__all__ = [
    'DataSink',
    'MySQLSink',
    'Neo4jSink',
    'parse_dsn',
]
