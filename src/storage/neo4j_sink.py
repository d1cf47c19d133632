from typing import Any, Dict, List, Optional, Sequence

from neo4j import GraphDatabase
from neo4j.exceptions import DriverError, Neo4jError

from src.benchmark.errors import StoreError
from src.storage.data_sink import DataSink


class Neo4jSink(DataSink):
    """Stores portfolio rows as nodes labelled with the table name"""

    name = "neo4j"

    def __init__(self, uri: str, user: str, password: str, max_open_conn: int,
                 database: Optional[str] = None, driver=None):
        self.database = database
        self.driver = driver or GraphDatabase.driver(
            uri,
            auth=(user, password),
            max_connection_pool_size=max_open_conn,
        )

    def insert_statement(self, table: str) -> str:
        return f"UNWIND $batch AS row CREATE (p:{table}) SET p = row"

    def select_statement(self, table: str) -> str:
        return f"""
            MATCH (p:{table})
            WHERE p.porto_stock_code = $stock_code AND p.has_credit = true
            RETURN p
        """

    def truncate(self, table: str):
        self._run("truncate", f"MATCH (n:{table}) DETACH DELETE n", {})

    def execute(self, query: str, rows: Sequence[Dict[str, Any]]):
        if len(rows) == 0:
            return
        self._run("seed", query, {'batch': list(rows)})

    def select(self, query: str, params: Dict[str, Any]) -> List:
        try:
            with self.driver.session(database=self.database) as session:
                return list(session.run(query, params))
        except (Neo4jError, DriverError) as e:
            raise StoreError("read", str(e)) from e

    def run(self, query: str, params: Dict[str, Any]):
        self._run("read", query, params)

    def explain_analyze(self, query: str, params: Dict[str, Any]) -> float:
        summary = self._run("read", "PROFILE " + query, params)
        return float((summary.result_available_after or 0) + (summary.result_consumed_after or 0))

    def close(self):
        self.driver.close()

    def _run(self, phase: str, query: str, params: Dict[str, Any]):
        try:
            with self.driver.session(database=self.database) as session:
                return session.run(query, params).consume()
        except (Neo4jError, DriverError) as e:
            raise StoreError(phase, str(e)) from e
