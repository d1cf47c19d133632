from abc import ABC, abstractmethod
from typing import Any, Dict, List, Sequence


class DataSink(ABC):
    """
    Storage backend under test.

    Every call is synchronous and all-or-nothing. Implementations raise
    ``StoreError`` tagged with the benchmark phase: ``truncate`` for
    :meth:`truncate`, ``seed`` for :meth:`execute` and ``read`` for the
    query methods.
    """

    name = "abstract"

    @abstractmethod
    def truncate(self, table: str):
        pass

    @abstractmethod
    def execute(self, query: str, rows: Sequence[Dict[str, Any]]):
        """Write a whole batch of rows with one statement"""
        pass

    @abstractmethod
    def select(self, query: str, params: Dict[str, Any]) -> List:
        """Run a read query and fetch every row"""
        pass

    @abstractmethod
    def run(self, query: str, params: Dict[str, Any]):
        """Run a query without fetching its rows"""
        pass

    @abstractmethod
    def explain_analyze(self, query: str, params: Dict[str, Any]) -> float:
        """Server-side execution time of ``query`` in milliseconds"""
        pass

    @abstractmethod
    def insert_statement(self, table: str) -> str:
        pass

    @abstractmethod
    def select_statement(self, table: str) -> str:
        pass

    def close(self):
        pass

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
