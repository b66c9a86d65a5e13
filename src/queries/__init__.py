"""Query execution package."""

from src.queries.executor import DueItem, LedgerQueryExecutor, QueryExecutionError

__all__ = ["DueItem", "LedgerQueryExecutor", "QueryExecutionError"]
