"""
Thin parameterized-query executor over the Flask-SQLAlchemy session.

SQL uses named ``:param`` placeholders. ``query`` returns plain dict rows;
``execute`` commits immediately and reports the inserted id and the number of
affected rows, so consecutive calls are independent of each other.
"""
import logging
from typing import Any, Dict, Iterable, List, NamedTuple, Optional, Tuple

from sqlalchemy import inspect, text

from motoshop.extensions import db

logger = logging.getLogger(__name__)


class ExecuteResult(NamedTuple):
    insert_id: Optional[int]
    affected_rows: int


class DataGateway:
    def __init__(self, session=None):
        self._session = session if session is not None else db.session

    def query(self, sql: str, params: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
        result = self._session.execute(text(sql), params or {})
        return [dict(row) for row in result.mappings().all()]

    def execute(self, sql: str, params: Optional[Dict[str, Any]] = None) -> ExecuteResult:
        try:
            result = self._session.execute(text(sql), params or {})
            self._session.commit()
        except Exception:
            self._session.rollback()
            raise
        return ExecuteResult(insert_id=result.lastrowid, affected_rows=result.rowcount)

    def show_columns(self, table: str) -> List[Dict[str, Any]]:
        """Column introspection, one dict (name, type, nullable) per column."""
        inspector = inspect(self._session.get_bind())
        if not inspector.has_table(table):
            return []
        return [
            {'name': col['name'], 'type': str(col['type']), 'nullable': col.get('nullable', True)}
            for col in inspector.get_columns(table)
        ]

    @staticmethod
    def in_clause(prefix: str, values: Iterable[Any]) -> Tuple[str, Dict[str, Any]]:
        """
        Build ``:prefix_0, :prefix_1, ...`` placeholders and their params for an
        ``IN (...)`` with a dynamic element count.
        """
        params = {f"{prefix}_{i}": value for i, value in enumerate(values)}
        placeholders = ", ".join(f":{name}" for name in params)
        return placeholders, params

    def dialect_name(self) -> str:
        return self._session.get_bind().dialect.name
