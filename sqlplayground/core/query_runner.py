"""
Query Runner

Executes user SQL against the embedded database and normalizes whatever
the engine returns into a single QueryResult.
"""

import logging
import time

from sqlplayground.core.connection import EmbeddedDatabase
from sqlplayground.core.schema_model import QueryResult

logger = logging.getLogger(__name__)


class QueryRunner:
    """Runs arbitrary, unsanitized SQL and keeps only the first result set."""

    def __init__(self, database: EmbeddedDatabase):
        self.database = database

    def run(self, sql: str) -> QueryResult:
        """
        Execute SQL and time the engine call.

        Args:
            sql: Non-empty SQL text; may hold several statements

        Returns:
            QueryResult holding the first result set, or empty columns and
            values when no statement returned rows

        A SELECT that matches zero rows still counts as a result set, so
        ``SELECT x FROM t WHERE 0; SELECT 5 AS y`` yields column ``x`` and
        no rows, not the second statement's ``y``.
        """
        start = time.perf_counter()
        results = self.database.exec(sql)
        execution_time = (time.perf_counter() - start) * 1000

        if len(results) > 1:
            logger.debug(f"Query produced {len(results)} result sets; only the first is kept")

        if not results:
            return QueryResult(columns=[], values=[], execution_time=execution_time)

        first = results[0]
        return QueryResult(
            columns=first.columns,
            values=first.values,
            execution_time=execution_time,
        )
