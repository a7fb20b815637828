"""
Embedded Database

In-process SQLite instance behind the three operations the playground
needs: exec (run a script, collect result sets), run (parameterized
statement) and close.
"""

from dataclasses import dataclass, field
from typing import Optional, Any, List, Dict, Sequence
import logging

import sqlparse
from sqlalchemy import create_engine, text, inspect
from sqlalchemy.engine import Engine, Connection
from sqlalchemy.pool import StaticPool

from sqlplayground.config import DatabaseConfig

logger = logging.getLogger(__name__)


class DatabaseClosedError(RuntimeError):
    """Raised when an operation is attempted on a closed database."""
    pass


@dataclass
class ResultSet:
    """Rows produced by one statement."""
    columns: List[str] = field(default_factory=list)
    values: List[List[Any]] = field(default_factory=list)


class EmbeddedDatabase:
    """
    A single in-memory SQLite database.

    Features:
    - One persistent connection (StaticPool), so the in-memory data
      survives between calls
    - Autocommit: every statement is committed as soon as it runs
    - Multi-statement scripts split into statements with sqlparse
    """

    def __init__(self, config: Optional[DatabaseConfig] = None):
        """
        Initialize the embedded database.

        Args:
            config: Database configuration object
        """
        self.config = config or DatabaseConfig()
        self._engine: Optional[Engine] = self._create_engine()
        self._connection: Optional[Connection] = self._engine.connect().execution_options(
            isolation_level="AUTOCOMMIT"
        )

    def _create_engine(self) -> Engine:
        """Create SQLAlchemy engine bound to a single SQLite connection."""
        engine = create_engine(
            self.config.url,
            echo=self.config.echo,
            poolclass=StaticPool,
            connect_args={"check_same_thread": False},
        )
        logger.debug(f"Created embedded database engine for {self.config.url}")
        return engine

    @property
    def is_open(self) -> bool:
        return self._connection is not None

    @property
    def connection(self) -> Connection:
        if self._connection is None:
            raise DatabaseClosedError("Database is closed")
        return self._connection

    @property
    def engine(self) -> Engine:
        if self._engine is None:
            raise DatabaseClosedError("Database is closed")
        return self._engine

    def exec(self, sql: str) -> List[ResultSet]:
        """
        Execute one or more statements.

        Returns one ResultSet for every statement that returns rows, in
        statement order. Statements that return nothing (DDL, DML)
        contribute no result set. Engine errors propagate unchanged and
        stop the script at the failing statement.
        """
        results = []
        for statement in sqlparse.split(sql):
            statement = statement.strip()
            if not statement:
                continue

            result = self.connection.exec_driver_sql(statement)
            if result.returns_rows:
                columns = list(result.keys())
                values = [list(row) for row in result.fetchall()]
                results.append(ResultSet(columns=columns, values=values))
            else:
                result.close()

        return results

    def run(self, sql: str, params: Optional[Sequence[Any]] = None) -> None:
        """Execute a single parameterized statement with positional (?) params."""
        result = self.connection.exec_driver_sql(sql, tuple(params or ()))
        result.close()

    def get_table_names(self) -> List[str]:
        """Get list of user table names."""
        return inspect(self.connection).get_table_names()

    def get_database_info(self) -> Dict[str, Any]:
        """Get engine information."""
        info = {
            "type": "sqlite",
            "dialect": str(self.engine.dialect.name),
        }

        result = self.connection.execute(text("SELECT sqlite_version()"))
        info["version"] = result.scalar()
        return info

    def close(self):
        """Close the connection and dispose of the engine."""
        if self._connection is not None:
            self._connection.close()
            self._connection = None
        if self._engine is not None:
            self._engine.dispose()
            self._engine = None
            logger.debug("Embedded database closed")

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.close()
