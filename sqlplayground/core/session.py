"""
Database Session

Owns the one embedded database of a playground session and serializes
every load and query against it, so at most one mutation is in flight.
"""

from typing import Optional
import logging
import threading

from sqlplayground.config import DatabaseConfig
from sqlplayground.core.connection import EmbeddedDatabase
from sqlplayground.core.dataset_loader import DatasetLoader
from sqlplayground.core.query_runner import QueryRunner
from sqlplayground.core.schema_model import Dataset, QueryResult

logger = logging.getLogger(__name__)


class SessionError(RuntimeError):
    """Raised when the session has no live database."""
    pass


class DatabaseSession:
    """
    Session context for the embedded database.

    Lifecycle:
        create()  - open a fresh database (no-op if one is open)
        reset()   - dispose and create again
        dispose() - close the database

    load_dataset() and run_query() hold the session lock, so a second
    load waits for the one in flight.
    """

    def __init__(self, config: Optional[DatabaseConfig] = None):
        self.config = config or DatabaseConfig()
        self._database: Optional[EmbeddedDatabase] = None
        self._lock = threading.RLock()
        self.current_dataset: Optional[Dataset] = None

    @property
    def database(self) -> EmbeddedDatabase:
        if self._database is None:
            raise SessionError("Database not initialized")
        return self._database

    @property
    def is_active(self) -> bool:
        return self._database is not None

    def create(self) -> EmbeddedDatabase:
        with self._lock:
            if self._database is None:
                self._database = EmbeddedDatabase(self.config)
                logger.info("Embedded database created")
            return self._database

    def reset(self) -> EmbeddedDatabase:
        with self._lock:
            self.dispose()
            return self.create()

    def dispose(self):
        with self._lock:
            if self._database is not None:
                self._database.close()
                self._database = None
                self.current_dataset = None
                logger.info("Embedded database disposed")

    def load_dataset(self, dataset: Dataset) -> int:
        """
        Materialize a dataset, replacing whatever was loaded before.

        Returns:
            Number of rows inserted
        """
        with self._lock:
            loader = DatasetLoader(self.database)
            self.current_dataset = None
            inserted = loader.load(dataset.tables)
            self.current_dataset = dataset
            logger.info(f"{dataset.name} dataset is ready for queries.")
            return inserted

    def run_query(self, sql: str) -> QueryResult:
        with self._lock:
            return QueryRunner(self.database).run(sql)

    def __enter__(self):
        self.create()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.dispose()
