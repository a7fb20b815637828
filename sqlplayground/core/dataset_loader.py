"""
Dataset Loader

Brings the embedded database in sync with a dataset's table definitions:
drop whatever is there, create the new tables, try to add foreign keys,
then insert the rows.

The load is sequential and not transactional. If a row insert fails,
everything inserted before it stays in the database.
"""

from typing import Iterable, List
import logging

from sqlalchemy.exc import SQLAlchemyError

from sqlplayground.core.connection import EmbeddedDatabase
from sqlplayground.core.schema_model import TableDefinition, Row
from sqlplayground.core.sql_generator import generate_create_table, generate_foreign_key

logger = logging.getLogger(__name__)

# SQLite's own AUTOINCREMENT bookkeeping table; it cannot be dropped.
RESERVED_TABLES = ("sqlite_sequence",)


class DatasetLoader:
    """
    Materializes table definitions into an embedded database.

    This module handles:
    - Clearing existing tables
    - Table creation from generated DDL
    - Best-effort foreign key constraints
    - Row-by-row parameterized inserts
    """

    def __init__(self, database: EmbeddedDatabase):
        """
        Initialize the loader.

        Args:
            database: Embedded database to load into
        """
        self.database = database

    def load(self, tables: Iterable[TableDefinition]) -> int:
        """
        Replace the database contents with the given tables.

        Args:
            tables: Table definitions to materialize, in creation order

        Returns:
            Number of rows inserted
        """
        tables = list(tables)
        logger.info(f"Loading {len(tables)} tables...")

        self.drop_existing_tables()

        for table in tables:
            self.database.exec(generate_create_table(table))
            logger.debug(f"Created table: {table.name}")

        for table in tables:
            self._apply_foreign_keys(table)

        inserted = 0
        for table in tables:
            inserted += self._insert_rows(table)

        logger.info(f"Dataset load complete. Inserted {inserted} rows.")
        return inserted

    def existing_tables(self) -> List[str]:
        """Table names currently in the catalog, reserved tables included."""
        results = self.database.exec("SELECT name FROM sqlite_master WHERE type='table';")
        if not results:
            return []
        return [row[0] for row in results[0].values]

    def drop_existing_tables(self):
        """Drop every table except the engine's reserved ones."""
        for table_name in self.existing_tables():
            if table_name in RESERVED_TABLES:
                continue
            self.database.exec(f"DROP TABLE IF EXISTS {table_name};")
            logger.debug(f"Dropped table: {table_name}")

    def _apply_foreign_keys(self, table: TableDefinition):
        """Try to add each declared foreign key; failures are only logged."""
        for column in table.schema.columns:
            if not column.has_foreign_key_target:
                continue
            try:
                self.database.exec(generate_foreign_key(table, column))
            except SQLAlchemyError as e:
                logger.warning(
                    f"Foreign key {table.name}.{column.name} -> "
                    f"{column.references_table}.{column.references_column} not applied: {e}"
                )

    def _insert_rows(self, table: TableDefinition) -> int:
        """Insert rows one at a time; the first failing row aborts the load."""
        for row in table.data:
            self.database.run(*build_row_insert(table.name, row))
        return len(table.data)


def build_row_insert(table_name: str, row: Row):
    """Parameterized INSERT for one row, columns taken from the row's own keys."""
    columns = list(row.keys())
    placeholders = ", ".join("?" for _ in columns)
    sql = f"INSERT INTO {table_name} ({', '.join(columns)}) VALUES ({placeholders});"
    return sql, [row[col] for col in columns]
