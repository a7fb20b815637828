"""
In-memory Store

Keyed maps with auto-increment ids for datasets, saved queries and
custom tables. Seeded with the built-in samples; nothing is persisted.
"""

from typing import Any, Dict, List, Optional
import logging
import threading

from sqlplayground.core.schema_model import (
    CustomTable,
    Dataset,
    InsertCustomTable,
    InsertSavedQuery,
    SavedQuery,
    SchemaValidationError,
    TableDefinition,
)
from sqlplayground.config import PlaygroundConfig
from sqlplayground.demo.sample_data import (
    build_sample_datasets,
    build_sample_queries,
    load_datasets_from_yaml,
)

logger = logging.getLogger(__name__)


class MemStorage:
    """
    Central in-memory repository for the playground's records.

    Ids start at 1 and continue after the highest seeded id.
    """

    def __init__(self, seed: bool = True):
        self._datasets: Dict[int, Dataset] = {}
        self._saved_queries: Dict[int, SavedQuery] = {}
        self._custom_tables: Dict[int, CustomTable] = {}

        self._dataset_id = 1
        self._query_id = 1
        self._table_id = 1
        self._lock = threading.Lock()

        if seed:
            self._init_sample_data()

    def _init_sample_data(self):
        """Add the built-in datasets and starter queries."""
        for dataset in build_sample_datasets():
            self._datasets[dataset.id] = dataset
            self._dataset_id = max(self._dataset_id, dataset.id + 1)

        for query in build_sample_queries():
            self._saved_queries[query.id] = query
            self._query_id = max(self._query_id, query.id + 1)

        logger.debug(
            f"Seeded {len(self._datasets)} datasets and {len(self._saved_queries)} saved queries"
        )

    # Dataset operations

    def get_datasets(self) -> List[Dataset]:
        return list(self._datasets.values())

    def get_dataset(self, dataset_id: int) -> Optional[Dataset]:
        return self._datasets.get(dataset_id)

    def create_dataset(
        self,
        name: str,
        tables: List[TableDefinition],
        description: Optional[str] = None,
        icon: Optional[str] = "ri-database-2-line",
        is_default: bool = False,
    ) -> Dataset:
        with self._lock:
            dataset = Dataset(
                id=self._dataset_id,
                name=name,
                tables=list(tables),
                description=description,
                icon=icon,
                is_default=is_default,
            )
            self._datasets[dataset.id] = dataset
            self._dataset_id += 1
        return dataset

    def add_datasets_from_dicts(self, items: List[Dict[str, Any]]) -> List[Dataset]:
        """
        Create datasets from wire-form dicts (e.g. loaded from YAML).

        Every item is validated before any dataset is created.

        Raises:
            SchemaValidationError: for a missing name or an invalid table
        """
        parsed = []
        for index, item in enumerate(items):
            name = item.get("name") if isinstance(item, dict) else None
            if not isinstance(name, str) or not name.strip():
                raise SchemaValidationError("Invalid dataset", [f"dataset {index}: name is required"])

            raw_tables = item.get("tables") or []
            if not isinstance(raw_tables, list) or not all(isinstance(t, dict) for t in raw_tables):
                raise SchemaValidationError("Invalid dataset", [f"dataset '{name}': tables must be a list of objects"])

            parsed.append((item, [TableDefinition.from_dict(t) for t in raw_tables]))

        created = []
        for item, tables in parsed:
            created.append(self.create_dataset(
                name=item["name"],
                tables=tables,
                description=item.get("description"),
                icon=item.get("icon", "ri-database-2-line"),
                is_default=bool(item.get("isDefault", False)),
            ))
        return created

    # Saved query operations

    def get_saved_queries(self) -> List[SavedQuery]:
        return list(self._saved_queries.values())

    def get_saved_query(self, query_id: int) -> Optional[SavedQuery]:
        return self._saved_queries.get(query_id)

    def create_saved_query(self, insert: InsertSavedQuery) -> SavedQuery:
        with self._lock:
            query = SavedQuery(
                id=self._query_id,
                name=insert.name,
                sql=insert.sql,
                description=insert.description,
                dataset_id=insert.dataset_id,
            )
            self._saved_queries[query.id] = query
            self._query_id += 1
        return query

    # Custom table operations

    def get_custom_tables(self) -> List[CustomTable]:
        return list(self._custom_tables.values())

    def get_custom_table(self, table_id: int) -> Optional[CustomTable]:
        return self._custom_tables.get(table_id)

    def create_custom_table(self, insert: InsertCustomTable) -> CustomTable:
        with self._lock:
            table = CustomTable(
                id=self._table_id,
                name=insert.table.name,
                schema=insert.table.schema,
                data=insert.table.data,
                description=insert.description,
            )
            self._custom_tables[table.id] = table
            self._table_id += 1
        return table


def build_storage(config: PlaygroundConfig) -> MemStorage:
    """Seeded store plus any datasets from config.datasets_file."""
    storage = MemStorage()
    if config.datasets_file:
        created = storage.add_datasets_from_dicts(load_datasets_from_yaml(config.datasets_file))
        logger.info(f"Loaded {len(created)} datasets from {config.datasets_file}")
    return storage
