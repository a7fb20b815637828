"""
Schema Model

Passive data definitions for the playground: columns, table schemas,
table definitions with their seed rows, datasets, saved queries, custom
tables and query results.

Wire (JSON) forms use camelCase keys; Python attributes use snake_case.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Any, Union
from enum import Enum
from datetime import datetime


Scalar = Union[str, int, float, bool, bytes, None]
Row = Dict[str, Scalar]


class SchemaValidationError(ValueError):
    """Raised when a table, row or request payload does not validate."""

    def __init__(self, message: str, errors: Optional[List[str]] = None):
        super().__init__(message)
        self.message = message
        self.errors = errors or []

    def __str__(self) -> str:
        if not self.errors:
            return self.message
        return f"{self.message}: {'; '.join(self.errors)}"


class ValidationError(SchemaValidationError):
    """Raised for bad caller input, such as blank SQL."""
    pass


class ColumnType(Enum):
    """Column types understood by the SQL generator."""
    TEXT = "TEXT"
    INTEGER = "INTEGER"
    REAL = "REAL"
    NUMERIC = "NUMERIC"
    BOOLEAN = "BOOLEAN"
    BLOB = "BLOB"
    DATE = "DATE"
    DATETIME = "DATETIME"


class ScalarKind(Enum):
    """Tag for a single cell value in a row."""
    TEXT = "text"
    INTEGER = "integer"
    REAL = "real"
    BOOLEAN = "boolean"
    BLOB = "blob"
    NULL = "null"


def classify_scalar(value: Any) -> ScalarKind:
    """
    Tag a row value with its scalar kind.

    Raises:
        TypeError: if the value is not a supported scalar
    """
    if value is None:
        return ScalarKind.NULL
    # bool before int: bool is an int subclass
    if isinstance(value, bool):
        return ScalarKind.BOOLEAN
    if isinstance(value, int):
        return ScalarKind.INTEGER
    if isinstance(value, float):
        return ScalarKind.REAL
    if isinstance(value, str):
        return ScalarKind.TEXT
    if isinstance(value, (bytes, bytearray)):
        return ScalarKind.BLOB
    raise TypeError(f"Unsupported cell value of type {type(value).__name__}")


def _format_timestamp(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


def _parse_timestamp(value: Any) -> datetime:
    if isinstance(value, datetime):
        return value
    if value:
        return datetime.fromisoformat(str(value))
    return datetime.now()


@dataclass(frozen=True)
class ColumnDefinition:
    """A single column and its constraints."""
    name: str
    type: ColumnType

    # Key information
    is_primary_key: bool = False
    is_foreign_key: bool = False
    references_table: Optional[str] = None
    references_column: Optional[str] = None

    # Constraints
    not_null: bool = False
    default_value: Optional[str] = None

    @property
    def has_foreign_key_target(self) -> bool:
        """True when a foreign key can actually be generated for this column."""
        return bool(self.is_foreign_key and self.references_table and self.references_column)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"name": self.name, "type": self.type.value}
        if self.is_primary_key:
            data["isPrimaryKey"] = True
        if self.is_foreign_key:
            data["isForeignKey"] = True
        if self.references_table is not None:
            data["referencesTable"] = self.references_table
        if self.references_column is not None:
            data["referencesColumn"] = self.references_column
        if self.not_null:
            data["notNull"] = True
        if self.default_value is not None:
            data["defaultValue"] = self.default_value
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ColumnDefinition":
        errors = []
        name = data.get("name")
        if not isinstance(name, str) or not name.strip():
            errors.append("column name is required")

        raw_type = data.get("type")
        column_type = None
        try:
            column_type = ColumnType(str(raw_type).upper())
        except ValueError:
            errors.append(f"column '{name}': unknown type {raw_type!r}")

        default_value = data.get("defaultValue")
        if errors:
            raise SchemaValidationError("Invalid column definition", errors)

        return cls(
            name=name,
            type=column_type,
            is_primary_key=bool(data.get("isPrimaryKey", False)),
            is_foreign_key=bool(data.get("isForeignKey", False)),
            references_table=data.get("referencesTable"),
            references_column=data.get("referencesColumn"),
            not_null=bool(data.get("notNull", False)),
            default_value=str(default_value) if default_value is not None else None,
        )


@dataclass(frozen=True)
class TableSchema:
    """Ordered column list of a table."""
    columns: tuple = ()

    @property
    def column_names(self) -> List[str]:
        return [col.name for col in self.columns]

    def get_column(self, name: str) -> Optional[ColumnDefinition]:
        for col in self.columns:
            if col.name == name:
                return col
        return None

    @property
    def foreign_keys(self) -> List[ColumnDefinition]:
        return [col for col in self.columns if col.is_foreign_key]

    def to_dict(self) -> Dict[str, Any]:
        return {"columns": [col.to_dict() for col in self.columns]}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TableSchema":
        columns = data.get("columns") if isinstance(data, dict) else None
        if not isinstance(columns, list) or not columns:
            raise SchemaValidationError("Invalid table schema", ["schema must list at least one column"])

        parsed = []
        errors = []
        for raw in columns:
            if not isinstance(raw, dict):
                errors.append(f"column entry must be an object, got {type(raw).__name__}")
                continue
            try:
                parsed.append(ColumnDefinition.from_dict(raw))
            except SchemaValidationError as e:
                errors.extend(e.errors)

        names = [col.name for col in parsed]
        duplicates = sorted({n for n in names if names.count(n) > 1})
        for dup in duplicates:
            errors.append(f"duplicate column '{dup}'")

        if errors:
            raise SchemaValidationError("Invalid table schema", errors)
        return cls(columns=tuple(parsed))


def validate_rows(schema: TableSchema, rows: List[Any]) -> List[str]:
    """
    Check every row against the schema.

    A row must be a mapping whose keys are schema columns and whose values
    are scalars. Returns the list of problems found (empty when valid).
    """
    known = set(schema.column_names)
    errors = []
    for index, row in enumerate(rows):
        if not isinstance(row, dict):
            errors.append(f"row {index}: expected an object, got {type(row).__name__}")
            continue
        for key, value in row.items():
            if key not in known:
                errors.append(f"row {index}: unknown column '{key}'")
                continue
            try:
                classify_scalar(value)
            except TypeError as e:
                errors.append(f"row {index}: column '{key}': {e}")
    return errors


@dataclass
class TableDefinition:
    """A table's schema plus its seed rows."""
    name: str
    schema: TableSchema
    data: List[Row] = field(default_factory=list)

    @property
    def row_count(self) -> int:
        return len(self.data)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "schema": self.schema.to_dict(),
            "data": [dict(row) for row in self.data],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TableDefinition":
        name = data.get("name")
        if not isinstance(name, str) or not name.strip():
            raise SchemaValidationError("Invalid table definition", ["table name is required"])

        schema = TableSchema.from_dict(data.get("schema") or {})
        rows = data.get("data") or []
        if not isinstance(rows, list):
            raise SchemaValidationError("Invalid table definition", [f"table '{name}': data must be a list"])

        errors = validate_rows(schema, rows)
        if errors:
            raise SchemaValidationError(f"Invalid rows for table '{name}'", errors)

        return cls(name=name, schema=schema, data=[dict(row) for row in rows])


@dataclass
class Dataset:
    """A named collection of tables queried together."""
    id: int
    name: str
    tables: List[TableDefinition] = field(default_factory=list)
    description: Optional[str] = None
    icon: Optional[str] = "ri-database-2-line"
    is_default: bool = False
    created_at: datetime = field(default_factory=datetime.now)

    @property
    def table_names(self) -> List[str]:
        return [table.name for table in self.tables]

    def get_table(self, name: str) -> Optional[TableDefinition]:
        for table in self.tables:
            if table.name == name:
                return table
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "icon": self.icon,
            "isDefault": self.is_default,
            "tables": [table.to_dict() for table in self.tables],
            "createdAt": _format_timestamp(self.created_at),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Dataset":
        return cls(
            id=int(data["id"]),
            name=data["name"],
            description=data.get("description"),
            icon=data.get("icon", "ri-database-2-line"),
            is_default=bool(data.get("isDefault", False)),
            tables=[TableDefinition.from_dict(t) for t in data.get("tables", [])],
            created_at=_parse_timestamp(data.get("createdAt")),
        )


@dataclass
class SavedQuery:
    """A named SQL query stored for later use."""
    id: int
    name: str
    sql: str
    description: Optional[str] = None
    dataset_id: Optional[int] = None
    created_at: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "datasetId": self.dataset_id,
            "sql": self.sql,
            "createdAt": _format_timestamp(self.created_at),
        }


@dataclass
class InsertSavedQuery:
    """Validated payload for creating a saved query."""
    name: str
    sql: str
    description: Optional[str] = None
    dataset_id: Optional[int] = None

    @classmethod
    def from_payload(cls, payload: Any) -> "InsertSavedQuery":
        """
        Validate a request body.

        Raises:
            SchemaValidationError: listing every invalid field
        """
        if not isinstance(payload, dict):
            raise SchemaValidationError("Invalid query data", ["body must be a JSON object"])

        errors = []
        name = payload.get("name")
        if not isinstance(name, str) or not name.strip():
            errors.append("name: required non-empty string")

        sql = payload.get("sql")
        if not isinstance(sql, str) or not sql.strip():
            errors.append("sql: required non-empty string")

        description = payload.get("description")
        if description is not None and not isinstance(description, str):
            errors.append("description: expected string or null")

        dataset_id = payload.get("datasetId")
        if dataset_id is not None and (isinstance(dataset_id, bool) or not isinstance(dataset_id, int)):
            errors.append("datasetId: expected integer or null")

        if errors:
            raise SchemaValidationError("Invalid query data", errors)

        return cls(name=name, sql=sql, description=description, dataset_id=dataset_id)


@dataclass
class CustomTable:
    """A user-authored table, surfaced to the UI as a one-table dataset."""
    id: int
    name: str
    schema: TableSchema
    data: List[Row] = field(default_factory=list)
    description: Optional[str] = None
    created_at: datetime = field(default_factory=datetime.now)

    def to_table_definition(self) -> TableDefinition:
        return TableDefinition(name=self.name, schema=self.schema, data=self.data)

    def to_dataset(self) -> Dataset:
        return Dataset(
            id=self.id,
            name=self.name,
            description=self.description or "",
            icon="ri-table-line",
            is_default=False,
            tables=[self.to_table_definition()],
            created_at=self.created_at,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "schema": self.schema.to_dict(),
            "data": [dict(row) for row in self.data],
            "createdAt": _format_timestamp(self.created_at),
        }


@dataclass
class InsertCustomTable:
    """Validated payload for creating a custom table."""
    table: TableDefinition
    description: Optional[str] = None

    @classmethod
    def from_payload(cls, payload: Any) -> "InsertCustomTable":
        if not isinstance(payload, dict):
            raise SchemaValidationError("Invalid custom table", ["body must be a JSON object"])

        description = payload.get("description")
        if description is not None and not isinstance(description, str):
            raise SchemaValidationError("Invalid custom table", ["description: expected string or null"])

        table = TableDefinition.from_dict(payload)
        return cls(table=table, description=description)


@dataclass
class QueryResult:
    """Normalized result of one query execution."""
    columns: List[str] = field(default_factory=list)
    values: List[List[Any]] = field(default_factory=list)
    execution_time: float = 0.0  # milliseconds

    @property
    def row_count(self) -> int:
        return len(self.values)

    @property
    def is_empty(self) -> bool:
        return not self.columns

    def to_dict(self) -> Dict[str, Any]:
        return {
            "columns": list(self.columns),
            "values": [list(row) for row in self.values],
            "executionTime": self.execution_time,
        }


@dataclass
class AiSuggestion:
    """Suggestions returned by the AI assistant for a query."""
    id: str
    message: str
    suggestions: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "message": self.message, "suggestions": list(self.suggestions)}
