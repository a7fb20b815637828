"""
SQL Generator

Pure text generation from table definitions to SQL statements. The output
is meant to be both executable and readable, since it doubles as the
"export as SQL" script for a dataset.
"""

from typing import Iterable, List

from sqlplayground.core.schema_model import (
    ColumnDefinition,
    ScalarKind,
    Scalar,
    TableDefinition,
    classify_scalar,
)


def format_column(column: ColumnDefinition) -> str:
    """Render one column definition: name, type, then PK / NOT NULL / DEFAULT."""
    col_def = f"{column.name} {column.type.value}"

    if column.is_primary_key:
        col_def += " PRIMARY KEY"

    if column.not_null:
        col_def += " NOT NULL"

    if column.default_value is not None:
        col_def += f" DEFAULT {column.default_value}"

    return col_def


def generate_create_table(table: TableDefinition) -> str:
    """Generate the CREATE TABLE statement for a table definition."""
    columns = ", ".join(format_column(col) for col in table.schema.columns)
    return f"CREATE TABLE {table.name} ({columns});"


def generate_foreign_key(table: TableDefinition, column: ColumnDefinition) -> str:
    """Generate the ALTER TABLE statement adding a column's foreign key."""
    return (
        f"ALTER TABLE {table.name} ADD FOREIGN KEY ({column.name}) "
        f"REFERENCES {column.references_table}({column.references_column});"
    )


def format_value(value: Scalar) -> str:
    """Render a scalar as a SQL literal."""
    kind = classify_scalar(value)

    if kind is ScalarKind.TEXT:
        escaped = value.replace("'", "''")
        return f"'{escaped}'"
    if kind is ScalarKind.NULL:
        return "NULL"
    if kind is ScalarKind.BOOLEAN:
        return "TRUE" if value else "FALSE"
    if kind is ScalarKind.BLOB:
        return f"X'{bytes(value).hex()}'"
    return str(value)


def generate_insert(table: TableDefinition) -> str:
    """
    Generate a single multi-row INSERT for the table's data.

    The column list comes from the first row's keys. Returns an empty
    string when the table has no rows.
    """
    if not table.data:
        return ""

    columns = list(table.data[0].keys())

    rows = []
    for row in table.data:
        values = [format_value(row.get(col)) for col in columns]
        rows.append(f"({', '.join(values)})")

    return f"INSERT INTO {table.name} ({', '.join(columns)}) VALUES {', '.join(rows)};"


def generate_dataset_sql(tables: Iterable[TableDefinition]) -> str:
    """Full bootstrap script: every CREATE, a blank line, then every INSERT."""
    tables = list(tables)

    creates: List[str] = [generate_create_table(table) for table in tables]
    inserts: List[str] = [sql for sql in (generate_insert(table) for table in tables) if sql]

    script = "\n".join(creates)
    if inserts:
        script += "\n\n" + "\n".join(inserts)
    return script + "\n"
