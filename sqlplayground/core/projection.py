"""
Result Projection

Read-only, presentation-oriented views over a QueryResult: CSV and JSON
export, and the boolean-cell heuristic used when rendering tables.
"""

from typing import Any, Dict, List, Optional
import json

from sqlplayground.core.schema_model import QueryResult


def _cell_text(value: Any) -> str:
    """Text of a cell the way the results grid prints it."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).hex()
    return str(value)


def to_csv(result: QueryResult) -> str:
    """
    Export as CSV.

    Cells are joined with commas as-is: embedded commas, quotes and
    newlines are not escaped.
    """
    header = ",".join(result.columns)
    rows = "\n".join(",".join(_cell_text(cell) for cell in row) for row in result.values)
    return f"{header}\n{rows}"


def to_records(result: QueryResult) -> List[Dict[str, Any]]:
    """One dict per row, keyed by column name in column order."""
    return [dict(zip(result.columns, row)) for row in result.values]


def _json_default(value: Any):
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).hex()
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def to_json(result: QueryResult) -> str:
    """Export as a pretty-printed JSON array of row objects."""
    return json.dumps(to_records(result), indent=2, ensure_ascii=False, default=_json_default)


def is_boolean_cell(value: Any) -> bool:
    """
    Whether a cell renders as a boolean indicator.

    True for booleans and for the numbers 0 and 1. This is a value
    heuristic, so a quantity of 1 is shown as a check mark too.
    """
    if isinstance(value, bool):
        return True
    if isinstance(value, (int, float)):
        return value == 0 or value == 1
    return False


def boolean_cell_state(value: Any) -> Optional[bool]:
    """True for true/1, False for false/0, None for cells that are not boolean."""
    if not is_boolean_cell(value):
        return None
    return value is True or value == 1


def format_cell(value: Any) -> str:
    """Display text for a results table."""
    state = boolean_cell_state(value)
    if state is not None:
        return "✓" if state else "✗"
    if value is None:
        return "NULL"
    return _cell_text(value)


def describe_result(result: QueryResult) -> str:
    """Short summary, e.g. '6 rows, 0.4ms'."""
    noun = "row" if result.row_count == 1 else "rows"
    return f"{result.row_count} {noun}, {result.execution_time:.1f}ms"
