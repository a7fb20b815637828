"""Tests for the schema model and payload validation."""

from datetime import datetime

import pytest

from sqlplayground.core.schema_model import (
    ColumnDefinition,
    ColumnType,
    CustomTable,
    Dataset,
    InsertCustomTable,
    InsertSavedQuery,
    QueryResult,
    ScalarKind,
    SchemaValidationError,
    TableDefinition,
    TableSchema,
    classify_scalar,
    validate_rows,
)


class TestClassifyScalar:
    @pytest.mark.parametrize("value,kind", [
        (None, ScalarKind.NULL),
        (True, ScalarKind.BOOLEAN),
        (0, ScalarKind.INTEGER),
        (1.5, ScalarKind.REAL),
        ("x", ScalarKind.TEXT),
        (b"\x00", ScalarKind.BLOB),
    ])
    def test_kinds(self, value, kind):
        assert classify_scalar(value) is kind

    def test_rejects_containers(self):
        with pytest.raises(TypeError):
            classify_scalar({"nested": 1})


class TestColumnDefinition:
    def test_from_dict(self):
        column = ColumnDefinition.from_dict({
            "name": "accommodation_id",
            "type": "integer",
            "isForeignKey": True,
            "referencesTable": "accommodations",
            "referencesColumn": "id",
        })
        assert column.type is ColumnType.INTEGER
        assert column.has_foreign_key_target

    def test_foreign_key_without_target(self):
        column = ColumnDefinition.from_dict({"name": "x", "type": "INTEGER", "isForeignKey": True})
        assert column.is_foreign_key
        assert not column.has_foreign_key_target

    def test_unknown_type(self):
        with pytest.raises(SchemaValidationError) as exc_info:
            ColumnDefinition.from_dict({"name": "x", "type": "VARCHAR2"})
        assert "unknown type" in exc_info.value.errors[0]

    def test_to_dict_omits_unset_flags(self):
        column = ColumnDefinition("name", ColumnType.TEXT, not_null=True)
        assert column.to_dict() == {"name": "name", "type": "TEXT", "notNull": True}


class TestTableSchema:
    def test_requires_columns(self):
        with pytest.raises(SchemaValidationError):
            TableSchema.from_dict({"columns": []})

    def test_rejects_duplicate_columns(self):
        with pytest.raises(SchemaValidationError) as exc_info:
            TableSchema.from_dict({"columns": [
                {"name": "id", "type": "INTEGER"},
                {"name": "id", "type": "TEXT"},
            ]})
        assert "duplicate column 'id'" in exc_info.value.errors

    def test_column_lookup(self):
        schema = TableSchema.from_dict({"columns": [
            {"name": "id", "type": "INTEGER"},
            {"name": "owner", "type": "INTEGER", "isForeignKey": True},
        ]})
        assert schema.column_names == ["id", "owner"]
        assert schema.get_column("owner").is_foreign_key
        assert schema.get_column("missing") is None
        assert [c.name for c in schema.foreign_keys] == ["owner"]


class TestRowValidation:
    @pytest.fixture
    def schema(self):
        return TableSchema.from_dict({"columns": [
            {"name": "id", "type": "INTEGER"},
            {"name": "name", "type": "TEXT"},
        ]})

    def test_valid_rows(self, schema):
        assert validate_rows(schema, [{"id": 1, "name": "a"}, {"id": 2}]) == []

    def test_unknown_column(self, schema):
        errors = validate_rows(schema, [{"id": 1, "colour": "red"}])
        assert errors == ["row 0: unknown column 'colour'"]

    def test_non_scalar_value(self, schema):
        errors = validate_rows(schema, [{"id": 1}, {"id": [1, 2]}])
        assert len(errors) == 1
        assert errors[0].startswith("row 1: column 'id'")

    def test_table_definition_rejects_bad_rows(self):
        with pytest.raises(SchemaValidationError) as exc_info:
            TableDefinition.from_dict({
                "name": "t",
                "schema": {"columns": [{"name": "id", "type": "INTEGER"}]},
                "data": ["not a row"],
            })
        assert "Invalid rows for table 't'" in str(exc_info.value)


class TestDataset:
    def test_round_trip_keys(self, sample_datasets):
        data = sample_datasets["Accommodations"].to_dict()
        assert data["isDefault"] is True
        assert [t["name"] for t in data["tables"]] == ["accommodations", "amenities", "reviews"]
        assert isinstance(data["createdAt"], str)

        restored = Dataset.from_dict(data)
        assert restored.table_names == ["accommodations", "amenities", "reviews"]
        assert restored.get_table("reviews").row_count == 7

    def test_custom_table_as_dataset(self):
        schema = TableSchema((ColumnDefinition("id", ColumnType.INTEGER),))
        table = CustomTable(id=3, name="mine", schema=schema, data=[{"id": 1}],
                            created_at=datetime(2024, 1, 1))
        dataset = table.to_dataset()
        assert dataset.id == 3
        assert dataset.icon == "ri-table-line"
        assert dataset.description == ""
        assert dataset.table_names == ["mine"]


class TestInsertSavedQuery:
    def test_valid_payload(self):
        insert = InsertSavedQuery.from_payload({"name": "q", "sql": "SELECT 1", "datasetId": 2})
        assert insert.dataset_id == 2
        assert insert.description is None

    def test_missing_sql(self):
        with pytest.raises(SchemaValidationError) as exc_info:
            InsertSavedQuery.from_payload({"name": "q"})
        assert exc_info.value.message == "Invalid query data"
        assert exc_info.value.errors == ["sql: required non-empty string"]

    def test_bool_is_not_a_dataset_id(self):
        with pytest.raises(SchemaValidationError):
            InsertSavedQuery.from_payload({"name": "q", "sql": "SELECT 1", "datasetId": True})

    def test_body_must_be_object(self):
        with pytest.raises(SchemaValidationError):
            InsertSavedQuery.from_payload(["q"])


class TestInsertCustomTable:
    def test_valid_payload(self):
        insert = InsertCustomTable.from_payload({
            "name": "notes",
            "description": "my notes",
            "schema": {"columns": [{"name": "body", "type": "TEXT"}]},
            "data": [{"body": "hello"}],
        })
        assert insert.table.name == "notes"
        assert insert.table.row_count == 1

    def test_missing_schema(self):
        with pytest.raises(SchemaValidationError):
            InsertCustomTable.from_payload({"name": "notes"})


class TestQueryResult:
    def test_empty_result(self):
        result = QueryResult()
        assert result.is_empty
        assert result.row_count == 0

    def test_to_dict(self):
        result = QueryResult(columns=["a"], values=[[1]], execution_time=1.5)
        assert result.to_dict() == {"columns": ["a"], "values": [[1]], "executionTime": 1.5}
