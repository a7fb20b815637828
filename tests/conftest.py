"""Shared fixtures for the SQL Playground tests."""

import pytest

from sqlplayground.config import PlaygroundConfig, create_default_config
from sqlplayground.core.connection import EmbeddedDatabase
from sqlplayground.core.schema_model import TableDefinition
from sqlplayground.core.session import DatabaseSession
from sqlplayground.core.store import MemStorage
from sqlplayground.demo.sample_data import build_sample_datasets


def _make_table(name, columns, rows=None):
    """Build a TableDefinition from wire-form column dicts."""
    return TableDefinition.from_dict({
        "name": name,
        "schema": {"columns": columns},
        "data": rows or [],
    })


@pytest.fixture
def database():
    """A fresh in-memory database, closed after the test."""
    db = EmbeddedDatabase()
    yield db
    db.close()


@pytest.fixture
def session():
    with DatabaseSession() as s:
        yield s


@pytest.fixture
def storage():
    return MemStorage()


@pytest.fixture
def sample_datasets():
    return {dataset.name: dataset for dataset in build_sample_datasets()}


@pytest.fixture
def mock_config(monkeypatch) -> PlaygroundConfig:
    """Default configuration with the assistant forced into mock mode."""
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    config = create_default_config(llm_provider="mock")
    return config


@pytest.fixture
def make_table():
    """Factory for TableDefinitions built from wire-form column dicts."""
    return _make_table
