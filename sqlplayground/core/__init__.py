"""Core modules for SQL Playground."""

from sqlplayground.core.connection import EmbeddedDatabase, ResultSet
from sqlplayground.core.dataset_loader import DatasetLoader
from sqlplayground.core.query_runner import QueryRunner
from sqlplayground.core.session import DatabaseSession, SessionError
from sqlplayground.core.store import MemStorage

__all__ = [
    "EmbeddedDatabase",
    "ResultSet",
    "DatasetLoader",
    "QueryRunner",
    "DatabaseSession",
    "SessionError",
    "MemStorage",
]
