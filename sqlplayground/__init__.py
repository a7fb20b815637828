"""
SQL Playground - Educational SQL Sandbox

Pick a sample dataset, query it with SQL in an embedded SQLite database,
export results, save queries and get AI suggestions.
"""

__version__ = "0.1.0"
__author__ = "SQL Playground Team"

from sqlplayground.config import PlaygroundConfig
from sqlplayground.core.session import DatabaseSession

__all__ = ["PlaygroundConfig", "DatabaseSession", "__version__"]
