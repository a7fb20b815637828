"""
Prompt Templates for the SQL Assistant

System prompts for query suggestions, query generation and query
explanation, plus the canned answers used when no API key is configured.
"""

from typing import List, Optional
from dataclasses import dataclass


DEFAULT_TABLES = ["accommodations", "amenities", "reviews"]


@dataclass
class PromptTemplates:
    """Collection of prompt templates for the assistant tasks."""

    SUGGEST_SYSTEM_PROMPT = (
        "You are a SQL expert assistant. Analyze the SQL query and provide 2-3 specific, "
        "concise suggestions for improvements or alternatives. Respond with JSON in this "
        "format: { 'message': 'brief observation', 'suggestions': ['suggestion1', "
        "'suggestion2', 'suggestion3'] }"
    )

    GENERATE_SYSTEM_PROMPT = (
        "You are a SQL expert assistant. Generate a SQL query based on the user's "
        "description. The available tables are: {tables}. Respond with JSON in this "
        "format: {{ 'sql': 'generated SQL query with comments' }}"
    )

    EXPLAIN_SYSTEM_PROMPT = (
        "You are a SQL expert assistant. Explain the given SQL query in simple terms, "
        "line by line. Respond with JSON in this format: { 'explanation': 'detailed explanation' }"
    )

    # Canned answers for demo mode
    MOCK_SUGGESTION_MESSAGE = (
        "I notice you're looking for specific data. Consider these query improvements:"
    )

    MOCK_SUGGESTIONS = [
        "Add LIMIT 10 to see only top results",
        "Consider adding ORDER BY to sort your results",
        "You could use column aliases for better readability",
    ]

    MOCK_GENERATED_SQL = (
        "-- Generated SQL based on your description:\n"
        "-- \"{description}\"\n"
        "SELECT * FROM accommodations\n"
        "WHERE price_per_night < 100\n"
        "ORDER BY rating DESC\n"
        "LIMIT 5;"
    )

    MOCK_EXPLANATION = (
        "This query selects data from the accommodations table, filters for prices less "
        "than $100, and sorts the results by rating in descending order to show the "
        "highest-rated options first."
    )

    @classmethod
    def format_generate_system(cls, tables: Optional[List[str]] = None) -> str:
        """Format the generation prompt with the tables the user can query."""
        return cls.GENERATE_SYSTEM_PROMPT.format(tables=", ".join(tables or DEFAULT_TABLES))

    @classmethod
    def format_mock_sql(cls, description: str) -> str:
        return cls.MOCK_GENERATED_SQL.format(description=description)
