"""AI assistant capability."""

from sqlplayground.inference.assistant import (
    AssistantError,
    MockSQLAssistant,
    OpenAISQLAssistant,
    SQLAssistant,
    create_assistant,
)
from sqlplayground.inference.prompts import PromptTemplates

__all__ = [
    "AssistantError",
    "MockSQLAssistant",
    "OpenAISQLAssistant",
    "SQLAssistant",
    "create_assistant",
    "PromptTemplates",
]
