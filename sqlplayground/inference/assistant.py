"""
SQL Assistant

AI capability behind query suggestions, SQL generation and explanations.
One interface, two implementations: a mock that returns canned answers
and a live one backed by the OpenAI chat completions API. Which one is
used is decided once, at startup, by create_assistant().
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional
import json
import logging
import time

import openai

from sqlplayground.config import LLMConfig
from sqlplayground.core.schema_model import AiSuggestion
from sqlplayground.inference.prompts import PromptTemplates

logger = logging.getLogger(__name__)


class AssistantError(RuntimeError):
    """Raised when the assistant cannot produce an answer."""
    pass


def _new_suggestion_id() -> str:
    return str(int(time.time() * 1000))


class SQLAssistant(ABC):
    """Interface of the AI assistant."""

    name = "base"

    @abstractmethod
    def suggest(self, sql: str) -> AiSuggestion:
        """Suggest improvements or alternatives for a query."""

    @abstractmethod
    def generate(self, description: str, tables: Optional[List[str]] = None) -> str:
        """Write SQL for a plain-language description."""

    @abstractmethod
    def explain(self, sql: str) -> str:
        """Explain a query in simple terms."""


class MockSQLAssistant(SQLAssistant):
    """Canned answers for running without an API key."""

    name = "mock"

    def suggest(self, sql: str) -> AiSuggestion:
        return AiSuggestion(
            id="1",
            message=PromptTemplates.MOCK_SUGGESTION_MESSAGE,
            suggestions=list(PromptTemplates.MOCK_SUGGESTIONS),
        )

    def generate(self, description: str, tables: Optional[List[str]] = None) -> str:
        return PromptTemplates.format_mock_sql(description)

    def explain(self, sql: str) -> str:
        return PromptTemplates.MOCK_EXPLANATION


class OpenAISQLAssistant(SQLAssistant):
    """
    Assistant backed by OpenAI chat completions in JSON mode.

    Each task sends its system prompt plus the user's text, and reads a
    single key out of the JSON object the model answers with.
    """

    name = "openai"

    def __init__(self, config: LLMConfig, client: Any = None):
        """
        Initialize the assistant.

        Args:
            config: LLM configuration
            client: Optional pre-built client exposing chat.completions.create
        """
        self.config = config
        self._client = client or openai.OpenAI(api_key=config.api_key, timeout=config.timeout)
        logger.info(f"Initialized OpenAI assistant with model: {config.model}")

    def _call_llm(self, system_prompt: str, prompt: str) -> Dict[str, Any]:
        """
        Make a JSON-mode call to the LLM.

        Raises:
            AssistantError: when every attempt fails or the answer is not JSON
        """
        attempts = max(1, self.config.retry_attempts)
        last_error: Optional[Exception] = None

        for attempt in range(attempts):
            try:
                response = self._client.chat.completions.create(
                    model=self.config.model,
                    messages=[
                        {"role": "system", "content": system_prompt},
                        {"role": "user", "content": prompt},
                    ],
                    temperature=self.config.temperature,
                    max_tokens=self.config.max_tokens,
                    response_format={"type": "json_object"},
                )
                content = response.choices[0].message.content
                return json.loads(content)

            except (json.JSONDecodeError, TypeError) as e:
                logger.warning(f"Failed to parse JSON response: {e}")
                last_error = e
            except openai.OpenAIError as e:
                logger.warning(f"LLM call failed (attempt {attempt + 1}): {e}")
                last_error = e

            if attempt < attempts - 1:
                time.sleep(2 ** attempt)

        raise AssistantError(f"LLM call failed: {last_error}")

    def suggest(self, sql: str) -> AiSuggestion:
        result = self._call_llm(PromptTemplates.SUGGEST_SYSTEM_PROMPT, sql)
        suggestions = result.get("suggestions") or []
        return AiSuggestion(
            id=_new_suggestion_id(),
            message=str(result.get("message", "")),
            suggestions=[str(s) for s in suggestions],
        )

    def generate(self, description: str, tables: Optional[List[str]] = None) -> str:
        result = self._call_llm(PromptTemplates.format_generate_system(tables), description)
        sql = result.get("sql")
        if not isinstance(sql, str):
            raise AssistantError("LLM answer has no 'sql' field")
        return sql

    def explain(self, sql: str) -> str:
        result = self._call_llm(PromptTemplates.EXPLAIN_SYSTEM_PROMPT, sql)
        explanation = result.get("explanation")
        if not isinstance(explanation, str):
            raise AssistantError("LLM answer has no 'explanation' field")
        return explanation


def create_assistant(config: LLMConfig) -> SQLAssistant:
    """Pick the assistant implementation for this configuration."""
    if config.provider == "mock":
        logger.info("Using mock SQL assistant")
        return MockSQLAssistant()

    if config.provider != "openai":
        logger.warning(f"Unsupported LLM provider: {config.provider}. Using mock SQL assistant.")
        return MockSQLAssistant()

    if not config.has_live_credentials:
        logger.warning("No OpenAI API key configured. AI features run in demo mode.")
        return MockSQLAssistant()

    return OpenAISQLAssistant(config)
