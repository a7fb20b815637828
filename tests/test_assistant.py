"""Tests for the AI assistant implementations."""

import json
from types import SimpleNamespace

import openai
import pytest

from sqlplayground.config import DEMO_API_KEY, LLMConfig
from sqlplayground.inference.assistant import (
    AssistantError,
    MockSQLAssistant,
    OpenAISQLAssistant,
    create_assistant,
)
from sqlplayground.inference.prompts import PromptTemplates


class FakeCompletions:
    """Stands in for client.chat.completions, replaying canned contents."""

    def __init__(self, *contents):
        self.contents = list(contents)
        self.calls = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        content = self.contents.pop(0)
        if isinstance(content, Exception):
            raise content
        message = SimpleNamespace(content=content)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


def fake_client(*contents):
    completions = FakeCompletions(*contents)
    return SimpleNamespace(chat=SimpleNamespace(completions=completions)), completions


@pytest.fixture
def llm_config():
    return LLMConfig(provider="openai", api_key="sk-test", retry_attempts=1)


class TestMockAssistant:
    def test_suggest(self):
        suggestion = MockSQLAssistant().suggest("SELECT * FROM accommodations")
        assert suggestion.id == "1"
        assert suggestion.message == PromptTemplates.MOCK_SUGGESTION_MESSAGE
        assert len(suggestion.suggestions) == 3

    def test_generate_mentions_description(self):
        sql = MockSQLAssistant().generate("cheap places")
        assert sql.startswith("-- Generated SQL based on your description:")
        assert '"cheap places"' in sql

    def test_explain(self):
        assert MockSQLAssistant().explain("SELECT 1") == PromptTemplates.MOCK_EXPLANATION


class TestOpenAIAssistant:
    def test_suggest(self, llm_config):
        client, completions = fake_client(json.dumps({
            "message": "Looks fine",
            "suggestions": ["Add LIMIT", "Use aliases"],
        }))
        assistant = OpenAISQLAssistant(llm_config, client=client)

        suggestion = assistant.suggest("SELECT * FROM reviews")
        assert suggestion.message == "Looks fine"
        assert suggestion.suggestions == ["Add LIMIT", "Use aliases"]
        assert suggestion.id.isdigit()

        call = completions.calls[0]
        assert call["model"] == "gpt-4o"
        assert call["response_format"] == {"type": "json_object"}
        assert call["messages"][1] == {"role": "user", "content": "SELECT * FROM reviews"}

    def test_generate_uses_tables(self, llm_config):
        client, completions = fake_client(json.dumps({"sql": "SELECT * FROM restaurants;"}))
        assistant = OpenAISQLAssistant(llm_config, client=client)

        assert assistant.generate("all restaurants", ["restaurants"]) == "SELECT * FROM restaurants;"
        system = completions.calls[0]["messages"][0]["content"]
        assert "The available tables are: restaurants." in system

    def test_generate_default_tables(self, llm_config):
        client, completions = fake_client(json.dumps({"sql": "SELECT 1;"}))
        OpenAISQLAssistant(llm_config, client=client).generate("anything")
        system = completions.calls[0]["messages"][0]["content"]
        assert "accommodations, amenities, reviews" in system

    def test_explain(self, llm_config):
        client, _ = fake_client(json.dumps({"explanation": "Selects everything."}))
        assert OpenAISQLAssistant(llm_config, client=client).explain("SELECT *") == "Selects everything."

    def test_invalid_json(self, llm_config):
        client, _ = fake_client("not json")
        with pytest.raises(AssistantError):
            OpenAISQLAssistant(llm_config, client=client).explain("SELECT 1")

    def test_missing_field(self, llm_config):
        client, _ = fake_client(json.dumps({"answer": "SELECT 1"}))
        with pytest.raises(AssistantError):
            OpenAISQLAssistant(llm_config, client=client).generate("x")

    def test_api_error(self, llm_config):
        client, _ = fake_client(openai.OpenAIError("quota exceeded"))
        with pytest.raises(AssistantError, match="quota exceeded"):
            OpenAISQLAssistant(llm_config, client=client).suggest("SELECT 1")

    def test_retries(self, monkeypatch):
        monkeypatch.setattr("sqlplayground.inference.assistant.time.sleep", lambda _: None)
        config = LLMConfig(provider="openai", api_key="sk-test", retry_attempts=2)
        client, completions = fake_client(
            openai.OpenAIError("temporary"), json.dumps({"explanation": "ok"})
        )
        assert OpenAISQLAssistant(config, client=client).explain("SELECT 1") == "ok"
        assert len(completions.calls) == 2


class TestCreateAssistant:
    @pytest.fixture(autouse=True)
    def no_env_key(self, monkeypatch):
        monkeypatch.delenv("OPENAI_API_KEY", raising=False)

    def test_mock_provider(self):
        assert isinstance(create_assistant(LLMConfig(provider="mock", api_key="sk-x")), MockSQLAssistant)

    def test_missing_key(self):
        assert isinstance(create_assistant(LLMConfig(provider="openai")), MockSQLAssistant)

    def test_demo_key(self):
        assert isinstance(create_assistant(LLMConfig(api_key=DEMO_API_KEY)), MockSQLAssistant)

    def test_unknown_provider(self):
        assert isinstance(create_assistant(LLMConfig(provider="other", api_key="sk-x")), MockSQLAssistant)

    def test_live_key(self):
        assistant = create_assistant(LLMConfig(provider="openai", api_key="sk-test"))
        assert isinstance(assistant, OpenAISQLAssistant)
        assert assistant.name == "openai"
