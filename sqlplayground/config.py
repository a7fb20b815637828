"""
Configuration management for SQL Playground.

Handles the embedded database settings, the AI assistant (LLM) settings,
the HTTP server options and where extra datasets are loaded from.
"""

from dataclasses import dataclass, field
from typing import Optional, Dict, Any
import os

import yaml


DEMO_API_KEY = "DEMO-API-KEY"


@dataclass
class DatabaseConfig:
    """Embedded database configuration."""
    url: str = "sqlite://"  # In-memory SQLite
    echo: bool = False


@dataclass
class LLMConfig:
    """LLM configuration for the AI assistant."""
    provider: str = "openai"  # "openai" or "mock"
    model: str = "gpt-4o"
    api_key: Optional[str] = None
    temperature: float = 0.3
    max_tokens: int = 1024
    timeout: int = 30
    retry_attempts: int = 1

    def __post_init__(self):
        if not self.api_key:
            self.api_key = os.environ.get("OPENAI_API_KEY")

    @property
    def has_live_credentials(self) -> bool:
        """True when a real API key is configured."""
        return bool(self.api_key) and self.api_key != DEMO_API_KEY


@dataclass
class ServerConfig:
    """HTTP server options."""
    host: str = "127.0.0.1"
    port: int = 5000
    debug: bool = False


@dataclass
class PlaygroundConfig:
    """Main configuration container."""
    database: DatabaseConfig = field(default_factory=DatabaseConfig)
    llm: LLMConfig = field(default_factory=LLMConfig)
    server: ServerConfig = field(default_factory=ServerConfig)

    # YAML file with extra datasets added to the store at startup
    datasets_file: Optional[str] = None
    # Dataset (id or name) selected when a session starts
    default_dataset: Optional[str] = None
    verbose: bool = False

    @classmethod
    def from_yaml(cls, path: str) -> "PlaygroundConfig":
        """Load configuration from YAML file."""
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        return cls._from_dict(data)

    @classmethod
    def _from_dict(cls, data: Dict[str, Any]) -> "PlaygroundConfig":
        """Create config from dictionary."""
        db_data = data.get("database", {}) or {}
        db_config = DatabaseConfig(
            url=db_data.get("url", "sqlite://"),
            echo=bool(db_data.get("echo", False)),
        )

        llm_data = data.get("llm", {}) or {}
        llm_config = LLMConfig(
            provider=llm_data.get("provider", "openai"),
            model=llm_data.get("model", "gpt-4o"),
            api_key=llm_data.get("api_key"),
            temperature=llm_data.get("temperature", 0.3),
            max_tokens=llm_data.get("max_tokens", 1024),
            timeout=llm_data.get("timeout", 30),
            retry_attempts=llm_data.get("retry_attempts", 1),
        )

        server_data = data.get("server", {}) or {}
        server_config = ServerConfig(
            host=server_data.get("host", "127.0.0.1"),
            port=int(server_data.get("port", 5000)),
            debug=bool(server_data.get("debug", False)),
        )

        default_dataset = data.get("default_dataset")
        return cls(
            database=db_config,
            llm=llm_config,
            server=server_config,
            datasets_file=data.get("datasets_file"),
            default_dataset=str(default_dataset) if default_dataset is not None else None,
            verbose=data.get("verbose", False),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert config to dictionary. The API key is never exported."""
        return {
            "database": {
                "url": self.database.url,
                "echo": self.database.echo,
            },
            "llm": {
                "provider": self.llm.provider,
                "model": self.llm.model,
                "temperature": self.llm.temperature,
                "max_tokens": self.llm.max_tokens,
                "timeout": self.llm.timeout,
                "retry_attempts": self.llm.retry_attempts,
            },
            "server": {
                "host": self.server.host,
                "port": self.server.port,
                "debug": self.server.debug,
            },
            "datasets_file": self.datasets_file,
            "default_dataset": self.default_dataset,
            "verbose": self.verbose,
        }


def create_default_config(
    llm_provider: str = "openai",
    host: str = "127.0.0.1",
    port: int = 5000,
    datasets_file: Optional[str] = None,
) -> PlaygroundConfig:
    """Factory function to create a default configuration."""
    return PlaygroundConfig(
        database=DatabaseConfig(),
        llm=LLMConfig(provider=llm_provider),
        server=ServerConfig(host=host, port=port),
        datasets_file=datasets_file,
    )
