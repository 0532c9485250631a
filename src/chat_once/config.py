"""Configuration for a single chat-completion run.

Every setting has a built-in default, so the program works with nothing but
``OPENAI_API_KEY`` in the environment. An optional YAML file (see
:func:`default_config_path`) may override any of them using camelCase keys.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Mapping

import yaml
from pydantic import BaseModel, ConfigDict, Field, HttpUrl, field_validator

from .errors import ConfigurationError

OPENAI_CHAT_URL = "https://api.openai.com/v1/chat/completions"
DEFAULT_MODEL = "gpt-3.5-turbo"
DEFAULT_SYSTEM_PROMPT = "You are a helpful assistant."
DEFAULT_USER_PROMPT = "Напиши короткий рассказ о роботе, который научился мечтать."
DEFAULT_MAX_TOKENS = 150
DEFAULT_TIMEOUT = 600.0  # 10 minutes


class RunnerCfg(BaseModel):
    """Everything :class:`~chat_once.runner.RequestRunner` needs besides the key."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="forbid")

    endpoint: HttpUrl = Field(default=OPENAI_CHAT_URL, validate_default=True)  # type: ignore[assignment]
    model: str = DEFAULT_MODEL
    system_prompt: str = Field(default=DEFAULT_SYSTEM_PROMPT, alias="systemPrompt")
    user_prompt: str = Field(default=DEFAULT_USER_PROMPT, alias="userPrompt")
    max_tokens: int | None = Field(default=DEFAULT_MAX_TOKENS, alias="maxTokens")
    temperature: float | None = Field(default=None, ge=0.0, le=2.0)
    env_key: str = Field(default="OPENAI_API_KEY", alias="envKey")
    timeout: float | None = DEFAULT_TIMEOUT  # None blocks indefinitely
    log_level: str = Field(default="WARNING", alias="logLevel")

    @field_validator("model", "env_key")
    @classmethod
    def _not_empty(cls, v: str) -> str:
        if not v:
            raise ValueError("must not be empty")
        return v

    @field_validator("max_tokens")
    @classmethod
    def _positive_tokens(cls, v: int | None) -> int | None:
        if v is not None and v <= 0:
            raise ValueError("maxTokens must be a positive integer")
        return v

    @field_validator("timeout")
    @classmethod
    def _positive_timeout(cls, v: float | None) -> float | None:
        if v is not None and v <= 0:
            raise ValueError("timeout must be positive or null")
        return v

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, v: str) -> str:
        level = v.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level '{v}'")
        return level


def parse_config(raw: Mapping[str, Any]) -> RunnerCfg:
    """Validate a raw mapping (e.g. parsed YAML) into a :class:`RunnerCfg`."""
    return RunnerCfg.model_validate(raw)


def default_config_path() -> Path:
    env_path = os.getenv("CHAT_ONCE_CONFIG_PATH")
    if env_path:
        return Path(env_path)
    return Path.home() / ".chat-once.yaml"


def load_config(path: str | Path) -> RunnerCfg:
    """Parse *path* and return the validated configuration."""

    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(path)

    with path.open("rt", encoding="utf-8") as fp:
        data = yaml.safe_load(fp) or {}

    if not isinstance(data, dict):
        raise ValueError(f"{path} must contain a mapping at the top level")

    return parse_config(data)


def resolve_api_key(env_key: str = "OPENAI_API_KEY") -> str:
    """Return the credential stored in *env_key*, failing if unset or empty."""
    token = os.getenv(env_key)
    if not token:
        raise ConfigurationError(f"Environment variable '{env_key}' not set or empty")
    return token
