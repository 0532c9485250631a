"""Value objects for the chat-completions request and response bodies."""

from __future__ import annotations

from typing import List, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

Role = Literal["system", "user", "assistant"]


class ChatMessage(BaseModel):
    """A single role-tagged message."""

    model_config = ConfigDict(frozen=True)

    role: Role
    content: str | None = None


class ChatRequest(BaseModel):
    """Body of ``POST /v1/chat/completions``."""

    model_config = ConfigDict(frozen=True)

    model: str = Field(min_length=1)
    messages: List[ChatMessage] = Field(min_length=1)
    max_tokens: int | None = Field(default=None, gt=0)
    temperature: float | None = Field(default=None, ge=0.0, le=2.0)

    def to_json(self) -> bytes:
        """Serialize to JSON, leaving out unset optional fields."""
        return self.model_dump_json(exclude_none=True).encode("utf-8")


class ResponseMessage(BaseModel):
    """Message as returned by the API; any role string is accepted."""

    model_config = ConfigDict(frozen=True)

    role: str = ""
    content: str | None = None


class Choice(BaseModel):
    model_config = ConfigDict(frozen=True)

    index: int = 0
    message: ResponseMessage = Field(default_factory=ResponseMessage)
    finish_reason: str | None = None


class Usage(BaseModel):
    model_config = ConfigDict(frozen=True)

    prompt_tokens: int = Field(default=0, ge=0)
    completion_tokens: int = Field(default=0, ge=0)
    total_tokens: int = Field(default=0, ge=0)


class ChatResponse(BaseModel):
    """Decoded completion. ``choices`` may legitimately be empty."""

    model_config = ConfigDict(frozen=True)

    id: str = ""
    object: str = ""
    created: int = 0
    model: str = ""
    choices: List[Choice] = Field(default_factory=list)
    usage: Usage = Field(default_factory=Usage)

    @field_validator("choices", mode="before")
    @classmethod
    def _null_choices(cls, v):  # noqa: ANN001
        return [] if v is None else v

    @model_validator(mode="before")
    @classmethod
    def _null_body(cls, data):  # noqa: ANN001
        # a literal ``null`` body decodes to an empty completion
        return {} if data is None else data
