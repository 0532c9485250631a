"""Synchronous runner that performs one chat-completion round trip."""

from __future__ import annotations

import json
import logging

import httpx
from pydantic import BaseModel, ConfigDict, ValidationError

from .config import RunnerCfg
from .errors import ApiError, ConfigurationError, DecodeError, RequestBuildError, TransportError
from .models import ChatMessage, ChatRequest, ChatResponse

logger = logging.getLogger(__name__)


def _pretty(data: bytes) -> str:
    """Return a prettified string representation of *data* if it's JSON."""
    try:
        obj = json.loads(data.decode("utf-8"))
    except ValueError:
        return data.decode("utf-8", errors="replace")
    return json.dumps(obj, indent=2, ensure_ascii=False)


class ChatOutcome(BaseModel):
    """Decoded response together with the raw body it came from."""

    model_config = ConfigDict(frozen=True)

    response: ChatResponse
    raw_body: str

    @property
    def reply(self) -> str | None:
        """Content of the first choice, or ``None`` when there are no choices."""
        if not self.response.choices:
            return None
        return self.response.choices[0].message.content or ""


class RequestRunner:
    """Build, send and decode a single system+user chat-completion request."""

    def __init__(self, api_key: str, cfg: RunnerCfg | None = None) -> None:
        if not api_key:
            raise ConfigurationError("API key must not be empty")
        self._api_key = api_key
        self._cfg = cfg or RunnerCfg()

    def build_request(self) -> ChatRequest:
        cfg = self._cfg
        try:
            return ChatRequest(
                model=cfg.model,
                messages=[
                    ChatMessage(role="system", content=cfg.system_prompt),
                    ChatMessage(role="user", content=cfg.user_prompt),
                ],
                max_tokens=cfg.max_tokens,
                temperature=cfg.temperature,
            )
        except ValidationError as exc:
            raise RequestBuildError(f"Invalid chat request: {exc}") from exc

    def run(self) -> ChatOutcome:
        """Perform the round trip.

        Raises one of the :mod:`chat_once.errors` exceptions on failure. An
        empty ``choices`` list is not a failure; see :attr:`ChatOutcome.reply`.
        """
        request = self.build_request()
        try:
            body = request.to_json()
        except ValueError as exc:
            raise RequestBuildError(f"Could not serialize chat request: {exc}") from exc

        endpoint = str(self._cfg.endpoint)
        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self._api_key}",
        }

        logger.info("Sending request to %s", endpoint)
        logger.debug("Outgoing body:\n%s", _pretty(body))

        try:
            with httpx.Client(timeout=httpx.Timeout(self._cfg.timeout)) as client:
                resp = client.post(endpoint, content=body, headers=headers)
        except httpx.RequestError as exc:
            raise TransportError(f"Failed to reach {endpoint}: {exc}") from exc

        raw = resp.text
        logger.debug("Upstream response (%s):\n%s", resp.status_code, _pretty(resp.content))

        if resp.status_code != httpx.codes.OK:
            raise ApiError(f"{resp.status_code} {resp.reason_phrase}", raw)

        try:
            decoded = ChatResponse.model_validate_json(resp.content)
        except ValidationError as exc:
            raise DecodeError(str(exc), raw) from exc

        logger.info("Usage results: %s", decoded.usage.model_dump())
        return ChatOutcome(response=decoded, raw_body=raw)
