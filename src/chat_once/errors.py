from __future__ import annotations


class ChatOnceError(Exception):
    """Base class for every failure of a request/response cycle."""


class ConfigurationError(ChatOnceError):
    """Missing credential or an invalid config file."""


class RequestBuildError(ChatOnceError):
    """The request body could not be built or serialized."""


class TransportError(ChatOnceError):
    """The endpoint could not be reached or the connection failed."""


class ApiError(ChatOnceError):
    """The endpoint answered with a non-200 status."""

    def __init__(self, status_line: str, body: str) -> None:
        super().__init__(f"API returned an error: {status_line}\nResponse body: {body}")
        self.status_line = status_line
        self.body = body


class DecodeError(ChatOnceError):
    """A 200 response whose body is not a valid completion."""

    def __init__(self, detail: str, body: str) -> None:
        super().__init__(f"Could not decode response: {detail}\nResponse body: {body}")
        self.body = body
