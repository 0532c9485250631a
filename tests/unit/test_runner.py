import json

import httpx
import pytest
from pytest_httpx import HTTPXMock

from chat_once.config import OPENAI_CHAT_URL, RunnerCfg
from chat_once.errors import ApiError, ConfigurationError, DecodeError, TransportError
from chat_once.runner import RequestRunner

COMPLETION = {
    "id": "chatcmpl-123",
    "object": "chat.completion",
    "created": 1700000000,
    "model": "gpt-3.5-turbo-0125",
    "choices": [
        {
            "index": 0,
            "message": {"role": "assistant", "content": "Once upon a time..."},
            "finish_reason": "stop",
        }
    ],
    "usage": {"prompt_tokens": 31, "completion_tokens": 150, "total_tokens": 181},
}


def test_run_success(httpx_mock: HTTPXMock) -> None:
    httpx_mock.add_response(url=OPENAI_CHAT_URL, method="POST", json=COMPLETION)

    outcome = RequestRunner("secret-token").run()

    assert outcome.reply == "Once upon a time..."
    assert outcome.response.id == "chatcmpl-123"
    assert outcome.response.usage.prompt_tokens == 31
    assert outcome.response.usage.completion_tokens == 150
    assert outcome.response.usage.total_tokens == 181
    assert outcome.response.choices[0].finish_reason == "stop"


def test_run_sends_expected_request(httpx_mock: HTTPXMock) -> None:
    httpx_mock.add_response(url="https://mock.upstream/chat/completions", json=COMPLETION)
    cfg = RunnerCfg(
        endpoint="https://mock.upstream/chat/completions",  # type: ignore[arg-type]
        model="remote-model",
        system_prompt="sys",
        user_prompt="hi",
        max_tokens=10,
    )

    RequestRunner("secret-token", cfg).run()

    req = httpx_mock.get_requests()[0]
    assert req.method == "POST"
    assert req.headers["Authorization"] == "Bearer secret-token"
    assert req.headers["Content-Type"] == "application/json"
    assert json.loads(req.content) == {
        "model": "remote-model",
        "messages": [
            {"role": "system", "content": "sys"},
            {"role": "user", "content": "hi"},
        ],
        "max_tokens": 10,
    }


def test_run_temperature_forwarded(httpx_mock: HTTPXMock) -> None:
    httpx_mock.add_response(url=OPENAI_CHAT_URL, json=COMPLETION)

    RequestRunner("k", RunnerCfg(temperature=0.7)).run()

    assert json.loads(httpx_mock.get_requests()[0].content)["temperature"] == 0.7


def test_run_empty_choices(httpx_mock: HTTPXMock) -> None:
    body = {**COMPLETION, "choices": []}
    httpx_mock.add_response(url=OPENAI_CHAT_URL, json=body)

    outcome = RequestRunner("k").run()

    assert outcome.reply is None
    assert json.loads(outcome.raw_body) == body


def test_run_api_error(httpx_mock: HTTPXMock) -> None:
    httpx_mock.add_response(url=OPENAI_CHAT_URL, status_code=401, text='{"error":"invalid_api_key"}')

    with pytest.raises(ApiError) as info:
        RequestRunner("bad").run()

    assert info.value.status_line == "401 Unauthorized"
    assert info.value.body == '{"error":"invalid_api_key"}'
    assert "401" in str(info.value)
    assert '{"error":"invalid_api_key"}' in str(info.value)


def test_run_decode_error(httpx_mock: HTTPXMock) -> None:
    httpx_mock.add_response(url=OPENAI_CHAT_URL, text="not json")

    with pytest.raises(DecodeError) as info:
        RequestRunner("k").run()

    assert info.value.body == "not json"
    assert "not json" in str(info.value)


def test_run_transport_error(httpx_mock: HTTPXMock) -> None:
    httpx_mock.add_exception(httpx.ConnectError("boom"))

    with pytest.raises(TransportError, match="boom") as info:
        RequestRunner("k").run()

    assert isinstance(info.value.__cause__, httpx.ConnectError)


def test_empty_api_key_rejected(httpx_mock: HTTPXMock) -> None:
    with pytest.raises(ConfigurationError):
        RequestRunner("")
    assert httpx_mock.get_requests() == []


def test_run_null_body(httpx_mock: HTTPXMock) -> None:
    httpx_mock.add_response(url=OPENAI_CHAT_URL, text="null")

    outcome = RequestRunner("k").run()

    assert outcome.reply is None
    assert outcome.raw_body == "null"
