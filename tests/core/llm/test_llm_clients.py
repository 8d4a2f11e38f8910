"""Unit tests for the Groq, Ollama and no-op provider clients.

HTTP is served by ``httpx.MockTransport`` so payload shapes, headers and
failure mapping are checked without a network.
"""

import json
import logging
from datetime import datetime, timezone

import httpx
import pytest

from chatstore.configs.system import LLMConfig
from chatstore.core.llm.base import SupportsContext
from chatstore.core.llm.exceptions import (
    InvalidResponseFormat,
    MissingCredentialError,
    ProviderCallError,
)
from chatstore.core.llm.groq import CONTEXT_SYSTEM_PROMPT, GroqClient, build_context_messages
from chatstore.core.llm.http import build_http_client
from chatstore.core.llm.models import ConversationTurn, MessageSender
from chatstore.core.llm.noop import NOOP_RESPONSE, NoOpLLMClient
from chatstore.core.llm.ollama import OllamaClient

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

GROQ_URL = "https://api.groq.test/openai/v1"
OLLAMA_URL = "http://ollama.test:11434"


def _groq_config(**overrides) -> LLMConfig:
    values = {
        "provider": "groq",
        "model": "llama-test",
        "api_url": GROQ_URL,
        "api_key": "secret-key",
        "temperature": 0.2,
        "max_tokens": 256,
        "top_p": 0.9,
        "timeout": 30,
    }
    values.update(overrides)
    return LLMConfig(**values)


def _ollama_config(**overrides) -> LLMConfig:
    values = {
        "provider": "local_ollama",
        "model": "llama3.2",
        "base_url": OLLAMA_URL,
        "temperature": 0.5,
        "max_tokens": 128,
        "timeout": 10,
    }
    values.update(overrides)
    return LLMConfig(**values)


class _Server:
    """Records requests and answers with a fixed response or exception."""

    def __init__(self, response: httpx.Response | Exception) -> None:
        self.response = response
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if isinstance(self.response, Exception):
            raise self.response
        return self.response

    @property
    def last_json(self) -> dict:
        return json.loads(self.requests[-1].content)


def _groq_reply(content: str | None = "Hi there!") -> httpx.Response:
    return httpx.Response(
        200,
        json={
            "id": "chatcmpl-1",
            "object": "chat.completion",
            "created": 1700000000,
            "model": "llama-test",
            "choices": [
                {
                    "index": 0,
                    "message": {"role": "assistant", "content": content},
                    "finish_reason": "stop",
                }
            ],
            "usage": {"prompt_tokens": 3, "completion_tokens": 2, "total_tokens": 5},
        },
    )


def _ollama_reply(content: str = "Local hello") -> httpx.Response:
    return httpx.Response(
        200,
        json={
            "model": "llama3.2",
            "message": {"role": "assistant", "content": content},
            "done": True,
        },
    )


def _groq(server: _Server, config: LLMConfig | None = None) -> GroqClient:
    config = config or _groq_config()
    return GroqClient(config, build_http_client(config, httpx.MockTransport(server)))


def _ollama(server: _Server, config: LLMConfig | None = None) -> OllamaClient:
    config = config or _ollama_config()
    return OllamaClient(config, build_http_client(config, httpx.MockTransport(server)))


def _turn(sender: MessageSender, content: str) -> ConversationTurn:
    return ConversationTurn(
        sender=sender, content=content, timestamp=datetime(2024, 1, 1, tzinfo=timezone.utc)
    )


# ---------------------------------------------------------------------------
# Transport construction
# ---------------------------------------------------------------------------


class TestBuildHttpClient:
    def test_hosted_without_key_raises(self):
        config = _groq_config(api_key="")
        with pytest.raises(MissingCredentialError):
            build_http_client(config)

    def test_hosted_sets_bearer_header(self):
        client = build_http_client(_groq_config())
        assert client.headers["Authorization"] == "Bearer secret-key"
        assert str(client.base_url).startswith(GROQ_URL)
        client.close()

    def test_local_has_no_credential(self):
        client = build_http_client(_ollama_config(api_key="ignored"))
        assert "Authorization" not in client.headers
        assert client.timeout.read == 10
        client.close()


# ---------------------------------------------------------------------------
# Groq
# ---------------------------------------------------------------------------


class TestGroqClient:
    def test_single_turn_payload(self):
        server = _Server(_groq_reply("Hello!"))

        reply = _groq(server).get_chat_completion("Hi")

        assert reply == "Hello!"
        request = server.requests[0]
        assert request.method == "POST"
        assert str(request.url) == f"{GROQ_URL}/chat/completions"
        assert request.headers["Authorization"] == "Bearer secret-key"
        assert server.last_json == {
            "model": "llama-test",
            "messages": [{"role": "user", "content": "Hi"}],
            "temperature": 0.2,
            "max_tokens": 256,
            "top_p": 0.9,
            "stream": False,
        }

    def test_context_payload_order(self):
        server = _Server(_groq_reply())
        history = [
            _turn(MessageSender.USER, "A"),
            _turn(MessageSender.ASSISTANT, "B"),
        ]

        _groq(server).get_chat_completion_with_context(history, "C")

        assert server.last_json["messages"] == [
            {"role": "system", "content": CONTEXT_SYSTEM_PROMPT},
            {"role": "user", "content": "A"},
            {"role": "assistant", "content": "B"},
            {"role": "user", "content": "C"},
        ]

    def test_build_context_messages_with_empty_history(self):
        messages = build_context_messages([], "only")

        assert [(m.role, m.content) for m in messages] == [
            ("system", CONTEXT_SYSTEM_PROMPT),
            ("user", "only"),
        ]

    def test_build_context_messages_does_not_reorder(self):
        history = [
            _turn(MessageSender.ASSISTANT, "first"),
            _turn(MessageSender.ASSISTANT, "second"),
            _turn(MessageSender.USER, "third"),
        ]

        messages = build_context_messages(history, "now")

        assert [m.content for m in messages[1:]] == ["first", "second", "third", "now"]

    def test_zero_choices_is_invalid_format(self):
        server = _Server(httpx.Response(200, json={"id": "x", "choices": []}))

        with pytest.raises(InvalidResponseFormat):
            _groq(server).get_chat_completion("Hi")

    def test_missing_message_is_invalid_format(self):
        server = _Server(
            httpx.Response(200, json={"choices": [{"index": 0, "finish_reason": "stop"}]})
        )

        with pytest.raises(InvalidResponseFormat):
            _groq(server).get_chat_completion("Hi")

    def test_null_content_is_invalid_format(self):
        server = _Server(_groq_reply(content=None))

        with pytest.raises(InvalidResponseFormat):
            _groq(server).get_chat_completion_with_context([], "Hi")

    def test_non_json_body_is_invalid_format(self):
        server = _Server(httpx.Response(200, text="<html>oops</html>"))

        with pytest.raises(InvalidResponseFormat):
            _groq(server).get_chat_completion("Hi")

    def test_wrong_shape_is_invalid_format(self):
        server = _Server(httpx.Response(200, json={"choices": "nope"}))

        with pytest.raises(InvalidResponseFormat):
            _groq(server).get_chat_completion("Hi")

    def test_http_error_status(self):
        server = _Server(httpx.Response(429, text="rate limited"))

        with pytest.raises(ProviderCallError) as exc_info:
            _groq(server).get_chat_completion("Hi")

        assert not isinstance(exc_info.value, InvalidResponseFormat)
        assert exc_info.value.status_code == 429
        assert exc_info.value.provider == "groq"
        assert "rate limited" in str(exc_info.value)

    def test_connection_error_keeps_cause(self):
        cause = httpx.ConnectError("connection refused")
        server = _Server(cause)

        with pytest.raises(ProviderCallError) as exc_info:
            _groq(server).get_chat_completion("Hi")

        assert exc_info.value.__cause__ is cause

    def test_stream_flag_forwarded(self):
        server = _Server(_groq_reply())

        _groq(server, _groq_config(stream=True)).get_chat_completion("Hi")

        assert server.last_json["stream"] is True

    def test_full_completions_url_not_doubled(self):
        server = _Server(_groq_reply())
        config = _groq_config(api_url=f"{GROQ_URL}/chat/completions")

        _groq(server, config).get_chat_completion("Hi")

        assert str(server.requests[0].url) == f"{GROQ_URL}/chat/completions"

    def test_stream_warns_at_construction(self, caplog):
        with caplog.at_level(logging.WARNING, logger="chatstore.core.llm.groq"):
            _groq(_Server(_groq_reply()), _groq_config(stream=True))

        assert "streamed replies are not parsed" in caplog.text

    def test_configured_timeout_applied(self):
        server = _Server(_groq_reply())

        _groq(server).get_chat_completion("Hi")

        assert server.requests[0].extensions["timeout"]["read"] == 30

    def test_per_call_timeout_overrides_config(self):
        server = _Server(_groq_reply())

        _groq(server).get_chat_completion("Hi", timeout=2.5)

        assert server.requests[0].extensions["timeout"]["read"] == 2.5

    def test_availability(self):
        server = _Server(_groq_reply())

        assert _groq(server).is_available()
        # Provider kind mismatch: built against an Ollama configuration.
        assert not _groq(server, _ollama_config()).is_available()
        assert server.requests == []

    def test_supports_context(self):
        assert isinstance(_groq(_Server(_groq_reply())), SupportsContext)


# ---------------------------------------------------------------------------
# Ollama
# ---------------------------------------------------------------------------


class TestOllamaClient:
    def test_single_turn_payload(self):
        server = _Server(_ollama_reply("Local hello"))

        reply = _ollama(server).get_chat_completion("Hi")

        assert reply == "Local hello"
        request = server.requests[0]
        assert str(request.url) == f"{OLLAMA_URL}/api/chat"
        assert "Authorization" not in request.headers
        assert server.last_json == {
            "model": "llama3.2",
            "messages": [{"role": "user", "content": "Hi"}],
            "temperature": 0.5,
            "max_tokens": 128,
            "top_p": 1.0,
            "stream": False,
        }

    def test_never_streams(self):
        server = _Server(_ollama_reply())

        _ollama(server, _ollama_config(stream=True)).get_chat_completion("Hi")

        assert server.last_json["stream"] is False

    def test_missing_message_is_invalid_format(self):
        server = _Server(httpx.Response(200, json={"model": "llama3.2", "done": True}))

        with pytest.raises(InvalidResponseFormat):
            _ollama(server).get_chat_completion("Hi")

    def test_timeout_is_provider_call_error(self):
        server = _Server(httpx.ReadTimeout("too slow"))

        with pytest.raises(ProviderCallError, match="timed out"):
            _ollama(server).get_chat_completion("Hi")

    def test_server_error(self):
        server = _Server(httpx.Response(500, text="model not loaded"))

        with pytest.raises(ProviderCallError) as exc_info:
            _ollama(server).get_chat_completion("Hi")

        assert exc_info.value.status_code == 500

    def test_availability(self):
        server = _Server(_ollama_reply())

        http_client = build_http_client(_ollama_config(), httpx.MockTransport(server))

        assert _ollama(server).is_available()
        assert not OllamaClient(_ollama_config(base_url=" "), http_client).is_available()

    def test_does_not_support_context(self):
        assert not isinstance(_ollama(_Server(_ollama_reply())), SupportsContext)


# ---------------------------------------------------------------------------
# No-op
# ---------------------------------------------------------------------------


class TestNoOpClient:
    def test_never_available(self):
        assert not NoOpLLMClient().is_available()

    def test_returns_placeholder(self):
        reply = NoOpLLMClient().get_chat_completion("anything")

        assert reply == NOOP_RESPONSE
        assert "not currently configured" in reply
        assert "store and retrieve chat messages" in reply

    def test_does_not_support_context(self):
        assert not isinstance(NoOpLLMClient(), SupportsContext)
