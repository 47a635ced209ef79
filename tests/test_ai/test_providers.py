"""Tests for provider request shaping and response handling."""
from __future__ import annotations

import json

import pytest

from notepadpro.ai.errors import (
    ErrorKind,
    NPAiConnectionError,
    NPAiDecodeError,
    NPAiHTTPStatusError,
    NPAiProviderError,
    NPAiTimeoutError,
)
from notepadpro.ai.models import Mode
from notepadpro.ai.providers import (
    ExternalProvider,
    LocalProvider,
    ProviderConfig,
    create_provider,
)


@pytest.fixture
def local() -> LocalProvider:
    return LocalProvider(ProviderConfig(base_url="http://localhost:11434/", model="gemma3:4b", timeout=60))


@pytest.fixture
def external() -> ExternalProvider:
    return ExternalProvider(
        ProviderConfig(
            base_url="https://openrouter.ai/api/v1",
            model="openai/gpt-3.5-turbo",
            timeout=30,
            api_key="secret",
            extra_headers={"HTTP-Referer": "https://notepad-clone.local", "X-Title": "Notepad Pro AI"},
            model_family="gpt-3.5-turbo",
        )
    )


def test_provider_config_is_immutable() -> None:
    config = ProviderConfig(base_url="http://x", model="m", extra_headers={"A": "b"})

    with pytest.raises(AttributeError):
        config.model = "other"  # type: ignore[misc]
    with pytest.raises(TypeError):
        config.extra_headers["A"] = "c"  # type: ignore[index]
    assert "secret" not in repr(ProviderConfig(base_url="http://x", model="m", api_key="secret"))


def test_local_request_shape(local: LocalProvider) -> None:
    spec = local.build_request("Hello", {"temperature": 0.2, "num_predict": 50})

    assert spec.url == "http://localhost:11434/api/generate"
    assert spec.method == "POST"
    assert spec.timeout == 60
    assert spec.headers["Content-Type"] == "application/json"
    assert json.loads(spec.body) == {
        "model": "gemma3:4b",
        "prompt": "Hello",
        "stream": False,
        "options": {"temperature": 0.2, "top_p": 0.9, "num_predict": 50},
    }


def test_local_extract_text(local: LocalProvider) -> None:
    assert local.extract_text({"response": "done"}) == "done"
    assert local.extract_text({"model": "gemma3:4b"}) == ""
    assert local.extract_text(["unexpected"]) == ""


def test_local_wraps_errors_with_underlying_message(local: LocalProvider) -> None:
    error = local.classify_error(NPAiHTTPStatusError(500, "model crashed"))

    assert isinstance(error, NPAiProviderError)
    assert error.kind is ErrorKind.LOCAL_FAILURE
    assert error.mode == "local"
    assert str(error).startswith("Local AI processing failed:")
    assert "model crashed" in str(error)

    timeout = local.classify_error(NPAiTimeoutError("Request timed out after 60s"))
    assert timeout.kind is ErrorKind.TIMEOUT
    assert "Ollama is taking too long" in str(timeout)

    refused = local.classify_error(NPAiConnectionError("Request failed: Connection refused"))
    assert refused.kind is ErrorKind.CONNECTION
    assert "Connection refused" in str(refused)


def test_local_model_listing(local: LocalProvider) -> None:
    assert local.has_model({"models": [{"name": "llama3"}, {"name": "gemma3:4b"}]})
    assert not local.has_model({"models": [{"name": "gemma3:4b-instruct"}]})
    assert not local.has_model({})
    assert local.build_probe_request().url == "http://localhost:11434/api/tags"
    assert local.build_probe_request().timeout == 10.0
    assert local.describe_status(True) == "Ollama ready with gemma3:4b"
    assert local.describe_status(False) == "Ollama running but gemma3:4b not found"


def test_external_request_shape(external: ExternalProvider) -> None:
    spec = external.build_request("Hello", {"max_tokens": 200, "stream": True})

    assert spec.url == "https://openrouter.ai/api/v1/chat/completions"
    assert spec.method == "POST"
    assert spec.headers["Authorization"] == "Bearer secret"
    assert spec.headers["HTTP-Referer"] == "https://notepad-clone.local"
    assert spec.headers["X-Title"] == "Notepad Pro AI"
    assert json.loads(spec.body) == {
        "model": "openai/gpt-3.5-turbo",
        "messages": [{"role": "user", "content": "Hello"}],
        "max_tokens": 200,
        "temperature": 0.7,
        "stream": False,
    }


def test_external_requires_credentials() -> None:
    provider = ExternalProvider(ProviderConfig(base_url="https://x.test/v1", model="m"))

    with pytest.raises(NPAiProviderError) as exc:
        provider.build_request("Hello")

    assert exc.value.kind is ErrorKind.MISSING_CREDENTIALS
    assert "OPENROUTER_API_KEY" in str(exc.value)
    assert provider.classify_error(exc.value) is exc.value


def test_external_extract_text(external: ExternalProvider) -> None:
    payload = {"choices": [{"message": {"role": "assistant", "content": "pong"}}]}

    assert external.extract_text(payload) == "pong"
    assert external.extract_text({"choices": []}) == ""
    assert external.extract_text({"choices": [{"message": None}]}) == ""
    assert external.extract_text({}) == ""


@pytest.mark.parametrize(
    ("status", "body", "kind", "fragment"),
    [
        (401, "bad key", ErrorKind.UNAUTHORIZED, "invalid or expired"),
        (403, "nope", ErrorKind.FORBIDDEN, "access denied"),
        (429, "slow down", ErrorKind.RATE_LIMITED, "try again later"),
        (404, "missing", ErrorKind.ENDPOINT_NOT_FOUND, "endpoint not found"),
        (400, '{"error": "foo is not a valid model ID"}', ErrorKind.INVALID_MODEL, "model not found"),
        (400, "bad request", ErrorKind.UNKNOWN, "OpenRouter AI processing failed"),
        (500, "boom", ErrorKind.UNKNOWN, "boom"),
    ],
)
def test_external_status_classification(
    external: ExternalProvider, status: int, body: str, kind: ErrorKind, fragment: str
) -> None:
    error = external.classify_error(NPAiHTTPStatusError(status, body))

    assert error.kind is kind
    assert error.mode == "external"
    assert fragment in str(error)


def test_external_classifies_markers_in_plain_errors(external: ExternalProvider) -> None:
    error = external.classify_error(RuntimeError("HTTP error! status: 429, message: quota"))
    assert error.kind is ErrorKind.RATE_LIMITED


def test_external_transport_failures(external: ExternalProvider) -> None:
    timeout = external.classify_error(NPAiTimeoutError("Request timed out after 30s"))
    assert timeout.kind is ErrorKind.TIMEOUT
    assert "taking too long" in str(timeout)

    refused = external.classify_error(NPAiConnectionError("Request failed: Name or service not known"))
    assert refused.kind is ErrorKind.CONNECTION
    assert "Name or service not known" in str(refused)

    decode = external.classify_error(NPAiDecodeError("Failed to parse response: Expecting value"))
    assert decode.kind is ErrorKind.UNKNOWN
    assert str(decode).startswith("OpenRouter AI processing failed:")


def test_external_model_listing(external: ExternalProvider) -> None:
    assert external.has_model({"data": [{"id": "openai/gpt-3.5-turbo"}]})
    assert external.has_model({"data": [{"id": "openai/gpt-3.5-turbo-0613"}]})
    assert not external.has_model({"data": [{"id": "anthropic/claude-3"}, {"name": "x"}]})
    assert not external.has_model({"data": "garbage"})

    probe = external.build_probe_request()
    assert probe.url == "https://openrouter.ai/api/v1/models"
    assert probe.method == "GET"
    assert probe.headers["Authorization"] == "Bearer secret"
    assert external.unavailable_message == "OpenRouter API not available"


def test_create_provider_by_mode() -> None:
    config = ProviderConfig(base_url="http://x", model="m")

    assert isinstance(create_provider("local", config), LocalProvider)
    assert isinstance(create_provider(Mode.EXTERNAL, config), ExternalProvider)
