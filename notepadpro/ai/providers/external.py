"""Provider for a hosted OpenAI compatible chat completion API."""

from __future__ import annotations

import logging
from typing import Any, Mapping

from notepadpro.ai.classifier import StatusClassifier
from notepadpro.ai.errors import (
    ErrorKind,
    NPAiConfigError,
    NPAiConnectionError,
    NPAiHTTPStatusError,
    NPAiProviderError,
    NPAiTimeoutError,
    NPAiTransportError,
)
from notepadpro.ai.models import Mode, RequestSpec

from .base import BaseProvider, ProviderConfig

logger = logging.getLogger(__name__)

_CHAT_COMPLETIONS_ENDPOINT = "/chat/completions"
_MODELS_ENDPOINT = "/models"

_DEFAULT_MAX_TOKENS = 1000
_DEFAULT_TEMPERATURE = 0.7


class ExternalProvider(BaseProvider):
    """Talks to the ``/chat/completions`` endpoint of a hosted API."""

    mode = Mode.EXTERNAL
    display_name = "OpenRouter"

    def __init__(self, config: ProviderConfig, *, classifier: StatusClassifier | None = None) -> None:
        super().__init__(config)
        self._classifier = classifier or StatusClassifier()

    @property
    def unavailable_message(self) -> str:
        return f"{self.display_name} API not available"

    def build_request(self, prompt: str, options: Mapping[str, Any] | None = None) -> RequestSpec:
        payload: dict[str, Any] = {
            "model": self.config.model,
            "messages": [{"role": "user", "content": prompt}],
            "max_tokens": _DEFAULT_MAX_TOKENS,
            "temperature": _DEFAULT_TEMPERATURE,
        }
        if options:
            payload.update(options)
        # Streaming output is not supported
        payload["stream"] = False

        headers = self._auth_headers()
        headers["Content-Type"] = "application/json"
        return RequestSpec(
            url=self.config.url(_CHAT_COMPLETIONS_ENDPOINT),
            method="POST",
            headers=headers,
            body=self._encode(payload),
            timeout=self.config.timeout,
        )

    def extract_text(self, payload: Any) -> str:
        choices = self._entries(payload, "choices")
        if not choices:
            return ""
        message = choices[0].get("message")
        content = message.get("content") if isinstance(message, Mapping) else None
        return content if isinstance(content, str) else ""

    def classify_error(self, error: Exception) -> NPAiProviderError:
        if isinstance(error, NPAiProviderError):
            return error
        if isinstance(error, NPAiTimeoutError):
            return NPAiProviderError(
                f"{self.display_name} AI processing failed: {self.display_name} API is taking "
                "too long to respond. Try with shorter text.",
                kind=ErrorKind.TIMEOUT,
                mode=self.mode.value,
            )
        if isinstance(error, NPAiConnectionError):
            detail = str(error) or error.__class__.__name__
            return NPAiProviderError(
                f"{self.display_name} AI processing failed: {detail}",
                kind=ErrorKind.CONNECTION,
                mode=self.mode.value,
            )
        if isinstance(error, (NPAiTransportError, NPAiConfigError)) and not isinstance(
            error, NPAiHTTPStatusError
        ):
            # Only HTTP status errors are matched against status patterns
            detail = str(error) or error.__class__.__name__
            return NPAiProviderError(
                f"{self.display_name} AI processing failed: {detail}",
                kind=ErrorKind.UNKNOWN,
                mode=self.mode.value,
            )

        result = self._classifier.classify(error, provider=self.display_name)
        return NPAiProviderError(result.message, kind=result.kind, mode=self.mode.value)

    def build_probe_request(self) -> RequestSpec:
        return RequestSpec(
            url=self.config.url(_MODELS_ENDPOINT),
            method="GET",
            headers=self._auth_headers(),
            timeout=self.config.probe_timeout,
        )

    def has_model(self, payload: Any) -> bool:
        family = self.config.model_family
        for entry in self._entries(payload, "data"):
            model_id = entry.get("id")
            if not isinstance(model_id, str):
                continue
            if model_id == self.config.model or (family and family in model_id):
                return True
        return False

    def describe_status(self, model_available: bool) -> str:
        if model_available:
            return f"{self.display_name} API ready with model"
        return f"{self.display_name} API ready but model not found"

    def _auth_headers(self) -> dict[str, str]:
        api_key = (self.config.api_key or "").strip()
        if not api_key:
            raise NPAiProviderError(
                f"{self.display_name} API key is not configured. Set the NOTEPADPRO_API_KEY "
                "or OPENROUTER_API_KEY environment variable.",
                kind=ErrorKind.MISSING_CREDENTIALS,
                mode=self.mode.value,
            )
        headers = {"Authorization": f"Bearer {api_key}"}
        headers.update(self.config.extra_headers)
        return headers
