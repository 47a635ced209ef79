"""Provider for a locally hosted Ollama server."""

from __future__ import annotations

import logging
from typing import Any, Mapping

from notepadpro.ai.errors import (
    ErrorKind,
    NPAiConnectionError,
    NPAiProviderError,
    NPAiTimeoutError,
)
from notepadpro.ai.models import Mode, RequestSpec

from .base import BaseProvider

logger = logging.getLogger(__name__)

_GENERATE_ENDPOINT = "/api/generate"
_TAGS_ENDPOINT = "/api/tags"

_DEFAULT_OPTIONS: dict[str, Any] = {"temperature": 0.7, "top_p": 0.9}


class LocalProvider(BaseProvider):
    """Talks to the ``/api/generate`` endpoint of a local Ollama server."""

    mode = Mode.LOCAL
    display_name = "Ollama"

    def build_request(self, prompt: str, options: Mapping[str, Any] | None = None) -> RequestSpec:
        model_options = dict(_DEFAULT_OPTIONS)
        if options:
            model_options.update(options)
        payload = {
            "model": self.config.model,
            "prompt": prompt,
            "stream": False,
            "options": model_options,
        }
        return RequestSpec(
            url=self.config.url(_GENERATE_ENDPOINT),
            method="POST",
            headers={"Content-Type": "application/json"},
            body=self._encode(payload),
            timeout=self.config.timeout,
        )

    def extract_text(self, payload: Any) -> str:
        text = payload.get("response") if isinstance(payload, Mapping) else None
        return text if isinstance(text, str) else ""

    def classify_error(self, error: Exception) -> NPAiProviderError:
        detail = str(error) or error.__class__.__name__
        kind = ErrorKind.LOCAL_FAILURE
        if isinstance(error, NPAiTimeoutError):
            kind = ErrorKind.TIMEOUT
            detail = (
                f"{detail}. Ollama is taking too long to respond. Try with shorter text "
                "or check if Ollama is running properly."
            )
        elif isinstance(error, NPAiConnectionError):
            kind = ErrorKind.CONNECTION
        return NPAiProviderError(
            f"Local AI processing failed: {detail}",
            kind=kind,
            mode=self.mode.value,
        )

    def build_probe_request(self) -> RequestSpec:
        return RequestSpec(
            url=self.config.url(_TAGS_ENDPOINT),
            method="GET",
            timeout=self.config.probe_timeout,
        )

    def has_model(self, payload: Any) -> bool:
        return any(entry.get("name") == self.config.model for entry in self._entries(payload, "models"))

    def describe_status(self, model_available: bool) -> str:
        if model_available:
            return f"Ollama ready with {self.config.model}"
        return f"Ollama running but {self.config.model} not found"
