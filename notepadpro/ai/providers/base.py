"""Base provider abstractions shared by the local and hosted backends."""

from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping

from notepadpro.ai.errors import NPAiProviderError
from notepadpro.ai.models import Mode, RequestSpec

logger = logging.getLogger(__name__)

PROBE_TIMEOUT = 10.0


@dataclass(frozen=True, slots=True)
class ProviderConfig:
    """Static description of one provider endpoint."""

    base_url: str
    model: str
    timeout: float = 30.0
    api_key: str | None = field(default=None, repr=False)
    extra_headers: Mapping[str, str] = field(default_factory=dict)
    model_family: str | None = None
    probe_timeout: float = PROBE_TIMEOUT

    def __post_init__(self) -> None:
        object.__setattr__(self, "extra_headers", MappingProxyType(dict(self.extra_headers)))

    def url(self, path: str) -> str:
        """Join ``path`` onto the configured base URL."""

        return self.base_url.rstrip("/") + path


class BaseProvider(ABC):
    """Shapes requests and responses for one AI backend.

    Providers are stateless apart from their read-only configuration, so one
    instance can serve any number of concurrent calls.
    """

    mode: Mode
    display_name: str = "AI"

    def __init__(self, config: ProviderConfig) -> None:
        self._config = config

    @property
    def config(self) -> ProviderConfig:
        """Return the provider configuration."""

        return self._config

    @property
    def unavailable_message(self) -> str:
        """Status message reported when the provider cannot be reached."""

        return f"{self.display_name} not available"

    @abstractmethod
    def build_request(self, prompt: str, options: Mapping[str, Any] | None = None) -> RequestSpec:
        """Return the generation request for ``prompt``."""

    @abstractmethod
    def extract_text(self, payload: Any) -> str:
        """Pull the generated text out of a decoded response body."""

    @abstractmethod
    def classify_error(self, error: Exception) -> NPAiProviderError:
        """Translate a transport failure into a descriptive provider error."""

    @abstractmethod
    def build_probe_request(self) -> RequestSpec:
        """Return the lightweight request used to test the connection."""

    @abstractmethod
    def has_model(self, payload: Any) -> bool:
        """Return ``True`` when the model listing includes the configured model."""

    @abstractmethod
    def describe_status(self, model_available: bool) -> str:
        """Return the status message for a reachable provider."""

    @staticmethod
    def _encode(payload: Mapping[str, Any]) -> bytes:
        return json.dumps(payload).encode("utf-8")

    @staticmethod
    def _entries(payload: Any, key: str) -> list[Mapping[str, Any]]:
        items = payload.get(key) if isinstance(payload, Mapping) else None
        if not isinstance(items, list):
            return []
        return [entry for entry in items if isinstance(entry, Mapping)]
