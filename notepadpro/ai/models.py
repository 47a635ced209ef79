"""Data transfer objects shared across the Notepad Pro AI layer."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping

from notepadpro.ai.errors import NPAiModeError

__all__ = [
    "Mode",
    "RequestSpec",
    "RawResponse",
    "ConnectionStatus",
    "AvailabilityReport",
    "EnhanceResult",
    "GrammarCheckResult",
]


class Mode(str, Enum):
    """The AI backend selected by the user."""

    LOCAL = "local"
    EXTERNAL = "external"

    @classmethod
    def parse(cls, value: "Mode | str") -> "Mode":
        """Return the matching mode or raise :class:`NPAiModeError`."""

        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            for mode in cls:
                if mode.value == value:
                    return mode
        raise NPAiModeError(f"Invalid mode {value!r}. Use \"local\" or \"external\".")

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class RequestSpec:
    """A single HTTP exchange, built fresh for every call."""

    url: str
    method: str = "GET"
    headers: Mapping[str, str] = field(default_factory=dict)
    body: bytes | None = None
    timeout: float = 30.0


@dataclass(frozen=True)
class RawResponse:
    """Decoded result of a successful exchange."""

    status_code: int
    body: Any


@dataclass(frozen=True)
class ConnectionStatus:
    """Outcome of a provider connection test."""

    connected: bool
    model_available: bool
    message: str
    mode: Mode | None = None

    def as_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "connected": self.connected,
            "model_available": self.model_available,
            "message": self.message,
        }
        if self.mode is not None:
            payload["mode"] = self.mode.value
        return payload


@dataclass(frozen=True)
class AvailabilityReport:
    """Combined status of both providers and the mode picked from them."""

    installed: bool
    server: bool
    model: bool
    mode: Mode
    local_status: ConnectionStatus | None = None
    external_status: ConnectionStatus | None = None

    def as_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "installed": self.installed,
            "server": self.server,
            "model": self.model,
            "mode": self.mode.value,
        }
        if self.local_status is not None:
            payload["local_status"] = self.local_status.as_dict()
        if self.external_status is not None:
            payload["external_status"] = self.external_status.as_dict()
        return payload


@dataclass
class EnhanceResult:
    """Text enhancement outcome handed back to the editor."""

    original: str
    enhanced: str
    explanation: str
    title: str = "Text Enhanced"
    action: str = "enhance"

    def as_dict(self) -> dict[str, Any]:
        return {
            "original": self.original,
            "enhanced": self.enhanced,
            "explanation": self.explanation,
            "title": self.title,
            "action": self.action,
        }


@dataclass
class GrammarCheckResult:
    """Grammar check outcome handed back to the editor."""

    original: str
    corrected: str
    errors: str
    improvements: str
    tips: str
    title: str = "Grammar Check Complete"
    action: str = "grammar-check"

    def as_dict(self) -> dict[str, Any]:
        return {
            "original": self.original,
            "corrected": self.corrected,
            "errors": self.errors,
            "improvements": self.improvements,
            "tips": self.tips,
            "title": self.title,
            "action": self.action,
        }
