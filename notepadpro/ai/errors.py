"""Error hierarchy shared by the Notepad Pro AI layer."""

from __future__ import annotations

from enum import Enum

__all__ = [
    "ErrorKind",
    "NPAiError",
    "NPAiInputError",
    "NPAiModeError",
    "NPAiConfigError",
    "NPAiApiError",
    "NPAiTransportError",
    "NPAiConnectionError",
    "NPAiTimeoutError",
    "NPAiDecodeError",
    "NPAiHTTPStatusError",
    "NPAiProviderError",
    "NPAiNotImplementedError",
]


class ErrorKind(str, Enum):
    """Classification attached to provider errors raised by the AI client."""

    UNAUTHORIZED = "unauthorized"
    FORBIDDEN = "forbidden"
    RATE_LIMITED = "rate_limited"
    ENDPOINT_NOT_FOUND = "endpoint_not_found"
    INVALID_MODEL = "invalid_model"
    TIMEOUT = "timeout"
    CONNECTION = "connection"
    LOCAL_FAILURE = "local_failure"
    MISSING_CREDENTIALS = "missing_credentials"
    UNKNOWN = "unknown"


class NPAiError(Exception):
    """Base error for all AI layer failures."""


class NPAiInputError(NPAiError):
    """Raised when text handed to a feature is empty or too long."""


class NPAiModeError(NPAiError, ValueError):
    """Raised when an unknown AI mode is requested."""


class NPAiConfigError(NPAiError):
    """Raised when AI configuration values are missing or invalid."""


class NPAiApiError(NPAiError):
    """Raised when the feature API detects invalid usage."""


class NPAiTransportError(NPAiError):
    """Base class for failures of a single HTTP exchange."""

    def __init__(self, message: str, *, url: str | None = None) -> None:
        super().__init__(message)
        self.url = url


class NPAiConnectionError(NPAiTransportError):
    """The remote host could not be reached or dropped the connection."""


class NPAiTimeoutError(NPAiTransportError):
    """The exchange did not complete within its deadline."""

    def __init__(self, message: str, *, url: str | None = None, timeout: float | None = None) -> None:
        super().__init__(message, url=url)
        self.timeout = timeout


class NPAiDecodeError(NPAiTransportError):
    """A successful response carried a body that is not valid JSON."""


class NPAiHTTPStatusError(NPAiTransportError):
    """The server answered with a non-2xx status."""

    def __init__(self, status_code: int, body: str, *, url: str | None = None) -> None:
        super().__init__(f"HTTP error! status: {status_code}, message: {body}", url=url)
        self.status_code = status_code
        self.body = body


class NPAiProviderError(NPAiError):
    """Descriptive, per-call failure raised at the AI client boundary."""

    def __init__(self, message: str, *, kind: ErrorKind = ErrorKind.UNKNOWN, mode: str | None = None) -> None:
        super().__init__(message)
        self.kind = kind
        self.mode = mode


class NPAiNotImplementedError(NPAiError, NotImplementedError):
    """Raised by editor features that are declared but not available yet."""
