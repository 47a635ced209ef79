"""Core AI domain package for the Notepad Pro editor."""

from .client import AIClient
from .config import AIConfig
from .errors import (
    ErrorKind,
    NPAiApiError,
    NPAiConfigError,
    NPAiConnectionError,
    NPAiDecodeError,
    NPAiError,
    NPAiHTTPStatusError,
    NPAiInputError,
    NPAiModeError,
    NPAiNotImplementedError,
    NPAiProviderError,
    NPAiTimeoutError,
    NPAiTransportError,
)
from .features import AIFeatures
from .models import (
    AvailabilityReport,
    ConnectionStatus,
    EnhanceResult,
    GrammarCheckResult,
    Mode,
    RawResponse,
    RequestSpec,
)
from .parser import ENHANCE_SCHEMA, GRAMMAR_SCHEMA, ResponseParser, SectionSchema, SectionSpec
from .transport import Transport

__all__ = [
    "AIClient",
    "AIConfig",
    "AIFeatures",
    "Transport",
    "ResponseParser",
    "SectionSchema",
    "SectionSpec",
    "ENHANCE_SCHEMA",
    "GRAMMAR_SCHEMA",
    "Mode",
    "RequestSpec",
    "RawResponse",
    "ConnectionStatus",
    "AvailabilityReport",
    "EnhanceResult",
    "GrammarCheckResult",
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
