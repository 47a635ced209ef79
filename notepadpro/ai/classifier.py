"""Status code classification for hosted provider failures."""

from __future__ import annotations

import logging
import re
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from notepadpro.ai.errors import ErrorKind, NPAiHTTPStatusError

__all__ = ["StatusPattern", "ClassifiedError", "StatusClassifier"]

logger = logging.getLogger(__name__)


class StatusPattern(BaseModel):
    """Maps an HTTP status (and optional body marker) to an error kind."""
    kind: ErrorKind
    status_code: int
    marker: Optional[str] = None
    message: str  # {provider} is substituted


class ClassifiedError(BaseModel):
    """Result of classifying a single failed call."""
    kind: ErrorKind
    message: str
    status_code: Optional[int] = None
    detail: str = ""
    timestamp: datetime = Field(default_factory=datetime.now)


class StatusClassifier:
    """Classifies failed hosted API calls by their status code."""

    # Checked in order; the first match wins
    DEFAULT_PATTERNS = [
        StatusPattern(
            kind=ErrorKind.UNAUTHORIZED,
            status_code=401,
            message="{provider} API key is invalid or expired. Please check your API key configuration.",
        ),
        StatusPattern(
            kind=ErrorKind.FORBIDDEN,
            status_code=403,
            message="{provider} API access denied. Please check your API key permissions.",
        ),
        StatusPattern(
            kind=ErrorKind.RATE_LIMITED,
            status_code=429,
            message="{provider} API rate limit exceeded. Please try again later.",
        ),
        StatusPattern(
            kind=ErrorKind.ENDPOINT_NOT_FOUND,
            status_code=404,
            message="{provider} API endpoint not found. Please check the API configuration.",
        ),
        StatusPattern(
            kind=ErrorKind.INVALID_MODEL,
            status_code=400,
            marker="not a valid model ID",
            message=(
                "{provider} model not found. Please check the model configuration "
                "or try a different model."
            ),
        ),
    ]

    def __init__(self, patterns: Optional[List[StatusPattern]] = None) -> None:
        self.patterns: List[StatusPattern] = list(patterns or self.DEFAULT_PATTERNS)

    def classify(self, error: Exception, *, provider: str) -> ClassifiedError:
        """Classify ``error`` raised while talking to ``provider``.

        A structured status code is used when the error carries one, otherwise
        the status marker embedded in the error text is searched.
        """
        text = str(error) or error.__class__.__name__
        status = error.status_code if isinstance(error, NPAiHTTPStatusError) else None

        for pattern in self.patterns:
            if not self._status_matches(pattern.status_code, status, text):
                continue
            if pattern.marker and pattern.marker.lower() not in text.lower():
                continue
            logger.debug("Classified %s failure as %s", provider, pattern.kind.value)
            return ClassifiedError(
                kind=pattern.kind,
                message=pattern.message.format(provider=provider),
                status_code=pattern.status_code,
                detail=text,
            )

        return ClassifiedError(
            kind=ErrorKind.UNKNOWN,
            message=f"{provider} AI processing failed: {text}",
            status_code=status,
            detail=text,
        )

    def add_pattern(self, pattern: StatusPattern) -> None:
        """Append a custom pattern after the built-in ones."""
        self.patterns.append(pattern)

    @staticmethod
    def _status_matches(expected: int, status: Optional[int], text: str) -> bool:
        if status is not None:
            return status == expected
        return re.search(rf"\b{expected}\b", text) is not None
