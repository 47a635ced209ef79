"""Editor-facing AI features built on top of :class:`AIClient`."""

from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable

from notepadpro.ai.client import AIClient
from notepadpro.ai.errors import NPAiApiError, NPAiInputError, NPAiNotImplementedError
from notepadpro.ai.models import (
    AvailabilityReport,
    ConnectionStatus,
    EnhanceResult,
    GrammarCheckResult,
    Mode,
)
from notepadpro.ai.parser import ENHANCE_SCHEMA, GRAMMAR_SCHEMA, ResponseParser

__all__ = ["AIFeatures", "ENHANCE_PROMPT", "GRAMMAR_PROMPT"]

logger = logging.getLogger(__name__)

ENHANCE_PROMPT = """You are an expert writing editor. Enhance this text for clarity, grammar, and impact while preserving the original voice.

TEXT: "{content}"

ENHANCE: Grammar, punctuation, word choice, clarity, conciseness, active voice.

RESPONSE FORMAT:
ENHANCED_TEXT:
[Improved version here]

EXPLANATION:
[2-3 specific improvements made]"""

GRAMMAR_PROMPT = """You are an expert grammarian. Analyze and correct this text.

TEXT: "{content}"

CHECK: Grammar, spelling, punctuation, style, clarity.

RESPONSE FORMAT:
CORRECTED_TEXT:
[Corrected version]

ERRORS_FOUND:
[Key errors found]

IMPROVEMENTS:
[Main improvements made]

GRAMMAR_TIPS:
[1-2 relevant tips]"""


class AIFeatures:
    """Text enhancement operations offered by the editor's AI menu."""

    def __init__(self, client: AIClient | None = None) -> None:
        self._client = client or AIClient()
        self._enhance_parser = ResponseParser(ENHANCE_SCHEMA)
        self._grammar_parser = ResponseParser(GRAMMAR_SCHEMA)
        self._actions: dict[str, Callable[[str], Awaitable[Any]]] = {
            "enhance": self.enhance_text,
            "grammar-check": self.grammar_check,
            "rewrite": self.rewrite_content,
            "prompt-engineer": self.prompt_engineer,
            "summarize": self.summarize_text,
            "translate": self.translate_text,
        }

    @property
    def client(self) -> AIClient:
        return self._client

    # ------------------------------------------------------------------
    # Mode passthrough
    # ------------------------------------------------------------------
    def set_mode(self, mode: Mode | str) -> None:
        self._client.set_mode(mode)

    def get_mode(self) -> Mode:
        return self._client.get_mode()

    def test_connection(self, mode: Mode | str | None = None) -> Awaitable[ConnectionStatus]:
        return self._client.test_connection(mode)

    # ------------------------------------------------------------------
    # Features
    # ------------------------------------------------------------------
    async def enhance_text(self, content: str) -> EnhanceResult:
        """Improve grammar, clarity and style of ``content``."""

        self._validate(content, "enhancement")
        logger.debug("Enhancing text, length: %d", len(content))
        response = await self._client.generate_response(ENHANCE_PROMPT.format(content=content))
        parsed = self._enhance_parser.parse(response)
        return EnhanceResult(
            original=content,
            enhanced=parsed["enhanced"],
            explanation=parsed["explanation"],
        )

    async def grammar_check(self, content: str) -> GrammarCheckResult:
        """Correct ``content`` and describe the errors that were found."""

        self._validate(content, "grammar check")
        logger.debug("Performing grammar check, length: %d", len(content))
        response = await self._client.generate_response(GRAMMAR_PROMPT.format(content=content))
        parsed = self._grammar_parser.parse(response)
        return GrammarCheckResult(
            original=content,
            corrected=parsed["corrected"],
            errors=parsed["errors"],
            improvements=parsed["improvements"],
            tips=parsed["tips"],
        )

    async def summarize_text(self, content: str) -> Any:
        raise NPAiNotImplementedError("Summarize feature not yet implemented")

    async def rewrite_content(self, content: str) -> Any:
        raise NPAiNotImplementedError("Rewrite feature not yet implemented")

    async def prompt_engineer(self, content: str) -> Any:
        raise NPAiNotImplementedError("Prompt engineer feature not yet implemented")

    async def translate_text(self, content: str, target_language: str = "Spanish") -> Any:
        raise NPAiNotImplementedError("Translate feature not yet implemented")

    async def process_action(self, action: str, content: str) -> Any:
        """Run the feature registered under the editor action id ``action``."""

        handler = self._actions.get(action)
        if handler is None:
            raise NPAiApiError(f"Unknown AI action: {action}")
        logger.info("Processing AI action: %s", action)
        return await handler(content)

    async def check_availability(self) -> AvailabilityReport:
        """Probe both providers and switch to the best available one.

        The local provider wins when it is ready, then the hosted one. When
        neither is ready the local mode is selected.
        """

        local_status = await self._client.test_connection(Mode.LOCAL)
        external_status = await self._client.test_connection(Mode.EXTERNAL)

        recommended = Mode.LOCAL
        ready = False
        if local_status.connected and local_status.model_available:
            ready = True
        elif external_status.connected and external_status.model_available:
            recommended = Mode.EXTERNAL
            ready = True

        self._client.set_mode(recommended)
        if ready:
            logger.info("AI available in %s mode", recommended.value)
        else:
            logger.info("No AI provider available")

        return AvailabilityReport(
            installed=ready,
            server=ready,
            model=ready,
            mode=recommended,
            local_status=local_status,
            external_status=external_status,
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def _validate(self, content: str, label: str) -> None:
        if not isinstance(content, str) or not content.strip():
            raise NPAiInputError(f"No text provided for {label}")
        limit = self._client.config.max_input_chars
        if len(content) > limit:
            raise NPAiInputError(
                f"Text is too long for {label}. Please use text under {limit} "
                "characters for best results."
            )
