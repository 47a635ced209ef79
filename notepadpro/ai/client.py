"""Unified AI client that switches between the local and hosted providers."""

from __future__ import annotations

import logging
from typing import Any, Awaitable, Mapping

from notepadpro.ai.config import AIConfig
from notepadpro.ai.errors import NPAiConfigError
from notepadpro.ai.models import ConnectionStatus, Mode
from notepadpro.ai.performance import PerformanceTracker, get_tracker
from notepadpro.ai.providers import BaseProvider, providers_from_config
from notepadpro.ai.transport import Transport

__all__ = ["AIClient"]

logger = logging.getLogger(__name__)


class AIClient:
    """Route generation and connection tests to the active provider.

    The active mode is the only mutable state. Both public coroutine methods
    pick their provider at the moment they are called, so a later
    :meth:`set_mode` never changes where an already issued call goes.

    Usage:
        client = AIClient()
        client.set_mode("external")
        text = await client.generate_response("Fix this sentence")
    """

    def __init__(
        self,
        config: AIConfig | None = None,
        *,
        providers: Mapping[Mode, BaseProvider] | None = None,
        transport: Transport | None = None,
        tracker: PerformanceTracker | None = None,
    ) -> None:
        self._config = config or AIConfig()
        self._providers: dict[Mode, BaseProvider] = (
            dict(providers) if providers is not None else providers_from_config(self._config)
        )
        missing = [mode.value for mode in Mode if mode not in self._providers]
        if missing:
            raise NPAiConfigError(f"No AI provider configured for mode(s): {', '.join(missing)}.")
        self._transport = transport or Transport()
        if tracker is None:
            tracker = get_tracker()
            tracker.set_enabled(self._config.metrics_enabled)
        self._tracker = tracker
        self._mode: Mode = self._config.default_mode

    @property
    def config(self) -> AIConfig:
        return self._config

    # ------------------------------------------------------------------
    # Mode handling
    # ------------------------------------------------------------------
    def set_mode(self, mode: Mode | str) -> None:
        """Switch the active provider.

        Raises:
            NPAiModeError: ``mode`` is not ``"local"`` or ``"external"``. The
                current mode is left unchanged.
        """

        resolved = Mode.parse(mode)
        self._mode = resolved
        logger.info("AI mode switched to: %s", resolved.value)

    def get_mode(self) -> Mode:
        """Return the active mode."""

        return self._mode

    def provider(self, mode: Mode | str | None = None) -> BaseProvider:
        """Return the provider for ``mode``, defaulting to the active one."""

        resolved = self._mode if mode is None else Mode.parse(mode)
        return self._providers[resolved]

    # ------------------------------------------------------------------
    # Provider calls
    # ------------------------------------------------------------------
    def generate_response(
        self,
        prompt: str,
        options: Mapping[str, Any] | None = None,
    ) -> Awaitable[str]:
        """Send ``prompt`` to the active provider and return its text.

        Any failure is re-raised as a single :class:`NPAiProviderError` whose
        ``kind`` tells the caller what went wrong.
        """

        return self._generate(self.provider(), prompt, options)

    def test_connection(self, mode: Mode | str | None = None) -> Awaitable[ConnectionStatus]:
        """Probe a provider and report whether it and its model are available.

        The returned status is negative on any failure; the awaitable itself
        never raises.
        """

        return self._probe(self.provider(mode))

    async def _generate(
        self,
        provider: BaseProvider,
        prompt: str,
        options: Mapping[str, Any] | None,
    ) -> str:
        logger.debug(
            "Sending request to %s: model=%s prompt_length=%d",
            provider.display_name,
            provider.config.model,
            len(prompt),
        )
        with self._tracker.track(
            provider.mode.value,
            operation="generate",
            timeout=provider.config.timeout,
            model=provider.config.model,
        ) as timer:
            try:
                spec = provider.build_request(prompt, dict(options or {}))
                response = await self._transport.send(spec)
                text = provider.extract_text(response.body)
            except Exception as exc:  # noqa: BLE001 - re-raised as a provider error
                error = provider.classify_error(exc)
                logger.warning("%s request failed: %s", provider.display_name, error)
                if error is exc:
                    raise
                raise error from exc
            timer.add_output(len(text))

        logger.debug("%s response received, length: %d", provider.display_name, len(text))
        return text

    async def _probe(self, provider: BaseProvider) -> ConnectionStatus:
        with self._tracker.track(
            provider.mode.value,
            operation="test_connection",
            timeout=provider.config.probe_timeout,
            model=provider.config.model,
        ) as timer:
            try:
                spec = provider.build_probe_request()
                response = await self._transport.send(spec)
                available = provider.has_model(response.body)
            except Exception as exc:  # noqa: BLE001 - reported as a negative status
                logger.warning("%s connection test failed: %s", provider.display_name, exc)
                timer.fail(str(exc) or exc.__class__.__name__)
                return ConnectionStatus(
                    connected=False,
                    model_available=False,
                    message=provider.unavailable_message,
                    mode=provider.mode,
                )

        return ConnectionStatus(
            connected=True,
            model_available=available,
            message=provider.describe_status(available),
            mode=provider.mode,
        )
