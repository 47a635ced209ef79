"""Provider factory helpers for the Notepad Pro AI layer."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Callable, Mapping

from notepadpro.ai.models import Mode

from .base import BaseProvider, ProviderConfig
from .external import ExternalProvider
from .local import LocalProvider

if TYPE_CHECKING:  # pragma: no cover - typing only
    from notepadpro.ai.config import AIConfig

logger = logging.getLogger(__name__)


_PROVIDER_REGISTRY: Mapping[Mode, Callable[[ProviderConfig], BaseProvider]] = {
    Mode.LOCAL: LocalProvider,
    Mode.EXTERNAL: ExternalProvider,
}


def create_provider(mode: Mode | str, config: ProviderConfig) -> BaseProvider:
    """Instantiate the provider registered for ``mode``."""

    resolved = Mode.parse(mode)
    provider = _PROVIDER_REGISTRY[resolved](config)
    logger.debug("Created AI provider '%s' with base URL '%s'", resolved.value, config.base_url)
    return provider


def providers_from_config(ai_config: "AIConfig") -> dict[Mode, BaseProvider]:
    """Create one provider per mode from an :class:`AIConfig` object."""

    configs = ai_config.build_provider_configs()
    return {mode: create_provider(mode, configs[mode]) for mode in Mode}
