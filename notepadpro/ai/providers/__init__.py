"""Provider implementations for the Notepad Pro AI layer."""

from .base import BaseProvider, ProviderConfig
from .external import ExternalProvider
from .factory import create_provider, providers_from_config
from .local import LocalProvider

__all__ = [
    "ProviderConfig",
    "BaseProvider",
    "LocalProvider",
    "ExternalProvider",
    "create_provider",
    "providers_from_config",
]
