"""Configuration helpers for the Notepad Pro AI layer."""

from __future__ import annotations

import logging
import os
from typing import TYPE_CHECKING, Any, Callable, Protocol

from notepadpro.ai.errors import NPAiConfigError, NPAiModeError
from notepadpro.ai.models import Mode

if TYPE_CHECKING:  # pragma: no cover - typing only
    from notepadpro.ai.providers.base import ProviderConfig

logger = logging.getLogger(__name__)


class _ConfigReader(Protocol):
    """Protocol describing the subset of config readers we rely on."""

    def has_option(self, section: str, option: str) -> bool:  # pragma: no cover - typing aid
        ...

    def get(self, section: str, option: str, *args: Any, **kwargs: Any) -> str:  # pragma: no cover
        ...


CredentialSource = Callable[[], "str | None"]

_ENV_API_KEYS = ("NOTEPADPRO_API_KEY", "OPENROUTER_API_KEY")

_DEF_LOCAL_BASE_URL = "http://localhost:11434"
_DEF_LOCAL_MODEL = "gemma3:4b"
_DEF_LOCAL_TIMEOUT = 60.0

_DEF_EXTERNAL_BASE_URL = "https://openrouter.ai/api/v1"
_DEF_EXTERNAL_MODEL = "openai/gpt-3.5-turbo"
_DEF_EXTERNAL_FAMILY = "gpt-3.5-turbo"
_DEF_EXTERNAL_TIMEOUT = 30.0
_DEF_EXTERNAL_HEADERS = {
    "HTTP-Referer": "https://notepad-clone.local",
    "X-Title": "Notepad Pro AI",
}


def env_credentials() -> str | None:
    """Return the hosted API key from the environment, if any."""

    for name in _ENV_API_KEYS:
        value = os.environ.get(name, "").strip()
        if value:
            return value
    return None


class AIConfig:
    """In-process settings for both AI providers.

    Values start from built-in defaults and may be overlaid from the ``[AI]``
    section of a config parser. The hosted API key is never read from a file;
    it comes from ``credentials`` each time provider configs are built.
    """

    __slots__ = (
        "default_mode",
        "local_base_url",
        "local_model",
        "local_timeout",
        "external_base_url",
        "external_model",
        "external_model_family",
        "external_timeout",
        "external_headers",
        "probe_timeout",
        "max_input_chars",
        "metrics_enabled",
        "_credentials",
    )

    SECTION = "AI"

    def __init__(self, *, credentials: CredentialSource | None = None) -> None:
        self.default_mode: Mode = Mode.LOCAL
        self.local_base_url: str = _DEF_LOCAL_BASE_URL
        self.local_model: str = _DEF_LOCAL_MODEL
        self.local_timeout: float = _DEF_LOCAL_TIMEOUT
        self.external_base_url: str = _DEF_EXTERNAL_BASE_URL
        self.external_model: str = _DEF_EXTERNAL_MODEL
        self.external_model_family: str | None = _DEF_EXTERNAL_FAMILY
        self.external_timeout: float = _DEF_EXTERNAL_TIMEOUT
        self.external_headers: dict[str, str] = dict(_DEF_EXTERNAL_HEADERS)
        self.probe_timeout: float = 10.0
        self.max_input_chars: int = 2000
        self.metrics_enabled: bool = True
        self._credentials: CredentialSource = credentials or env_credentials

    @property
    def has_credentials(self) -> bool:
        """Return ``True`` when the credential source yields an API key."""

        return bool(self._credentials())

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------
    def load_from_main_config(self, conf: _ConfigReader) -> None:
        """Overlay settings from the ``[AI]`` section of ``conf``."""

        reader = _ReaderFacade(conf)
        section = self.SECTION

        raw_mode = reader.get_str(section, "default_mode", self.default_mode.value)
        try:
            self.default_mode = Mode.parse(raw_mode.strip().lower())
        except NPAiModeError:
            logger.warning("Ignoring unknown default AI mode '%s'", raw_mode)

        self.local_base_url = reader.get_str(section, "local_base_url", self.local_base_url)
        self.local_model = reader.get_str(section, "local_model", self.local_model)
        self.local_timeout = reader.get_float(section, "local_timeout", self.local_timeout)
        self.external_base_url = reader.get_str(section, "external_base_url", self.external_base_url)
        self.external_model = reader.get_str(section, "external_model", self.external_model)
        self.external_model_family = self._normalise_optional(
            reader.get_str(section, "external_model_family", self.external_model_family or "")
        )
        self.external_timeout = reader.get_float(section, "external_timeout", self.external_timeout)
        self.probe_timeout = reader.get_float(section, "probe_timeout", self.probe_timeout)
        self.max_input_chars = reader.get_int(section, "max_input_chars", self.max_input_chars)
        self.metrics_enabled = reader.get_bool(section, "metrics_enabled", self.metrics_enabled)

        headers = self._parse_header_entries(reader.get_str(section, "external_headers", ""))
        if headers is not None:
            self.external_headers = headers

        if conf.has_option(section, "api_key"):
            logger.warning("Ignoring 'api_key' in AI config; set %s instead", _ENV_API_KEYS[0])

    # ------------------------------------------------------------------
    # Provider settings
    # ------------------------------------------------------------------
    def build_provider_configs(self) -> dict[Mode, "ProviderConfig"]:
        """Translate configuration values into one :class:`ProviderConfig` per mode."""

        from notepadpro.ai.providers.base import ProviderConfig  # Local import to avoid cycles

        local = ProviderConfig(
            base_url=self._require(self.local_base_url, "Local AI base URL"),
            model=self._require(self.local_model, "Local AI model name"),
            timeout=self._require_positive(self.local_timeout, "Local AI timeout"),
            probe_timeout=self._require_positive(self.probe_timeout, "Connection test timeout"),
        )
        external = ProviderConfig(
            base_url=self._require(self.external_base_url, "External AI base URL"),
            model=self._require(self.external_model, "External AI model name"),
            timeout=self._require_positive(self.external_timeout, "External AI timeout"),
            api_key=self._credentials(),
            extra_headers=self.external_headers,
            model_family=self.external_model_family,
            probe_timeout=self._require_positive(self.probe_timeout, "Connection test timeout"),
        )
        return {Mode.LOCAL: local, Mode.EXTERNAL: external}

    @staticmethod
    def _require(value: str | None, label: str) -> str:
        cleaned = (value or "").strip()
        if not cleaned:
            raise NPAiConfigError(f"{label} is not configured.")
        return cleaned

    @staticmethod
    def _require_positive(value: float, label: str) -> float:
        if value <= 0:
            raise NPAiConfigError(f"{label} must be positive, got {value!r}.")
        return float(value)

    @staticmethod
    def _normalise_optional(value: str | None) -> str | None:
        cleaned = (value or "").strip()
        return cleaned or None

    @staticmethod
    def _parse_header_entries(raw: str) -> dict[str, str] | None:
        if not raw:
            return None
        entries = [chunk.strip() for chunk in raw.split(";") if chunk.strip()]
        if not entries:
            return None
        headers: dict[str, str] = {}
        for entry in entries:
            if ":" not in entry:
                continue
            key, value = entry.split(":", 1)
            key = key.strip()
            value = value.strip()
            if key:
                headers[key] = value
        return headers or None


class _ReaderFacade:
    """Typed access to a :class:`ConfigParser` with warnings on bad values."""

    __slots__ = ("_conf",)

    def __init__(self, conf: _ConfigReader) -> None:
        self._conf = conf

    def get_str(self, section: str, option: str, default: str) -> str:
        if not self._conf.has_option(section, option):
            return default
        return self._conf.get(section, option, fallback=default)

    def get_bool(self, section: str, option: str, default: bool) -> bool:
        raw = self.get_str(section, option, "").strip().lower()
        if not raw:
            return default
        if raw in ("1", "yes", "true", "on"):
            return True
        if raw in ("0", "no", "false", "off"):
            return False
        logger.warning("Invalid boolean for '%s:%s' in AI config", section, option)
        return default

    def get_int(self, section: str, option: str, default: int) -> int:
        raw = self.get_str(section, option, "").strip()
        if not raw:
            return default
        try:
            return int(raw)
        except ValueError:
            logger.warning("Invalid integer for '%s:%s' in AI config", section, option)
            return default

    def get_float(self, section: str, option: str, default: float) -> float:
        raw = self.get_str(section, option, "").strip()
        if not raw:
            return default
        try:
            return float(raw)
        except ValueError:
            logger.warning("Invalid float for '%s:%s' in AI config", section, option)
            return default
