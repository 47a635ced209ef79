"""Tests for the AI configuration helper."""
from __future__ import annotations

from configparser import ConfigParser

import pytest

from notepadpro.ai.config import AIConfig, env_credentials
from notepadpro.ai.errors import NPAiConfigError
from notepadpro.ai.models import Mode
from notepadpro.ai.providers import providers_from_config


def test_ai_config_defaults() -> None:
    cfg = AIConfig(credentials=lambda: None)

    assert cfg.default_mode is Mode.LOCAL
    assert cfg.local_base_url == "http://localhost:11434"
    assert cfg.local_model == "gemma3:4b"
    assert cfg.local_timeout == 60
    assert cfg.external_base_url.startswith("https://")
    assert cfg.external_model == "openai/gpt-3.5-turbo"
    assert cfg.external_timeout == 30
    assert cfg.probe_timeout == 10
    assert cfg.max_input_chars == 2000
    assert cfg.has_credentials is False


def test_build_provider_configs() -> None:
    cfg = AIConfig(credentials=lambda: "key-from-store")

    configs = cfg.build_provider_configs()
    local, external = configs[Mode.LOCAL], configs[Mode.EXTERNAL]

    assert local.api_key is None
    assert local.timeout == 60
    assert external.api_key == "key-from-store"
    assert external.extra_headers["X-Title"] == "Notepad Pro AI"
    assert external.extra_headers["HTTP-Referer"] == "https://notepad-clone.local"
    assert external.model_family == "gpt-3.5-turbo"


def test_credentials_are_read_when_configs_are_built() -> None:
    keys = iter(["first", "second"])
    cfg = AIConfig(credentials=lambda: next(keys))

    assert cfg.build_provider_configs()[Mode.EXTERNAL].api_key == "first"
    assert cfg.build_provider_configs()[Mode.EXTERNAL].api_key == "second"


def test_env_credentials(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("NOTEPADPRO_API_KEY", raising=False)
    monkeypatch.delenv("OPENROUTER_API_KEY", raising=False)
    assert env_credentials() is None

    monkeypatch.setenv("OPENROUTER_API_KEY", " router-key ")
    assert env_credentials() == "router-key"

    monkeypatch.setenv("NOTEPADPRO_API_KEY", "app-key")
    assert env_credentials() == "app-key"
    assert AIConfig().has_credentials is True


def test_load_from_main_config() -> None:
    parser = ConfigParser()
    parser[AIConfig.SECTION] = {
        "default_mode": "External",
        "local_base_url": "http://gpu-box:11434",
        "local_model": "llama3",
        "local_timeout": "120",
        "external_model": "openai/gpt-4o-mini",
        "external_model_family": "",
        "external_headers": "X-Title: Custom; HTTP-Referer: https://example.org",
        "max_input_chars": "4000",
        "metrics_enabled": "no",
    }

    cfg = AIConfig(credentials=lambda: None)
    cfg.load_from_main_config(parser)

    assert cfg.default_mode is Mode.EXTERNAL
    assert cfg.local_base_url == "http://gpu-box:11434"
    assert cfg.local_model == "llama3"
    assert cfg.local_timeout == 120.0
    assert cfg.external_model == "openai/gpt-4o-mini"
    assert cfg.external_model_family is None
    assert cfg.external_headers == {"X-Title": "Custom", "HTTP-Referer": "https://example.org"}
    assert cfg.max_input_chars == 4000
    assert cfg.metrics_enabled is False


def test_invalid_values_keep_defaults(caplog: pytest.LogCaptureFixture) -> None:
    parser = ConfigParser()
    parser[AIConfig.SECTION] = {
        "default_mode": "cloud",
        "local_timeout": "soon",
        "max_input_chars": "lots",
        "metrics_enabled": "maybe",
        "api_key": "do-not-store-me",
    }

    cfg = AIConfig(credentials=lambda: None)
    cfg.load_from_main_config(parser)

    assert cfg.default_mode is Mode.LOCAL
    assert cfg.local_timeout == 60
    assert cfg.max_input_chars == 2000
    assert cfg.metrics_enabled is True
    assert cfg.build_provider_configs()[Mode.EXTERNAL].api_key is None
    assert "Ignoring 'api_key'" in caplog.text


def test_missing_section_keeps_defaults() -> None:
    cfg = AIConfig(credentials=lambda: None)
    cfg.load_from_main_config(ConfigParser())
    assert cfg.local_model == "gemma3:4b"


@pytest.mark.parametrize(
    ("attribute", "value"),
    [("local_base_url", " "), ("external_model", ""), ("local_timeout", 0), ("probe_timeout", -1)],
)
def test_invalid_provider_settings(attribute: str, value) -> None:
    cfg = AIConfig(credentials=lambda: None)
    setattr(cfg, attribute, value)

    with pytest.raises(NPAiConfigError):
        cfg.build_provider_configs()


def test_providers_from_config() -> None:
    providers = providers_from_config(AIConfig(credentials=lambda: "k"))

    assert set(providers) == {Mode.LOCAL, Mode.EXTERNAL}
    assert providers[Mode.LOCAL].mode is Mode.LOCAL
    assert providers[Mode.EXTERNAL].config.api_key == "k"
