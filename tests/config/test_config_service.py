"""
🧪 test_config_service.py — unit-тести для ConfigService

Перевіряє:
- Доступ за ключем із крапками
- Типізовані геттери та секції
- Базовий config.yaml і перевизначення з оточення
"""

import pytest

from fxwidget.config.config_service import ConfigService


@pytest.fixture(autouse=True)
def fresh_singleton():
    ConfigService.reset()
    yield
    ConfigService.reset()


def test_from_dict_dotted_access():
    config = ConfigService.from_dict({"currency_api": {"timeout_sec": "7.5", "fence_stale_responses": "false"}})

    assert config.get("currency_api.timeout_sec") == "7.5"
    assert config.get_float("currency_api.timeout_sec", 10) == 7.5
    assert config.get_bool("currency_api.fence_stale_responses", True) is False
    assert config.get("missing.key", "default") == "default"
    assert config.section("currency_api")["timeout_sec"] == "7.5"
    assert config.section("nothing") == {}


def test_bad_number_falls_back_to_default():
    config = ConfigService.from_dict({"converter": {"debounce_sec": "soon"}})
    assert config.get_float("converter.debounce_sec", 0.5) == 0.5


def test_packaged_yaml_defaults(monkeypatch):
    for name in ("BOT_TOKEN", "TELEGRAM_TOKEN", "FIXER_API_KEY", "FXWIDGET_CREDENTIALS_FILE", "FXWIDGET_LOG_LEVEL"):
        monkeypatch.setenv(name, "")

    config = ConfigService()

    assert config.get("currency_api.base_url") == "https://data.fixer.io/api"
    assert config.get_float("currency_api.refresh_interval_sec", 0) == 600
    assert config.get_float("converter.debounce_sec", 0) == 0.5
    assert config.get("converter.credential_key") == "fixerApiKey"
    assert list(config.get("converter.fallback_currencies")) == ["EUR", "USD", "GBP", "JPY", "CAD", "AUD"]
    assert ConfigService() is config


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("FIXER_API_KEY", "env-key")
    monkeypatch.setenv("FXWIDGET_CREDENTIALS_FILE", "/tmp/creds.json")

    config = ConfigService()

    assert config.get("currency_api.default_access_key") == "env-key"
    assert config.get("files.credentials") == "/tmp/creds.json"
