from pathlib import Path

import pytest

from app import create_app
from config import DEFAULT_CATALOG, ConfigError, Settings

ENV = {"OPENAI_API_KEY": "sk-test", "OPEN_EXCHANGE_RATES_API_KEY": "fx-test"}


def test_defaults():
    s = Settings.from_env(ENV)
    assert s.openai_api_key == "sk-test"
    assert s.exchange_api_key == "fx-test"
    assert s.openai_model == "gpt-4o-mini"
    assert s.max_function_steps == 5
    assert s.catalog_path == DEFAULT_CATALOG
    assert s.exchange_api_url == "https://api.fastforex.io"


def test_overrides():
    s = Settings.from_env({
        **ENV,
        "OPENAI_MODEL": "gpt-4.1",
        "OPENAI_TIMEOUT": "12.5",
        "EXCHANGE_API_URL": "https://fx.test/",
        "CATALOG_PATH": "/tmp/products.csv",
        "MAX_FUNCTION_STEPS": "3",
        "LOG_LEVEL": "debug",
    })
    assert s.openai_model == "gpt-4.1"
    assert s.openai_timeout == 12.5
    assert s.exchange_api_url == "https://fx.test"
    assert s.catalog_path == Path("/tmp/products.csv")
    assert s.max_function_steps == 3
    assert s.log_level == "DEBUG"


@pytest.mark.parametrize("missing", ["OPENAI_API_KEY", "OPEN_EXCHANGE_RATES_API_KEY"])
def test_missing_key_fails_fast(missing):
    env = {k: v for k, v in ENV.items() if k != missing}
    with pytest.raises(ConfigError, match=missing):
        Settings.from_env(env)


def test_blank_key_counts_as_missing():
    with pytest.raises(ConfigError):
        Settings.from_env({**ENV, "OPENAI_API_KEY": "  "})


@pytest.mark.parametrize("env", [{"OPENAI_TIMEOUT": "soon"}, {"MAX_FUNCTION_STEPS": "0"}])
def test_invalid_numbers(env):
    with pytest.raises(ConfigError):
        Settings.from_env({**ENV, **env})


def test_create_app_refuses_to_start_without_keys(monkeypatch, tmp_path):
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    monkeypatch.delenv("OPEN_EXCHANGE_RATES_API_KEY", raising=False)
    monkeypatch.setattr("config.APP_DIR", tmp_path)  # no .env to pick up
    with pytest.raises(ConfigError):
        create_app()


def test_unknown_log_level_fails_fast():
    with pytest.raises(ConfigError, match="LOG_LEVEL"):
        Settings.from_env({**ENV, "LOG_LEVEL": "verbose"})
