"""Tests for environment-driven settings."""
import pytest
from pydantic import ValidationError

from shoplist.config.settings import (
    DEFAULT_MODEL,
    LLMSettings,
    ShopListSettings,
    clear_settings_cache,
    get_settings,
)


@pytest.fixture(autouse=True)
def fresh_settings():
    clear_settings_cache()
    yield
    clear_settings_cache()


def test_defaults():
    settings = ShopListSettings(_env_file=None)
    assert settings.DEFAULT_MODEL == DEFAULT_MODEL
    assert settings.DEFAULT_AUTO_HIDE_WISHLIST_ON_ADD is True
    assert settings.SWIPE_THRESHOLD == 50
    assert settings.EXTRACTION_BACKEND == "inline_audio"


def test_environment_overrides(monkeypatch):
    """Test SHOPLIST_* variables are picked up after a cache clear."""
    monkeypatch.setenv("SHOPLIST_USE_MOCK_AI", "true")
    monkeypatch.setenv("SHOPLIST_LOG_LEVEL", "debug")
    monkeypatch.setenv("SHOPLIST_EXTRACTION_BACKEND", "TRANSCRIBE")

    settings = get_settings()

    assert settings.USE_MOCK_AI is True
    assert settings.LOG_LEVEL == "DEBUG"
    assert settings.EXTRACTION_BACKEND == "transcribe"


@pytest.mark.parametrize("name,value", [
    ("SHOPLIST_LOG_LEVEL", "LOUD"),
    ("SHOPLIST_EXTRACTION_BACKEND", "telepathy"),
    ("SHOPLIST_DEFAULT_MODEL", "gpt-2"),
])
def test_invalid_values(monkeypatch, name, value):
    monkeypatch.setenv(name, value)
    with pytest.raises(ValidationError):
        ShopListSettings(_env_file=None)


def test_relative_sqlite_path_is_anchored():
    settings = ShopListSettings(_env_file=None, DB_URL="sqlite:///data/list.db")
    assert settings.DB_URL.startswith("sqlite:////")
    assert settings.DB_URL.endswith("data/list.db")


def test_blank_api_key_means_unset(monkeypatch):
    monkeypatch.setenv("SHOPLIST_LLM_API_KEY", "   ")
    assert LLMSettings(_env_file=None).API_KEY is None


def test_temperature_range():
    with pytest.raises(ValidationError):
        LLMSettings(_env_file=None, TEMPERATURE=3)
