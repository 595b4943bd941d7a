"""Tests for stored user preferences."""
from shoplist.config.settings import AVAILABLE_MODELS, DEFAULT_MODEL
from shoplist.services.app_settings import AppSettingsService
from shoplist.services.storage import AUTO_HIDE_KEY, SELECTED_MODEL_KEY


def test_defaults(app_settings):
    """Test defaults before anything is stored."""
    assert app_settings.selected_model == DEFAULT_MODEL
    assert app_settings.auto_hide_wishlist_on_add is True


def test_six_models_available():
    """Test the fixed model list."""
    assert len(AVAILABLE_MODELS) == 6
    assert DEFAULT_MODEL in AVAILABLE_MODELS


def test_select_model_persists(app_settings, storage):
    """Test choosing a model stores it and survives reload."""
    result = app_settings.select_model("gemma-3-27b-it")
    assert result.success
    assert storage.get(SELECTED_MODEL_KEY) == "gemma-3-27b-it"

    reloaded = AppSettingsService(storage)
    reloaded.load()
    assert reloaded.selected_model == "gemma-3-27b-it"


def test_select_unknown_model(app_settings, storage):
    """Test unknown models are refused."""
    result = app_settings.select_model("gpt-2")
    assert not result.success
    assert "gemini-2.5-flash" in result.suggestions
    assert app_settings.selected_model == DEFAULT_MODEL
    assert storage.get(SELECTED_MODEL_KEY) is None


def test_unknown_stored_model_is_ignored(storage):
    """Test a stale stored model falls back to the default."""
    storage.set(SELECTED_MODEL_KEY, "retired-model")
    service = AppSettingsService(storage)
    service.load()
    assert service.selected_model == DEFAULT_MODEL


def test_toggle_auto_hide(app_settings, storage):
    """Test the switch is stored as a string flag."""
    result = app_settings.toggle_auto_hide()
    assert result.success
    assert result.data is False
    assert storage.get(AUTO_HIDE_KEY) == "false"

    reloaded = AppSettingsService(storage)
    reloaded.load()
    assert reloaded.auto_hide_wishlist_on_add is False

    app_settings.toggle_auto_hide()
    assert storage.get(AUTO_HIDE_KEY) == "true"
