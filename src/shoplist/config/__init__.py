"""Configuration package for shoplist."""
from .settings import (
    AVAILABLE_MODELS,
    DEFAULT_MODEL,
    LLMSettings,
    ShopListSettings,
    clear_settings_cache,
    get_llm_settings,
    get_settings,
)

__all__ = [
    'AVAILABLE_MODELS',
    'DEFAULT_MODEL',
    'LLMSettings',
    'ShopListSettings',
    'clear_settings_cache',
    'get_llm_settings',
    'get_settings',
]
