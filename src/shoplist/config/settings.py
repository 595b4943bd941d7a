"""Configuration settings for shoplist."""
from functools import lru_cache
from pathlib import Path
from typing import Optional
from pydantic import validator
from pydantic_settings import BaseSettings, SettingsConfigDict


# Get project root directory (the repository root above src/)
PROJECT_ROOT = Path(__file__).parent.parent.parent.parent

DEFAULT_LOG_FILE = PROJECT_ROOT / "logs" / "shoplist.log"

# Remote models the app can talk to, in the order they are offered in settings
AVAILABLE_MODELS = {
    "gemini-2.5-flash": "Gemini 2.5 Flash",
    "gemini-2.5-flash-lite": "Gemini 2.5 Flash Lite",
    "gemini-2.0-flash": "Gemini 2.0 Flash",
    "gemini-2.0-flash-lite": "Gemini 2.0 Flash Lite",
    "gemma-3-12b-it": "Gemma 3 12B",
    "gemma-3-27b-it": "Gemma 3 27B",
}
DEFAULT_MODEL = "gemini-2.5-flash-lite"

LOG_LEVELS = ("TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL")
LOG_FORMATS = ("simple", "detailed")
EXTRACTION_BACKENDS = ("inline_audio", "transcribe")


def _one_of(value: str, allowed, label: str) -> str:
    if value not in allowed:
        raise ValueError(f"{label} must be one of: {', '.join(allowed)}")
    return value


class LLMSettings(BaseSettings):
    """Remote language model settings."""
    API_KEY: Optional[str] = None
    BASE_URL: str = "https://generativelanguage.googleapis.com/v1beta/openai/"
    TRANSCRIPTION_MODEL: str = "whisper-1"
    TEMPERATURE: float = 0.0
    TIMEOUT: Optional[float] = None  # None keeps the SDK default

    model_config = SettingsConfigDict(
        env_prefix="SHOPLIST_LLM_",
        case_sensitive=False,
        env_file=PROJECT_ROOT / ".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    @validator("TEMPERATURE")
    def validate_temperature(cls, v: float) -> float:
        if not 0 <= v <= 2:
            raise ValueError("Temperature must be between 0 and 2")
        return v

    @validator("API_KEY")
    def validate_api_key(cls, v: Optional[str]) -> Optional[str]:
        # Blank values in .env mean "not configured"
        if v is not None and not v.strip():
            return None
        return v.strip() if v else v


class ShopListSettings(BaseSettings):
    """Application settings, overridable through SHOPLIST_* variables."""

    # Database
    DB_URL: str = "sqlite:///shoplist.db"
    DB_ECHO: bool = False

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FILE: Optional[Path] = DEFAULT_LOG_FILE
    LOG_FORMAT: str = "detailed"
    LOG_RETENTION_DAYS: int = 7
    LOG_ROTATION_SIZE_MB: int = 1

    # AI Feature Flags
    USE_MOCK_AI: bool = False
    LLM_CHAT_ENABLED: bool = False
    EXTRACTION_BACKEND: str = "inline_audio"

    # Defaults for the settings surface
    DEFAULT_MODEL: str = DEFAULT_MODEL
    DEFAULT_AUTO_HIDE_WISHLIST_ON_ADD: bool = True

    # Voice capture
    MICROPHONE_ENABLED: bool = True
    SAMPLE_RATE: int = 16000
    CHANNELS: int = 1

    # Screen switching
    SWIPE_THRESHOLD: int = 50

    model_config = SettingsConfigDict(
        env_prefix="SHOPLIST_",
        case_sensitive=False,
        env_file=PROJECT_ROOT / ".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        # Relative paths are anchored at the repository root
        if self.DB_URL.startswith("sqlite:///") and ":memory:" not in self.DB_URL:
            relative_path = self.DB_URL.replace("sqlite:///", "")
            if not Path(relative_path).is_absolute():
                self.DB_URL = f"sqlite:///{PROJECT_ROOT / relative_path}"

        if self.LOG_FILE and not self.LOG_FILE.is_absolute():
            self.LOG_FILE = PROJECT_ROOT / self.LOG_FILE

    @validator("LOG_LEVEL")
    def validate_log_level(cls, v: str) -> str:
        return _one_of(v.upper(), LOG_LEVELS, "Log level")

    @validator("LOG_FORMAT")
    def validate_log_format(cls, v: str) -> str:
        return _one_of(v.lower(), LOG_FORMATS, "Log format")

    @validator("EXTRACTION_BACKEND")
    def validate_backend(cls, v: str) -> str:
        return _one_of(v.lower(), EXTRACTION_BACKENDS, "Extraction backend")

    @validator("DEFAULT_MODEL")
    def validate_default_model(cls, v: str) -> str:
        return _one_of(v, list(AVAILABLE_MODELS), "Model")


@lru_cache()
def get_settings() -> ShopListSettings:
    """Application settings, read from the environment once."""
    return ShopListSettings()


@lru_cache()
def get_llm_settings() -> LLMSettings:
    """Remote model settings, read from the environment once."""
    return LLMSettings()


def clear_settings_cache() -> None:
    """Forget cached settings so the next access re-reads the environment."""
    get_settings.cache_clear()
    get_llm_settings.cache_clear()
