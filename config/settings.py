from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional

from core.exceptions import ConfigurationError

SUPPORTED_PROVIDERS = ("gemini", "openrouter")

class Settings(BaseSettings):
    """Application settings with environment variable support."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True, extra="ignore")

    PROJECT_NAME: str = "Image Edit Studio"

    # Remote edit provider
    IMAGE_EDIT_PROVIDER: str = "gemini"

    # Gemini
    GEMINI_API_KEY: Optional[str] = None
    GEMINI_MODEL: str = "gemini-2.5-flash-image"
    GEMINI_BASE_URL: str = "https://generativelanguage.googleapis.com/v1beta"

    # OpenRouter
    OPENROUTER_API_KEY: Optional[str] = None
    OPENROUTER_MODEL: str = "google/gemini-2.5-flash-image-preview"
    OPENROUTER_BASE_URL: str = "https://openrouter.ai/api/v1"
    OPENROUTER_REFERER: str = "https://image-edit-studio.app"

    # Processing Configuration
    IMAGE_EDIT_TIMEOUT: float = 120.0  # seconds, single attempt

    # Downloads
    DOWNLOAD_DIR: str = "."
    DOWNLOAD_FILENAME: str = "edited-image"
    DEFAULT_DOWNLOAD_EXTENSION: str = "png"

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        # Validate required settings
        self._validate_required_settings()

    def _validate_required_settings(self):
        """Validate that the selected provider and its API key are present."""
        if self.IMAGE_EDIT_PROVIDER not in SUPPORTED_PROVIDERS:
            raise ConfigurationError(
                f"Unknown IMAGE_EDIT_PROVIDER '{self.IMAGE_EDIT_PROVIDER}'. "
                f"Expected one of: {', '.join(SUPPORTED_PROVIDERS)}"
            )

        required_fields = {
            "gemini": ["GEMINI_API_KEY"],
            "openrouter": ["OPENROUTER_API_KEY"],
        }[self.IMAGE_EDIT_PROVIDER]
        missing_fields = []

        for field in required_fields:
            if not getattr(self, field, None):
                missing_fields.append(field)

        if missing_fields:
            raise ConfigurationError(
                f"Missing required environment variables: {', '.join(missing_fields)}\n"
                f"Please check your .env file or environment variables."
            )

        if self.IMAGE_EDIT_TIMEOUT <= 0:
            raise ConfigurationError("IMAGE_EDIT_TIMEOUT must be a positive number of seconds")


_settings_instance: Optional[Settings] = None


def get_settings() -> Settings:
    """Return the process-wide settings, building them on first use"""
    global _settings_instance
    if _settings_instance is None:
        _settings_instance = Settings()
    return _settings_instance


def reset_settings() -> None:
    """Forget the cached settings so the next get_settings() re-reads the environment"""
    global _settings_instance
    _settings_instance = None
