"""
Settings tests

These tests validate startup configuration checks and provider wiring.
"""
import pytest

from config.settings import Settings, get_settings, reset_settings
from core.exceptions import ConfigurationError
from services.edit_workflow_service import create_edit_workflow, get_image_edit_service
from services.gemini_service import GeminiService
from services.openrouter_service import OpenRouterService


@pytest.mark.unit
class TestSettingsValidation:
    """Tests for required settings"""

    def test_missing_gemini_key(self, clean_env):
        with pytest.raises(ConfigurationError) as exc_info:
            Settings(_env_file=None)

        assert "GEMINI_API_KEY" in str(exc_info.value)

    def test_gemini_key_from_environment(self, clean_env):
        clean_env.setenv("GEMINI_API_KEY", "env-key")

        settings = Settings(_env_file=None)

        assert settings.GEMINI_API_KEY == "env-key"
        assert settings.IMAGE_EDIT_PROVIDER == "gemini"
        assert settings.GEMINI_MODEL == "gemini-2.5-flash-image"

    def test_openrouter_requires_its_own_key(self, clean_env):
        clean_env.setenv("IMAGE_EDIT_PROVIDER", "openrouter")
        clean_env.setenv("GEMINI_API_KEY", "unused")

        with pytest.raises(ConfigurationError) as exc_info:
            Settings(_env_file=None)

        assert "OPENROUTER_API_KEY" in str(exc_info.value)

    def test_unknown_provider(self, clean_env):
        with pytest.raises(ConfigurationError):
            Settings(_env_file=None, IMAGE_EDIT_PROVIDER="dalle", GEMINI_API_KEY="key")

    def test_timeout_must_be_positive(self, clean_env):
        with pytest.raises(ConfigurationError):
            Settings(_env_file=None, GEMINI_API_KEY="key", IMAGE_EDIT_TIMEOUT=0)

    def test_get_settings_is_cached(self, clean_env, tmp_path):
        clean_env.setenv("GEMINI_API_KEY", "env-key")
        clean_env.chdir(tmp_path)  # keep a developer .env out of the test
        reset_settings()
        try:
            assert get_settings() is get_settings()
        finally:
            reset_settings()


@pytest.mark.unit
class TestProviderWiring:
    """Tests for building the configured edit workflow"""

    def test_gemini_provider(self, clean_env):
        settings = Settings(_env_file=None, GEMINI_API_KEY="key", IMAGE_EDIT_TIMEOUT=30)

        service = get_image_edit_service(settings)

        assert isinstance(service, GeminiService)
        assert service.api_key == "key"
        assert service.timeout == 30

    def test_openrouter_provider(self, clean_env):
        settings = Settings(_env_file=None, IMAGE_EDIT_PROVIDER="openrouter", OPENROUTER_API_KEY="or-key")

        service = get_image_edit_service(settings)

        assert isinstance(service, OpenRouterService)
        assert service.api_key == "or-key"

    def test_create_edit_workflow(self, clean_env, tmp_path):
        settings = Settings(
            _env_file=None,
            GEMINI_API_KEY="key",
            DOWNLOAD_DIR=str(tmp_path),
            DOWNLOAD_FILENAME="my-edit",
        )

        workflow = create_edit_workflow(settings)

        assert isinstance(workflow.image_edit_service, GeminiService)
        assert workflow.storage_service.download_dir == tmp_path
        assert workflow.download_filename == "my-edit"
