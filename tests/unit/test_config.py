# tests/unit/test_config.py
"""
Unit tests for configuration system.
"""

import json

import pytest


class TestConfigurationManager:
    """Tests for ConfigurationManager singleton."""

    @pytest.fixture
    def config_manager(self):
        """Get the global ConfigurationManager instance."""
        from chatplatform.config.manager import config_manager

        # Store original values to restore after test
        original_temp = config_manager.get("llm", "temperature")
        yield config_manager
        config_manager.set("llm", "temperature", original_temp)

    def test_singleton(self, config_manager):
        from chatplatform.config.manager import ConfigurationManager

        assert ConfigurationManager() is config_manager

    def test_get_default_value(self, config_manager):
        value = config_manager.get("llm", "temperature")
        assert isinstance(value, float)
        assert 0 <= value <= 2.0

    def test_get_unknown_returns_none(self, config_manager):
        assert config_manager.get("llm", "nope") is None
        assert config_manager.get("nope", "temperature") is None

    def test_set_and_get_value(self, config_manager):
        assert config_manager.set("llm", "temperature", 0.5) is True
        assert config_manager.get("llm", "temperature") == 0.5

    def test_set_invalid_value_type_rejected(self, config_manager):
        original = config_manager.get("llm", "temperature")
        assert config_manager.set("llm", "temperature", "not a number") is False
        assert config_manager.get("llm", "temperature") == original

    def test_set_value_out_of_range_rejected(self, config_manager):
        original = config_manager.get("llm", "temperature")
        assert config_manager.set("llm", "temperature", 5.0) is False
        assert config_manager.get("llm", "temperature") == original

    def test_set_option_outside_choices_rejected(self, config_manager):
        assert config_manager.set("server", "log_level", "CHATTY") is False

    def test_set_unknown_field_rejected(self, config_manager):
        assert config_manager.set("llm", "does_not_exist", 1) is False

    def test_get_section(self, config_manager):
        section = config_manager.get_section("uploads")
        assert section["max_file_size_mb"] == 10
        assert "text/plain" in section["allowed_mime_types"]

    def test_get_all_values(self, config_manager):
        all_config = config_manager.get_all_values()
        assert set(all_config) == {"server", "database", "security", "llm", "uploads", "paths"}

    def test_env_overrides(self, config_manager, monkeypatch):
        from chatplatform.config import SERVER, LLM

        # Register the current values so monkeypatch restores them afterwards
        monkeypatch.setattr(SERVER, "cors_origins", SERVER.cors_origins)
        monkeypatch.setattr(SERVER, "port", SERVER.port)
        monkeypatch.setattr(LLM, "referer", LLM.referer)

        monkeypatch.setenv("FRONTEND_URL", "http://a.test, http://b.test")
        monkeypatch.setenv("PORT", "8080")
        config_manager._apply_env()

        assert SERVER.cors_origins == ["http://a.test", "http://b.test"]
        assert SERVER.port == 8080
        assert LLM.referer == "http://a.test, http://b.test"

    def test_invalid_env_value_ignored(self, config_manager, monkeypatch):
        from chatplatform.config import SERVER

        monkeypatch.setattr(SERVER, "port", SERVER.port)
        original = SERVER.port
        monkeypatch.setenv("PORT", "not-a-port")
        config_manager._apply_env()

        assert SERVER.port == original

    def test_load_from_file(self, config_manager, monkeypatch, tmp_path):
        from chatplatform.config import UPLOADS

        config_file = tmp_path / "config.json"
        config_file.write_text(json.dumps({"uploads": {"max_file_size_mb": 2, "unknown": True}}))

        monkeypatch.setattr(UPLOADS, "max_file_size_mb", UPLOADS.max_file_size_mb)
        monkeypatch.setattr(config_manager, "_config_file", config_file)
        config_manager._load_from_file()

        assert UPLOADS.max_file_size_mb == 2
        assert UPLOADS.max_file_size_bytes == 2 * 1024 * 1024
        assert not hasattr(UPLOADS, "unknown")

    def test_malformed_file_keeps_defaults(self, config_manager, monkeypatch, tmp_path):
        config_file = tmp_path / "config.json"
        config_file.write_text("{ not json")

        monkeypatch.setattr(config_manager, "_config_file", config_file)
        config_manager._load_from_file()

        assert config_manager.get("llm", "max_tokens") == 4096


class TestSettingsDataclasses:
    """Tests for settings dataclasses."""

    def test_security_settings_defaults(self):
        from chatplatform.config.schema import SecuritySettings

        settings = SecuritySettings()

        assert settings.algorithm == "HS256"
        assert settings.access_token_expire_minutes == 7 * 24 * 60
        assert settings.bcrypt_rounds == 12

    def test_llm_settings_defaults(self):
        from chatplatform.config.schema import LLMSettings

        settings = LLMSettings()

        assert settings.default_model == "openai/gpt-3.5-turbo"
        assert settings.max_tokens == 4096
        assert settings.temperature == 0.7
        assert len(settings.fallback_models) == 4

    def test_upload_settings_defaults(self):
        from chatplatform.config.schema import UploadSettings

        settings = UploadSettings()

        assert settings.max_file_size_bytes == 10 * 1024 * 1024
        assert settings.allow_any_text is True

    def test_env_overrides_applied_at_import(self):
        """conftest sets these before the config package is imported."""
        from chatplatform.config import SECURITY, LLM

        assert SECURITY.secret_key == "test-signing-key"
        assert SECURITY.admin_secret_key == "test-admin-secret"
        assert LLM.api_key == "test-upstream-key"
