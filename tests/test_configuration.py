# tests/test_configuration.py
import json

import pytest

from core.app_initializer import initialize_app
from infrastructure.configuration import STORAGE_NAMESPACE, ConfigurationService


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    monkeypatch.delenv("SMARTQUOTE_AI_API_KEY", raising=False)
    monkeypatch.delenv("SMARTQUOTE_AI_PROVIDER", raising=False)


class TestConfigurationService:

    def test_defaults(self, tmp_path):
        config = ConfigurationService(str(tmp_path / "app_config.json"))
        assert config.get_ai_provider() == "groq"
        assert config.get_ai_api_key() is None
        assert not config.is_ai_enabled()
        assert config.get_ai_timeout() == 60.0
        assert config.get_default_tax_rate() == 15.0
        assert config.get_storage_namespace() == STORAGE_NAMESPACE == "smartquote-storage"

    def test_file_values_override_defaults(self, tmp_path):
        path = tmp_path / "app_config.json"
        path.write_text(json.dumps({"pricing_currency": "USD", "ai_timeout_seconds": 15}), encoding="utf-8")
        config = ConfigurationService(str(path))
        assert config.get_pricing_currency() == "USD"
        assert config.get_ai_timeout() == 15.0
        assert config.get_default_currency() == "ZAR"

    def test_unreadable_file_falls_back_to_defaults(self, tmp_path):
        path = tmp_path / "app_config.json"
        path.write_text("{oops", encoding="utf-8")
        assert ConfigurationService(str(path)).get_ai_provider() == "groq"

    def test_set_ai_config_is_saved(self, tmp_path):
        path = tmp_path / "app_config.json"
        ConfigurationService(str(path)).set_ai_config("together", "tk-123")

        reloaded = ConfigurationService(str(path))
        assert reloaded.get_ai_provider() == "together"
        assert reloaded.get_ai_api_key() == "tk-123"
        assert reloaded.is_ai_enabled()

    def test_unknown_provider_rejected(self, tmp_path):
        with pytest.raises(ValueError):
            ConfigurationService(str(tmp_path / "c.json")).set_ai_config("skynet", "k")

    def test_environment_takes_precedence(self, tmp_path, monkeypatch):
        config = ConfigurationService(str(tmp_path / "c.json"))
        monkeypatch.setenv("SMARTQUOTE_AI_API_KEY", "env-key")
        monkeypatch.setenv("SMARTQUOTE_AI_PROVIDER", "huggingface")
        assert config.get_ai_api_key() == "env-key"
        assert config.get_ai_provider() == "huggingface"
        assert config.is_ai_enabled()


class TestInitializeApp:

    def test_wires_services(self, tmp_path):
        config = ConfigurationService(str(tmp_path / "c.json"))
        ctx = initialize_app(config, db_path=str(tmp_path / "data" / "smartquote.db"), logging_enabled=False)

        assert ctx.pricing.provider_client is None
        assert ctx.store.persistence is not None
        assert ctx.store.next_quotation_number().startswith("QUO")
        assert (tmp_path / "data" / "smartquote.db").exists()
