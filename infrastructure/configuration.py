# infrastructure/configuration.py
import json
import os
from typing import Optional

from infrastructure.logging_service import get_module_logger

logger = get_module_logger("Configuration", "configuration.log")

APP_FOLDER = "SmartQuote"
STORAGE_NAMESPACE = "smartquote-storage"
SUPPORTED_PROVIDERS = ("groq", "huggingface", "together", "openrouter")

ENV_API_KEY = "SMARTQUOTE_AI_API_KEY"
ENV_PROVIDER = "SMARTQUOTE_AI_PROVIDER"


def app_data_dir() -> str:
    """Per-user application folder (created on demand)."""
    app_data = os.environ.get('LOCALAPPDATA', os.path.join(os.path.expanduser('~'), '.local', 'share'))
    folder = os.path.join(app_data, APP_FOLDER)
    os.makedirs(folder, exist_ok=True)
    return folder


class ConfigurationService:
    """Service to load and manage application configuration."""

    _instance = None  # Singleton instance

    DEFAULTS = {
        "ai_provider": "groq",
        "ai_api_key": "",
        "ai_enabled": False,
        "ai_timeout_seconds": 60.0,
        "pricing_currency": "ZAR",
        "default_currency": "ZAR",
        "default_tax_rate": 15.0,
        "storage_namespace": STORAGE_NAMESPACE,
        "database_path": None,
    }

    @classmethod
    def get_instance(cls) -> 'ConfigurationService':
        """Get singleton instance."""
        if cls._instance is None:
            cls._instance = ConfigurationService()
        return cls._instance

    def __init__(self, config_path: str = None):
        if config_path is None:
            config_path = os.path.join(app_data_dir(), "app_config.json")
        self.config_path = config_path
        self.config = self._load_config()

    def _load_config(self) -> dict:
        config = dict(self.DEFAULTS)
        if os.path.exists(self.config_path):
            try:
                with open(self.config_path, 'r', encoding='utf-8') as f:
                    config.update(json.load(f))
            except (OSError, json.JSONDecodeError) as e:
                logger.warning(f"Ignoring unreadable config {self.config_path}: {e}")
        return config

    def save(self):
        """Save configuration to file."""
        try:
            with open(self.config_path, 'w', encoding='utf-8') as f:
                json.dump(self.config, f, indent=2, ensure_ascii=False)
        except OSError as e:
            logger.error(f"Error saving config: {e}")

    # AI provider ------------------------------------------------------------

    def get_ai_provider(self) -> str:
        return os.environ.get(ENV_PROVIDER) or self.config.get("ai_provider") or "groq"

    def get_ai_api_key(self) -> Optional[str]:
        return os.environ.get(ENV_API_KEY) or self.config.get("ai_api_key") or None

    def is_ai_enabled(self) -> bool:
        """An API key in the environment enables AI on its own; a stored key also needs the flag."""
        if os.environ.get(ENV_API_KEY):
            return True
        return bool(self.config.get("ai_enabled")) and bool(self.config.get("ai_api_key"))

    def set_ai_config(self, provider: str, api_key: str, enabled: bool = True):
        if provider not in SUPPORTED_PROVIDERS:
            raise ValueError(f"Unsupported AI provider: {provider}")
        self.config["ai_provider"] = provider
        self.config["ai_api_key"] = api_key
        self.config["ai_enabled"] = enabled
        self.save()

    def get_ai_timeout(self) -> float:
        return float(self.config.get("ai_timeout_seconds", 60.0))

    # Pricing & documents ----------------------------------------------------

    def get_pricing_currency(self) -> str:
        return self.config.get("pricing_currency", "ZAR")

    def get_default_currency(self) -> str:
        return self.config.get("default_currency", "ZAR")

    def get_default_tax_rate(self) -> float:
        return float(self.config.get("default_tax_rate", 15.0))

    # Storage ----------------------------------------------------------------

    def get_storage_namespace(self) -> str:
        return self.config.get("storage_namespace") or STORAGE_NAMESPACE

    def get_database_path(self) -> str:
        return self.config.get("database_path") or os.path.join(app_data_dir(), "smartquote.db")
