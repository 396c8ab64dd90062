"""
Core Configuration Module

Centralizes environment configuration for the postage quote service.
Provides a singleton Settings object whose properties read the environment
on every access, so carrier credentials can be rotated without a restart.

Usage:
    from postage_service.core.config import settings

    print(settings.APP_ENV)
    print(settings.data_dir)
    print(settings.carrier_timeout("auspost"))
"""

import os
from pathlib import Path
from typing import List, Optional


# Provider names known to the service, in registry order
KNOWN_PROVIDERS = ("auspost", "shippit", "shipstation", "aftership", "aramex")

DEFAULT_BASE_URLS = {
    "auspost": "https://digitalapi.auspost.com.au",
    "shippit": "https://app.shippit.com/api/3",
    "shipstation": "https://api.shipstation.com",
    "aftership": "https://api.aftership.com/postmen/v3",
    "aramex": "https://ws.aramex.net/ShippingAPI.V2/RateCalculator/Service_1_0.svc",
}

DEFAULT_SHIPSTATION_CARRIER_IDS = "se-4731463,se-4731464,se-4731516,se-4731511"


def _env(key: str) -> Optional[str]:
    """Read an env var, treating blank values as unset."""
    value = os.getenv(key)
    if value is None or not value.strip():
        return None
    return value.strip()


class Settings:
    """
    Application settings loaded from environment variables.
    """

    # ==================== Application Settings ====================

    @property
    def APP_ENV(self) -> str:
        """Application environment: dev, staging, production"""
        return os.getenv("APP_ENV", "dev")

    @property
    def LOG_LEVEL(self) -> str:
        """Logging level: DEBUG, INFO, WARNING, ERROR, CRITICAL"""
        return os.getenv("LOG_LEVEL", "INFO")

    @property
    def POSTAGE_DATA_DIR(self) -> Optional[str]:
        """Directory holding items.json, packaging.json and settings.json"""
        return _env("POSTAGE_DATA_DIR")

    @property
    def data_dir(self) -> Path:
        """Resolved data directory (defaults to ~/.postage-comparator)"""
        configured = self.POSTAGE_DATA_DIR
        if configured:
            return Path(configured)
        return Path.home() / ".postage-comparator"

    # ==================== Quoting ====================

    @property
    def PRIMARY_CARRIER(self) -> str:
        """Provider that receives the rules-based fallback line"""
        return os.getenv("PRIMARY_CARRIER", "auspost").strip().lower()

    @property
    def QUOTE_CURRENCY(self) -> str:
        """Currency code stamped on every quote result"""
        return os.getenv("QUOTE_CURRENCY", "AUD")

    @property
    def WEIGHT_BRACKETS_PATH(self) -> Optional[str]:
        """Optional JSON file overriding the default bracket table"""
        return _env("WEIGHT_BRACKETS_PATH")

    # ==================== HTTP Client Settings ====================

    @property
    def DEFAULT_CARRIER_TIMEOUT(self) -> float:
        """Default carrier HTTP timeout in seconds"""
        return float(os.getenv("DEFAULT_CARRIER_TIMEOUT", "10.0"))

    @property
    def DEFAULT_CLIENT_MAX_CONNECTIONS(self) -> int:
        """Maximum HTTP connections per carrier pool"""
        return int(os.getenv("DEFAULT_CLIENT_MAX_CONNECTIONS", "50"))

    @property
    def DEFAULT_CLIENT_MAX_KEEPALIVE(self) -> int:
        """Maximum keepalive connections per carrier pool"""
        return int(os.getenv("DEFAULT_CLIENT_MAX_KEEPALIVE", "10"))

    def carrier_timeout(self, provider: str) -> float:
        """Per-carrier timeout, e.g. AUSPOST_TIMEOUT, falling back to the default"""
        raw = _env(f"{provider.upper()}_TIMEOUT")
        if raw is None:
            return self.DEFAULT_CARRIER_TIMEOUT
        return float(raw)

    def carrier_base_url(self, provider: str) -> str:
        """Per-carrier base URL, e.g. SHIPPIT_BASE_URL"""
        return _env(f"{provider.upper()}_BASE_URL") or DEFAULT_BASE_URLS[provider]

    # ==================== Carrier Credentials ====================

    @property
    def AUSPOST_API_KEY(self) -> Optional[str]:
        return _env("AUSPOST_API_KEY")

    @property
    def SHIPPIT_API_KEY(self) -> Optional[str]:
        return _env("SHIPPIT_API_KEY")

    @property
    def SHIPSTATION_API_KEY(self) -> Optional[str]:
        return _env("SHIPSTATION_API_KEY")

    @property
    def AFTERSHIP_API_KEY(self) -> Optional[str]:
        return _env("AFTERSHIP_API_KEY")

    @property
    def SHIPSTATION_CARRIER_IDS(self) -> List[str]:
        """ShipStation carrier accounts to rate against"""
        raw = os.getenv("SHIPSTATION_CARRIER_IDS", DEFAULT_SHIPSTATION_CARRIER_IDS)
        return [carrier_id.strip() for carrier_id in raw.split(",") if carrier_id.strip()]

    def api_key(self, provider: str) -> Optional[str]:
        """Look up <PROVIDER>_API_KEY for a provider name."""
        return _env(f"{provider.upper()}_API_KEY")

    def aramex_option(self, key: str, default: Optional[str] = None) -> Optional[str]:
        """
        Read an Aramex SOAP option such as ARAMEX_USERNAME.

        Args:
            key: Option suffix (USERNAME, PASSWORD, ACCOUNT_NUMBER, ...)
            default: Value used when the variable is unset or blank
        """
        return _env(f"ARAMEX_{key}") or default

    # ==================== Provider Allow-list ====================

    def provider_enabled_flag(self, provider: str) -> Optional[bool]:
        """
        Read <PROVIDER>_ENABLED.

        Returns:
            True/False when the variable is set, None when it is not
        """
        raw = _env(f"{provider.upper()}_ENABLED")
        if raw is None:
            return None
        return raw.lower() in ("1", "true", "yes", "on")

    # ==================== CORS Settings ====================

    @property
    def CORS_ORIGINS(self) -> List[str]:
        """Allowed CORS origins"""
        origins_str = os.getenv("CORS_ORIGINS", "*")
        if origins_str == "*":
            return ["*"]
        return [origin.strip() for origin in origins_str.split(",")]

    @property
    def CORS_ALLOW_CREDENTIALS(self) -> bool:
        """Allow credentials in CORS requests"""
        return os.getenv("CORS_ALLOW_CREDENTIALS", "true").lower() == "true"


# ==================== Singleton Instance ====================

_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """
    Get the singleton Settings instance.

    Returns:
        Settings object with configuration values
    """
    global _settings

    if _settings is None:
        _settings = Settings()

    return _settings


settings = get_settings()

