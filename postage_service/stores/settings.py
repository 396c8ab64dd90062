"""
Settings Store

settings.json holds the merchant origin address and the UI theme. Either may
be present without the other: a theme can be chosen before any origin exists.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from pydantic import ValidationError as PydanticValidationError

from postage_service.core.errors import StoreError
from postage_service.schemas.settings import OriginSettings, ThemeSettings, normalize_theme
from postage_service.stores.json_store import JsonFileStore

logger = logging.getLogger(__name__)


class SettingsStore(JsonFileStore):
    """File-backed origin and theme settings."""

    file_name = "settings.json"

    def _load_raw(self) -> Dict[str, Any]:
        raw = self._read(default={})
        return raw if isinstance(raw, dict) else {}

    def get_origin_settings(self) -> Optional[OriginSettings]:
        """Stored origin, or None when no origin has been saved yet."""
        with self._lock:
            raw = self._load_raw()
        if not raw.get("postcode"):
            return None
        try:
            return OriginSettings.model_validate(raw)
        except PydanticValidationError as e:
            logger.error(f"Corrupt origin settings in {self.path}: {e}")
            raise StoreError("Unable to read origin settings", details={"path": str(self.path)})

    def save_origin_settings(self, origin: OriginSettings) -> OriginSettings:
        """
        Replace the origin and stamp updated_at.

        A missing theme preference keeps the one already stored.
        """
        with self._lock:
            existing = self._load_raw()
            theme = origin.theme_preference or existing.get("themePreference")
            saved = origin.model_copy(update={
                "theme_preference": theme,
                "updated_at": datetime.now(timezone.utc),
            })
            self._write(saved.model_dump(mode="json", by_alias=True))

        logger.info(f"Saved origin settings: {saved.postcode} {saved.suburb} {saved.state}")
        return saved

    def update_theme(self, theme_preference: Optional[str]) -> ThemeSettings:
        """
        Store a theme preference, keeping any origin already saved.

        Raises:
            ValueError: Theme other than dark, light or sepia
        """
        normalized = normalize_theme(theme_preference)
        now = datetime.now(timezone.utc)

        with self._lock:
            raw = self._load_raw()
            raw["themePreference"] = normalized
            raw["updatedAt"] = now.isoformat()
            self._write(raw)

        logger.info(f"Theme preference set to {normalized}")
        return ThemeSettings(theme_preference=normalized, updated_at=now)
