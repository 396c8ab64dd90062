"""
Settings Schemas

Merchant origin address and UI theme preference.
"""

import re
from datetime import datetime
from typing import Optional
from pydantic import Field, field_validator

from postage_service.schemas.base import ApiModel

THEME_CHOICES = ("dark", "light", "sepia")

_POSTCODE_PATTERN = re.compile(r"[0-9]{4}")


def normalize_theme(value: Optional[str]) -> Optional[str]:
    """
    Lower-case a theme name and check it against THEME_CHOICES.

    Raises:
        ValueError: For anything other than dark, light or sepia
    """
    if value is None:
        return None
    normalized = value.strip().lower()
    if normalized not in THEME_CHOICES:
        raise ValueError("Theme preference must be dark, light, or sepia")
    return normalized


class OriginSettings(ApiModel):
    """Where every parcel ships from."""
    postcode: str = Field(..., description="4-digit origin postcode")
    suburb: str = Field(..., description="Origin suburb")
    state: str = Field(..., description="Origin state code, e.g. VIC")
    country: str = Field("AU", description="2-letter country code")
    theme_preference: Optional[str] = Field(None, description="dark, light or sepia")
    updated_at: Optional[datetime] = Field(None, description="Last write time (UTC)")

    @field_validator("postcode")
    @classmethod
    def _check_postcode(cls, value: str) -> str:
        if not _POSTCODE_PATTERN.fullmatch(value or ""):
            raise ValueError("Postcode must be 4 digits")
        return value

    @field_validator("suburb", "state", "country")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("must not be blank")
        return value

    @field_validator("theme_preference")
    @classmethod
    def _check_theme(cls, value: Optional[str]) -> Optional[str]:
        return normalize_theme(value)


class ThemePreferenceRequest(ApiModel):
    """Body of PUT /api/settings/theme."""
    theme_preference: Optional[str] = Field(None, description="dark, light or sepia")

    @field_validator("theme_preference")
    @classmethod
    def _check_theme(cls, value: Optional[str]) -> Optional[str]:
        return normalize_theme(value)


class ThemeSettings(ApiModel):
    """Stored theme preference, returned by PUT /api/settings/theme."""
    theme_preference: Optional[str] = Field(None, description="dark, light or sepia")
    updated_at: Optional[datetime] = Field(None, description="Last write time (UTC)")
