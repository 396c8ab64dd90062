"""
Catalog Schemas

Items (what is being shipped) and packaging (what it ships in).
Both are persisted by postage_service.stores and looked up by id when quoting.
"""

from typing import Optional
from pydantic import Field, model_validator

from postage_service.schemas.base import ApiModel


# ==================== Items ====================

class Item(ApiModel):
    """Catalog item with its unit weight."""
    id: str = Field(..., description="Item identifier (uuid)")
    name: str = Field(..., description="Unique item name")
    description: Optional[str] = Field(None, description="Free-text description")
    unit_weight_grams: int = Field(..., description="Weight of one unit in grams", gt=0)


class ItemCreate(ApiModel):
    """
    Payload for creating an item.

    Field rules are enforced by the item store so that API callers get the
    same messages as any other store client.
    """
    name: Optional[str] = None
    description: Optional[str] = None
    unit_weight_grams: int = 0


class ItemUpdate(ApiModel):
    """Partial update: blank name and weight <= 0 keep the existing value."""
    name: Optional[str] = None
    description: Optional[str] = None
    unit_weight_grams: int = 0


# ==================== Packaging ====================

class Packaging(ApiModel):
    """
    Packaging option with outer dimensions and usable volume.

    internal_volume_cubic_cm defaults to length x height x width when it is
    missing or zero.
    """
    id: str = Field(..., description="Packaging identifier (uuid)")
    name: str = Field(..., description="Unique packaging name")
    description: Optional[str] = Field(None, description="Free-text description")
    length_cm: int = Field(..., description="Length in cm", gt=0)
    height_cm: int = Field(..., description="Height in cm", gt=0)
    width_cm: int = Field(..., description="Width in cm", gt=0)
    internal_volume_cubic_cm: int = Field(0, description="Usable volume in cm3", ge=0)
    packaging_cost_aud: float = Field(0.0, description="Cost of the packaging itself", ge=0)

    @model_validator(mode="after")
    def _derive_volume(self) -> "Packaging":
        if not self.internal_volume_cubic_cm:
            self.internal_volume_cubic_cm = self.length_cm * self.height_cm * self.width_cm
        return self


class PackagingCreate(ApiModel):
    """Payload for creating packaging; validated by the packaging store."""
    name: Optional[str] = None
    description: Optional[str] = None
    length_cm: int = 0
    height_cm: int = 0
    width_cm: int = 0
    internal_volume_cubic_cm: int = 0
    packaging_cost_aud: float = 0.0


class PackagingUpdate(ApiModel):
    """Partial update: unset or non-positive sizes and an unset cost keep the existing value."""
    name: Optional[str] = None
    description: Optional[str] = None
    length_cm: Optional[int] = None
    height_cm: Optional[int] = None
    width_cm: Optional[int] = None
    internal_volume_cubic_cm: Optional[int] = None
    packaging_cost_aud: Optional[float] = None
