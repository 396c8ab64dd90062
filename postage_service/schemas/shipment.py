"""
Shipment Schemas

The quote request and the destination derived from it.

Presence checks (blank postcode, no items, quantity <= 0, blank packaging id)
are made by the quote orchestrator so every caller gets the same messages;
these models only reject values that are malformed when present.
"""

import re
from typing import List, Optional
from pydantic import ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from postage_service.constants.pricing import DEFAULT_COUNTRY
from postage_service.schemas.base import ApiModel

_POSTCODE_PATTERN = re.compile(r"[0-9]{4}")
_COUNTRY_PATTERN = re.compile(r"[A-Za-z]{2}")


class ShipmentItemSelection(ApiModel):
    """One catalog item and how many of it go in the parcel."""
    item_id: Optional[str] = Field(None, description="Catalog item id")
    quantity: int = Field(0, description="Number of units, must be > 0")

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class ShipmentRequest(ApiModel):
    """
    Immutable quote request.

    Example body:
        {
            "destinationPostcode": "3004",
            "destinationSuburb": "Melbourne",
            "destinationState": "VIC",
            "items": [{"itemId": "...", "quantity": 2}],
            "packagingId": "...",
            "isExpress": false
        }
    """
    destination_postcode: Optional[str] = Field(None, description="4-digit destination postcode")
    destination_suburb: Optional[str] = Field(None, description="Destination suburb")
    destination_state: Optional[str] = Field(None, description="Destination state code")
    country: Optional[str] = Field(None, description="2-letter country code, AU when blank")
    items: List[ShipmentItemSelection] = Field(default_factory=list)
    packaging_id: Optional[str] = Field(None, description="Packaging id")
    is_express: bool = Field(False, description="Express service level")

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    @field_validator("destination_postcode")
    @classmethod
    def _check_postcode(cls, value: Optional[str]) -> Optional[str]:
        if value and value.strip() and not _POSTCODE_PATTERN.fullmatch(value):
            raise ValueError("Destination postcode must be 4 digits")
        return value

    @field_validator("country")
    @classmethod
    def _check_country(cls, value: Optional[str]) -> Optional[str]:
        if value and value.strip() and not _COUNTRY_PATTERN.fullmatch(value):
            raise ValueError("Country must be 2 letters")
        return value


class Destination(ApiModel):
    """Where the parcel is going, as echoed back in the quote result."""
    postcode: str
    suburb: Optional[str] = None
    state: Optional[str] = None
    country: str = DEFAULT_COUNTRY

    @classmethod
    def from_request(cls, request: ShipmentRequest) -> "Destination":
        """Build from a request, defaulting a blank country to AU."""
        country = request.country.strip().upper() if request.country and request.country.strip() else DEFAULT_COUNTRY
        return cls(
            postcode=request.destination_postcode,
            suburb=request.destination_suburb,
            state=request.destination_state,
            country=country,
        )
