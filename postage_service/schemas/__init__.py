"""
Pydantic Schemas Package

Typed request/response models for the postage quote service.

Schema Conventions:
- JSON keys are camelCase, Python attributes snake_case (ApiModel)
- Errors: {"error": {code, message, details, trace_id, timestamp}}

Export Groups:
- Base: ApiModel, ErrorResponse
- Catalog: Item, Packaging and their create/update payloads
- Settings: OriginSettings, ThemePreferenceRequest
- Shipment: ShipmentRequest, ShipmentItemSelection, Destination
- Quotes: WeightBracket, CarrierQuote, QuoteResult
"""

from postage_service.schemas.base import ApiModel, ErrorDetail, ErrorResponse

from postage_service.schemas.catalog import (
    Item,
    ItemCreate,
    ItemUpdate,
    Packaging,
    PackagingCreate,
    PackagingUpdate,
)

from postage_service.schemas.settings import (
    OriginSettings,
    ThemePreferenceRequest,
    ThemeSettings,
    THEME_CHOICES,
)

from postage_service.schemas.shipment import (
    ShipmentRequest,
    ShipmentItemSelection,
    Destination,
)

from postage_service.schemas.quotes import (
    WeightBracket,
    CarrierQuote,
    QuoteResult,
)

__all__ = [
    "ApiModel",
    "ErrorDetail",
    "ErrorResponse",
    "Item",
    "ItemCreate",
    "ItemUpdate",
    "Packaging",
    "PackagingCreate",
    "PackagingUpdate",
    "OriginSettings",
    "ThemePreferenceRequest",
    "ThemeSettings",
    "THEME_CHOICES",
    "ShipmentRequest",
    "ShipmentItemSelection",
    "Destination",
    "WeightBracket",
    "CarrierQuote",
    "QuoteResult",
]
