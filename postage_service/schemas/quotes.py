"""
Quote Schemas

Pydantic models for the pricing engine output.

CarrierQuote keeps total == packaging + delivery + surcharges by computing the
total itself; providers hand over the carrier's all-in price through
from_carrier_total() and the delivery share is derived from it.
"""

from datetime import datetime
from typing import List, Optional, Tuple
from pydantic import ConfigDict, Field
from pydantic.alias_generators import to_camel

from postage_service.constants.pricing import DEFAULT_CURRENCY
from postage_service.schemas.base import ApiModel
from postage_service.schemas.catalog import Packaging
from postage_service.schemas.settings import OriginSettings
from postage_service.schemas.shipment import Destination


def _money(value: float) -> float:
    return round(value, 2)


class WeightBracket(ApiModel):
    """
    Tariff row covering weights in (min_weight_inclusive, max_weight_inclusive].

    The lower bound is excluded despite its name; the field names follow the
    stored bracket file format.
    """
    min_weight_inclusive: float = Field(..., ge=0)
    max_weight_inclusive: float = Field(..., gt=0)
    price_standard: float = Field(..., ge=0)
    price_express: float = Field(..., ge=0)

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    def contains(self, weight_kg: float) -> bool:
        return self.min_weight_inclusive < weight_kg <= self.max_weight_inclusive

    def price(self, express: bool) -> float:
        return self.price_express if express else self.price_standard


class CarrierQuote(ApiModel):
    """One priced service line from a carrier API or from the rules engine."""
    carrier: str = Field(..., description="Carrier label, e.g. AUSPOST")
    service_name: str = Field(..., description="Carrier service name")
    delivery_eta_days_min: Optional[int] = Field(None, ge=0)
    delivery_eta_days_max: Optional[int] = Field(None, ge=0)
    packaging_cost_aud: float = Field(..., ge=0)
    delivery_cost_aud: float = Field(..., ge=0)
    surcharges_aud: float = Field(0.0, ge=0)
    total_cost_aud: float = Field(..., ge=0)
    pricing_source: str = Field(..., description="<CARRIER>_API or RULES")
    rule_fallback_used: bool = False
    raw_carrier_ref: Optional[str] = None

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    @classmethod
    def build(
        cls,
        carrier: str,
        service_name: str,
        packaging_cost: float,
        delivery_cost: float,
        pricing_source: str,
        surcharges: float = 0.0,
        eta: Optional[Tuple[Optional[int], Optional[int]]] = None,
        rule_fallback_used: bool = False,
        raw_carrier_ref: Optional[str] = None,
    ) -> "CarrierQuote":
        """
        Create a quote whose total is the sum of its parts.

        Args:
            carrier: Carrier label
            service_name: Service name shown to the user
            packaging_cost: Packaging cost (AUD)
            delivery_cost: Delivery cost (AUD)
            pricing_source: Source tag
            surcharges: Surcharges (AUD)
            eta: Optional (min_days, max_days)
            rule_fallback_used: True for rules-engine lines
            raw_carrier_ref: Carrier's own reference, if any

        Returns:
            CarrierQuote
        """
        eta_min, eta_max = eta if eta else (None, None)
        packaging_cost = _money(packaging_cost)
        delivery_cost = _money(delivery_cost)
        surcharges = _money(surcharges)
        return cls(
            carrier=carrier,
            service_name=service_name,
            delivery_eta_days_min=eta_min,
            delivery_eta_days_max=eta_max,
            packaging_cost_aud=packaging_cost,
            delivery_cost_aud=delivery_cost,
            surcharges_aud=surcharges,
            total_cost_aud=_money(packaging_cost + delivery_cost + surcharges),
            pricing_source=pricing_source,
            rule_fallback_used=rule_fallback_used,
            raw_carrier_ref=raw_carrier_ref,
        )

    @classmethod
    def from_carrier_total(
        cls,
        carrier: str,
        service_name: str,
        carrier_total: float,
        packaging_cost: float,
        pricing_source: str,
        eta: Optional[Tuple[Optional[int], Optional[int]]] = None,
        raw_carrier_ref: Optional[str] = None,
    ) -> "CarrierQuote":
        """
        Split a carrier's all-in price into packaging and delivery.

        A carrier price below the packaging cost leaves delivery at zero, so
        the quoted total never drops below what the packaging costs.
        """
        delivery_cost = max(carrier_total - packaging_cost, 0.0)
        return cls.build(
            carrier=carrier,
            service_name=service_name,
            packaging_cost=packaging_cost,
            delivery_cost=delivery_cost,
            pricing_source=pricing_source,
            eta=eta,
            raw_carrier_ref=raw_carrier_ref,
        )

    def tagged(self, pricing_source: str) -> "CarrierQuote":
        """Copy marked as an API quote from the given source."""
        return self.model_copy(update={"pricing_source": pricing_source, "rule_fallback_used": False})


class QuoteResult(ApiModel):
    """Everything the caller needs to compare carriers for one shipment."""
    total_weight_grams: int = Field(..., ge=0)
    weight_in_kg: float = Field(..., ge=0)
    volume_weight_in_kg: float = Field(..., ge=0)
    total_volume_cubic_cm: int = Field(..., ge=0)
    origin: OriginSettings
    destination: Destination
    packaging: Packaging
    carrier_quotes: List[CarrierQuote] = Field(default_factory=list)
    currency: str = DEFAULT_CURRENCY
    generated_at: datetime
