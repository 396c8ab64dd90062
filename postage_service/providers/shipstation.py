"""
ShipStation Provider

POST /v2/rates/estimate with "api-key: <SHIPSTATION_API_KEY>". Rates are
requested across the configured carrier accounts (SHIPSTATION_CARRIER_IDS) and
come back as a flat list:

    [{"service_code": "...", "delivery_days": 3, "validation_status": "valid",
      "shipping_amount": {"currency": "aud", "amount": 12.5}}, ...]

Invalid, non-AUD and zero-priced rates are dropped.
"""

import logging
from typing import Any, List, Optional

from postage_service.constants.carriers import SHIPSTATION_ESTIMATE_PATH
from postage_service.core.config import settings
from postage_service.core.logging import mask_secret
from postage_service.providers.base import CarrierProvider, describe_route, total_weight_grams
from postage_service.schemas.catalog import Item, Packaging
from postage_service.schemas.quotes import CarrierQuote
from postage_service.schemas.settings import OriginSettings
from postage_service.schemas.shipment import Destination, ShipmentRequest
from postage_service.tools.carrier_http import is_aud, safe_float, safe_int

logger = logging.getLogger(__name__)


def _city(suburb: Optional[str], postcode: Optional[str]) -> str:
    """ShipStation requires a city; fall back to the postcode."""
    if suburb and suburb.strip():
        return suburb
    return postcode or "Unknown"


class ShipStationProvider(CarrierProvider):
    """Multi-quote provider over several ShipStation carrier accounts."""

    name = "shipstation"
    carrier_code = "SHIPSTATION"
    multi_quote = True

    def __init__(self, api_key=None, client=None, carrier_ids: Optional[List[str]] = None):
        super().__init__(api_key=api_key, client=client)
        self._carrier_ids = carrier_ids

    def carrier_ids(self) -> List[str]:
        return self._carrier_ids if self._carrier_ids is not None else settings.SHIPSTATION_CARRIER_IDS

    async def quotes(
        self,
        request: ShipmentRequest,
        origin: OriginSettings,
        packaging: Packaging,
        items: List[Item]
    ) -> Optional[List[CarrierQuote]]:
        api_key = self.api_key()
        if not api_key:
            logger.info("ShipStation API key not configured, skipping API call")
            return None

        destination = Destination.from_request(request)
        weight_grams = total_weight_grams(request, items)
        route = describe_route(origin, destination, "estimate")

        payload = {
            "carrier_ids": self.carrier_ids(),
            "from_country_code": origin.country,
            "from_postal_code": origin.postcode,
            "from_city_locality": _city(origin.suburb, origin.postcode),
            "from_state_province": origin.state,
            "to_country_code": destination.country,
            "to_postal_code": destination.postcode,
            "to_city_locality": _city(destination.suburb, destination.postcode),
            "to_state_province": destination.state,
            "weight": {"value": max(1.0, float(weight_grams)), "unit": "gram"},
            "dimensions": {
                "length": packaging.length_cm,
                "width": packaging.width_cm,
                "height": packaging.height_cm,
                "unit": "centimeter",
            },
        }

        logger.info(f"Attempting ShipStation API call: {route}, key: {mask_secret(api_key)}")

        body = await self._send_json(
            "POST",
            SHIPSTATION_ESTIMATE_PATH,
            route,
            json=payload,
            headers={"api-key": api_key, "Accept": "application/json"},
        )
        if body is None:
            return None

        if not isinstance(body, list):
            logger.error(f"ShipStation response is not a rate list: {body}")
            return None

        return self._parse(body, packaging)

    def _parse(self, rates: List[Any], packaging: Packaging) -> List[CarrierQuote]:
        results = []
        for rate in rates:
            if not isinstance(rate, dict):
                continue
            if str(rate.get("validation_status") or "").lower() == "invalid":
                continue

            shipping_amount = rate.get("shipping_amount")
            if not isinstance(shipping_amount, dict):
                continue
            if not is_aud(shipping_amount.get("currency")):
                continue

            amount = safe_float(shipping_amount.get("amount"))
            if amount is None or amount <= 0:
                continue

            delivery_days = safe_int(rate.get("delivery_days"))
            eta = (delivery_days, delivery_days) if delivery_days is not None else None

            quote = self._carrier_quote(str(rate.get("service_code") or "rate"), amount, packaging, eta=eta)
            if quote is not None:
                results.append(quote)

        return results
