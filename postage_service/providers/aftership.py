"""
AfterShip Shipping Provider

POST /rates with "as-api-key: <AFTERSHIP_API_KEY>":

    {"ship_date": "YYYY-MM-DD",
     "shipment": {"ship_from": {...}, "ship_to": {...},
                  "parcels": [{"weight": {"value", "unit": "kg"},
                               "dimensions": {...}, "quantity"}]}}

Rates are read from data.rates (or a top-level rates list). AfterShip does not
report transit times, so these quotes carry no ETA.
"""

import logging
from datetime import date
from typing import Any, Dict, List, Optional, Tuple

from postage_service.constants.carriers import (
    AFTERSHIP_RATES_PATH,
    AFTERSHIP_MONEY_FIELDS,
    AFTERSHIP_SERVICE_FIELDS,
)
from postage_service.providers.base import (
    CarrierProvider,
    describe_route,
    total_weight_grams,
    total_pieces,
)
from postage_service.schemas.catalog import Item, Packaging
from postage_service.schemas.quotes import CarrierQuote
from postage_service.schemas.settings import OriginSettings
from postage_service.schemas.shipment import Destination, ShipmentRequest
from postage_service.tools.carrier_http import first_present, is_aud, safe_float

logger = logging.getLogger(__name__)


def _address(suburb, state, postcode, country) -> Dict[str, str]:
    return {
        "city": suburb or "",
        "state": state or "",
        "postal_code": postcode or "",
        "country": country or "",
    }


def parse_money(rate: Dict[str, Any]) -> Optional[Tuple[Optional[str], float]]:
    """
    First readable charge on a rate as (currency, amount).

    Each field may hold {"amount", "currency"} or a bare number.
    """
    for key in AFTERSHIP_MONEY_FIELDS:
        value = rate.get(key)
        if isinstance(value, dict):
            amount = safe_float(value.get("amount"))
            if amount is not None:
                return first_present(value, ("currency", "currency_code")), amount
            continue
        amount = safe_float(value)
        if amount is not None:
            return None, amount
    return None


class AfterShipProvider(CarrierProvider):
    """Multi-quote provider across the couriers connected to AfterShip."""

    name = "aftership"
    carrier_code = "AFTERSHIP"
    multi_quote = True

    async def quotes(
        self,
        request: ShipmentRequest,
        origin: OriginSettings,
        packaging: Packaging,
        items: List[Item]
    ) -> Optional[List[CarrierQuote]]:
        api_key = self.api_key()
        if not api_key:
            logger.info("AfterShip API key not configured, skipping API call")
            return None

        destination = Destination.from_request(request)
        weight_grams = total_weight_grams(request, items)
        route = describe_route(origin, destination, "rates")

        payload = {
            "ship_date": date.today().isoformat(),
            "shipment": {
                "ship_from": _address(origin.suburb, origin.state, origin.postcode, origin.country),
                "ship_to": _address(
                    destination.suburb, destination.state, destination.postcode, destination.country
                ),
                "parcels": [{
                    "weight": {"value": max(0.001, weight_grams / 1000.0), "unit": "kg"},
                    "dimensions": {
                        "unit": "cm",
                        "length": packaging.length_cm,
                        "width": packaging.width_cm,
                        "height": packaging.height_cm,
                    },
                    "quantity": total_pieces(request),
                }],
            },
        }

        logger.info(f"Attempting AfterShip API call: {route}")

        body = await self._send_json(
            "POST",
            AFTERSHIP_RATES_PATH,
            route,
            json=payload,
            headers={"as-api-key": api_key, "Accept": "application/json"},
        )
        if body is None:
            return None

        return self._parse(body, packaging)

    def _parse(self, body: Any, packaging: Packaging) -> List[CarrierQuote]:
        if not isinstance(body, dict):
            logger.warning(f"AfterShip response is not an object: {body}")
            return []

        data = body.get("data")
        rates = data.get("rates") if isinstance(data, dict) else body.get("rates")
        if not isinstance(rates, list) or not rates:
            logger.warning(f"AfterShip response missing rates array: {body}")
            return []

        results = []
        for rate in rates:
            if not isinstance(rate, dict):
                continue

            money = parse_money(rate)
            if money is None:
                continue
            currency, amount = money
            if amount <= 0 or not is_aud(currency):
                continue

            quote = self._carrier_quote(first_present(rate, AFTERSHIP_SERVICE_FIELDS) or "rate", amount, packaging)
            if quote is not None:
                results.append(quote)

        return results
