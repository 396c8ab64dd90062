"""
Shippit Provider

POST /quotes with "Authorization: <SHIPPIT_API_KEY>" and body:

    {"quote": {"dropoff_postcode", "dropoff_state", "dropoff_suburb",
               "dropoff_country_code",
               "parcel_attributes": [{"qty", "weight" (kg),
                                      "length", "width", "depth" (m)}],
               "service_levels": ["express" | "standard"],
               "return_all_quotes": true}}

Shippit answers with one entry per service level, each holding the courier
quotes for it. Only successful entries for the requested level are kept.
"""

import logging
from typing import Any, List, Optional

from postage_service.constants.carriers import (
    SHIPPIT_QUOTES_PATH,
    SHIPPIT_SERVICE_EXPRESS,
    SHIPPIT_SERVICE_STANDARD,
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
from postage_service.tools.carrier_http import first_present, parse_eta_days, safe_float

logger = logging.getLogger(__name__)


class ShippitProvider(CarrierProvider):
    """Multi-quote provider: every courier Shippit offers for the service level."""

    name = "shippit"
    carrier_code = "SHIPPIT"
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
            logger.info("Shippit API key not configured, skipping API call")
            return None

        destination = Destination.from_request(request)
        weight_grams = total_weight_grams(request, items)
        service_level = SHIPPIT_SERVICE_EXPRESS if request.is_express else SHIPPIT_SERVICE_STANDARD
        route = describe_route(origin, destination, service_level)

        payload = {
            "quote": {
                "dropoff_postcode": destination.postcode,
                "dropoff_state": destination.state,
                "dropoff_suburb": destination.suburb,
                "dropoff_country_code": destination.country,
                "parcel_attributes": [{
                    "qty": total_pieces(request),
                    "weight": weight_grams / 1000.0,
                    "length": packaging.length_cm / 100.0,
                    "width": packaging.width_cm / 100.0,
                    "depth": packaging.height_cm / 100.0,
                }],
                "service_levels": [service_level],
                "return_all_quotes": True,
            }
        }

        logger.info(f"Attempting Shippit API call: {route}, weight: {weight_grams}g")

        body = await self._send_json(
            "POST",
            SHIPPIT_QUOTES_PATH,
            route,
            json=payload,
            headers={"Authorization": api_key, "Accept": "application/json"},
        )
        if body is None:
            return None

        quotes = self._parse(body, packaging, service_level)
        logger.info(f"Shippit API returned {len(quotes)} usable quote(s). Request: {route}")
        return quotes

    def _parse(self, body: Any, packaging: Packaging, service_level: str) -> List[CarrierQuote]:
        entries = body.get("response") if isinstance(body, dict) else None
        if not isinstance(entries, list):
            logger.error(f"Shippit response missing response array: {body}")
            return []

        results = []
        for entry in entries:
            if not isinstance(entry, dict) or entry.get("success") is not True:
                continue

            entry_level = entry.get("service_level")
            if entry_level is not None and str(entry_level).lower() != service_level:
                continue

            courier_quotes = entry.get("quotes")
            if not isinstance(courier_quotes, list):
                continue

            for courier_quote in courier_quotes:
                if not isinstance(courier_quote, dict):
                    continue

                price = safe_float(courier_quote.get("price"))
                if price is None or price <= 0:
                    continue

                service_name = (
                    first_present(courier_quote, ("courier_type",))
                    or first_present(entry, ("courier_type",))
                    or service_level
                )
                transit = first_present(courier_quote, ("estimated_transit_time", "estimated_delivery_time"))

                quote = self._carrier_quote(service_name, price, packaging, eta=parse_eta_days(transit))
                if quote is not None:
                    results.append(quote)

        return results
