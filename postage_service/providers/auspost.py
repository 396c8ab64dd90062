"""
Australia Post Provider

Calls the PAC domestic parcel calculator:
    GET /postage/parcel/domestic/calculate.json
        ?from_postcode&to_postcode&length&width&height&weight&service_code
    AUTH-KEY: <AUSPOST_API_KEY>

Response:
    {"postage_result": {"service": "Parcel Post", "delivery_time":
     "Delivered in 2-3 business days", "total_cost": "15.05"}}

AusPost is the primary carrier: when this provider has nothing, the
orchestrator adds a rules-based AusPost line instead.
"""

import logging
from typing import Any, List, Optional

from postage_service.constants.carriers import (
    AUSPOST_CALCULATE_PATH,
    AUSPOST_SERVICE_EXPRESS,
    AUSPOST_SERVICE_REGULAR,
    AUSPOST_DEFAULT_ETA_EXPRESS,
    AUSPOST_DEFAULT_ETA_STANDARD,
)
from postage_service.providers.base import CarrierProvider, describe_route, total_weight_grams
from postage_service.schemas.catalog import Item, Packaging
from postage_service.schemas.quotes import CarrierQuote
from postage_service.schemas.settings import OriginSettings
from postage_service.schemas.shipment import Destination, ShipmentRequest
from postage_service.tools.carrier_http import parse_eta_days, safe_float

logger = logging.getLogger(__name__)


class AusPostProvider(CarrierProvider):
    """Single-quote provider for Australia Post parcel services."""

    name = "auspost"
    carrier_code = "AUSPOST"

    async def quote(
        self,
        request: ShipmentRequest,
        origin: OriginSettings,
        packaging: Packaging,
        items: List[Item]
    ) -> Optional[CarrierQuote]:
        api_key = self.api_key()
        if not api_key:
            logger.info("AusPost API key not configured, skipping API call and using rules-based pricing")
            return None

        destination = Destination.from_request(request)
        weight_grams = total_weight_grams(request, items)
        service_code = AUSPOST_SERVICE_EXPRESS if request.is_express else AUSPOST_SERVICE_REGULAR
        route = describe_route(origin, destination, service_code)

        logger.info(f"Attempting AusPost API call: {route}, weight: {weight_grams}g")

        params = {
            "from_postcode": origin.postcode,
            "to_postcode": destination.postcode,
            "length": str(packaging.length_cm),
            "width": str(packaging.width_cm),
            "height": str(packaging.height_cm),
            "weight": str(weight_grams / 1000.0),
            "service_code": service_code,
        }

        body = await self._send_json(
            "GET",
            AUSPOST_CALCULATE_PATH,
            route,
            params=params,
            headers={"AUTH-KEY": api_key, "Accept": "application/json"},
        )
        if body is None:
            return None

        quote = self._parse(body, packaging, request.is_express)
        if quote is None:
            logger.warning(f"AusPost API response unusable, falling back to rules. Request: {route}")
        else:
            logger.info(f"AusPost API quote retrieved: ${quote.total_cost_aud}")
        return quote

    def _parse(self, body: Any, packaging: Packaging, express: bool) -> Optional[CarrierQuote]:
        postage_result = body.get("postage_result") if isinstance(body, dict) else None
        if not isinstance(postage_result, dict):
            logger.error(f"AusPost response missing postage_result: {body}")
            return None

        total_cost = safe_float(postage_result.get("total_cost"))
        if total_cost is None:
            logger.error(f"AusPost response missing total_cost: {postage_result}")
            return None

        service_name = postage_result.get("service") or ("Express Post" if express else "Parcel Post")

        eta = parse_eta_days(postage_result.get("delivery_time"))
        if eta is None:
            eta = AUSPOST_DEFAULT_ETA_EXPRESS if express else AUSPOST_DEFAULT_ETA_STANDARD

        return self._carrier_quote(str(service_name), total_cost, packaging, eta=eta)
