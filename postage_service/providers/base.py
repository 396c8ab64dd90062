"""
Base Carrier Provider

Every carrier integration inherits from CarrierProvider and implements quote()
or quotes(). Multi-quote providers set multi_quote = True and implement
quotes(); their quote() is the cheapest of those. A None or empty answer means
"no quote from this carrier".

Contract:
- Never raise for carrier-side conditions: missing credentials, network
  errors, timeouts, HTTP 4xx/5xx, malformed bodies, foreign currency or an
  unavailable service level all become None
- Without credentials, return None before touching the network
"""

import logging
from typing import Any, Dict, List, Optional, Tuple

import httpx
from pydantic import BaseModel, Field, ValidationError as PydanticValidationError

from postage_service.core.config import KNOWN_PROVIDERS, settings
from postage_service.schemas.catalog import Item, Packaging
from postage_service.schemas.quotes import CarrierQuote
from postage_service.schemas.settings import OriginSettings
from postage_service.schemas.shipment import Destination, ShipmentRequest
from postage_service.tools import carrier_http

logger = logging.getLogger(__name__)


# ============================================================================
# Provider Configuration
# ============================================================================

class ProviderSettings(BaseModel):
    """Per-carrier switch and optional credentials."""
    enabled: bool = False
    api_key: Optional[str] = None
    api_id: Optional[str] = None


class ProviderConfig(BaseModel):
    """
    Carrier allow-list.

    An empty mapping means no allow-list was configured at all; the registry
    then tries every provider.
    """
    providers: Dict[str, ProviderSettings] = Field(default_factory=dict)

    def get_provider(self, name: str) -> Optional[ProviderSettings]:
        return self.providers.get(name.lower())

    def is_empty(self) -> bool:
        return not self.providers

    @classmethod
    def enabled_only(cls, *names: str) -> "ProviderConfig":
        """Config enabling exactly the named providers."""
        return cls(providers={name.lower(): ProviderSettings(enabled=True) for name in names})

    @classmethod
    def from_env(cls) -> "ProviderConfig":
        """
        Build from <NAME>_ENABLED variables.

        Providers whose variable is unset are left out, which disables them
        once any other provider is listed.
        """
        providers = {}
        for name in KNOWN_PROVIDERS:
            flag = settings.provider_enabled_flag(name)
            if flag is None:
                continue
            providers[name] = ProviderSettings(enabled=flag, api_key=settings.api_key(name))
        return cls(providers=providers)


# ============================================================================
# Shipment Helpers
# ============================================================================

def total_weight_grams(request: ShipmentRequest, items: List[Item]) -> int:
    """Sum of unit weight x quantity over the request's selections."""
    weights = {item.id: item.unit_weight_grams for item in items}
    return sum(weights.get(selection.item_id, 0) * selection.quantity for selection in request.items)


def total_pieces(request: ShipmentRequest) -> int:
    """Total unit count, at least 1."""
    return max(1, sum(selection.quantity for selection in request.items))


def describe_route(origin: OriginSettings, destination: Destination, service: str) -> str:
    """Log fragment naming the route and service."""
    return (
        f"from {origin.postcode} {origin.suburb} to "
        f"{destination.postcode} {destination.suburb}, service: {service}"
    )


# ============================================================================
# Provider Base Class
# ============================================================================

class CarrierProvider:
    """
    Base class for all carrier integrations.

    Class attributes:
        name: Stable identifier used in configuration (e.g. "auspost")
        carrier_code: Label stamped on quotes (e.g. "AUSPOST")
        multi_quote: True when quotes() is the primary entry point

    Constructor arguments override settings; tests pass a client built on
    httpx.MockTransport.
    """

    name: str = ""
    carrier_code: str = ""
    multi_quote: bool = False

    def __init__(
        self,
        api_key: Optional[str] = None,
        client: Optional[httpx.AsyncClient] = None
    ):
        self._api_key = api_key
        self._client = client

    # ==================== Identity & Configuration ====================

    @property
    def pricing_source(self) -> str:
        return f"{self.carrier_code}_API"

    def is_enabled(self, config: ProviderConfig) -> bool:
        """Enabled only when the config lists this provider as enabled."""
        provider_settings = config.get_provider(self.name)
        return bool(provider_settings and provider_settings.enabled)

    def api_key(self) -> Optional[str]:
        """Constructor key, else <NAME>_API_KEY from the environment."""
        return self._api_key or settings.api_key(self.name)

    def has_credentials(self) -> bool:
        return bool(self.api_key())

    def client(self) -> httpx.AsyncClient:
        return self._client or carrier_http.get_client(self.name)

    # ==================== Quoting ====================

    async def quote(
        self,
        request: ShipmentRequest,
        origin: OriginSettings,
        packaging: Packaging,
        items: List[Item]
    ) -> Optional[CarrierQuote]:
        """
        Cheapest quote for the shipment, or None.

        Default: the lowest total among quotes().
        """
        quotes = await self.quotes(request, origin, packaging, items)
        if not quotes:
            return None
        return min(quotes, key=lambda quote: quote.total_cost_aud)

    async def quotes(
        self,
        request: ShipmentRequest,
        origin: OriginSettings,
        packaging: Packaging,
        items: List[Item]
    ) -> Optional[List[CarrierQuote]]:
        """Every service-level quote for the shipment, or None."""
        return None

    # ==================== Quote Building ====================

    def _carrier_quote(
        self,
        service_name: str,
        carrier_total: float,
        packaging: Packaging,
        eta: Optional[Tuple[Optional[int], Optional[int]]] = None,
        raw_carrier_ref: Optional[str] = None
    ) -> Optional[CarrierQuote]:
        """
        CarrierQuote.from_carrier_total() stamped with this carrier.

        A day range with a missing or negative bound is dropped rather than the
        rate. Values the quote model rejects give None.
        """
        if eta is not None and any(days is None or days < 0 for days in eta):
            eta = None
        try:
            return CarrierQuote.from_carrier_total(
                carrier=self.carrier_code,
                service_name=service_name,
                carrier_total=carrier_total,
                packaging_cost=packaging.packaging_cost_aud,
                pricing_source=self.pricing_source,
                eta=eta,
                raw_carrier_ref=raw_carrier_ref,
            )
        except PydanticValidationError as e:
            logger.warning(
                f"{self.carrier_code} rate '{service_name}' rejected, "
                f"{e.error_count()} invalid field(s): total={carrier_total!r}, eta={eta}"
            )
            return None

    # ==================== HTTP Helpers ====================

    async def _send(self, method: str, path: str, route: str, **kwargs) -> Optional[httpx.Response]:
        """
        Issue a request and return the response, or None on any HTTP failure.

        Args:
            method: HTTP method
            path: Path relative to the carrier base URL
            route: describe_route() text for logs
            **kwargs: Passed to httpx (params, json, content, headers)
        """
        try:
            response = await self.client().request(method, path, **kwargs)
            response.raise_for_status()
            return response
        except httpx.HTTPStatusError as e:
            log = logger.warning if e.response.status_code < 500 else logger.error
            log(f"{self.carrier_code} API {carrier_http.describe_http_error(e)}. Request: {route}")
            return None
        except httpx.HTTPError as e:
            logger.error(f"{self.carrier_code} API {carrier_http.describe_http_error(e)}. Request: {route}")
            return None

    async def _send_json(self, method: str, path: str, route: str, **kwargs) -> Optional[Any]:
        """_send() and decode the JSON body; undecodable bodies give None."""
        response = await self._send(method, path, route, **kwargs)
        if response is None:
            return None
        try:
            return response.json()
        except ValueError as e:
            logger.error(f"{self.carrier_code} API returned a non-JSON body ({e}). Request: {route}")
            return None
