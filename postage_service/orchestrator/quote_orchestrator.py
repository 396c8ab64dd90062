"""
Quote Orchestrator - Carrier Fan-out with Rules Fallback

Turns a ShipmentRequest into a QuoteResult:
1. Validates the request (no I/O happens before this passes)
2. Resolves origin, packaging and items from the stores (one read each, off
   the event loop)
3. Computes actual and volumetric weight
4. Asks every enabled provider for quotes, concurrently
5. Adds a rules-priced line whenever the primary carrier has no API quote,
   including when the allow-list leaves it out, so a price always comes back

Provider answers are merged in registry order regardless of which call
finishes first. Carrier-side failures arrive here as None; anything a provider
raises is a bug and is re-raised once every provider has finished.
"""

import asyncio
import logging
from datetime import datetime, timezone
from typing import List, Optional, Sequence, Tuple

from postage_service.algorithms.delivery_eta import estimate_eta_for_postcodes
from postage_service.algorithms.weight_brackets import (
    grams_to_kg,
    resolve_delivery_cost,
    volumetric_weight_kg,
)
from postage_service.constants.pricing import RULES_PRICING_SOURCE, RULES_SERVICE_NAME
from postage_service.core.config import settings
from postage_service.core.errors import OriginNotConfiguredError, ValidationError
from postage_service.providers.base import CarrierProvider, ProviderConfig
from postage_service.providers.registry import ProviderRegistry
from postage_service.schemas.catalog import Item, Packaging
from postage_service.schemas.quotes import CarrierQuote, QuoteResult, WeightBracket
from postage_service.schemas.settings import OriginSettings
from postage_service.schemas.shipment import Destination, ShipmentRequest
from postage_service.stores.items import ItemStore
from postage_service.stores.packaging import PackagingStore
from postage_service.stores.settings import SettingsStore

logger = logging.getLogger(__name__)


def _blank(value: Optional[str]) -> bool:
    return value is None or not value.strip()


def validate_request(request: ShipmentRequest) -> None:
    """
    Presence checks made before anything is looked up.

    Raises:
        ValidationError: First failing check, in this order: destination
            postcode, items, packaging id, quantities
    """
    if _blank(request.destination_postcode):
        raise ValidationError("Destination postcode is required", details={"field": "destinationPostcode"})
    if not request.items:
        raise ValidationError("At least one item is required", details={"field": "items"})
    if _blank(request.packaging_id):
        raise ValidationError("Packaging is required", details={"field": "packagingId"})
    for selection in request.items:
        if selection.quantity <= 0:
            raise ValidationError("Item quantity must be greater than 0", details={"field": "quantity"})


class QuoteOrchestrator:
    """
    Multi-carrier quoting with a rules-based fallback for the primary carrier.

    Args:
        registry: Providers to consult
        item_store: Item lookup
        packaging_store: Packaging lookup
        settings_store: Origin lookup
        brackets: Tariff used for rules pricing
        provider_config: Allow-list; None or empty enables every provider
        primary_carrier: Provider name that gets the rules fallback line
            (default: settings.PRIMARY_CARRIER)
    """

    def __init__(
        self,
        registry: ProviderRegistry,
        item_store: ItemStore,
        packaging_store: PackagingStore,
        settings_store: SettingsStore,
        brackets: Sequence[WeightBracket],
        provider_config: Optional[ProviderConfig] = None,
        primary_carrier: Optional[str] = None
    ):
        self.registry = registry
        self.item_store = item_store
        self.packaging_store = packaging_store
        self.settings_store = settings_store
        self.brackets = tuple(brackets)
        self.provider_config = provider_config
        self.primary_carrier = (primary_carrier or settings.PRIMARY_CARRIER).lower()

    # ==================== Public API ====================

    async def calculate_quote(self, request: ShipmentRequest) -> QuoteResult:
        """
        Quote a shipment across every enabled carrier.

        Raises:
            ValidationError: Missing fields, unknown ids, unparseable
                postcodes, or a shipment outside the bracket table
            OriginNotConfiguredError: No origin saved yet
        """
        validate_request(request)

        origin, packaging, items = await asyncio.to_thread(self._load_inputs, request)

        total_weight_grams = sum(
            weight * selection.quantity
            for weight, selection in zip((item.unit_weight_grams for item in items), request.items)
        )
        weight_kg = grams_to_kg(total_weight_grams)
        volume_weight_kg = volumetric_weight_kg(packaging.internal_volume_cubic_cm)
        destination = Destination.from_request(request)

        providers = self.registry.enabled_providers(self.provider_config)
        logger.info(
            f"Quoting {total_weight_grams}g ({volume_weight_kg:.3f}kg volumetric) "
            f"{origin.postcode} -> {destination.postcode}, express={request.is_express}, "
            f"providers: {[provider.name for provider in providers]}"
        )

        outcomes = await asyncio.gather(
            *(self._collect(provider, request, origin, packaging, items) for provider in providers),
            return_exceptions=True,
        )

        failure = next((outcome for outcome in outcomes if isinstance(outcome, BaseException)), None)
        if failure is not None:
            raise failure

        answered = {provider.name: provider_quotes for provider, provider_quotes in zip(providers, outcomes)}
        primary = self.registry.by_name(self.primary_carrier)
        primary_code = primary.carrier_code if primary is not None else self.primary_carrier.upper()

        def rules_line() -> CarrierQuote:
            logger.info(f"No {primary_code} API quote; using rules-based pricing")
            return self._rules_quote(
                primary_code, origin, destination, packaging, weight_kg, volume_weight_kg, request.is_express
            )

        # Registry order; the primary carrier always ends up with a line, even
        # when the allow-list skips it
        carrier_quotes: List[CarrierQuote] = []
        for provider in self.registry.all_providers():
            provider_quotes = answered.get(provider.name)
            if provider_quotes:
                carrier_quotes.extend(provider_quotes)
            elif provider.name == self.primary_carrier:
                carrier_quotes.append(rules_line())
        if primary is None:
            carrier_quotes.append(rules_line())

        return QuoteResult(
            total_weight_grams=total_weight_grams,
            weight_in_kg=weight_kg,
            volume_weight_in_kg=volume_weight_kg,
            total_volume_cubic_cm=packaging.internal_volume_cubic_cm,
            origin=origin,
            destination=destination,
            packaging=packaging,
            carrier_quotes=carrier_quotes,
            currency=settings.QUOTE_CURRENCY,
            generated_at=datetime.now(timezone.utc),
        )

    # ==================== Lookups ====================

    def _load_inputs(self, request: ShipmentRequest) -> Tuple[OriginSettings, Packaging, List[Item]]:
        """Store reads for one quote: origin, then packaging, then items."""
        origin = self.settings_store.get_origin_settings()
        if origin is None:
            raise OriginNotConfiguredError()
        return origin, self._resolve_packaging(request.packaging_id), self._resolve_items(request)

    def _resolve_packaging(self, packaging_id: str) -> Packaging:
        packaging = self.packaging_store.find_by_id(packaging_id)
        if packaging is None:
            raise ValidationError(f"Packaging with id {packaging_id} not found", details={"packagingId": packaging_id})
        return packaging

    def _resolve_items(self, request: ShipmentRequest) -> List[Item]:
        """Items in selection order (one entry per selection), from a single catalog read."""
        catalog = {item.id: item for item in self.item_store.find_all()}
        items = []
        for selection in request.items:
            item = None if _blank(selection.item_id) else catalog.get(selection.item_id)
            if item is None:
                raise ValidationError(
                    f"Item with id {selection.item_id} not found", details={"itemId": selection.item_id}
                )
            items.append(item)
        return items

    # ==================== Providers ====================

    async def _collect(
        self,
        provider: CarrierProvider,
        request: ShipmentRequest,
        origin: OriginSettings,
        packaging: Packaging,
        items: List[Item]
    ) -> List[CarrierQuote]:
        """
        Provider answer tagged as API pricing; [] when there is none.

        Multi-quote providers are asked once through quotes(), since their
        quote() would only repeat the same call.
        """
        if provider.multi_quote:
            quotes = await provider.quotes(request, origin, packaging, items)
            if quotes:
                logger.info(f"{provider.carrier_code}: {len(quotes)} API quote(s)")
                return [quote.tagged(provider.pricing_source) for quote in quotes]
            logger.info(f"{provider.carrier_code}: no API quote")
            return []

        quote = await provider.quote(request, origin, packaging, items)
        if quote is not None:
            logger.info(f"{provider.carrier_code}: API quote {quote.total_cost_aud:.2f}")
            return [quote.tagged(provider.pricing_source)]

        logger.info(f"{provider.carrier_code}: no API quote")
        return []

    def _rules_quote(
        self,
        carrier_code: str,
        origin: OriginSettings,
        destination: Destination,
        packaging: Packaging,
        weight_kg: float,
        volume_weight_kg: float,
        express: bool
    ) -> CarrierQuote:
        delivery_cost = resolve_delivery_cost(weight_kg, volume_weight_kg, self.brackets, express)
        eta = estimate_eta_for_postcodes(
            origin.postcode, destination.postcode, origin.state, destination.state, express
        )
        return CarrierQuote.build(
            carrier=carrier_code,
            service_name=RULES_SERVICE_NAME,
            packaging_cost=packaging.packaging_cost_aud,
            delivery_cost=delivery_cost,
            pricing_source=RULES_PRICING_SOURCE,
            eta=(eta.min_days, eta.max_days),
            rule_fallback_used=True,
        )
