"""
Provider Registry

Holds one CarrierProvider per name, in registration order, and selects the
enabled subset for a ProviderConfig. Used by the quote orchestrator.

Duplicate names are rejected when the registry is built.

DO NOT import the orchestrator here to avoid circular dependencies.
"""

import logging
from typing import Any, Dict, Iterable, List, Optional

from postage_service.providers.base import CarrierProvider, ProviderConfig

logger = logging.getLogger(__name__)


class ProviderRegistry:
    """Ordered, name-unique collection of carrier providers."""

    def __init__(self, providers: Iterable[CarrierProvider]):
        self._providers: List[CarrierProvider] = []
        seen = set()
        for provider in providers:
            if provider.name in seen:
                raise ValueError(f"Duplicate carrier provider name: {provider.name}")
            seen.add(provider.name)
            self._providers.append(provider)

    def all_providers(self) -> List[CarrierProvider]:
        """Every provider in registration order."""
        return list(self._providers)

    def enabled_providers(self, config: Optional[ProviderConfig]) -> List[CarrierProvider]:
        """
        Providers to query for a quote.

        Args:
            config: Allow-list; None or empty means every provider

        Returns:
            Providers in registration order
        """
        if config is None or config.is_empty():
            return self.all_providers()
        return [provider for provider in self._providers if provider.is_enabled(config)]

    def by_name(self, name: str) -> Optional[CarrierProvider]:
        for provider in self._providers:
            if provider.name == name:
                return provider
        return None

    def __len__(self) -> int:
        return len(self._providers)


# ============================================================================
# Default Registry
# ============================================================================

def build_default_registry() -> ProviderRegistry:
    """The shipped carriers, AusPost first."""
    from postage_service.providers.auspost import AusPostProvider
    from postage_service.providers.shippit import ShippitProvider
    from postage_service.providers.shipstation import ShipStationProvider
    from postage_service.providers.aftership import AfterShipProvider
    from postage_service.providers.aramex import AramexProvider

    return ProviderRegistry([
        AusPostProvider(),
        ShippitProvider(),
        ShipStationProvider(),
        AfterShipProvider(),
        AramexProvider(),
    ])


_registry: Optional[ProviderRegistry] = None


def get_registry() -> ProviderRegistry:
    """Lazily built default registry (singleton)."""
    global _registry

    if _registry is None:
        _registry = build_default_registry()
        logger.info(f"Initialized provider registry with {len(_registry)} providers")

    return _registry


def list_providers(
    config: Optional[ProviderConfig] = None,
    registry: Optional[ProviderRegistry] = None
) -> List[Dict[str, Any]]:
    """
    Describe every registered provider.

    Args:
        config: Allow-list used to compute "enabled"
        registry: Registry to describe (default: get_registry())

    Returns:
        [{"name", "carrier", "enabled", "credentials_configured"}, ...]
    """
    if registry is None:
        registry = get_registry()
    enabled = {provider.name for provider in registry.enabled_providers(config)}
    return [
        {
            "name": provider.name,
            "carrier": provider.carrier_code,
            "enabled": provider.name in enabled,
            "credentials_configured": provider.has_credentials(),
        }
        for provider in registry.all_providers()
    ]


def log_provider_diagnostics(
    config: Optional[ProviderConfig] = None,
    registry: Optional[ProviderRegistry] = None
) -> None:
    """Log each provider's enabled flag and credential presence at startup."""
    if config is None or config.is_empty():
        logger.info("No provider allow-list configured; all providers will be tried")
    for entry in list_providers(config, registry):
        logger.info(
            f"Provider {entry['name']}: enabled={entry['enabled']}, "
            f"credentials={'present' if entry['credentials_configured'] else 'missing'}"
        )


def clear_instances() -> None:
    """Drop the cached registry. Useful for testing."""
    global _registry
    _registry = None
    logger.info("Cleared provider registry")
