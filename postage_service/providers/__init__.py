"""
Providers Package

Carrier integrations behind a common quoting contract.

Available Providers:
- AusPostProvider: Australia Post PAC calculator (primary carrier)
- ShippitProvider: Shippit multi-courier quotes
- ShipStationProvider: ShipStation rate estimates
- AfterShipProvider: AfterShip Shipping rates
- AramexProvider: Aramex SOAP RateCalculator

Registry:
- get_registry(): Default ProviderRegistry
- list_providers(): Enabled/credential status per provider
"""

from postage_service.providers.base import (
    CarrierProvider,
    ProviderConfig,
    ProviderSettings,
)

from postage_service.providers.registry import (
    ProviderRegistry,
    build_default_registry,
    get_registry,
    list_providers,
    log_provider_diagnostics,
)

__all__ = [
    "CarrierProvider",
    "ProviderConfig",
    "ProviderSettings",
    "ProviderRegistry",
    "build_default_registry",
    "get_registry",
    "list_providers",
    "log_provider_diagnostics",
]
