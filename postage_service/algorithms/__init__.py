"""
Algorithms Package

Deterministic pricing and delivery-estimate functions:
- postcodes: Metro/rural postcode classification
- delivery_eta: Business-day delivery window per route and service level
- weight_brackets: Rules-based delivery pricing from a bracket table

No I/O apart from loading a bracket file; no randomness.
"""

from postage_service.algorithms.postcodes import is_metro, parse_postcode
from postage_service.algorithms.delivery_eta import (
    EtaRange,
    estimate_eta,
    estimate_eta_for_postcodes,
)
from postage_service.algorithms.weight_brackets import (
    find_bracket,
    resolve_delivery_cost,
    volumetric_weight_kg,
    default_brackets,
    load_brackets,
)

__all__ = [
    "is_metro",
    "parse_postcode",
    "EtaRange",
    "estimate_eta",
    "estimate_eta_for_postcodes",
    "find_bracket",
    "resolve_delivery_cost",
    "volumetric_weight_kg",
    "default_brackets",
    "load_brackets",
]
