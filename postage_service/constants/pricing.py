"""
Pricing Constants

Default values for rules-based pricing and delivery estimates.

IMPORTANT: These values are the fallback tariff shown to customers whenever
no carrier API answers. Change them together with the tests in
postage_service/tests/test_algorithms.py.
"""

# ============================================================================
# Volumetric Weight
# SYNC WITH: postage_service/algorithms/weight_brackets.py
# ============================================================================

# 0.25 kg per 1000 cm3
VOLUMETRIC_KG_PER_1000_CUBIC_CM = 0.25


# ============================================================================
# Default Weight Brackets (AusPost parcel tariff, AUD)
# (min_weight_exclusive_kg, max_weight_inclusive_kg, standard, express)
# ============================================================================

DEFAULT_WEIGHT_BRACKETS = (
    (0.0, 0.25, 9.70, 12.70),
    (0.25, 0.5, 11.15, 14.65),
    (0.5, 1.0, 15.25, 19.25),
    (1.0, 3.0, 19.30, 23.80),
    (3.0, 5.0, 23.30, 31.80),
)


# ============================================================================
# Delivery ETA (business days)
# SYNC WITH: postage_service/algorithms/delivery_eta.py
# ============================================================================

EXPRESS_MIN_DAYS = 1
EXPRESS_MAX_DAYS_SAME_STATE = 2
EXPRESS_MAX_DAYS_INTERSTATE = 3

STANDARD_MIN_DAYS_SAME_STATE = 2
STANDARD_MIN_DAYS_INTERSTATE = 3
STANDARD_MAX_DAYS_SAME_STATE = 4
STANDARD_MAX_DAYS_INTERSTATE = 6

# Extra days added to the max only: (standard, express)
RURAL_BOTH_EXTRA_DAYS = (3, 2)
RURAL_ONE_EXTRA_DAYS = (2, 1)


# ============================================================================
# Quote Defaults
# ============================================================================

DEFAULT_CURRENCY = "AUD"
DEFAULT_COUNTRY = "AU"
RULES_PRICING_SOURCE = "RULES"
RULES_SERVICE_NAME = "Derived from rules"
