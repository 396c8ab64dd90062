"""
Delivery ETA Estimator

Deterministic business-day range for a route and service level.

Rules:
1. same_state is an exact, case-sensitive comparison of the state codes
2. Base range - express: (1, 2 same state | 3 interstate)
                standard: (2 | 3, 4 | 6)
3. Rural widening applies to the max only:
   both ends rural -> +3 standard / +2 express
   one end rural   -> +2 standard / +1 express

Used by the orchestrator when it synthesizes a rules-based quote.
"""

from typing import NamedTuple, Optional

from postage_service.algorithms.postcodes import is_metro, parse_postcode
from postage_service.constants.pricing import (
    EXPRESS_MIN_DAYS,
    EXPRESS_MAX_DAYS_SAME_STATE,
    EXPRESS_MAX_DAYS_INTERSTATE,
    STANDARD_MIN_DAYS_SAME_STATE,
    STANDARD_MIN_DAYS_INTERSTATE,
    STANDARD_MAX_DAYS_SAME_STATE,
    STANDARD_MAX_DAYS_INTERSTATE,
    RURAL_BOTH_EXTRA_DAYS,
    RURAL_ONE_EXTRA_DAYS,
)


class EtaRange(NamedTuple):
    """Inclusive business-day range."""
    min_days: int
    max_days: int


def _base_range(same_state: bool, express: bool) -> EtaRange:
    if express:
        return EtaRange(
            EXPRESS_MIN_DAYS,
            EXPRESS_MAX_DAYS_SAME_STATE if same_state else EXPRESS_MAX_DAYS_INTERSTATE,
        )
    return EtaRange(
        STANDARD_MIN_DAYS_SAME_STATE if same_state else STANDARD_MIN_DAYS_INTERSTATE,
        STANDARD_MAX_DAYS_SAME_STATE if same_state else STANDARD_MAX_DAYS_INTERSTATE,
    )


def rural_adjustment(origin_postcode: int, dest_postcode: int, express: bool) -> int:
    """Extra days added to the max for rural endpoints."""
    rural_count = (not is_metro(origin_postcode)) + (not is_metro(dest_postcode))
    if rural_count == 0:
        return 0
    standard_extra, express_extra = RURAL_BOTH_EXTRA_DAYS if rural_count == 2 else RURAL_ONE_EXTRA_DAYS
    return express_extra if express else standard_extra


def estimate_eta(
    origin_postcode: int,
    dest_postcode: int,
    origin_state: Optional[str],
    dest_state: Optional[str],
    express: bool
) -> EtaRange:
    """
    Estimate the delivery window for a route.

    Args:
        origin_postcode: Origin postcode
        dest_postcode: Destination postcode
        origin_state: Origin state code (e.g. "VIC")
        dest_state: Destination state code; None never equals a real state
        express: Express service level

    Returns:
        EtaRange(min_days, max_days)

    Example:
        >>> estimate_eta(3000, 3999, "VIC", "VIC", express=True)
        EtaRange(min_days=1, max_days=3)
    """
    same_state = origin_state == dest_state
    base = _base_range(same_state, express)
    extra = rural_adjustment(origin_postcode, dest_postcode, express)
    return EtaRange(base.min_days, base.max_days + extra)


def estimate_eta_for_postcodes(
    origin_postcode: str,
    dest_postcode: str,
    origin_state: Optional[str],
    dest_state: Optional[str],
    express: bool
) -> EtaRange:
    """
    String-postcode variant of estimate_eta().

    Raises:
        PostcodeParseError: If either postcode is not a plain number
    """
    return estimate_eta(
        parse_postcode(origin_postcode),
        parse_postcode(dest_postcode),
        origin_state,
        dest_state,
        express,
    )
