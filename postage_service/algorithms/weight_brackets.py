"""
Weight Bracket Resolver

Deterministic rules-based delivery pricing from a bracket table.

Both the actual weight and the volumetric weight are looked up; when both land
in a bracket the dearer price wins, so bulky light parcels are never
under-priced. A shipment outside every bracket cannot be priced by rules.

The table is loaded once (defaults or WEIGHT_BRACKETS_PATH) and passed to the
resolver explicitly; it is an immutable tuple.
"""

import json
import logging
from pathlib import Path
from typing import Optional, Sequence, Tuple

from postage_service.constants.pricing import (
    DEFAULT_WEIGHT_BRACKETS,
    VOLUMETRIC_KG_PER_1000_CUBIC_CM,
)
from postage_service.core.errors import NoBracketMatchError, StoreError
from postage_service.schemas.quotes import WeightBracket

logger = logging.getLogger(__name__)

BracketTable = Tuple[WeightBracket, ...]


# ============================================================================
# Weight Conversions
# ============================================================================


def volumetric_weight_kg(volume_cubic_cm: float) -> float:
    """
    Volumetric weight at 0.25 kg per 1000 cm3.

    Example:
        >>> volumetric_weight_kg(1_000_000)
        250.0
    """
    return volume_cubic_cm / 1000.0 * VOLUMETRIC_KG_PER_1000_CUBIC_CM


def grams_to_kg(grams: int) -> float:
    return grams / 1000.0


# ============================================================================
# Bracket Lookup
# ============================================================================


def find_bracket(weight_kg: float, brackets: Sequence[WeightBracket]) -> Optional[WeightBracket]:
    """First bracket with min < weight_kg <= max, or None."""
    for bracket in brackets:
        if bracket.contains(weight_kg):
            return bracket
    return None


def resolve_delivery_cost(
    weight_kg: float,
    volumetric_weight_kg: float,
    brackets: Sequence[WeightBracket],
    express: bool
) -> float:
    """
    Price a shipment from the bracket table.

    Args:
        weight_kg: Actual weight in kg
        volumetric_weight_kg: Volumetric weight in kg
        brackets: Ordered bracket table
        express: Use express prices instead of standard

    Returns:
        Delivery cost (packaging not included)

    Raises:
        NoBracketMatchError: If neither weight lands in any bracket
    """
    by_weight = find_bracket(weight_kg, brackets)
    by_volume = find_bracket(volumetric_weight_kg, brackets)

    if by_weight is None and by_volume is None:
        logger.warning(
            f"No bracket for weight={weight_kg:.3f}kg volumetric={volumetric_weight_kg:.3f}kg"
        )
        raise NoBracketMatchError(weight_kg, volumetric_weight_kg)

    if by_weight is None:
        return by_volume.price(express)
    if by_volume is None:
        return by_weight.price(express)
    return max(by_weight.price(express), by_volume.price(express))


# ============================================================================
# Table Loading
# ============================================================================


def default_brackets() -> BracketTable:
    """The built-in AusPost parcel tariff."""
    return tuple(
        WeightBracket(
            min_weight_inclusive=low,
            max_weight_inclusive=high,
            price_standard=standard,
            price_express=express,
        )
        for low, high, standard, express in DEFAULT_WEIGHT_BRACKETS
    )


def load_brackets(path: Optional[str] = None) -> BracketTable:
    """
    Load a bracket table from a JSON list, or the defaults when path is None.

    File format:
        [{"minWeightInclusive": 0, "maxWeightInclusive": 0.25,
          "priceStandard": 9.70, "priceExpress": 12.70}, ...]

    Raises:
        StoreError: If the file is unreadable or not a list of brackets
    """
    if not path:
        return default_brackets()

    try:
        raw = json.loads(Path(path).read_text(encoding="utf-8"))
        if not isinstance(raw, list) or not raw:
            raise ValueError("expected a non-empty JSON list")
        table = tuple(WeightBracket.model_validate(entry) for entry in raw)
    except (OSError, ValueError) as e:
        logger.error(f"Failed to load weight brackets from {path}: {e}")
        raise StoreError(f"Unable to load weight brackets from {path}") from e

    logger.info(f"Loaded {len(table)} weight brackets from {path}")
    return table
