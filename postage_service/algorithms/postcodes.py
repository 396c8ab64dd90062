"""
Postcode Classifier

Classifies Australian postcodes as metropolitan or rural/regional.
The result only feeds delivery ETA widening; it never affects price.

No external dependencies - a fixed table of inclusive ranges.
"""

import bisect
from typing import Tuple

from postage_service.core.errors import PostcodeParseError

# ============================================================================
# Metropolitan Postcode Bands (inclusive, sorted, disjoint)
# ============================================================================

METRO_POSTCODE_RANGES: Tuple[Tuple[int, int], ...] = (
    (1000, 1935), (2000, 2079), (2085, 2107), (2109, 2156), (2158, 2172),
    (2174, 2229), (2232, 2249), (2557, 2559), (2564, 2567), (2740, 2744),
    (2747, 2751), (2759, 2764), (2766, 2774), (2776, 2777), (2890, 2897),
    (3000, 3062), (3064, 3098), (3101, 3138), (3140, 3210), (3800, 3801),
    (4000, 4018), (4029, 4068), (4072, 4123), (4127, 4129), (4131, 4132),
    (4151, 4164), (4169, 4182), (4205, 4206), (5000, 5113), (5115, 5117),
    (5125, 5130), (5158, 5169), (5800, 5999), (8000, 8999), (9000, 9275),
    (9999, 9999),
)

_RANGE_STARTS = tuple(start for start, _ in METRO_POSTCODE_RANGES)


def is_metro(postcode: int) -> bool:
    """
    Check whether a postcode falls inside a metropolitan band.

    Args:
        postcode: Numeric postcode (e.g. 3000)

    Returns:
        True for metro postcodes, False otherwise
    """
    index = bisect.bisect_right(_RANGE_STARTS, postcode) - 1
    if index < 0:
        return False
    start, end = METRO_POSTCODE_RANGES[index]
    return start <= postcode <= end


def parse_postcode(postcode: str) -> int:
    """
    Strictly parse a postcode string.

    Only a non-empty run of ASCII digits is accepted: no sign, no surrounding
    whitespace, no unicode digits.

    Raises:
        PostcodeParseError: If the string is not a plain number
    """
    if not isinstance(postcode, str) or not postcode or not (postcode.isascii() and postcode.isdigit()):
        raise PostcodeParseError(postcode)
    return int(postcode)
