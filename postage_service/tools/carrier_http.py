"""
Carrier HTTP Clients

Pooled httpx.AsyncClient instances, one per carrier, plus the lenient value
parsing every carrier response mapper needs.

Functions:
- get_client: Get or create the pooled client for a carrier
- aclose_client / aclose_all_clients: Close pools (call during app shutdown)
- describe_http_error: One-line log summary of an httpx failure
- safe_float / safe_int: Parse loosely typed JSON numbers
- parse_eta_days: Read "2-3 business days" style strings
- first_present: First non-blank value among several keys

Clients are created lazily so importing a provider never opens a connection.
"""

import logging
import math
import re
from typing import Any, Dict, Iterable, Optional, Tuple
import httpx

from postage_service.core.config import settings

logger = logging.getLogger(__name__)


# ============================================================================
# Module-level HTTP Clients (one pool per carrier)
# ============================================================================

_clients: Dict[str, httpx.AsyncClient] = {}


def get_client(carrier: str) -> httpx.AsyncClient:
    """
    Get or create the httpx.AsyncClient for a carrier.

    Base URL and timeout come from <CARRIER>_BASE_URL / <CARRIER>_TIMEOUT.

    Args:
        carrier: Provider name (auspost, shippit, ...)
    """
    client = _clients.get(carrier)

    if client is None or client.is_closed:
        limits = httpx.Limits(
            max_connections=settings.DEFAULT_CLIENT_MAX_CONNECTIONS,
            max_keepalive_connections=settings.DEFAULT_CLIENT_MAX_KEEPALIVE
        )

        client = httpx.AsyncClient(
            base_url=settings.carrier_base_url(carrier),
            timeout=settings.carrier_timeout(carrier),
            limits=limits,
            follow_redirects=False
        )
        _clients[carrier] = client
        logger.info(f"Initialized {carrier} httpx.AsyncClient ({client.base_url})")

    return client


async def aclose_client(carrier: str) -> None:
    """Close one carrier's client gracefully."""
    client = _clients.pop(carrier, None)

    if client is not None and not client.is_closed:
        await client.aclose()
        logger.info(f"Closed {carrier} httpx.AsyncClient")


async def aclose_all_clients() -> None:
    """Close every carrier client."""
    for carrier in list(_clients):
        try:
            await aclose_client(carrier)
        except Exception as e:
            logger.error(f"Error closing {carrier} client: {e}")


# ============================================================================
# Error Description
# ============================================================================


def describe_http_error(e: Exception) -> str:
    """
    Summarize an httpx failure for logs.

    4xx and 5xx are labelled separately so operators can tell a bad request
    from a carrier outage; callers treat both the same way.
    """
    if isinstance(e, httpx.HTTPStatusError):
        status_code = e.response.status_code
        kind = "client error" if status_code < 500 else "server error"
        body = (e.response.text or "")[:500]
        return f"{kind} (status: {status_code}). Response: {body}"
    if isinstance(e, httpx.TimeoutException):
        return f"timeout: {type(e).__name__}"
    if isinstance(e, httpx.HTTPError):
        return f"network error: {type(e).__name__}: {e}"
    return f"{type(e).__name__}: {e}"


# ============================================================================
# Lenient Value Parsing
# ============================================================================


def safe_float(value: Any, default: Optional[float] = None) -> Optional[float]:
    """
    Safely convert value to float, returning default on error.
    Handles None, empty strings, non-numeric strings, booleans and
    NaN/Infinity, which carriers occasionally send for unpriced services.
    """
    if value is None or value == "" or isinstance(value, bool):
        return default
    try:
        number = float(value)
    except (ValueError, TypeError, OverflowError):
        return default
    return number if math.isfinite(number) else default


def safe_int(value: Any, default: Optional[int] = None) -> Optional[int]:
    """
    Safely convert value to int, returning default on error.
    Accepts ints, finite floats and digit strings.
    """
    if value is None or value == "" or isinstance(value, bool):
        return default
    try:
        return int(value)
    except (ValueError, TypeError, OverflowError):
        return default


_RANGE_PATTERN = re.compile(r"(\d+)\s*-\s*(\d+)")
_SINGLE_PATTERN = re.compile(r"(\d+)")


def parse_eta_days(text: Optional[str]) -> Optional[Tuple[int, int]]:
    """
    Extract a day range from carrier delivery text.

    Example:
        >>> parse_eta_days("Delivered in 2-3 business days")
        (2, 3)
        >>> parse_eta_days("Delivered in 4 business days")
        (4, 4)
    """
    if not text or not str(text).strip():
        return None

    text = str(text)
    match = _RANGE_PATTERN.search(text)
    if match:
        return int(match.group(1)), int(match.group(2))

    match = _SINGLE_PATTERN.search(text)
    if match:
        days = int(match.group(1))
        return days, days

    return None


def first_present(data: Dict[str, Any], keys: Iterable[str]) -> Optional[str]:
    """First value among keys that is not None or blank, as a string."""
    for key in keys:
        value = data.get(key)
        if value is not None and str(value).strip():
            return str(value)
    return None


def is_aud(currency: Optional[str]) -> bool:
    """Missing currency is assumed to be AUD."""
    return currency is None or not str(currency).strip() or str(currency).strip().upper() == "AUD"
