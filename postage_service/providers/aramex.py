"""
Aramex Provider

SOAP RateCalculator (CalculateRate). Account details come from ARAMEX_*
variables:

    required: ARAMEX_USERNAME, ARAMEX_PASSWORD
    account:  ARAMEX_ACCOUNT_NUMBER, ARAMEX_ACCOUNT_PIN, ARAMEX_ACCOUNT_ENTITY,
              ARAMEX_ACCOUNT_COUNTRY (AU)
    options:  ARAMEX_PRODUCT_GROUP (EXP), ARAMEX_PRODUCT_TYPE (PPX),
              ARAMEX_PAYMENT_TYPE (P), ARAMEX_VERSION (v1.0)

The response is read namespace-agnostically: HasErrors must be false and
TotalAmount must be in AUD.
"""

import logging
from typing import Dict, List, Optional
from xml.etree import ElementTree as ET

from postage_service.constants.carriers import (
    ARAMEX_SOAP_ACTION,
    ARAMEX_SOAP_ENV_NS,
    ARAMEX_TYPES_NS,
    ARAMEX_DEFAULT_ACCOUNT_COUNTRY,
    ARAMEX_DEFAULT_PRODUCT_GROUP,
    ARAMEX_DEFAULT_PRODUCT_TYPE,
    ARAMEX_DEFAULT_PAYMENT_TYPE,
    ARAMEX_DEFAULT_VERSION,
)
from postage_service.core.config import settings
from postage_service.providers.base import (
    CarrierProvider,
    describe_route,
    total_weight_grams,
    total_pieces,
)
from postage_service.schemas.catalog import Item, Packaging
from postage_service.schemas.quotes import CarrierQuote
from postage_service.schemas.settings import OriginSettings
from postage_service.schemas.shipment import Destination, ShipmentRequest
from postage_service.tools.carrier_http import is_aud, safe_float

logger = logging.getLogger(__name__)

ET.register_namespace("soapenv", ARAMEX_SOAP_ENV_NS)
ET.register_namespace("typ", ARAMEX_TYPES_NS)


def _typ(tag: str) -> str:
    return f"{{{ARAMEX_TYPES_NS}}}{tag}"


def _add(parent: ET.Element, tag: str, text: Optional[str] = None) -> ET.Element:
    element = ET.SubElement(parent, _typ(tag))
    if text is not None:
        element.text = text
    return element


def _text(root: ET.Element, path: str) -> Optional[str]:
    element = root.find(path)
    if element is None or element.text is None:
        return None
    return element.text.strip()


def aramex_credentials(overrides: Optional[Dict[str, str]] = None) -> Dict[str, str]:
    """
    Collect the ARAMEX_* options, applying defaults.

    Args:
        overrides: Values that take precedence over the environment (tests)
    """
    overrides = overrides or {}

    def option(key: str, default: str = "") -> str:
        if overrides.get(key):
            return overrides[key]
        return settings.aramex_option(key, default) or ""

    return {
        "USERNAME": option("USERNAME"),
        "PASSWORD": option("PASSWORD"),
        "ACCOUNT_NUMBER": option("ACCOUNT_NUMBER"),
        "ACCOUNT_PIN": option("ACCOUNT_PIN"),
        "ACCOUNT_ENTITY": option("ACCOUNT_ENTITY"),
        "ACCOUNT_COUNTRY": option("ACCOUNT_COUNTRY", ARAMEX_DEFAULT_ACCOUNT_COUNTRY),
        "PRODUCT_GROUP": option("PRODUCT_GROUP", ARAMEX_DEFAULT_PRODUCT_GROUP),
        "PRODUCT_TYPE": option("PRODUCT_TYPE", ARAMEX_DEFAULT_PRODUCT_TYPE),
        "PAYMENT_TYPE": option("PAYMENT_TYPE", ARAMEX_DEFAULT_PAYMENT_TYPE),
        "VERSION": option("VERSION", ARAMEX_DEFAULT_VERSION),
    }


def build_rate_request(
    credentials: Dict[str, str],
    origin: OriginSettings,
    destination: Destination,
    weight_kg: float,
    pieces: int
) -> bytes:
    """Serialize a RateCalculatorRequest SOAP envelope."""
    envelope = ET.Element(f"{{{ARAMEX_SOAP_ENV_NS}}}Envelope")
    ET.SubElement(envelope, f"{{{ARAMEX_SOAP_ENV_NS}}}Header")
    body = ET.SubElement(envelope, f"{{{ARAMEX_SOAP_ENV_NS}}}Body")
    rate_request = _add(body, "RateCalculatorRequest")

    client_info = _add(rate_request, "ClientInfo")
    _add(client_info, "AccountCountryCode", credentials["ACCOUNT_COUNTRY"])
    _add(client_info, "AccountEntity", credentials["ACCOUNT_ENTITY"])
    _add(client_info, "AccountNumber", credentials["ACCOUNT_NUMBER"])
    _add(client_info, "AccountPin", credentials["ACCOUNT_PIN"])
    _add(client_info, "UserName", credentials["USERNAME"])
    _add(client_info, "Password", credentials["PASSWORD"])
    _add(client_info, "Version", credentials["VERSION"])

    transaction = _add(rate_request, "Transaction")
    _add(transaction, "Reference1", "001")

    origin_address = _add(rate_request, "OriginAddress")
    _add(origin_address, "City", origin.suburb or "")
    _add(origin_address, "CountryCode", origin.country or "")

    destination_address = _add(rate_request, "DestinationAddress")
    _add(destination_address, "City", destination.suburb or "")
    _add(destination_address, "CountryCode", destination.country or "")

    details = _add(rate_request, "ShipmentDetails")
    _add(details, "PaymentType", credentials["PAYMENT_TYPE"])
    _add(details, "ProductGroup", credentials["PRODUCT_GROUP"])
    _add(details, "ProductType", credentials["PRODUCT_TYPE"])
    for weight_tag in ("ActualWeight", "ChargeableWeight"):
        weight = _add(details, weight_tag)
        _add(weight, "Value", f"{weight_kg:.3f}")
        _add(weight, "Unit", "KG")
    _add(details, "NumberOfPieces", str(pieces))

    return ET.tostring(envelope, encoding="utf-8", xml_declaration=True)


class AramexProvider(CarrierProvider):
    """Single-quote provider for Aramex Australia."""

    name = "aramex"
    carrier_code = "ARAMEX"

    def __init__(self, client=None, credentials: Optional[Dict[str, str]] = None):
        super().__init__(client=client)
        self._credential_overrides = credentials

    def credentials(self) -> Dict[str, str]:
        return aramex_credentials(self._credential_overrides)

    def has_credentials(self) -> bool:
        creds = self.credentials()
        return bool(creds["USERNAME"] and creds["PASSWORD"])

    async def quote(
        self,
        request: ShipmentRequest,
        origin: OriginSettings,
        packaging: Packaging,
        items: List[Item]
    ) -> Optional[CarrierQuote]:
        if not self.has_credentials():
            logger.info("Aramex credentials not configured; skipping API call")
            return None

        credentials = self.credentials()
        destination = Destination.from_request(request)
        weight_kg = total_weight_grams(request, items) / 1000.0
        route = describe_route(origin, destination, credentials["PRODUCT_TYPE"])

        envelope = build_rate_request(credentials, origin, destination, weight_kg, total_pieces(request))

        logger.info(f"Attempting Aramex API call: {route}, weight: {weight_kg:.3f}kg")

        response = await self._send(
            "POST",
            settings.carrier_base_url(self.name),
            route,
            content=envelope,
            headers={
                "Content-Type": "text/xml; charset=utf-8",
                "Accept": "text/xml",
                "SOAPAction": ARAMEX_SOAP_ACTION,
            },
        )
        if response is None:
            return None

        if not response.text or not response.text.strip():
            logger.warning(f"Aramex API returned empty response. Request: {route}")
            return None

        return self._parse(response.text, packaging)

    def _parse(self, response_xml: str, packaging: Packaging) -> Optional[CarrierQuote]:
        try:
            root = ET.fromstring(response_xml)
        except ET.ParseError as e:
            logger.error(f"Failed to parse Aramex rate response: {e}")
            return None

        if (_text(root, ".//{*}HasErrors") or "").lower() == "true":
            message = _text(root, ".//{*}Notifications//{*}Message")
            logger.warning(f"Aramex rate response has errors: {message}")
            return None

        total = safe_float(_text(root, ".//{*}TotalAmount/{*}Value"))
        if total is None:
            logger.warning("Aramex rate response missing TotalAmount")
            return None

        currency = _text(root, ".//{*}TotalAmount/{*}CurrencyCode")
        if not is_aud(currency):
            logger.warning(f"Aramex rate response currency not supported: {currency}")
            return None

        return self._carrier_quote(self.carrier_code, total, packaging)
