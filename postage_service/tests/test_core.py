"""
Core Tests

Configuration, logging, error envelopes, carrier HTTP helpers and the quote
schemas.

Run: pytest postage_service/tests/test_core.py -v
"""

import logging
from pathlib import Path

import httpx
import pytest


# ==================== Config Tests ====================

def test_data_dir_from_env(isolated_env):
    from postage_service.core.config import settings

    assert settings.data_dir == Path(str(isolated_env))


def test_data_dir_default(monkeypatch):
    from postage_service.core.config import settings

    monkeypatch.delenv("POSTAGE_DATA_DIR", raising=False)

    assert settings.data_dir == Path.home() / ".postage-comparator"


def test_carrier_overrides(monkeypatch):
    from postage_service.core.config import settings

    assert settings.carrier_timeout("auspost") == 10.0
    assert settings.carrier_base_url("auspost") == "https://digitalapi.auspost.com.au"

    monkeypatch.setenv("AUSPOST_TIMEOUT", "2.5")
    monkeypatch.setenv("AUSPOST_BASE_URL", "https://sandbox.example")
    monkeypatch.setenv("AUSPOST_API_KEY", "  ")

    assert settings.carrier_timeout("auspost") == 2.5
    assert settings.carrier_base_url("auspost") == "https://sandbox.example"
    assert settings.api_key("auspost") is None


@pytest.mark.parametrize("raw,expected", [("true", True), ("1", True), ("YES", True), ("false", False), ("0", False)])
def test_provider_enabled_flag(monkeypatch, raw, expected):
    from postage_service.core.config import settings

    monkeypatch.setenv("SHIPPIT_ENABLED", raw)

    assert settings.provider_enabled_flag("shippit") is expected
    assert settings.provider_enabled_flag("aramex") is None


def test_primary_carrier_normalized(monkeypatch):
    from postage_service.core.config import settings

    monkeypatch.setenv("PRIMARY_CARRIER", " Aramex ")

    assert settings.PRIMARY_CARRIER == "aramex"


# ==================== Logging Tests ====================

def test_mask_secret():
    from postage_service.core.logging import mask_secret

    assert mask_secret("abcd1234") == "abcd***"
    assert mask_secret("ab") == "ab***"
    assert mask_secret(None) == "<empty>"


def test_trace_id_filter():
    from postage_service.core.logging import TRACE_ID, TraceIdFilter

    record = logging.LogRecord("test", logging.INFO, __file__, 1, "msg", None, None)
    token = TRACE_ID.set("trace-xyz")
    try:
        assert TraceIdFilter().filter(record) is True
    finally:
        TRACE_ID.reset(token)

    assert record.trace_id == "trace-xyz"


def test_setup_logging_marks_configured():
    from postage_service.core import logging as app_logging

    app_logging.setup_logging()

    assert app_logging._configured is True
    assert app_logging.get_trace_id() == "-"


# ==================== Error Tests ====================

def test_error_payload_shape():
    from postage_service.core.errors import ValidationError

    error = ValidationError("Packaging is required", details={"field": "packagingId"})
    payload = error.to_dict(trace_id="t-1")

    assert payload["code"] == "validation_error"
    assert payload["message"] == "Packaging is required"
    assert payload["details"] == {"field": "packagingId"}
    assert payload["trace_id"] == "t-1"
    assert "timestamp" in payload


def test_default_error_codes():
    from postage_service.core.errors import AppError, NoBracketMatchError, OriginNotConfiguredError, StoreError

    class CarrierTimeoutError(AppError):
        pass

    assert CarrierTimeoutError("x").code == "carrier_timeout"
    assert StoreError("disk").code == "internal_error"
    assert StoreError("disk").status_code == 500
    assert OriginNotConfiguredError().code == "origin_not_configured"

    no_match = NoBracketMatchError(6.0, 0.5)
    assert no_match.details == {"weight_kg": 6.0, "volumetric_weight_kg": 0.5}
    assert "6.000" in no_match.message


# ==================== Carrier HTTP Helper Tests ====================

@pytest.mark.parametrize("value,expected", [
    ("12.5", 12.5), (3, 3.0), (None, None), ("", None), ("abc", None), (True, None),
    ("NaN", None), ("-inf", None), (float("nan"), None), (float("inf"), None), ("1e999", None),
])
def test_safe_float(value, expected):
    from postage_service.tools.carrier_http import safe_float

    assert safe_float(value) == expected


@pytest.mark.parametrize("value,expected", [
    ("3", 3), (4.0, 4), (None, None), ("x", None), (False, None), (float("inf"), None), (float("nan"), None),
])
def test_safe_int(value, expected):
    from postage_service.tools.carrier_http import safe_int

    assert safe_int(value) == expected


@pytest.mark.parametrize("text,expected", [
    ("Delivered in 2-3 business days", (2, 3)),
    ("3 - 5 days", (3, 5)),
    ("Next day: 1", (1, 1)),
    ("soon", None),
    (None, None),
])
def test_parse_eta_days(text, expected):
    from postage_service.tools.carrier_http import parse_eta_days

    assert parse_eta_days(text) == expected


def test_is_aud_and_first_present():
    from postage_service.tools.carrier_http import first_present, is_aud

    assert is_aud(None) and is_aud("") and is_aud("aud") and is_aud(" AUD ")
    assert not is_aud("NZD")
    assert first_present({"a": " ", "b": None, "c": 7}, ("a", "b", "c")) == "7"
    assert first_present({}, ("a",)) is None


def test_describe_http_error():
    from postage_service.tools.carrier_http import describe_http_error

    request = httpx.Request("GET", "https://carrier.test/x")
    client_error = httpx.HTTPStatusError("bad", request=request, response=httpx.Response(422, request=request))
    server_error = httpx.HTTPStatusError("down", request=request, response=httpx.Response(502, request=request))

    assert describe_http_error(client_error).startswith("client error (status: 422)")
    assert describe_http_error(server_error).startswith("server error (status: 502)")
    assert describe_http_error(httpx.ConnectTimeout("slow", request=request)).startswith("timeout")
    assert describe_http_error(httpx.ConnectError("refused", request=request)).startswith("network error")


@pytest.mark.asyncio
async def test_client_pool_lifecycle(monkeypatch):
    from postage_service.tools import carrier_http

    monkeypatch.setenv("SHIPPIT_BASE_URL", "https://shippit.test/api")
    await carrier_http.aclose_all_clients()

    client = carrier_http.get_client("shippit")

    assert carrier_http.get_client("shippit") is client
    assert str(client.base_url).startswith("https://shippit.test/api")

    await carrier_http.aclose_all_clients()

    assert client.is_closed
    assert carrier_http.get_client("shippit") is not client
    await carrier_http.aclose_all_clients()


# ==================== Schema Tests ====================

def test_carrier_quote_build_rounds_and_sums():
    from postage_service.schemas.quotes import CarrierQuote

    quote = CarrierQuote.build(
        carrier="AUSPOST",
        service_name="Parcel Post",
        packaging_cost=1.234,
        delivery_cost=9.701,
        pricing_source="RULES",
        surcharges=0.5,
        eta=(2, 4),
        rule_fallback_used=True,
    )

    assert quote.packaging_cost_aud == 1.23
    assert quote.delivery_cost_aud == 9.7
    assert quote.total_cost_aud == pytest.approx(11.43)
    assert quote.delivery_eta_days_max == 4


def test_carrier_quote_tagged_is_copy():
    from postage_service.schemas.quotes import CarrierQuote

    quote = CarrierQuote.from_carrier_total(
        carrier="SHIPPIT", service_name="std", carrier_total=10.0, packaging_cost=2.0, pricing_source="X"
    )
    tagged = quote.tagged("SHIPPIT_API")

    assert tagged.pricing_source == "SHIPPIT_API"
    assert tagged.rule_fallback_used is False
    assert quote.pricing_source == "X"
    assert tagged.delivery_cost_aud == 8.0


def test_carrier_quote_serializes_camel_case():
    from postage_service.schemas.quotes import CarrierQuote

    quote = CarrierQuote.build(
        carrier="AUSPOST", service_name="s", packaging_cost=0, delivery_cost=1, pricing_source="RULES"
    )
    data = quote.model_dump(by_alias=True)

    assert data["totalCostAud"] == 1.0
    assert data["ruleFallbackUsed"] is False
    assert "rawCarrierRef" in data


def test_packaging_volume_derived():
    from postage_service.schemas.catalog import Packaging

    packaging = Packaging.model_validate({
        "id": "p", "name": "Box", "lengthCm": 10, "heightCm": 20, "widthCm": 5, "packagingCostAud": 0,
    })

    assert packaging.internal_volume_cubic_cm == 1000


def test_shipment_request_aliases_and_destination():
    from postage_service.schemas.shipment import Destination, ShipmentRequest

    request = ShipmentRequest.model_validate({
        "destinationPostcode": "2000",
        "destinationState": "NSW",
        "country": "nz",
        "items": [{"itemId": "a", "quantity": 1}],
        "packagingId": "p",
        "isExpress": True,
    })

    assert request.items[0].item_id == "a"
    assert request.is_express is True
    assert Destination.from_request(request).country == "NZ"
    assert Destination.from_request(request.model_copy(update={"country": "  "})).country == "AU"


@pytest.mark.parametrize("field,value", [("destinationPostcode", "20000"), ("country", "AUS")])
def test_shipment_request_rejects_malformed_values(field, value):
    from pydantic import ValidationError as PydanticValidationError
    from postage_service.schemas.shipment import ShipmentRequest

    with pytest.raises(PydanticValidationError):
        ShipmentRequest.model_validate({field: value})


def test_weight_bracket_contains():
    from postage_service.schemas.quotes import WeightBracket

    bracket = WeightBracket(min_weight_inclusive=0.25, max_weight_inclusive=0.5, price_standard=1, price_express=2)

    assert not bracket.contains(0.25)
    assert bracket.contains(0.5)
    assert bracket.price(True) == 2
