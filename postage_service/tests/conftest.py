import sys
from pathlib import Path

import pytest

# Add the project root to sys.path so that "postage_service" can be found
# structure: <root>/postage_service/tests/conftest.py
current_dir = Path(__file__).parent.absolute()
root_dir = current_dir.parent.parent
sys.path.insert(0, str(root_dir))


CARRIER_ENV_SUFFIXES = ("API_KEY", "ENABLED", "BASE_URL", "TIMEOUT")
CARRIER_NAMES = ("AUSPOST", "SHIPPIT", "SHIPSTATION", "AFTERSHIP", "ARAMEX")
ARAMEX_OPTIONS = (
    "USERNAME", "PASSWORD", "ACCOUNT_NUMBER", "ACCOUNT_PIN", "ACCOUNT_ENTITY",
    "ACCOUNT_COUNTRY", "PRODUCT_GROUP", "PRODUCT_TYPE", "PAYMENT_TYPE", "VERSION",
)


# ==================== Environment Isolation ====================

@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    """
    Point the data directory at tmp_path, strip carrier credentials and
    drop cached singletons so tests never touch the network or ~/.
    """
    for carrier in CARRIER_NAMES:
        for suffix in CARRIER_ENV_SUFFIXES:
            monkeypatch.delenv(f"{carrier}_{suffix}", raising=False)
    for option in ARAMEX_OPTIONS:
        monkeypatch.delenv(f"ARAMEX_{option}", raising=False)
    for key in ("PRIMARY_CARRIER", "WEIGHT_BRACKETS_PATH", "SHIPSTATION_CARRIER_IDS", "QUOTE_CURRENCY"):
        monkeypatch.delenv(key, raising=False)

    monkeypatch.setenv("POSTAGE_DATA_DIR", str(tmp_path))

    from postage_service.api import deps
    from postage_service.providers import registry
    deps.clear_instances()
    registry.clear_instances()

    yield tmp_path

    deps.clear_instances()
    registry.clear_instances()


# ==================== Domain Fixtures ====================

@pytest.fixture
def origin():
    """Melbourne CBD origin."""
    from postage_service.schemas.settings import OriginSettings
    return OriginSettings(postcode="3000", suburb="Melbourne", state="VIC", country="AU")


@pytest.fixture
def item():
    """100 g catalog item."""
    from postage_service.schemas.catalog import Item
    return Item(id="item-1", name="Widget", description="Small widget", unit_weight_grams=100)


@pytest.fixture
def packaging():
    """Small satchel: 10 x 10 x 10 cm, 1.50 AUD."""
    from postage_service.schemas.catalog import Packaging
    return Packaging(
        id="pkg-1",
        name="Small satchel",
        length_cm=10,
        height_cm=10,
        width_cm=10,
        packaging_cost_aud=1.5,
    )


@pytest.fixture
def shipment_request():
    """Two widgets to Southbank, standard service."""
    from postage_service.schemas.shipment import ShipmentRequest
    return ShipmentRequest(
        destination_postcode="3004",
        destination_suburb="Southbank",
        destination_state="VIC",
        items=[{"item_id": "item-1", "quantity": 2}],
        packaging_id="pkg-1",
        is_express=False,
    )


@pytest.fixture
def mock_client():
    """Factory for httpx.AsyncClient instances answering with handler(request)."""
    import httpx

    def _build(handler, base_url="https://carrier.test"):
        return httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url=base_url)

    return _build
