"""
API Tests

Tests for FastAPI endpoints using TestClient. Stores write to the test's
tmp_path; no carrier credentials are set, so quoting never leaves the process.

Run: pytest postage_service/tests/test_api.py -v
"""

import pytest


# ==================== Test Client Fixture ====================

@pytest.fixture
def client():
    """Create FastAPI TestClient over a fresh app."""
    from fastapi.testclient import TestClient
    from postage_service.main import create_app

    return TestClient(create_app())


def _create_catalog(client):
    item = client.post("/api/items", json={"name": "Widget", "unitWeightGrams": 100}).json()
    packaging = client.post("/api/packaging", json={
        "name": "Cube", "lengthCm": 10, "heightCm": 10, "widthCm": 10, "packagingCostAud": 1.5,
    }).json()
    return item, packaging


def _save_origin(client):
    return client.put("/api/settings/origin", json={
        "postcode": "3000", "suburb": "Melbourne", "state": "VIC", "country": "AU",
    })


# ==================== Health and Root Endpoints ====================

def test_root_endpoint(client):
    response = client.get("/")

    assert response.status_code == 200
    assert response.json()["status"] == "running"


def test_health_endpoint(client):
    response = client.get("/health")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["components"]["primary_carrier"] == "auspost"


def test_request_id_echoed(client):
    response = client.get("/health", headers={"x-request-id": "trace-abc"})

    assert response.headers["x-request-id"] == "trace-abc"
    assert client.get("/health").headers["x-request-id"]


# ==================== Items API Tests ====================

def test_item_crud(client):
    created = client.post("/api/items", json={"name": "Widget", "description": "Blue", "unitWeightGrams": 100})

    assert created.status_code == 201
    item = created.json()
    assert item["unitWeightGrams"] == 100
    assert item["id"]

    assert client.get("/api/items").json() == [item]
    assert client.get(f"/api/items/{item['id']}").json() == item

    updated = client.put(f"/api/items/{item['id']}", json={"unitWeightGrams": 250})
    assert updated.status_code == 200
    assert updated.json()["unitWeightGrams"] == 250
    assert updated.json()["name"] == "Widget"

    assert client.delete(f"/api/items/{item['id']}").status_code == 204
    assert client.delete(f"/api/items/{item['id']}").status_code == 204
    assert client.get(f"/api/items/{item['id']}").status_code == 404


def test_item_errors(client):
    client.post("/api/items", json={"name": "Widget", "unitWeightGrams": 100})

    duplicate = client.post("/api/items", json={"name": "Widget", "unitWeightGrams": 5})
    assert duplicate.status_code == 400
    assert duplicate.json()["error"]["message"] == "Item with name Widget already exists"

    no_weight = client.post("/api/items", json={"name": "Feather"})
    assert no_weight.status_code == 400
    assert no_weight.json()["error"]["code"] == "validation_error"

    missing = client.put("/api/items/missing", json={"name": "Other"})
    assert missing.status_code == 404
    assert missing.json()["error"]["code"] == "not_found"
    assert missing.json()["error"]["message"] == "Item with id missing not found"


# ==================== Packaging API Tests ====================

def test_packaging_crud(client):
    created = client.post("/api/packaging", json={
        "name": "Box", "lengthCm": 10, "heightCm": 20, "widthCm": 30, "packagingCostAud": 2.25,
    })

    assert created.status_code == 201
    packaging = created.json()
    assert packaging["internalVolumeCubicCm"] == 6000

    updated = client.put(f"/api/packaging/{packaging['id']}", json={"description": "Sturdy"})
    assert updated.json()["description"] == "Sturdy"
    assert updated.json()["packagingCostAud"] == 2.25

    assert client.get("/api/packaging").json()[0]["id"] == packaging["id"]
    assert client.delete(f"/api/packaging/{packaging['id']}").status_code == 204
    assert client.get(f"/api/packaging/{packaging['id']}").status_code == 404


def test_packaging_bad_dimensions(client):
    response = client.post("/api/packaging", json={"name": "Flat", "lengthCm": 0, "heightCm": 1, "widthCm": 1})

    assert response.status_code == 400
    assert "dimensions" in response.json()["error"]["message"]


# ==================== Settings API Tests ====================

def test_origin_not_found_until_saved(client):
    response = client.get("/api/settings/origin")

    assert response.status_code == 404
    assert response.json()["error"]["code"] == "not_found"


def test_origin_roundtrip(client):
    saved = _save_origin(client)

    assert saved.status_code == 200
    assert saved.json()["updatedAt"]

    loaded = client.get("/api/settings/origin").json()
    assert loaded["postcode"] == "3000"
    assert loaded["state"] == "VIC"


def test_origin_rejects_bad_postcode(client):
    response = client.put("/api/settings/origin", json={"postcode": "30A0", "suburb": "X", "state": "VIC"})

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "validation_error"


def test_theme_update(client):
    _save_origin(client)

    response = client.put("/api/settings/theme", json={"themePreference": "DARK"})
    assert response.status_code == 200
    assert response.json()["themePreference"] == "dark"

    assert client.get("/api/settings/origin").json()["themePreference"] == "dark"

    rejected = client.put("/api/settings/theme", json={"themePreference": "neon"})
    assert rejected.status_code == 400


# ==================== Providers API Tests ====================

def test_providers_listing(client, monkeypatch):
    monkeypatch.setenv("SHIPPIT_API_KEY", "shippit-secret")

    response = client.get("/api/providers")

    assert response.status_code == 200
    providers = {entry["name"]: entry for entry in response.json()}
    assert list(providers) == ["auspost", "shippit", "shipstation", "aftership", "aramex"]
    assert providers["auspost"]["primary"] is True
    assert providers["auspost"]["enabled"] is True
    assert providers["shippit"]["credentialsConfigured"] is True
    assert providers["aramex"]["credentialsConfigured"] is False
    assert "shippit-secret" not in response.text


# ==================== Quotes API Tests ====================

def test_quote_requires_origin(client):
    item, packaging = _create_catalog(client)

    response = client.post("/api/quotes", json={
        "destinationPostcode": "3004",
        "items": [{"itemId": item["id"], "quantity": 1}],
        "packagingId": packaging["id"],
    }, headers={"x-request-id": "trace-origin"})

    assert response.status_code == 500
    error = response.json()["error"]
    assert error["code"] == "origin_not_configured"
    assert error["message"] == "Origin settings must be configured before calculating quotes"
    assert error["trace_id"] == "trace-origin"


def test_quote_rules_fallback(client):
    """Without carrier keys the primary carrier line is priced from brackets."""
    item, packaging = _create_catalog(client)
    _save_origin(client)

    response = client.post("/api/quotes", json={
        "destinationPostcode": "3004",
        "destinationSuburb": "Southbank",
        "destinationState": "VIC",
        "items": [{"itemId": item["id"], "quantity": 2}],
        "packagingId": packaging["id"],
        "isExpress": False,
    })

    assert response.status_code == 200
    data = response.json()
    assert data["totalWeightGrams"] == 200
    assert data["totalVolumeCubicCm"] == 1000
    assert data["currency"] == "AUD"
    assert data["destination"]["country"] == "AU"
    assert len(data["carrierQuotes"]) == 1

    quote = data["carrierQuotes"][0]
    assert quote["carrier"] == "AUSPOST"
    assert quote["pricingSource"] == "RULES"
    assert quote["ruleFallbackUsed"] is True
    assert quote["deliveryCostAud"] == pytest.approx(9.70)
    assert quote["totalCostAud"] == pytest.approx(11.20)
    assert (quote["deliveryEtaDaysMin"], quote["deliveryEtaDaysMax"]) == (2, 4)


def test_quote_priced_when_allow_list_skips_primary(client, monkeypatch):
    monkeypatch.setenv("SHIPPIT_ENABLED", "true")
    item, packaging = _create_catalog(client)
    _save_origin(client)

    response = client.post("/api/quotes", json={
        "destinationPostcode": "3004",
        "destinationState": "VIC",
        "items": [{"itemId": item["id"], "quantity": 2}],
        "packagingId": packaging["id"],
    })

    assert response.status_code == 200
    quotes = response.json()["carrierQuotes"]
    assert [(q["carrier"], q["pricingSource"]) for q in quotes] == [("AUSPOST", "RULES")]


@pytest.mark.parametrize("body,message", [
    ({"items": [{"itemId": "x", "quantity": 1}], "packagingId": "p"}, "Destination postcode is required"),
    ({"destinationPostcode": "3004", "items": [], "packagingId": "p"}, "At least one item is required"),
    ({"destinationPostcode": "3004", "items": [{"itemId": "x", "quantity": 1}]}, "Packaging is required"),
    ({"destinationPostcode": "3004", "items": [{"itemId": "x", "quantity": 0}], "packagingId": "p"},
     "Item quantity must be greater than 0"),
])
def test_quote_validation_messages(client, body, message):
    response = client.post("/api/quotes", json=body)

    assert response.status_code == 400
    assert response.json()["error"]["message"] == message


def test_quote_malformed_postcode(client):
    response = client.post("/api/quotes", json={
        "destinationPostcode": "30A4",
        "items": [{"itemId": "x", "quantity": 1}],
        "packagingId": "p",
    })

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "validation_error"


def test_quote_unknown_packaging(client):
    _save_origin(client)

    response = client.post("/api/quotes", json={
        "destinationPostcode": "3004",
        "items": [{"itemId": "x", "quantity": 1}],
        "packagingId": "missing",
    })

    assert response.status_code == 400
    assert response.json()["error"]["message"] == "Packaging with id missing not found"


def test_store_endpoints_run_in_threadpool():
    """Store-backed handlers are plain functions, so file reads stay off the event loop."""
    import inspect
    from postage_service.main import create_app

    store_routes = [
        route for route in create_app().routes
        if getattr(route, "path", "").startswith(("/api/items", "/api/packaging", "/api/settings"))
    ]

    assert len(store_routes) == 13
    assert not any(inspect.iscoroutinefunction(route.endpoint) for route in store_routes)
