import pytest
from fastapi.testclient import TestClient

from delivery_quote.api.routes import audit as audit_routes
from delivery_quote.api.routes import quotes as quote_routes
from delivery_quote.api.routes import settings as settings_routes
from delivery_quote.api.routes import zones as zone_routes
from delivery_quote.config import settings
from delivery_quote.main import create_app
from delivery_quote.persistence import audit
from delivery_quote.persistence.filesystem import FileStorage

from conftest import CITY_A, north_of


def _payload(**overrides) -> dict:
    delivery = north_of(CITY_A, 2.0)
    payload = {
        "cart_id": "cart-77",
        "subtotal_ngn": 10000,
        "items": [
            {
                "id": "I1",
                "product_id": "P1",
                "quantity": 1,
                "price": 10000,
                "weight_kg": 2.0,
                "pickup_location_id": "store-a",
                "pickup_coords": {"lat": CITY_A.lat, "lng": CITY_A.lng},
            }
        ],
        "delivery_coords": {"lat": delivery.lat, "lng": delivery.lng},
        "requested_at": "2024-05-06T11:00:00",
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def audited() -> list:
    return []


@pytest.fixture
def api_client(monkeypatch: pytest.MonkeyPatch, dependencies, audited) -> TestClient:
    for module in (quote_routes, zone_routes, settings_routes):
        monkeypatch.setattr(module, "get_quote_dependencies", lambda: dependencies)
    monkeypatch.setattr(quote_routes, "log_quote", lambda quote, request: audited.append((quote, request)))
    monkeypatch.setattr(settings, "audit_enabled", True)
    return TestClient(create_app())


def test_health(api_client: TestClient) -> None:
    response = api_client.get("/api/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_delivery_quote_endpoint(api_client: TestClient, audited: list) -> None:
    response = api_client.post("/api/delivery-quote", json=_payload())

    assert response.status_code == 200
    body = response.json()
    assert body["cart_id"] == "cart-77"
    assert body["currency"] == "NGN"
    assert body["grand_total_ngn"] == 460
    assert [option["id"] for option in body["delivery_options"]] == ["standard", "express", "same_day"]
    assert "per_shipment_fees" not in body
    assert "fallback" not in body
    assert "suspension_reason" not in body["delivery_options"][0]
    assert len(audited) == 1
    assert audited[0][0].cart_id == "cart-77"


def test_audit_can_be_disabled(api_client: TestClient, audited: list, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(settings, "audit_enabled", False)

    assert api_client.post("/api/delivery-quote", json=_payload()).status_code == 200
    assert audited == []


def test_engine_failure_returns_fallback(api_client: TestClient, audited: list, monkeypatch: pytest.MonkeyPatch) -> None:
    def explode(request, dependencies):
        raise RuntimeError("zone catalog unavailable")

    monkeypatch.setattr(quote_routes, "get_quote", explode)

    response = api_client.post("/api/delivery-quote", json=_payload())

    assert response.status_code == 200
    body = response.json()
    assert body["fallback"] is True
    assert body["error"] == "zone catalog unavailable"
    option = body["delivery_options"][0]
    assert option["id"] == "fallback"
    assert option["price_ngn"] == 2500
    assert option["price_breakdown"] == [{"label": "Flat Rate", "amount_ngn": 2500}]
    assert option["estimated_eta_minutes"] == {"min": 45, "max": 90}
    assert audited == []


def test_fallback_honours_free_shipping(api_client: TestClient, monkeypatch: pytest.MonkeyPatch) -> None:
    def explode(request, dependencies):
        raise RuntimeError("boom")

    monkeypatch.setattr(quote_routes, "get_quote", explode)

    body = api_client.post("/api/delivery-quote", json=_payload(subtotal_ngn=75000)).json()

    assert body["grand_total_ngn"] == 0
    assert body["delivery_options"][0]["tags"] == ["free_shipping"]


def test_missing_cart_id_is_rejected(api_client: TestClient) -> None:
    payload = _payload()
    del payload["cart_id"]

    assert api_client.post("/api/delivery-quote", json=payload).status_code == 422


def test_missing_delivery_latitude_is_rejected(api_client: TestClient) -> None:
    payload = _payload(delivery_coords={"lng": 8.5})

    assert api_client.post("/api/delivery-quote", json=payload).status_code == 422


def test_preview_quote_endpoint(api_client: TestClient, audited: list) -> None:
    payload = {
        "items": [
            {
                "quantity": 1,
                "price": 10000,
                "weight_kg": 2.0,
                "pickup_location_id": "store-a",
                "pickup_coords": {"lat": CITY_A.lat, "lng": CITY_A.lng},
            }
        ],
        "delivery_coords": _payload()["delivery_coords"],
        "delivery_type": "express",
    }

    response = api_client.post("/api/admin/preview-quote", json=payload)

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["preview"] is True
    assert body["quote"]["cart_id"].startswith("preview_")
    assert body["quote"]["delivery_options"][0]["id"] == "express"
    assert audited == []


def test_preview_requires_items(api_client: TestClient) -> None:
    payload = {"items": [], "delivery_coords": {"lat": 7.7, "lng": 8.5}}

    assert api_client.post("/api/admin/preview-quote", json=payload).status_code == 422


def test_preview_failure_is_a_server_error(api_client: TestClient, monkeypatch: pytest.MonkeyPatch) -> None:
    def explode(*args, **kwargs):
        raise RuntimeError("zone catalog unavailable")

    monkeypatch.setattr(quote_routes, "preview_quote", explode)
    payload = {
        "items": [{"quantity": 1, "price": 5000, "pickup_location_id": "store-a"}],
        "delivery_coords": {"lat": 7.7, "lng": 8.5},
    }

    response = api_client.post("/api/admin/preview-quote", json=payload)

    assert response.status_code == 500
    assert response.json() == {"detail": "zone catalog unavailable"}


def test_zone_listing_hides_suspended_zones(api_client: TestClient, dependencies, make_zone) -> None:
    dependencies.resolver.city_zones = (
        make_zone("MKD-AA", CITY_A),
        make_zone("MKD-SS", north_of(CITY_A, 20.0), is_suspended=True),
    )

    visible = api_client.get("/api/zones").json()
    everything = api_client.get("/api/zones", params={"include_suspended": "true"}).json()

    assert visible["success"] is True
    assert [zone["code"] for zone in visible["zones"]] == ["MKD-AA", "BN-RR"]
    assert visible["count"] == 2
    assert everything["count"] == 3


def test_zone_detail(api_client: TestClient) -> None:
    response = api_client.get("/api/zones/BN-RR")

    assert response.status_code == 200
    body = response.json()
    assert body["type"] == "centroid-fallback"
    assert body["is_city_zone"] is False
    assert body["pricing"]["base_fee_ngn"] == 800
    assert body["delivery_types"] == ["express", "standard"]


def test_unknown_zone_is_404(api_client: TestClient) -> None:
    assert api_client.get("/api/zones/MKD-NOPE").status_code == 404


def test_settings_endpoint_reports_effective_settings(api_client: TestClient) -> None:
    body = api_client.get("/api/settings").json()

    assert body["base_fee_ngn"] == 300
    assert body["platform_commission_percent"] == 15
    assert body["delivery_type_multipliers"]["express"] == 1.3


def test_database_health_reports_seed_catalog(api_client: TestClient, monkeypatch: pytest.MonkeyPatch) -> None:
    from delivery_quote.data import zones_repository
    from delivery_quote.db import supabase as supabase_module

    monkeypatch.setattr(supabase_module, "get_supabase_client", lambda: None)
    monkeypatch.setattr(zones_repository, "get_supabase_client", lambda: None)

    body = api_client.get("/api/health/database").json()

    assert body["configured"] is False
    assert body["zone_source"].endswith("benue_zones.json")
    assert body["zones_count"] > 0


def test_audit_log_lists_newest_quotes_first(
    api_client: TestClient, monkeypatch: pytest.MonkeyPatch, tmp_path
) -> None:
    storage = FileStorage(root=tmp_path)
    monkeypatch.setattr(audit, "get_supabase_client", lambda: None)
    monkeypatch.setattr(audit, "FileStorage", lambda: storage)
    for cart_id, created_at in (
        ("cart-old", "2024-05-01T09:00:00+00:00"),
        ("cart-mid", "2024-05-03T09:00:00+00:00"),
        ("cart-new", "2024-05-05T09:00:00+00:00"),
    ):
        storage.write_json(storage.audit_path(cart_id), {"cart_id": cart_id, "created_at": created_at})

    everything = api_client.get("/api/audit/quotes").json()
    page = api_client.get("/api/audit/quotes", params={"limit": 1, "offset": 1}).json()
    window = api_client.get("/api/audit/quotes", params={"from": "2024-05-02T00:00:00Z"}).json()

    assert everything["success"] is True
    assert [quote["cart_id"] for quote in everything["quotes"]] == ["cart-new", "cart-mid", "cart-old"]
    assert everything["total"] == 3
    assert [quote["cart_id"] for quote in page["quotes"]] == ["cart-mid"]
    assert page["total"] == 3
    assert [quote["cart_id"] for quote in window["quotes"]] == ["cart-new", "cart-mid"]
    assert window["total"] == 2


def test_audit_log_failure_is_a_server_error(api_client: TestClient, monkeypatch: pytest.MonkeyPatch) -> None:
    def explode(**kwargs):
        raise OSError("audit directory unreadable")

    monkeypatch.setattr(audit_routes, "list_quotes", explode)

    response = api_client.get("/api/audit/quotes")

    assert response.status_code == 500
    assert "audit directory unreadable" in response.json()["detail"]


def test_audit_log_rejects_bad_limit(api_client: TestClient) -> None:
    assert api_client.get("/api/audit/quotes", params={"limit": 0}).status_code == 422
