"""Tests for request logging middleware and log processors."""

from httpx import ASGITransport, AsyncClient
from starlette.requests import Request

from recipe_inventory.api.main import app
from recipe_inventory.api.middleware.logging import store_for
from recipe_inventory.config.logging import add_service_context, round_quantities


def _request(path: str, query: str = "") -> Request:
    return Request(
        {
            "type": "http",
            "method": "GET",
            "path": path,
            "query_string": query.encode(),
            "headers": [],
        }
    )


class TestStoreFor:
    def test_from_store_path(self):
        assert store_for(_request("/api/stores/store-a/mappings")) == "store-a"

    def test_from_query(self):
        assert store_for(_request("/api/inventory/items", "store_id=store-b")) == "store-b"

    def test_none_when_absent(self):
        assert store_for(_request("/api/templates")) is None


class TestRequestHeaders:
    async def test_request_id_echoed(self):
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            response = await client.get("/api/health", headers={"X-Request-ID": "sale-42"})

        assert response.headers["X-Request-ID"] == "sale-42"
        assert response.headers["Server-Timing"].startswith("app;dur=")

    async def test_request_id_generated(self):
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            response = await client.get("/health")

        assert len(response.headers["X-Request-ID"]) == 12


class TestProcessors:
    def test_converted_quantities_rounded(self):
        event = round_quantities(
            None, "info", {"event": "stock_adjusted", "new_quantity": 0.1 + 0.2, "item_id": 3}
        )
        assert event["new_quantity"] == 0.3
        assert event["item_id"] == 3

    def test_non_quantity_floats_untouched(self):
        event = round_quantities(None, "info", {"duration_ms": 0.123456789})
        assert event["duration_ms"] == 0.123456789

    def test_service_context_added(self, test_settings):
        event = add_service_context(None, "info", {"event": "x"})
        assert event["service"] == test_settings.app_name
        assert event["environment"] == test_settings.environment
