"""Tests for search endpoint."""

from typing import Any
from unittest.mock import AsyncMock

from fastapi.testclient import TestClient

from layered_search.api.search import get_provider
from layered_search.main import app
from layered_search.search import LayeredProductSearchProvider, NavigationStateCodec


class TestSearchProducts:
    """Tests for GET /search."""

    def test_unfiltered_search(self, client: TestClient) -> None:
        """Search without a token returns every product and all facets."""
        response = client.get("/search")

        assert response.status_code == 200
        data = response.json()
        assert len(data["products"]) == 5
        assert data["pagination"]["total_results_count"] == 5
        assert data["pagination"]["pages_count"] == 1
        assert [f["label"] for f in data["facets"]] == ["Color", "Size"]
        assert data["encoded_facets"] == ""
        assert data["current_sort_order"] == "product.position.asc"

    def test_filtered_search(self, client: TestClient, catalog: Any) -> None:
        """The token filters products and is echoed for the next request."""
        response = client.get("/search", params={"q": "Color-Red"})

        assert response.status_code == 200
        data = response.json()
        assert [p["id"] for p in data["products"]] == ["p1", "p2", "p3"]
        assert data["encoded_facets"] == "Color-Red"
        assert catalog.executed[0]["filters"] == {"color": ["red"]}

        color, size = data["facets"]
        assert color["filters"][0]["active"] is True
        assert color["filters"][0]["properties"] == {"color": "#ff0000"}
        assert [f["magnitude"] for f in size["filters"]] == [1, 2]
        assert size["filters"][1]["next_encoded_facets"] == "Color-Red/Size-M"

    def test_pagination_params(self, client: TestClient, catalog: Any) -> None:
        """page and resultsPerPage reach the catalog."""
        response = client.get("/search", params={"page": 2, "resultsPerPage": 2})

        assert response.status_code == 200
        pagination = response.json()["pagination"]
        assert pagination["page"] == 2
        assert pagination["pages_count"] == 3
        assert pagination["has_next"] is True
        assert pagination["has_prev"] is True
        assert catalog.executed[0]["per_page"] == 2

    def test_sort_order_and_language(self, client: TestClient, catalog: Any) -> None:
        """order and lang are translated into catalog parameters."""
        response = client.get(
            "/search", params={"order": "product.price.desc", "lang": "fr"}
        )

        assert response.status_code == 200
        data = response.json()
        assert data["current_sort_order"] == "product.price.desc"
        current = [o["value"] for o in data["sort_orders"] if o["current"]]
        assert current == ["product.price.desc"]
        assert catalog.executed[0]["order_by"] == "price"
        assert catalog.executed[0]["order_way"] == "desc"
        assert catalog.executed[0]["language"] == "fr"

    def test_malformed_token_is_ignored(self, client: TestClient) -> None:
        """A broken token yields an unfiltered search."""
        response = client.get("/search", params={"q": "Color-Red~"})

        assert response.status_code == 200
        assert response.json()["pagination"]["total_results_count"] == 5

    def test_token_with_percent_sign_in_label(self, client: TestClient, catalog: Any) -> None:
        """A token passed as an encoded query value keeps literal percent signs."""
        catalog.definitions[1]["options"][0]["label"] = "100%41"
        token = NavigationStateCodec().encode_selection({"Size": ["100%41"]})

        response = client.get("/search", params={"q": token})

        assert response.status_code == 200
        data = response.json()
        assert data["encoded_facets"] == token
        assert data["facets"][1]["filters"][0]["active"] is True
        assert catalog.executed[0]["filters"] == {"size": ["s"]}

    def test_invalid_sort_order(self, client: TestClient) -> None:
        """Malformed sort orders are rejected with 400."""
        response = client.get("/search", params={"order": "price"})

        assert response.status_code == 400
        data = response.json()
        assert data["error_code"] == "INVALID_QUERY"
        assert data["details"][0]["field"] == "sort order"
        assert data["details"][0]["value"] == "price"

    def test_invalid_page(self, client: TestClient) -> None:
        """Page numbers start at 1."""
        response = client.get("/search", params={"page": 0})
        assert response.status_code == 422

    def test_catalog_failure(self, catalog: Any) -> None:
        """Catalog failures are reported as 503."""
        executor = AsyncMock()
        executor.execute_filtered_query.side_effect = ConnectionError("database down")
        provider = LayeredProductSearchProvider(catalog, executor)
        app.dependency_overrides[get_provider] = lambda: provider
        try:
            response = TestClient(app).get("/search")
        finally:
            app.dependency_overrides.clear()

        assert response.status_code == 503
        data = response.json()
        assert data["error_code"] == "CATALOG_UNAVAILABLE"
        assert data["details"][0]["reason"] == "database down"

    def test_conversion_failure(self, catalog: Any) -> None:
        """A malformed filter block is reported as 500."""
        catalog.definitions[0]["label"] = ""
        provider = LayeredProductSearchProvider(catalog, catalog)
        app.dependency_overrides[get_provider] = lambda: provider
        try:
            response = TestClient(app).get("/search")
        finally:
            app.dependency_overrides.clear()

        assert response.status_code == 500
        assert response.json()["error_code"] == "CONVERSION_ERROR"

    def test_request_id_in_error_response(self, client: TestClient) -> None:
        """Error responses carry the request ID."""
        response = client.get(
            "/search",
            params={"order": "price"},
            headers={"X-Request-ID": "search-req-1"},
        )

        assert response.headers["X-Request-ID"] == "search-req-1"
        assert response.json()["request_id"] == "search-req-1"
