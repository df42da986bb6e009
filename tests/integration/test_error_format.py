"""Integration tests for standardized error responses."""

import pytest

pytestmark = pytest.mark.integration


class TestStandardizedErrors:
    def _assert_standard(self, response, status_code):
        assert response.status_code == status_code
        data = response.json()
        assert set(data) >= {"error", "code", "status"}
        assert data["status"] == status_code

    def test_not_found_has_standard_format(self, api_client):
        response = api_client.get("/api/v1/products/missing/")
        self._assert_standard(response, 404)
        assert response.json()["code"] == "PRODUCT_NOT_FOUND"

    def test_malformed_json_has_standard_format(self, api_client):
        response = api_client.post(
            "/api/v1/products/", data="{", content_type="application/json"
        )
        self._assert_standard(response, 400)
        assert response.json()["code"] == "PARSE_ERROR"

    def test_validation_error_lists_fields(self, api_client):
        response = api_client.post("/api/v1/products/", {"sku": "ONLY-SKU"})
        self._assert_standard(response, 400)
        data = response.json()
        assert isinstance(data["errors"], list)
        assert {"field", "detail"} <= set(data["errors"][0])

    def test_method_not_allowed_has_standard_format(self, api_client):
        response = api_client.delete("/api/v1/products/")
        self._assert_standard(response, 405)

    def test_storage_failure_returns_503(self, api_client):
        from unittest.mock import patch

        from modules.core.exceptions import StorageFailure

        with patch(
            "modules.products.repositories.django_store.ProductDjangoStore.count",
            side_effect=StorageFailure("count failed"),
        ):
            response = api_client.get("/api/v1/products/")
        self._assert_standard(response, 503)
        assert response.json()["code"] == "STORAGE_FAILURE"
