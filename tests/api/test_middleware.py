"""Tests for API middleware."""

import pytest
from fastapi import HTTPException
from fastapi.testclient import TestClient
from starlette.requests import Request

from shopcatalog.api.middleware import (
    _matches_pattern,
    _requires_shop_identity,
    missing_identity_error,
)
from shopcatalog.api.products import get_shop_id
from shopcatalog.infrastructure.config import settings


class TestRequestIdMiddleware:
    """Tests for request ID correlation middleware."""

    def test_generates_request_id_if_not_provided(self, client: TestClient) -> None:
        """Should generate request ID if not in request headers."""
        response = client.get("/health")
        assert response.status_code == 200
        assert "X-Request-ID" in response.headers
        # UUID format
        assert len(response.headers["X-Request-ID"]) == 36

    def test_uses_provided_request_id(self, client: TestClient) -> None:
        """Should use request ID from request headers."""
        custom_id = "custom-request-id-12345"
        response = client.get("/health", headers={"X-Request-ID": custom_id})
        assert response.headers["X-Request-ID"] == custom_id

    def test_error_body_carries_request_id(self, client: TestClient) -> None:
        """Should echo the request ID in error responses."""
        response = client.get("/product/missing", headers={"X-Request-ID": "req-42"})
        assert response.status_code == 404
        assert response.json()["request_id"] == "req-42"


class TestShopIdentityMiddleware:
    """Tests for shop identity middleware."""

    def test_storefront_is_public(self, client: TestClient) -> None:
        """Storefront endpoints work without identity."""
        assert client.get("/product").status_code == 200
        assert client.get("/product/discounts").status_code == 200
        assert client.get("/product/bestsellers").status_code == 200

    def test_missing_identity(self, client: TestClient) -> None:
        """Shop endpoints reject requests without identity."""
        response = client.get("/product/drafts")
        assert response.status_code == 401
        data = response.json()
        assert data["error_code"] == "UNAUTHENTICATED"
        assert settings.shop_id_header in data["message"]

    def test_missing_identity_body(self, client: TestClient) -> None:
        """The middleware answers with the shared error body."""
        response = client.get("/product/drafts", headers={"X-Request-ID": "req-7"})
        assert response.json() == {**missing_identity_error(), "request_id": "req-7"}

    def test_dependency_uses_same_body(self) -> None:
        """A route reached without identity fails with the same body."""
        request = Request({"type": "http", "headers": []})

        with pytest.raises(HTTPException) as exc_info:
            get_shop_id(request)

        assert exc_info.value.status_code == 401
        assert exc_info.value.detail == missing_identity_error()

    def test_dependency_reads_attached_identity(self) -> None:
        """The dependency returns what the middleware attached."""
        request = Request({"type": "http", "headers": [], "state": {"shop_id": "shop-1"}})
        assert get_shop_id(request) == "shop-1"

    def test_blank_identity(self, client: TestClient) -> None:
        """A whitespace identity counts as missing."""
        response = client.get("/product/drafts", headers={settings.shop_id_header: "  "})
        assert response.status_code == 401

    def test_identity_accepted(self, client: TestClient) -> None:
        """A present identity reaches the handler."""
        response = client.get("/product/drafts", headers={settings.shop_id_header: "shop-1"})
        assert response.status_code == 200


class TestPathMatching:
    """Tests for shop endpoint detection."""

    @pytest.mark.parametrize(
        ("path", "pattern", "expected"),
        [
            ("/product/publish/abc", "/product/publish/{product_id}", True),
            ("/product/publish/abc/", "/product/publish/{product_id}", True),
            ("/product/publish", "/product/publish/{product_id}", False),
            ("/product/unpublish/abc", "/product/publish/{product_id}", False),
            ("/product/create", "/product/create", True),
        ],
    )
    def test_matches_pattern(self, path: str, pattern: str, expected: bool) -> None:
        """Placeholders match any single segment."""
        assert _matches_pattern(path, pattern) is expected

    @pytest.mark.parametrize(
        ("path", "method", "expected"),
        [
            ("/product/create", "POST", True),
            ("/product/update/abc", "PUT", True),
            ("/product/unpublish/abc", "PUT", True),
            ("/product/drafts", "GET", True),
            ("/product/published", "GET", True),
            ("/product/abc", "GET", False),
            ("/product/create", "GET", False),
            ("/product", "GET", False),
            ("/health", "GET", False),
        ],
    )
    def test_requires_shop_identity(self, path: str, method: str, expected: bool) -> None:
        """Only shop-management routes need identity."""
        assert _requires_shop_identity(path, method) is expected
