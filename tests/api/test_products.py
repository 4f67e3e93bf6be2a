"""Tests for product API endpoints.

Tests the catalog flow including:
- Creating products as a shop
- Reading product details
- Partial updates and ownership
- Publishing and unpublishing
- Storefront listings and search
"""

import pytest
from fastapi import status
from fastapi.testclient import TestClient


def create_product(client: TestClient, headers: dict, payload: dict) -> dict:
    response = client.post("/product/create", json=payload, headers=headers)
    assert response.status_code == status.HTTP_201_CREATED, response.text
    return response.json()


def create_published(client: TestClient, headers: dict, payload: dict) -> dict:
    product = create_product(client, headers, payload)
    response = client.put(f"/product/publish/{product['id']}", headers=headers)
    assert response.status_code == status.HTTP_200_OK, response.text
    return response.json()


# ============================================================================
# Create
# ============================================================================


class TestCreateProduct:
    """Tests for POST /product/create."""

    def test_create_product(
        self, client: TestClient, shop_headers: dict, mushroom_payload: dict
    ) -> None:
        """Should create a draft product with attributes and stock."""
        response = client.post("/product/create", json=mushroom_payload, headers=shop_headers)

        assert response.status_code == status.HTTP_201_CREATED
        data = response.json()
        assert data["product_name"] == "Shiitake"
        assert data["product_price"] == 50000
        assert data["product_type"] == "Mushroom"
        assert data["product_shop"] == "shop-dalat"
        assert data["is_draft"] is True
        assert data["is_published"] is False
        assert data["product_description"] == "<p>Fresh from Dalat.</p><p>Picked daily.</p>"
        assert data["product_attributes"]["weight"] == 2.5
        assert data["product_attributes"]["origin"] == "Dalat"
        assert data["inventory"]["stock"] == 20

    def test_requires_shop_identity(self, client: TestClient, mushroom_payload: dict) -> None:
        """Should reject creation without a shop identity."""
        response = client.post("/product/create", json=mushroom_payload)

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.json()["error_code"] == "UNAUTHENTICATED"

    def test_invalid_product_type(
        self, client: TestClient, shop_headers: dict, mushroom_payload: dict
    ) -> None:
        """Should reject unknown product types."""
        mushroom_payload["product_type"] = "Orchid"

        response = client.post("/product/create", json=mushroom_payload, headers=shop_headers)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["error_code"] == "INVALID_PRODUCT_TYPE"

        listing = client.get("/product/drafts", headers=shop_headers)
        assert listing.json()["total"] == 0

    def test_invalid_attributes(
        self, client: TestClient, shop_headers: dict, mushroom_payload: dict
    ) -> None:
        """Should report mistyped attributes by field."""
        mushroom_payload["product_attributes"] = {"weight": "heavy"}

        response = client.post("/product/create", json=mushroom_payload, headers=shop_headers)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        data = response.json()
        assert data["error_code"] == "INVALID_INPUT"
        assert [d["field"] for d in data["details"]] == ["weight"]

    def test_missing_name(
        self, client: TestClient, shop_headers: dict, mushroom_payload: dict
    ) -> None:
        """Should require a product name."""
        del mushroom_payload["product_name"]

        response = client.post("/product/create", json=mushroom_payload, headers=shop_headers)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["error_code"] == "INVALID_INPUT"

    def test_price_below_one_hundredth(
        self, client: TestClient, shop_headers: dict, mushroom_payload: dict
    ) -> None:
        """Should reject prices the price column would round to zero."""
        mushroom_payload["product_price"] = 0.001

        response = client.post("/product/create", json=mushroom_payload, headers=shop_headers)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["error_code"] == "INVALID_INPUT"

    def test_zero_discount_is_no_discount(
        self, client: TestClient, shop_headers: dict, mushroom_payload: dict
    ) -> None:
        """Should accept a zero discount and report none."""
        mushroom_payload["product_discounted_price"] = 0

        response = client.post("/product/create", json=mushroom_payload, headers=shop_headers)

        assert response.status_code == status.HTTP_201_CREATED
        assert response.json()["product_discounted_price"] is None

    def test_malformed_body(self, client: TestClient, shop_headers: dict) -> None:
        """Should report schema errors as invalid input."""
        response = client.post(
            "/product/create",
            json={"product_name": "Shiitake", "product_quantity": "many"},
            headers=shop_headers,
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["error_code"] == "INVALID_INPUT"


# ============================================================================
# Read
# ============================================================================


class TestGetProduct:
    """Tests for GET /product/{product_id}."""

    def test_get_product(
        self, client: TestClient, shop_headers: dict, mushroom_payload: dict
    ) -> None:
        """Should return product details without identity."""
        created = create_product(client, shop_headers, mushroom_payload)

        response = client.get(f"/product/{created['id']}")

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["id"] == created["id"]
        assert data["product_attributes"]["origin"] == "Dalat"
        assert data["inventory"]["shop_id"] == "shop-dalat"

    def test_get_unknown_product(self, client: TestClient) -> None:
        """Should return 404 for unknown IDs."""
        response = client.get("/product/does-not-exist")

        assert response.status_code == status.HTTP_404_NOT_FOUND
        data = response.json()
        assert data["error_code"] == "NOT_FOUND"
        assert "request_id" in data


# ============================================================================
# Update
# ============================================================================


class TestUpdateProduct:
    """Tests for PUT /product/update/{product_id}."""

    def test_partial_update(
        self, client: TestClient, shop_headers: dict, mushroom_payload: dict
    ) -> None:
        """Should change only the supplied fields."""
        created = create_product(client, shop_headers, mushroom_payload)

        response = client.put(
            f"/product/update/{created['id']}",
            json={"product_price": 60000, "product_attributes": {"freshness": "dried"}},
            headers=shop_headers,
        )

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["product_price"] == 60000
        assert data["product_name"] == "Shiitake"
        assert data["product_attributes"]["freshness"] == "dried"
        assert data["product_attributes"]["origin"] == "Dalat"

    def test_clear_thumb(
        self, client: TestClient, shop_headers: dict, mushroom_payload: dict
    ) -> None:
        """Should clear nullable fields sent as null."""
        mushroom_payload["product_thumb"] = "shiitake.png"
        created = create_product(client, shop_headers, mushroom_payload)

        response = client.put(
            f"/product/update/{created['id']}",
            json={"product_thumb": None},
            headers=shop_headers,
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["product_thumb"] is None

    def test_other_shop_forbidden(
        self,
        client: TestClient,
        shop_headers: dict,
        other_shop_headers: dict,
        mushroom_payload: dict,
    ) -> None:
        """Should reject updates from a shop that does not own the product."""
        created = create_product(client, shop_headers, mushroom_payload)

        response = client.put(
            f"/product/update/{created['id']}",
            json={"product_name": "Taken"},
            headers=other_shop_headers,
        )

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert response.json()["error_code"] == "UNAUTHORIZED"
        assert client.get(f"/product/{created['id']}").json()["product_name"] == "Shiitake"

    def test_type_change_rejected(
        self, client: TestClient, shop_headers: dict, mushroom_payload: dict
    ) -> None:
        """Should refuse to change the product type."""
        created = create_product(client, shop_headers, mushroom_payload)

        response = client.put(
            f"/product/update/{created['id']}",
            json={"product_type": "Vegetable"},
            headers=shop_headers,
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_update_unknown_product(self, client: TestClient, shop_headers: dict) -> None:
        """Should return 404 for unknown IDs."""
        response = client.put(
            "/product/update/missing",
            json={"product_name": "X"},
            headers=shop_headers,
        )

        assert response.status_code == status.HTTP_404_NOT_FOUND


# ============================================================================
# Publication
# ============================================================================


class TestPublication:
    """Tests for publish and unpublish."""

    def test_publish_and_unpublish(
        self, client: TestClient, shop_headers: dict, mushroom_payload: dict
    ) -> None:
        """Should flip the product between draft and published."""
        created = create_product(client, shop_headers, mushroom_payload)

        published = client.put(f"/product/publish/{created['id']}", headers=shop_headers)
        assert published.status_code == status.HTTP_200_OK
        assert published.json()["is_published"] is True
        assert published.json()["is_draft"] is False

        unpublished = client.put(f"/product/unpublish/{created['id']}", headers=shop_headers)
        assert unpublished.status_code == status.HTTP_200_OK
        assert unpublished.json()["is_published"] is False
        assert unpublished.json()["is_draft"] is True

    def test_publish_twice(
        self, client: TestClient, shop_headers: dict, mushroom_payload: dict
    ) -> None:
        """Should accept publishing an already published product."""
        product = create_published(client, shop_headers, mushroom_payload)

        response = client.put(f"/product/publish/{product['id']}", headers=shop_headers)

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["is_published"] is True

    def test_publish_other_shop(
        self,
        client: TestClient,
        shop_headers: dict,
        other_shop_headers: dict,
        mushroom_payload: dict,
    ) -> None:
        """Should forbid publishing another shop's product."""
        created = create_product(client, shop_headers, mushroom_payload)

        response = client.put(f"/product/publish/{created['id']}", headers=other_shop_headers)

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert client.get(f"/product/{created['id']}").json()["is_draft"] is True

    def test_publish_requires_identity(self, client: TestClient) -> None:
        """Should reject publishing without a shop identity."""
        response = client.put("/product/publish/anything")

        assert response.status_code == status.HTTP_401_UNAUTHORIZED


# ============================================================================
# Listings
# ============================================================================


class TestListings:
    """Tests for storefront and shop listings."""

    def test_storefront_lists_published(
        self, client: TestClient, shop_headers: dict, mushroom_payload: dict
    ) -> None:
        """Should list published products only."""
        published = create_published(client, shop_headers, mushroom_payload)
        create_product(client, shop_headers, {**mushroom_payload, "product_name": "Oyster"})

        response = client.get("/product")

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["current_page"] == 1
        assert data["total"] == 1
        assert data["total_pages"] == 1
        assert [p["id"] for p in data["data"]] == [published["id"]]

    def test_storefront_type_filter(
        self, client: TestClient, shop_headers: dict, mushroom_payload: dict
    ) -> None:
        """Should filter by product type."""
        create_published(client, shop_headers, mushroom_payload)
        bonsai = create_published(
            client,
            shop_headers,
            {
                **mushroom_payload,
                "product_name": "Juniper",
                "product_type": "Bonsai",
                "product_attributes": {"age": 10},
            },
        )

        response = client.get("/product", params={"product_type": "Bonsai"})

        assert [p["id"] for p in response.json()["data"]] == [bonsai["id"]]

    def test_storefront_unknown_type(self, client: TestClient) -> None:
        """Should reject unknown type filters."""
        response = client.get("/product", params={"product_type": "Orchid"})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["error_code"] == "INVALID_PRODUCT_TYPE"

    def test_storefront_pagination_defaults(self, client: TestClient) -> None:
        """Should fall back to page 1 for invalid page numbers."""
        response = client.get("/product", params={"page": 0, "limit": 0})

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["current_page"] == 1

    def test_shop_drafts_and_published(
        self, client: TestClient, shop_headers: dict, mushroom_payload: dict
    ) -> None:
        """Should list the caller's drafts and published products separately."""
        published = create_published(client, shop_headers, mushroom_payload)
        draft = create_product(client, shop_headers, {**mushroom_payload, "product_name": "Oyster"})

        drafts = client.get("/product/drafts", headers=shop_headers).json()
        live = client.get("/product/published", headers=shop_headers).json()

        assert [p["id"] for p in drafts["data"]] == [draft["id"]]
        assert [p["id"] for p in live["data"]] == [published["id"]]

    def test_shop_listings_require_identity(self, client: TestClient) -> None:
        """Should reject shop listings without identity."""
        assert client.get("/product/drafts").status_code == status.HTTP_401_UNAUTHORIZED
        assert client.get("/product/published").status_code == status.HTTP_401_UNAUTHORIZED

    def test_discounts(
        self, client: TestClient, shop_headers: dict, mushroom_payload: dict
    ) -> None:
        """Should order by discount price, largest first."""
        small = create_published(
            client, shop_headers, {**mushroom_payload, "product_discounted_price": 5000}
        )
        large = create_published(
            client, shop_headers, {**mushroom_payload, "product_discounted_price": 10000}
        )

        response = client.get("/product/discounts")

        assert [p["id"] for p in response.json()["data"]] == [large["id"], small["id"]]
        assert response.json()["data"][0]["product_discounted_price"] == 10000

    def test_bestsellers(
        self, client: TestClient, shop_headers: dict, mushroom_payload: dict
    ) -> None:
        """Should list published products."""
        published = create_published(client, shop_headers, mushroom_payload)

        response = client.get("/product/bestsellers")

        assert response.status_code == status.HTTP_200_OK
        assert [p["id"] for p in response.json()["data"]] == [published["id"]]


class TestSearch:
    """Tests for GET /product/search."""

    def test_search_ignores_case(
        self, client: TestClient, shop_headers: dict, mushroom_payload: dict
    ) -> None:
        """Should match names case-insensitively."""
        published = create_published(client, shop_headers, mushroom_payload)

        response = client.get("/product/search", params={"keyword": "SHIITAKE"})

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["keyword"] == "SHIITAKE"
        assert data["total"] == 1
        assert data["data"][0]["id"] == published["id"]

    @pytest.mark.parametrize("params", [{}, {"keyword": "  "}])
    def test_search_requires_keyword(self, client: TestClient, params: dict) -> None:
        """Should reject a missing or blank keyword."""
        response = client.get("/product/search", params=params)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["error_code"] == "INVALID_INPUT"
