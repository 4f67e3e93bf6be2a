"""Product API endpoints.

Storefront browsing routes are public. Shop-management routes act on
behalf of the shop identity attached by the identity middleware.
"""

from typing import Annotated

from fastapi import APIRouter, Body, Depends, HTTPException, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from shopcatalog.api.middleware import missing_identity_error
from shopcatalog.api.schemas import (
    ErrorResponse,
    InventorySchema,
    ProductDetailResponse,
    ProductListResponse,
    ProductResponse,
    ProductSearchResponse,
)
from shopcatalog.catalog.inputs import ProductCreate, ProductUpdate
from shopcatalog.catalog.models import Product
from shopcatalog.catalog.query import PaginatedResult, ProductQuery
from shopcatalog.catalog.repository import ProductRepository
from shopcatalog.catalog.service import CatalogService, ProductDetail
from shopcatalog.infrastructure.database import get_session

router = APIRouter(prefix="/product", tags=["Products"])


# ============================================================================
# Dependencies
# ============================================================================


def get_service(
    session: Annotated[AsyncSession, Depends(get_session)],
) -> CatalogService:
    """Get catalog service bound to the request's session."""
    return CatalogService(ProductRepository(session))


def get_shop_id(request: Request) -> str:
    """Get the shop identity attached by ShopIdentityMiddleware."""
    shop_id = getattr(request.state, "shop_id", None)
    if not shop_id:
        # Route missing from SHOP_ENDPOINTS
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=missing_identity_error(),
        )
    return shop_id


Service = Annotated[CatalogService, Depends(get_service)]
ShopId = Annotated[str, Depends(get_shop_id)]
Page = Annotated[int, Query(description="Page number (1-based)")]
Limit = Annotated[int, Query(description="Items per page")]


# ============================================================================
# Converters
# ============================================================================


def product_to_response(product: Product) -> ProductResponse:
    """Convert Product row to response schema."""
    return ProductResponse(**_product_fields(product))


def detail_to_response(detail: ProductDetail) -> ProductDetailResponse:
    """Convert ProductDetail to response schema."""
    inventory = detail.inventory
    return ProductDetailResponse(
        **_product_fields(detail.product),
        product_attributes=detail.attributes,
        inventory=(
            InventorySchema(
                shop_id=inventory.shop_id,
                location=inventory.location,
                stock=inventory.stock,
            )
            if inventory
            else None
        ),
    )


def page_to_response(result: PaginatedResult[Product]) -> ProductListResponse:
    """Convert a page of products to response schema."""
    return ProductListResponse(
        current_page=result.page,
        total_pages=result.total_pages,
        total=result.total,
        data=[product_to_response(p) for p in result.items],
    )


def _product_fields(product: Product) -> dict:
    discount = product.product_discounted_price
    return {
        "id": product.id,
        "product_name": product.product_name,
        "product_price": float(product.product_price),
        "product_discounted_price": float(discount) if discount is not None else None,
        "product_thumb": product.product_thumb,
        "product_description": product.product_description,
        "product_quantity": product.product_quantity,
        "product_type": product.product_type,
        "sub_product_type": product.sub_product_type,
        "product_videos": list(product.product_videos or []),
        "product_pictures": list(product.product_pictures or []),
        "product_status": product.product_status,
        "product_selled": product.product_selled,
        "product_shop": product.product_shop,
        "is_draft": product.is_draft,
        "is_published": product.is_published,
        "created_at": product.created_at,
        "updated_at": product.updated_at,
    }


# ============================================================================
# Storefront Endpoints
# ============================================================================


@router.get(
    "",
    response_model=ProductListResponse,
    responses={400: {"model": ErrorResponse}},
    summary="List published products",
    description=(
        "List published products. A product_type filter takes precedence "
        "over a keyword; with neither, all published products are listed."
    ),
)
async def list_products(
    service: Service,
    page: Page = 1,
    limit: Limit = 10,
    product_type: Annotated[str | None, Query(description="Product type filter")] = None,
    keyword: Annotated[str | None, Query(description="Name keyword")] = None,
) -> ProductListResponse:
    """List published products with optional filter."""
    result = await service.find_all_products(
        ProductQuery(page=page, limit=limit, product_type=product_type, keyword=keyword)
    )
    return page_to_response(result)


@router.get(
    "/search",
    response_model=ProductSearchResponse,
    responses={400: {"model": ErrorResponse}},
    summary="Search products by name",
)
async def search_products(
    service: Service,
    keyword: Annotated[str, Query(description="Name keyword")] = "",
) -> ProductSearchResponse:
    """Search published products by name, at most 100 results."""
    products = await service.search_products(keyword)
    return ProductSearchResponse(
        keyword=keyword,
        total=len(products),
        data=[product_to_response(p) for p in products],
    )


@router.get(
    "/discounts",
    response_model=ProductListResponse,
    summary="List products by discount",
)
async def list_by_discount(
    service: Service,
    page: Page = 1,
    limit: Limit = 10,
) -> ProductListResponse:
    """List published products, largest discount price first."""
    return page_to_response(await service.get_products_by_discount(page, limit))


@router.get(
    "/bestsellers",
    response_model=ProductListResponse,
    summary="List best-selling products",
)
async def list_bestsellers(
    service: Service,
    page: Page = 1,
    limit: Limit = 10,
) -> ProductListResponse:
    """List published products, most units sold first."""
    return page_to_response(await service.get_products_by_selled(page, limit))


# ============================================================================
# Shop Endpoints
# ============================================================================


@router.get(
    "/drafts",
    response_model=ProductListResponse,
    responses={401: {"model": ErrorResponse}},
    summary="List the shop's drafts",
)
async def list_drafts(
    service: Service,
    shop_id: ShopId,
    page: Page = 1,
    limit: Limit = 10,
) -> ProductListResponse:
    """List the caller's draft products."""
    return page_to_response(await service.find_all_drafts_for_shop(shop_id, page, limit))


@router.get(
    "/published",
    response_model=ProductListResponse,
    responses={401: {"model": ErrorResponse}},
    summary="List the shop's published products",
)
async def list_published(
    service: Service,
    shop_id: ShopId,
    page: Page = 1,
    limit: Limit = 10,
) -> ProductListResponse:
    """List the caller's published products."""
    return page_to_response(
        await service.find_all_published_for_shop(shop_id, page, limit)
    )


@router.post(
    "/create",
    response_model=ProductDetailResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse},
        401: {"model": ErrorResponse},
    },
    summary="Create a product",
    description="Create a draft product with its type-specific attributes and stock.",
)
async def create_product(
    payload: Annotated[ProductCreate, Body()],
    service: Service,
    shop_id: ShopId,
) -> ProductDetailResponse:
    """Create a product owned by the calling shop."""
    detail = await service.create_product(payload, shop_id)
    return detail_to_response(detail)


@router.put(
    "/update/{product_id}",
    response_model=ProductDetailResponse,
    responses={
        400: {"model": ErrorResponse},
        401: {"model": ErrorResponse},
        403: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
    },
    summary="Update a product",
    description="Apply a partial update. Omitted fields are left unchanged.",
)
async def update_product(
    product_id: str,
    payload: Annotated[ProductUpdate, Body()],
    service: Service,
    shop_id: ShopId,
) -> ProductDetailResponse:
    """Update a product owned by the calling shop."""
    detail = await service.update_product(product_id, payload, shop_id)
    return detail_to_response(detail)


@router.put(
    "/publish/{product_id}",
    response_model=ProductResponse,
    responses={
        401: {"model": ErrorResponse},
        403: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
    },
    summary="Publish a product",
)
async def publish_product(
    product_id: str,
    service: Service,
    shop_id: ShopId,
) -> ProductResponse:
    """Publish a product owned by the calling shop."""
    return product_to_response(await service.publish_product(product_id, shop_id))


@router.put(
    "/unpublish/{product_id}",
    response_model=ProductResponse,
    responses={
        401: {"model": ErrorResponse},
        403: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
    },
    summary="Unpublish a product",
)
async def unpublish_product(
    product_id: str,
    service: Service,
    shop_id: ShopId,
) -> ProductResponse:
    """Return a product owned by the calling shop to draft."""
    return product_to_response(await service.unpublish_product(product_id, shop_id))


# Declared last so the fixed paths above take precedence.
@router.get(
    "/{product_id}",
    response_model=ProductDetailResponse,
    responses={404: {"model": ErrorResponse}},
    summary="Get a product",
)
async def get_product(
    product_id: str,
    service: Service,
) -> ProductDetailResponse:
    """Get a product with its attributes and stock."""
    return detail_to_response(await service.find_product(product_id))
