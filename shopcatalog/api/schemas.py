"""API schemas for the catalog API.

Pydantic models for response serialization. Request bodies reuse the
catalog input models.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field


# ============================================================================
# Common Schemas
# ============================================================================


class ErrorDetail(BaseModel):
    """Detailed error information."""

    field: str | None = Field(default=None, description="Field that caused the error")
    message: str = Field(..., description="Error message")


class ErrorResponse(BaseModel):
    """Standard error response.

    All API errors follow this format for consistency.
    """

    error_code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error message")
    details: list[ErrorDetail] = Field(
        default_factory=list, description="Additional error details"
    )
    request_id: str | None = Field(
        default=None, description="Request ID for correlation"
    )


# ============================================================================
# Product Schemas
# ============================================================================


class ProductResponse(BaseModel):
    """A catalog product."""

    id: str = Field(..., description="Product identifier")
    product_name: str = Field(..., description="Product name")
    product_price: float = Field(..., description="Price")
    product_discounted_price: float | None = Field(
        default=None, description="Sale price"
    )
    product_thumb: str | None = Field(default=None, description="Thumbnail reference")
    product_description: str | None = Field(
        default=None, description="Description markup"
    )
    product_quantity: int = Field(..., description="Quantity")
    product_type: str = Field(..., description="Product kind")
    sub_product_type: str | None = Field(default=None, description="Sub-type")
    product_videos: list[str] = Field(default_factory=list, description="Videos")
    product_pictures: list[str] = Field(default_factory=list, description="Pictures")
    product_status: str = Field(..., description="Status flag")
    product_selled: int = Field(..., description="Units sold")
    product_shop: str = Field(..., description="Owning shop")
    is_draft: bool = Field(..., description="Whether the product is a draft")
    is_published: bool = Field(..., description="Whether the product is published")
    created_at: datetime = Field(..., description="When the product was created")
    updated_at: datetime = Field(..., description="When the product was last updated")


class InventorySchema(BaseModel):
    """Stock held by the owning shop."""

    shop_id: str = Field(..., description="Shop identifier")
    location: str | None = Field(default=None, description="Stock location")
    stock: int = Field(..., description="Units in stock")


class ProductDetailResponse(ProductResponse):
    """A product with its type-specific attributes and stock."""

    product_attributes: dict[str, Any] = Field(
        default_factory=dict, description="Type-specific attributes"
    )
    inventory: InventorySchema | None = Field(default=None, description="Stock record")


class ProductListResponse(BaseModel):
    """Paginated list of products."""

    current_page: int = Field(..., description="Current page number")
    total_pages: int = Field(..., description="Total number of pages")
    total: int = Field(..., description="Total number of matching products")
    data: list[ProductResponse] = Field(..., description="Products on this page")


class ProductSearchResponse(BaseModel):
    """Keyword search results."""

    keyword: str = Field(..., description="Searched keyword")
    total: int = Field(..., description="Number of results returned")
    data: list[ProductResponse] = Field(..., description="Matching products")
