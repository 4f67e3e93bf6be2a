"""Input models for catalog writes.

These are the shapes the catalog service accepts for creating and
updating products. Business rules (non-empty name, positive price,
discount not above price) are checked by the service so they surface
as catalog errors.
"""

from decimal import Decimal
from typing import Any

from pydantic import BaseModel, Field


class ProductCreate(BaseModel):
    """Data for a new product."""

    product_name: str = Field(default="", description="Product name")
    product_price: Decimal = Field(
        default=Decimal("0"), max_digits=12, decimal_places=2, description="Price"
    )
    product_discounted_price: Decimal | None = Field(
        default=None,
        max_digits=12,
        decimal_places=2,
        description="Optional sale price, 0 for none",
    )
    product_thumb: str | None = Field(default=None, description="Thumbnail reference")
    product_description: str | None = Field(
        default=None, description="Plain text, one paragraph per line"
    )
    product_quantity: int = Field(default=0, description="Initial stock")
    product_type: str = Field(default="", description="Mushroom, Vegetable or Bonsai")
    sub_product_type: str | None = Field(default=None, description="Free-form sub-type")
    product_videos: list[str] = Field(default_factory=list, description="Video references")
    product_pictures: list[str] = Field(
        default_factory=list, description="Picture references"
    )
    product_status: str = Field(default="active", description="Status flag")
    product_attributes: dict[str, Any] = Field(
        default_factory=dict, description="Type-specific attributes"
    )
    inventory_location: str | None = Field(
        default=None, description="Where the initial stock is kept"
    )


class ProductUpdate(BaseModel):
    """Partial product update.

    Only fields present in the payload are applied. A field sent as
    null clears it where the column allows it; omitting a field leaves
    it unchanged.
    """

    product_name: str | None = None
    product_price: Decimal | None = Field(default=None, max_digits=12, decimal_places=2)
    product_discounted_price: Decimal | None = Field(
        default=None, max_digits=12, decimal_places=2
    )
    product_thumb: str | None = None
    product_description: str | None = None
    product_quantity: int | None = None
    product_type: str | None = None
    sub_product_type: str | None = None
    product_videos: list[str] | None = None
    product_pictures: list[str] | None = None
    product_status: str | None = None
    product_attributes: dict[str, Any] | None = None

    def supplied(self) -> dict[str, Any]:
        """Fields the caller explicitly set, attributes excluded."""
        return self.model_dump(exclude_unset=True, exclude={"product_attributes"})
