"""SQLAlchemy models for the product catalog.

Defines the products table, one side table per variant kind keyed by
the product ID, and the per-shop inventory table.
"""

from datetime import datetime, timezone
from decimal import Decimal
from typing import Any

from sqlalchemy import (
    JSON,
    Boolean,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from shopcatalog.catalog.variants import ProductType
from shopcatalog.domain.state_machines import PublicationStatus
from shopcatalog.infrastructure.database import Base

# JSONB on PostgreSQL, plain JSON elsewhere
JSONList = JSON().with_variant(JSONB(), "postgresql")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Product(Base):
    """Product entity in the catalog.

    Common fields shared by every product type. Type-specific
    attributes live in the matching variant table.

    Attributes:
        id: Unique product identifier (UUID string).
        product_name: Display name.
        product_price: Price, always positive.
        product_discounted_price: Optional sale price, never above price.
        product_thumb: Thumbnail reference.
        product_description: Description as paragraph markup.
        product_quantity: Quantity at listing time.
        product_type: Variant kind (Mushroom, Vegetable, Bonsai).
        sub_product_type: Free-form sub-type.
        product_videos: Ordered video references.
        product_pictures: Ordered picture references.
        product_status: Free-form status flag.
        product_selled: Units sold.
        product_shop: Owning shop.
        is_draft: Draft flag.
        is_published: Published flag.
        created_at: Creation timestamp.
        updated_at: Last update timestamp.
    """

    __tablename__ = "products"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    product_name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    product_price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    product_discounted_price: Mapped[Decimal | None] = mapped_column(
        Numeric(12, 2), nullable=True
    )
    product_thumb: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    product_description: Mapped[str | None] = mapped_column(Text, nullable=True)
    product_quantity: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    product_type: Mapped[str] = mapped_column(String(50), nullable=False, index=True)
    sub_product_type: Mapped[str | None] = mapped_column(String(100), nullable=True)
    product_videos: Mapped[list[str]] = mapped_column(JSONList, nullable=False, default=list)
    product_pictures: Mapped[list[str]] = mapped_column(JSONList, nullable=False, default=list)
    product_status: Mapped[str] = mapped_column(String(50), nullable=False, default="active")
    product_selled: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    product_shop: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    is_draft: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    is_published: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, index=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        onupdate=_utcnow,
    )

    def __repr__(self) -> str:
        """String representation."""
        return f"<Product(id={self.id}, type={self.product_type}, name={self.product_name[:30]})>"

    @property
    def kind(self) -> ProductType:
        """Variant kind of this product."""
        return ProductType(self.product_type)

    @property
    def publication_status(self) -> PublicationStatus:
        """Current publication state."""
        return PublicationStatus.from_flags(self.is_draft, self.is_published)


class _ProduceVariant:
    """Columns shared by the mushroom and vegetable tables."""

    id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("products.id", ondelete="CASCADE"),
        primary_key=True,
    )
    product_shop: Mapped[str] = mapped_column(String(100), nullable=False)
    weight: Mapped[Decimal | None] = mapped_column(Numeric(10, 2), nullable=True)
    origin: Mapped[str | None] = mapped_column(String(255), nullable=True)
    freshness: Mapped[str | None] = mapped_column(String(100), nullable=True)
    package_type: Mapped[str | None] = mapped_column(String(100), nullable=True)

    def to_dict(self) -> dict[str, Any]:
        """Convert attributes to dictionary."""
        return {
            "weight": float(self.weight) if self.weight is not None else None,
            "origin": self.origin,
            "freshness": self.freshness,
            "package_type": self.package_type,
        }


class MushroomModel(_ProduceVariant, Base):
    """Mushroom attributes."""

    __tablename__ = "mushrooms"


class VegetableModel(_ProduceVariant, Base):
    """Vegetable attributes."""

    __tablename__ = "vegetables"


class BonsaiModel(Base):
    """Bonsai attributes."""

    __tablename__ = "bonsais"

    id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("products.id", ondelete="CASCADE"),
        primary_key=True,
    )
    product_shop: Mapped[str] = mapped_column(String(100), nullable=False)
    age: Mapped[int | None] = mapped_column(Integer, nullable=True)
    height: Mapped[int | None] = mapped_column(Integer, nullable=True)
    style: Mapped[str | None] = mapped_column(String(100), nullable=True)
    species: Mapped[str | None] = mapped_column(String(255), nullable=True)
    pot_type: Mapped[str | None] = mapped_column(String(100), nullable=True)

    def to_dict(self) -> dict[str, Any]:
        """Convert attributes to dictionary."""
        return {
            "age": self.age,
            "height": self.height,
            "style": self.style,
            "species": self.species,
            "pot_type": self.pot_type,
        }


VariantModel = MushroomModel | VegetableModel | BonsaiModel

VARIANT_MODELS: dict[ProductType, type[VariantModel]] = {
    ProductType.MUSHROOM: MushroomModel,
    ProductType.VEGETABLE: VegetableModel,
    ProductType.BONSAI: BonsaiModel,
}


class Inventory(Base):
    """Stock record for a product in a shop.

    Attributes:
        id: Surrogate key.
        product_id: Product the stock belongs to.
        shop_id: Shop holding the stock.
        location: Optional warehouse or shelf location.
        stock: Units in stock.
    """

    __tablename__ = "inventories"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    product_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("products.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    shop_id: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    location: Mapped[str | None] = mapped_column(String(255), nullable=True)
    stock: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        onupdate=_utcnow,
    )

    __table_args__ = (
        UniqueConstraint("product_id", "shop_id", name="uq_inventories_product_shop"),
    )

    def __repr__(self) -> str:
        """String representation."""
        return f"<Inventory(product_id={self.product_id}, shop_id={self.shop_id}, stock={self.stock})>"
