"""Catalog service for product operations.

Orchestrates the multi-record workflows (create, update, publish,
unpublish) over the repository and enforces ownership and validation
rules. Listing operations are thin wrappers over the query engine.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any
from uuid import uuid4

import structlog

from shopcatalog.catalog.inputs import ProductCreate, ProductUpdate
from shopcatalog.catalog.models import Inventory, Product
from shopcatalog.catalog.query import (
    SEARCH_RESULT_LIMIT,
    PaginatedResult,
    PaginationParams,
    ProductQuery,
)
from shopcatalog.catalog.repository import ProductRepository
from shopcatalog.catalog.variants import extract_variant, extract_variant_patch
from shopcatalog.domain.exceptions import (
    CatalogError,
    InvalidInputError,
    UnauthorizedError,
)
from shopcatalog.domain.state_machines import (
    PublicationStatus,
    validate_publication_transition,
)

logger = structlog.get_logger()

# Update fields whose columns cannot hold NULL
_NON_NULLABLE_UPDATES = ("product_name", "product_price", "product_quantity", "product_status")


def _discount_or_none(discount: Decimal | None) -> Decimal | None:
    """A zero discount means the product has none."""
    if discount is None or discount == 0:
        return None
    return discount


def format_description(description: str) -> str:
    """Wrap each non-blank line of a description in a paragraph tag.

    Lines are trimmed and blank lines dropped. Running this on text that
    is already wrapped wraps it again.
    """
    lines = (line.strip() for line in description.split("\n"))
    return "".join(f"<p>{line}</p>" for line in lines if line)


@dataclass
class ProductDetail:
    """A product together with its variant attributes and stock.

    Attributes:
        product: Product row.
        attributes: Type-specific attributes.
        inventory: Owning shop's stock row, if present.
    """

    product: Product
    attributes: dict[str, Any] = field(default_factory=dict)
    inventory: Inventory | None = None


class CatalogService:
    """Service for catalog operations.

    Example usage:
        async with async_session_factory() as session:
            service = CatalogService(ProductRepository(session))

            detail = await service.create_product(
                ProductCreate(
                    product_name="Shiitake",
                    product_price=Decimal("50000"),
                    product_type="Mushroom",
                    product_attributes={"weight": 2.5, "origin": "Dalat"},
                ),
                shop_id="shop-1",
            )
            await service.publish_product(detail.product.id, "shop-1")
    """

    def __init__(self, repository: ProductRepository) -> None:
        """Initialize service with its repository.

        Args:
            repository: Catalog store.
        """
        self.repository = repository

    # ========================================================================
    # Writes
    # ========================================================================

    async def create_product(self, data: ProductCreate, shop_id: str) -> ProductDetail:
        """Create a draft product with its variant and inventory rows.

        The three rows are written in one transaction. If any write
        fails, none of them is kept.

        Args:
            data: Product data.
            shop_id: Caller identity, becomes the owning shop.

        Returns:
            The created product with attributes and inventory.

        Raises:
            InvalidInputError: If required fields are missing or invalid.
            InvalidProductTypeError: If the product type is unknown.
            ConstraintViolationError: If the generated ID collides.
            StoreError: If persistence fails.
        """
        self._validate_new(data)
        attributes = extract_variant(data.product_type, data.product_attributes)

        product_id = str(uuid4())
        is_draft, is_published = PublicationStatus.DRAFT.flags()
        product = Product(
            id=product_id,
            product_name=data.product_name.strip(),
            product_price=data.product_price,
            product_discounted_price=_discount_or_none(data.product_discounted_price),
            product_thumb=data.product_thumb or None,
            product_description=(
                format_description(data.product_description) or None
                if data.product_description
                else None
            ),
            product_quantity=data.product_quantity,
            product_type=attributes.kind.value,
            sub_product_type=data.sub_product_type or None,
            product_videos=list(data.product_videos),
            product_pictures=list(data.product_pictures),
            product_status=data.product_status or "active",
            product_selled=0,
            product_shop=shop_id,
            is_draft=is_draft,
            is_published=is_published,
        )
        inventory = Inventory(
            product_id=product_id,
            shop_id=shop_id,
            location=data.inventory_location,
            stock=data.product_quantity,
        )

        try:
            await self.repository.create_product(product)
            variant = await self.repository.create_variant(product_id, shop_id, attributes)
            await self.repository.create_inventory(inventory)
            await self.repository.commit()
        except CatalogError as exc:
            await self.repository.rollback()
            logger.error(
                "Product creation rolled back",
                product_id=product_id,
                shop_id=shop_id,
                error=exc.message,
            )
            raise

        logger.info(
            "Product created",
            product_id=product_id,
            shop_id=shop_id,
            product_type=product.product_type,
        )
        return ProductDetail(product=product, attributes=variant.to_dict(), inventory=inventory)

    async def update_product(
        self,
        product_id: str,
        data: ProductUpdate,
        shop_id: str,
    ) -> ProductDetail:
        """Apply a partial update to a product and its variant attributes.

        Args:
            product_id: Product ID.
            data: Fields to change; omitted fields stay as they are.
            shop_id: Caller identity.

        Returns:
            The updated product.

        Raises:
            NotFoundError: If the product does not exist.
            UnauthorizedError: If the caller does not own the product.
            InvalidInputError: If a supplied value is invalid.
        """
        product = await self.repository.get_product(product_id)
        self._check_owner(product, shop_id)

        patch = self._build_patch(product, data)
        variant_patch = extract_variant_patch(product.kind, data.product_attributes)

        try:
            await self.repository.update_variant(product.kind, product_id, variant_patch)
            await self.repository.update_product(product_id, patch)
            await self.repository.commit()
        except CatalogError:
            await self.repository.rollback()
            raise

        logger.info(
            "Product updated",
            product_id=product_id,
            shop_id=shop_id,
            fields=sorted(patch),
            attributes=sorted(variant_patch),
        )
        return await self.find_product(product_id)

    async def publish_product(self, product_id: str, shop_id: str) -> Product:
        """Publish a product. Publishing a published product is a no-op.

        Raises:
            NotFoundError: If the product does not exist for this shop.
            UnauthorizedError: If the caller does not own the product.
        """
        return await self._transition(product_id, shop_id, PublicationStatus.PUBLISHED)

    async def unpublish_product(self, product_id: str, shop_id: str) -> Product:
        """Return a product to draft. Unpublishing a draft is a no-op.

        Raises:
            NotFoundError: If the product does not exist for this shop.
            UnauthorizedError: If the caller does not own the product.
        """
        return await self._transition(product_id, shop_id, PublicationStatus.DRAFT)

    async def _transition(
        self,
        product_id: str,
        shop_id: str,
        target: PublicationStatus,
    ) -> Product:
        product = await self.repository.get_product(product_id)
        self._check_owner(product, shop_id)

        current = product.publication_status
        validate_publication_transition(product_id, current, target)

        try:
            if target is PublicationStatus.PUBLISHED:
                await self.repository.publish_product(product_id, shop_id)
            else:
                await self.repository.unpublish_product(product_id, shop_id)
            await self.repository.commit()
        except CatalogError:
            await self.repository.rollback()
            raise

        await self.repository.refresh(product)
        logger.info(
            "Product publication changed",
            product_id=product_id,
            shop_id=shop_id,
            from_status=current.value,
            to_status=target.value,
        )
        return product

    # ========================================================================
    # Reads
    # ========================================================================

    async def find_product(self, product_id: str) -> ProductDetail:
        """Get a product with its attributes and owner stock.

        Raises:
            NotFoundError: If the product does not exist.
        """
        product = await self.repository.get_product(product_id)
        await self.repository.refresh(product)
        variant = await self.repository.get_variant(product)
        if variant is not None:
            await self.repository.refresh(variant)
        inventory = await self.repository.get_inventory(product_id, product.product_shop)
        return ProductDetail(
            product=product,
            attributes=variant.to_dict() if variant is not None else {},
            inventory=inventory,
        )

    async def find_all_products(self, query: ProductQuery) -> PaginatedResult[Product]:
        """List published products for the storefront.

        Raises:
            InvalidProductTypeError: If the type filter is unknown.
        """
        listing = query.resolve_listing()
        pagination = query.pagination
        products, total = await self.repository.list_all(
            listing, limit=pagination.limit, offset=pagination.offset
        )
        return PaginatedResult(
            items=list(products),
            total=total,
            page=pagination.page,
            limit=pagination.limit,
        )

    async def find_all_drafts_for_shop(
        self,
        shop_id: str,
        page: int = 1,
        limit: int = 10,
    ) -> PaginatedResult[Product]:
        """List the caller's draft products, newest first."""
        pagination = PaginationParams(page, limit).normalized()
        products = await self.repository.list_drafts(
            shop_id, limit=pagination.limit, offset=pagination.offset
        )
        total = await self.repository.count_for_shop(shop_id, published=False)
        return PaginatedResult(
            items=list(products), total=total, page=pagination.page, limit=pagination.limit
        )

    async def find_all_published_for_shop(
        self,
        shop_id: str,
        page: int = 1,
        limit: int = 10,
    ) -> PaginatedResult[Product]:
        """List the caller's published products, newest first."""
        pagination = PaginationParams(page, limit).normalized()
        products = await self.repository.list_published(
            shop_id, limit=pagination.limit, offset=pagination.offset
        )
        total = await self.repository.count_for_shop(shop_id, published=True)
        return PaginatedResult(
            items=list(products), total=total, page=pagination.page, limit=pagination.limit
        )

    async def get_products_by_discount(
        self,
        page: int = 1,
        limit: int = 10,
    ) -> PaginatedResult[Product]:
        """List published products by discount price, highest first."""
        pagination = PaginationParams(page, limit).normalized()
        products = await self.repository.list_by_discount(
            limit=pagination.limit, offset=pagination.offset
        )
        total = await self.repository.count_published()
        return PaginatedResult(
            items=list(products), total=total, page=pagination.page, limit=pagination.limit
        )

    async def get_products_by_selled(
        self,
        page: int = 1,
        limit: int = 10,
    ) -> PaginatedResult[Product]:
        """List published products by units sold, highest first."""
        pagination = PaginationParams(page, limit).normalized()
        products = await self.repository.list_by_selled(
            limit=pagination.limit, offset=pagination.offset
        )
        total = await self.repository.count_published()
        return PaginatedResult(
            items=list(products), total=total, page=pagination.page, limit=pagination.limit
        )

    async def search_products(self, keyword: str) -> list[Product]:
        """Search published products by name, capped at 100 rows.

        Raises:
            InvalidInputError: If the keyword is blank.
        """
        if not keyword or not keyword.strip():
            raise InvalidInputError("Keyword is required", fields=["keyword"])
        products = await self.repository.search_by_keyword(
            keyword.strip(), limit=SEARCH_RESULT_LIMIT
        )
        return list(products)

    # ========================================================================
    # Rules
    # ========================================================================

    def _check_owner(self, product: Product, shop_id: str) -> None:
        if product.product_shop != shop_id:
            logger.warning(
                "Ownership check failed",
                product_id=product.id,
                shop_id=shop_id,
            )
            raise UnauthorizedError(product.id, shop_id)

    def _validate_new(self, data: ProductCreate) -> None:
        invalid = []
        if not data.product_name or not data.product_name.strip():
            invalid.append("product_name")
        if data.product_price is None or data.product_price <= 0:
            invalid.append("product_price")
        if data.product_quantity < 0:
            invalid.append("product_quantity")
        if invalid:
            raise InvalidInputError(
                f"Missing or invalid fields: {', '.join(invalid)}", fields=invalid
            )
        self._check_discount(data.product_price, data.product_discounted_price)

    def _check_discount(self, price: Decimal, discount: Decimal | None) -> None:
        if discount is None:
            return
        if discount < 0 or discount > price:
            raise InvalidInputError(
                "Discount price must not be negative or above the price",
                fields=["product_discounted_price"],
            )

    def _build_patch(self, product: Product, data: ProductUpdate) -> dict[str, Any]:
        supplied = data.supplied()

        cleared = [
            name for name in _NON_NULLABLE_UPDATES if name in supplied and supplied[name] is None
        ]
        if cleared:
            raise InvalidInputError(
                f"Fields cannot be cleared: {', '.join(cleared)}", fields=cleared
            )

        product_type = supplied.pop("product_type", None)
        if product_type is not None and product_type != product.product_type:
            raise InvalidInputError(
                "Product type cannot change after creation", fields=["product_type"]
            )

        patch: dict[str, Any] = {}
        invalid = []
        for name, value in supplied.items():
            if name == "product_name":
                if not value.strip():
                    invalid.append(name)
                    continue
                value = value.strip()
            elif name == "product_price" and value <= 0:
                invalid.append(name)
                continue
            elif name == "product_quantity" and value < 0:
                invalid.append(name)
                continue
            elif name == "product_status" and not value.strip():
                invalid.append(name)
                continue
            elif name == "product_description" and value is not None:
                value = format_description(value) or None
            elif name in ("product_videos", "product_pictures") and value is None:
                value = []
            elif name == "product_discounted_price":
                value = _discount_or_none(value)
            elif name in ("product_thumb", "sub_product_type") and value == "":
                value = None
            patch[name] = value
        if invalid:
            raise InvalidInputError(f"Invalid fields: {', '.join(invalid)}", fields=invalid)

        price = patch.get("product_price", product.product_price)
        discount = patch.get("product_discounted_price", product.product_discounted_price)
        if "product_discounted_price" in patch or "product_price" in patch:
            self._check_discount(price, discount)
        return patch
