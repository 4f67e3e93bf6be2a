"""Product repository for database operations.

Persistence boundary for products, their variant attributes and
inventory. Writes are flushed, not committed: the caller owns the
transaction and decides when to commit or roll back.
"""

from collections.abc import Sequence
from datetime import datetime, timezone
from typing import Any

import structlog
from sqlalchemy import Select, and_, func, select, text, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from shopcatalog.catalog.models import VARIANT_MODELS, Inventory, Product, VariantModel
from shopcatalog.catalog.query import (
    SEARCH_RESULT_LIMIT,
    ListingKind,
    ProductListing,
    keyword_pattern,
)
from shopcatalog.catalog.variants import ProductType, VariantAttributes
from shopcatalog.domain.exceptions import ConstraintViolationError, NotFoundError, StoreError

logger = structlog.get_logger()


class ProductRepository:
    """Repository for catalog database operations.

    Example usage:
        async with async_session_factory() as session:
            repo = ProductRepository(session)
            products, total = await repo.list_all(
                ProductListing(kind=ListingKind.ALL_PUBLISHED),
                limit=10,
                offset=0,
            )
    """

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: Async SQLAlchemy session.
        """
        self.session = session

    # ========================================================================
    # Transactions
    # ========================================================================

    async def commit(self) -> None:
        """Commit pending writes."""
        try:
            await self.session.commit()
        except IntegrityError as exc:
            raise ConstraintViolationError(str(exc.orig)) from exc
        except SQLAlchemyError as exc:
            raise StoreError(f"Commit failed: {exc}") from exc

    async def rollback(self) -> None:
        """Discard pending writes."""
        await self.session.rollback()

    async def refresh(self, instance: Any) -> None:
        """Reload a row's attributes from the database."""
        try:
            await self.session.refresh(instance)
        except SQLAlchemyError as exc:
            raise StoreError(f"Refresh failed: {exc}") from exc

    async def ping(self) -> None:
        """Check the database answers."""
        try:
            await self.session.execute(text("SELECT 1"))
        except SQLAlchemyError as exc:
            raise StoreError(f"Database unavailable: {exc}") from exc

    # ========================================================================
    # Create
    # ========================================================================

    async def create_product(self, product: Product) -> Product:
        """Insert a new product row.

        Raises:
            ConstraintViolationError: If the ID already exists.
            StoreError: On any other database failure.
        """
        self.session.add(product)
        await self._flush("product", product.id)
        return product

    async def create_variant(
        self,
        product_id: str,
        shop_id: str,
        attributes: VariantAttributes,
    ) -> VariantModel:
        """Insert the type-specific side row for a product.

        Args:
            product_id: Product the attributes belong to.
            shop_id: Owning shop.
            attributes: Validated attributes; their kind picks the table.

        Returns:
            Saved variant row.
        """
        model = VARIANT_MODELS[attributes.kind]
        variant = model(id=product_id, product_shop=shop_id, **attributes.model_dump())
        self.session.add(variant)
        await self._flush(attributes.kind.value, product_id)
        return variant

    async def create_inventory(self, inventory: Inventory) -> Inventory:
        """Insert the stock row for a (product, shop) pair."""
        self.session.add(inventory)
        await self._flush("inventory", inventory.product_id)
        return inventory

    # ========================================================================
    # Read
    # ========================================================================

    async def get_product(self, product_id: str) -> Product:
        """Get product by ID.

        Raises:
            NotFoundError: If no product has this ID.
        """
        result = await self._execute(select(Product).where(Product.id == product_id))
        product = result.scalar_one_or_none()
        if product is None:
            raise NotFoundError("Product", product_id)
        return product

    async def get_variant(self, product: Product) -> VariantModel | None:
        """Get the variant row of a product."""
        model = VARIANT_MODELS[product.kind]
        result = await self._execute(select(model).where(model.id == product.id))
        return result.scalar_one_or_none()

    async def get_inventory(self, product_id: str, shop_id: str) -> Inventory | None:
        """Get the stock row of a product in a shop."""
        query = select(Inventory).where(
            and_(
                Inventory.product_id == product_id,
                Inventory.shop_id == shop_id,
            )
        )
        result = await self._execute(query)
        return result.scalar_one_or_none()

    # ========================================================================
    # Update
    # ========================================================================

    async def update_product(self, product_id: str, fields: dict[str, Any]) -> None:
        """Apply a partial update to a product row.

        Args:
            product_id: Product ID.
            fields: Column values to set. Empty means no-op.

        Raises:
            NotFoundError: If no product has this ID.
        """
        if not fields:
            return
        values = {**fields, "updated_at": datetime.now(timezone.utc)}
        statement = update(Product).where(Product.id == product_id).values(**values)
        result = await self._execute(statement)
        if result.rowcount == 0:
            raise NotFoundError("Product", product_id)

    async def update_variant(
        self,
        kind: ProductType,
        product_id: str,
        fields: dict[str, Any],
    ) -> None:
        """Apply a partial update to a variant row. Empty means no-op."""
        if not fields:
            return
        model = VARIANT_MODELS[kind]
        statement = update(model).where(model.id == product_id).values(**fields)
        result = await self._execute(statement)
        if result.rowcount == 0:
            raise NotFoundError(kind.value, product_id)

    async def publish_product(self, product_id: str, shop_id: str) -> None:
        """Mark a product published, scoped to its owning shop.

        Raises:
            NotFoundError: If no product matches both ID and shop.
        """
        await self._set_publication(product_id, shop_id, is_draft=False, is_published=True)

    async def unpublish_product(self, product_id: str, shop_id: str) -> None:
        """Return a product to draft, scoped to its owning shop.

        Raises:
            NotFoundError: If no product matches both ID and shop.
        """
        await self._set_publication(product_id, shop_id, is_draft=True, is_published=False)

    async def _set_publication(
        self,
        product_id: str,
        shop_id: str,
        is_draft: bool,
        is_published: bool,
    ) -> None:
        statement = (
            update(Product)
            .where(and_(Product.id == product_id, Product.product_shop == shop_id))
            .values(
                is_draft=is_draft,
                is_published=is_published,
                updated_at=datetime.now(timezone.utc),
            )
        )
        result = await self._execute(statement)
        if result.rowcount == 0:
            raise NotFoundError("Product", product_id)

    # ========================================================================
    # Shop listings
    # ========================================================================

    async def list_drafts(self, shop_id: str, limit: int, offset: int) -> Sequence[Product]:
        """List a shop's draft products, newest first."""
        return await self._list_for_shop(shop_id, published=False, limit=limit, offset=offset)

    async def list_published(
        self, shop_id: str, limit: int, offset: int
    ) -> Sequence[Product]:
        """List a shop's published products, newest first."""
        return await self._list_for_shop(shop_id, published=True, limit=limit, offset=offset)

    async def count_for_shop(self, shop_id: str, published: bool) -> int:
        """Count a shop's products in one publication state."""
        query = select(func.count(Product.id)).where(
            and_(
                Product.product_shop == shop_id,
                Product.is_published == published,
            )
        )
        result = await self._execute(query)
        return result.scalar_one()

    async def _list_for_shop(
        self,
        shop_id: str,
        published: bool,
        limit: int,
        offset: int,
    ) -> Sequence[Product]:
        query = (
            select(Product)
            .where(
                and_(
                    Product.product_shop == shop_id,
                    Product.is_published == published,
                )
            )
            .order_by(Product.created_at.desc())
            .limit(limit)
            .offset(offset)
        )
        result = await self._execute(query)
        return result.scalars().all()

    # ========================================================================
    # Storefront listings
    # ========================================================================

    async def list_all(
        self,
        listing: ProductListing,
        limit: int,
        offset: int,
    ) -> tuple[Sequence[Product], int]:
        """List published products through one filter path.

        Args:
            listing: Resolved filter (type, keyword or none).
            limit: Maximum results.
            offset: Result offset.

        Returns:
            Tuple of (products, total matching count).
        """
        conditions = [Product.is_published.is_(True)]
        if listing.kind is ListingKind.BY_TYPE and listing.product_type is not None:
            conditions.append(Product.product_type == listing.product_type.value)
        elif listing.kind is ListingKind.BY_KEYWORD and listing.search_pattern is not None:
            conditions.append(Product.product_name.ilike(listing.search_pattern, escape="\\"))

        count_result = await self._execute(
            select(func.count(Product.id)).where(and_(*conditions))
        )
        total = count_result.scalar_one()

        query = (
            select(Product)
            .where(and_(*conditions))
            .order_by(Product.created_at.desc())
            .limit(limit)
            .offset(offset)
        )
        result = await self._execute(query)
        return result.scalars().all(), total

    async def list_by_discount(self, limit: int, offset: int) -> Sequence[Product]:
        """List published products, largest discount price first."""
        query = self._published().order_by(
            Product.product_discounted_price.desc().nulls_last(),
            Product.created_at.desc(),
        )
        result = await self._execute(query.limit(limit).offset(offset))
        return result.scalars().all()

    async def list_by_selled(self, limit: int, offset: int) -> Sequence[Product]:
        """List published products, most units sold first."""
        query = self._published().order_by(
            Product.product_selled.desc(),
            Product.created_at.desc(),
        )
        result = await self._execute(query.limit(limit).offset(offset))
        return result.scalars().all()

    async def count_published(self) -> int:
        """Count all published products."""
        result = await self._execute(
            select(func.count(Product.id)).where(Product.is_published.is_(True))
        )
        return result.scalar_one()

    async def search_by_keyword(
        self,
        keyword: str,
        limit: int = SEARCH_RESULT_LIMIT,
    ) -> Sequence[Product]:
        """Case-insensitive substring search on product name.

        Args:
            keyword: Text to look for.
            limit: Row cap, never above SEARCH_RESULT_LIMIT.
        """
        query = (
            self._published()
            .where(Product.product_name.ilike(keyword_pattern(keyword), escape="\\"))
            .order_by(Product.created_at.desc())
            .limit(min(limit, SEARCH_RESULT_LIMIT))
        )
        result = await self._execute(query)
        return result.scalars().all()

    # ========================================================================
    # Helpers
    # ========================================================================

    def _published(self) -> Select[tuple[Product]]:
        return select(Product).where(Product.is_published.is_(True))

    async def _execute(self, statement: Any) -> Any:
        try:
            return await self.session.execute(statement)
        except IntegrityError as exc:
            raise ConstraintViolationError(str(exc.orig)) from exc
        except SQLAlchemyError as exc:
            logger.error("Catalog query failed", error=str(exc))
            raise StoreError(f"Database error: {exc}") from exc

    async def _flush(self, entity_type: str, entity_id: str) -> None:
        try:
            await self.session.flush()
        except IntegrityError as exc:
            raise ConstraintViolationError(
                f"Duplicate or invalid {entity_type}: {entity_id}",
                details={"entity_type": entity_type, "entity_id": entity_id},
            ) from exc
        except SQLAlchemyError as exc:
            logger.error(
                "Catalog write failed",
                entity_type=entity_type,
                entity_id=entity_id,
                error=str(exc),
            )
            raise StoreError(
                f"Failed to write {entity_type}: {entity_id}",
                details={"entity_type": entity_type, "entity_id": entity_id},
            ) from exc
