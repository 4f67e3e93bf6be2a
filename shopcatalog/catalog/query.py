"""Query engine for product listings.

Turns page/limit input into offsets, picks the single listing path a
storefront query resolves to, and computes page counts.
"""

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Generic, TypeVar

from shopcatalog.catalog.variants import ProductType, parse_product_type

T = TypeVar("T")

DEFAULT_PAGE = 1
DEFAULT_PAGE_LIMIT = 10
SEARCH_RESULT_LIMIT = 100


@dataclass
class PaginationParams:
    """Pagination parameters.

    Attributes:
        page: Page number (1-indexed).
        limit: Items per page.
    """

    page: int = DEFAULT_PAGE
    limit: int = DEFAULT_PAGE_LIMIT

    def normalized(self) -> "PaginationParams":
        """Clamp out-of-range values to the defaults."""
        return PaginationParams(
            page=self.page if self.page >= 1 else DEFAULT_PAGE,
            limit=self.limit if self.limit >= 1 else DEFAULT_PAGE_LIMIT,
        )

    @property
    def offset(self) -> int:
        """Calculate offset from page number."""
        return (self.page - 1) * self.limit


@dataclass
class PaginatedResult(Generic[T]):
    """Paginated result container.

    Attributes:
        items: List of items.
        total: Total count of matching rows.
        page: Current page.
        limit: Items per page.
    """

    items: list[T]
    total: int
    page: int
    limit: int

    @property
    def total_pages(self) -> int:
        """Calculate total pages."""
        return math.ceil(self.total / self.limit)

    @property
    def has_next(self) -> bool:
        """Check if there's a next page."""
        return self.page < self.total_pages

    @property
    def has_prev(self) -> bool:
        """Check if there's a previous page."""
        return self.page > 1


class ListingKind(str, Enum):
    """Storefront listing paths, in precedence order."""

    BY_TYPE = "by_type"
    BY_KEYWORD = "by_keyword"
    ALL_PUBLISHED = "all_published"


@dataclass(frozen=True)
class ProductListing:
    """The one filter a storefront listing applies."""

    kind: ListingKind
    product_type: ProductType | None = None
    keyword: str | None = None

    @property
    def search_pattern(self) -> str | None:
        """LIKE pattern for keyword listings."""
        if self.keyword is None:
            return None
        return keyword_pattern(self.keyword)


@dataclass
class ProductQuery:
    """Storefront listing query.

    Attributes:
        page: Requested page.
        limit: Requested page size.
        product_type: Optional product-type filter.
        keyword: Optional name keyword.
    """

    page: int = DEFAULT_PAGE
    limit: int = DEFAULT_PAGE_LIMIT
    product_type: str | None = None
    keyword: str | None = None
    pagination: PaginationParams = field(init=False)

    def __post_init__(self) -> None:
        self.pagination = PaginationParams(self.page, self.limit).normalized()

    def resolve_listing(self) -> ProductListing:
        """Pick the listing path.

        A product-type filter wins over a keyword, which wins over the
        default listing of all published products.

        Raises:
            InvalidProductTypeError: If the type filter is not a known kind.
        """
        if self.product_type:
            return ProductListing(
                kind=ListingKind.BY_TYPE,
                product_type=parse_product_type(self.product_type),
            )
        if self.keyword and self.keyword.strip():
            return ProductListing(kind=ListingKind.BY_KEYWORD, keyword=self.keyword.strip())
        return ProductListing(kind=ListingKind.ALL_PUBLISHED)


def keyword_pattern(keyword: str) -> str:
    """Build a substring LIKE pattern, escaping LIKE wildcards."""
    escaped = keyword.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"
