"""Tests for the listing query engine."""

import pytest

from shopcatalog.catalog.query import (
    ListingKind,
    PaginatedResult,
    PaginationParams,
    ProductQuery,
    keyword_pattern,
)
from shopcatalog.catalog.variants import ProductType
from shopcatalog.domain.exceptions import InvalidProductTypeError


class TestPaginationParams:
    """Tests for page/limit normalization."""

    def test_offset(self) -> None:
        """Offset skips the earlier pages."""
        assert PaginationParams(page=3, limit=10).offset == 20
        assert PaginationParams(page=1, limit=5).offset == 0

    @pytest.mark.parametrize(
        ("page", "limit", "expected"),
        [
            (0, 0, (1, 10)),
            (-2, 5, (1, 5)),
            (4, -1, (4, 10)),
            (2, 25, (2, 25)),
        ],
    )
    def test_normalized(self, page: int, limit: int, expected: tuple[int, int]) -> None:
        """Out-of-range values fall back to the defaults."""
        normalized = PaginationParams(page=page, limit=limit).normalized()
        assert (normalized.page, normalized.limit) == expected


class TestPaginatedResult:
    """Tests for page counting."""

    @pytest.mark.parametrize(
        ("total", "limit", "pages"),
        [(0, 10, 0), (1, 10, 1), (10, 10, 1), (11, 10, 2), (25, 5, 5)],
    )
    def test_total_pages(self, total: int, limit: int, pages: int) -> None:
        """Total pages is total over limit, rounded up."""
        result: PaginatedResult[str] = PaginatedResult(items=[], total=total, page=1, limit=limit)
        assert result.total_pages == pages

    def test_navigation(self) -> None:
        """Middle pages have neighbours on both sides."""
        result: PaginatedResult[str] = PaginatedResult(items=[], total=30, page=2, limit=10)
        assert result.has_next
        assert result.has_prev

        last: PaginatedResult[str] = PaginatedResult(items=[], total=30, page=3, limit=10)
        assert not last.has_next


class TestProductQuery:
    """Tests for listing resolution."""

    def test_pagination_is_normalized(self) -> None:
        """The query carries normalized pagination."""
        query = ProductQuery(page=0, limit=0)
        assert query.pagination == PaginationParams(page=1, limit=10)

    def test_default_listing(self) -> None:
        """No filter lists all published products."""
        listing = ProductQuery().resolve_listing()
        assert listing.kind is ListingKind.ALL_PUBLISHED
        assert listing.product_type is None
        assert listing.search_pattern is None

    def test_type_listing(self) -> None:
        """A type filter resolves to its kind."""
        listing = ProductQuery(product_type="Bonsai").resolve_listing()
        assert listing.kind is ListingKind.BY_TYPE
        assert listing.product_type is ProductType.BONSAI

    def test_type_wins_over_keyword(self) -> None:
        """The keyword is ignored when a type is given."""
        listing = ProductQuery(product_type="Mushroom", keyword="carrot").resolve_listing()
        assert listing.kind is ListingKind.BY_TYPE
        assert listing.keyword is None

    def test_keyword_listing(self) -> None:
        """A keyword alone resolves to a name search."""
        listing = ProductQuery(keyword="  shii ").resolve_listing()
        assert listing.kind is ListingKind.BY_KEYWORD
        assert listing.keyword == "shii"
        assert listing.search_pattern == "%shii%"

    def test_blank_keyword_is_ignored(self) -> None:
        """Whitespace is not a keyword."""
        assert ProductQuery(keyword="   ").resolve_listing().kind is ListingKind.ALL_PUBLISHED

    def test_unknown_type(self) -> None:
        """Unknown type filters are rejected."""
        with pytest.raises(InvalidProductTypeError):
            ProductQuery(product_type="Orchid").resolve_listing()


class TestKeywordPattern:
    """Tests for LIKE pattern escaping."""

    def test_plain_keyword(self) -> None:
        """Plain keywords match as substrings."""
        assert keyword_pattern("oyster") == "%oyster%"

    def test_wildcards_are_escaped(self) -> None:
        """LIKE wildcards in the keyword match literally."""
        assert keyword_pattern("50%_off") == "%50\\%\\_off%"

    def test_backslash_is_escaped(self) -> None:
        """The escape character itself is escaped first."""
        assert keyword_pattern("a\\b") == "%a\\\\b%"
