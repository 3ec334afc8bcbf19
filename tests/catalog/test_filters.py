"""Tests for filter normalization and pagination types."""

import pytest

from app.catalog.filters import (
    MAX_OFFSET,
    PageRequest,
    PaginatedResult,
    ProductFilter,
    count_pages,
)
from app.domain.exceptions import InvalidPaginationError


class TestProductFilter:
    """Tests for ProductFilter."""

    def test_empty_sets_are_unconstrained(self) -> None:
        """Empty inputs collapse to None, not to 'match nothing'."""
        filters = ProductFilter.of(names=[], categories=set(), brands=None)
        assert filters.names is None
        assert filters.categories is None
        assert filters.brands is None
        assert filters.is_unconstrained
        assert filters.conditions() == []

    def test_non_empty_sets_are_kept(self) -> None:
        """Supplied values become frozensets."""
        filters = ProductFilter.of(names=[], categories=["Toys", "Home", "Toys"])
        assert filters.names is None
        assert filters.categories == frozenset({"Toys", "Home"})
        assert not filters.is_unconstrained

    def test_one_condition_per_constrained_field(self) -> None:
        """Each constrained field contributes one IN condition."""
        filters = ProductFilter.of(categories=["Toys"], brands=["Acme", "Globex"])
        assert len(filters.conditions()) == 2

    def test_to_dict_sorts_values(self) -> None:
        """Dictionary form is stable for logging."""
        filters = ProductFilter.of(brands=["b", "a"])
        assert filters.to_dict() == {"names": [], "categories": [], "brands": ["a", "b"]}


class TestPageRequest:
    """Tests for PageRequest."""

    def test_offset(self) -> None:
        """Offset is page index times size."""
        assert PageRequest(page=0, size=2).offset == 0
        assert PageRequest(page=3, size=2).offset == 6
        assert PageRequest(page=3, size=2).limit == 2

    def test_negative_page_rejected(self) -> None:
        """Page index must be non-negative."""
        with pytest.raises(InvalidPaginationError):
            PageRequest(page=-1, size=10)

    def test_zero_size_rejected(self) -> None:
        """Page size must be positive."""
        with pytest.raises(InvalidPaginationError) as exc_info:
            PageRequest(page=0, size=0)
        assert exc_info.value.error_code == "INVALID_PAGINATION"

    def test_offset_beyond_driver_range_rejected(self) -> None:
        """Offsets past a signed 64-bit integer are refused up front."""
        with pytest.raises(InvalidPaginationError) as exc_info:
            PageRequest(page=10**19, size=10)
        assert exc_info.value.details["reason"] == "offset out of range"

    def test_largest_offset_accepted(self) -> None:
        """The last reachable page is still a valid cursor."""
        page = PageRequest(page=MAX_OFFSET // 100, size=100)
        assert page.offset <= MAX_OFFSET


class TestPagination:
    """Tests for page counting and result mapping."""

    @pytest.mark.parametrize(
        ("total", "size", "expected"),
        [(0, 10, 0), (5, 2, 3), (4, 2, 2), (1, 10, 1), (10, 10, 1), (11, 10, 2)],
    )
    def test_count_pages(self, total: int, size: int, expected: int) -> None:
        """Total pages is ceil(total / size)."""
        assert count_pages(total, size) == expected

    def test_map_keeps_metadata(self) -> None:
        """Mapping items preserves totals and cursor."""
        result = PaginatedResult(items=[1, 2], total=5, page=0, size=2)
        mapped = result.map(str)
        assert mapped.items == ["1", "2"]
        assert mapped.total == 5
        assert mapped.total_pages == 3
        assert not mapped.is_empty
