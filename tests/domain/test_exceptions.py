"""Tests for domain exceptions."""

import pytest

from app.domain.exceptions import (
    DomainError,
    EntityKind,
    EntityNotFoundError,
    NoMatchingProductsError,
    ProductAlreadyExistsError,
)


class TestEntityNotFoundError:
    """Tests for EntityNotFoundError."""

    @pytest.mark.parametrize(
        ("kind", "code"),
        [
            (EntityKind.USER, "USER_NOT_FOUND"),
            (EntityKind.PRODUCT, "PRODUCT_NOT_FOUND"),
            (EntityKind.SELLER, "SELLER_NOT_FOUND"),
        ],
    )
    def test_error_code_per_kind(self, kind: EntityKind, code: str) -> None:
        """Error code names the missing kind."""
        error = EntityNotFoundError(kind, "abc")
        assert error.error_code == code
        assert error.details == {"kind": kind.value, "id": "abc"}

    def test_accepts_kind_value(self) -> None:
        """Kind may be given by its string value."""
        error = EntityNotFoundError("Seller", "abc")
        assert error.kind is EntityKind.SELLER
        assert str(error) == "Seller not found: abc"


class TestOtherErrors:
    """Tests for conflict and empty-filter errors."""

    def test_already_exists_carries_conflicting_id(self) -> None:
        """The conflicting product id is exposed."""
        error = ProductAlreadyExistsError("p-1")
        assert error.conflicting_id == "p-1"
        assert error.error_code == "PRODUCT_ALREADY_EXISTS"
        assert isinstance(error, DomainError)

    def test_no_matching_products_defaults(self) -> None:
        """Details default to an empty dict."""
        error = NoMatchingProductsError()
        assert error.details == {}
        assert error.error_code == "NO_MATCHING_PRODUCTS"
