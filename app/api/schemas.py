"""API schemas for the catalog API.

Pydantic models for request/response validation and serialization.
"""

from pydantic import BaseModel, Field


# ============================================================================
# Common Schemas
# ============================================================================


class ErrorResponse(BaseModel):
    """Standard error response.

    All API errors follow this format for consistency.
    """

    error_code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error message")
    details: dict | list = Field(
        default_factory=dict, description="Additional error details"
    )
    request_id: str | None = Field(
        default=None, description="Request ID for correlation"
    )


class PaginatedResponse(BaseModel):
    """Base paginated response."""

    total_pages: int = Field(..., ge=0, description="Total number of pages")
    total: int = Field(..., ge=0, description="Total number of matching items")
    page: int = Field(..., ge=0, description="Current page index (0-based)")
    size: int = Field(..., ge=1, description="Items per page")


# ============================================================================
# Product Schemas
# ============================================================================


class ProductResponse(BaseModel):
    """Product representation."""

    id: str = Field(..., description="Unique product identifier")
    name: str = Field(..., description="Product name")
    brand: str = Field(..., description="Brand name")
    category: str = Field(..., description="Product category")
    image_url: str | None = Field(default=None, description="Product image URL")


class ProductsListResponse(PaginatedResponse):
    """Paginated list of products."""

    items: list[ProductResponse] = Field(..., description="Products on this page")


class ProductCreateRequest(BaseModel):
    """Request to create a product."""

    name: str = Field(..., min_length=1, max_length=255, description="Product name")
    brand: str = Field(..., min_length=1, max_length=100, description="Brand name")
    category: str = Field(..., min_length=1, max_length=100, description="Product category")
    image_url: str | None = Field(default=None, max_length=1000, description="Product image URL")


class ProductUpdateRequest(BaseModel):
    """Partial product update.

    Omitted, empty or whitespace-only fields keep their stored value.
    """

    name: str | None = Field(default=None, max_length=255, description="New product name")
    brand: str | None = Field(default=None, max_length=100, description="New brand name")
    category: str | None = Field(default=None, max_length=100, description="New category")
    image_url: str | None = Field(default=None, max_length=1000, description="New image URL")


class ProductFilterRequest(BaseModel):
    """Filter for product browsing.

    An empty list leaves that field unconstrained. Values within a list
    are alternatives; lists combine with AND.
    """

    names: list[str] = Field(default_factory=list, description="Accepted product names")
    categories: list[str] = Field(default_factory=list, description="Accepted categories")
    brands: list[str] = Field(default_factory=list, description="Accepted brands")


# ============================================================================
# Seller Schemas
# ============================================================================


class SellerResponse(BaseModel):
    """Seller representation."""

    id: str = Field(..., description="Unique seller identifier")
    name: str = Field(..., description="Seller name")


class SellersListResponse(PaginatedResponse):
    """Paginated list of sellers."""

    items: list[SellerResponse] = Field(..., description="Sellers on this page")
