"""Product API endpoints.

Provides endpoints for browsing and managing the catalog:
- GET /products - all products (paginated)
- GET /products/available/{user_id} - products visible to a user
- POST /products/filter - filter all products
- POST /products/filter/{user_id} - filter products visible to a user
- POST /products - create a product
- GET /products/{id} - product details
- PATCH /products/{id} - partial update
- DELETE /products/{id} - delete with association cleanup
- GET /products/{id}/sellers - sellers listing a product
- GET /sellers/{id}/products - products listed by a seller
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.schemas import (
    ErrorResponse,
    ProductCreateRequest,
    ProductFilterRequest,
    ProductResponse,
    ProductsListResponse,
    ProductUpdateRequest,
    SellerResponse,
    SellersListResponse,
)
from app.catalog.filters import MAX_OFFSET, PageRequest, PaginatedResult, ProductFilter
from app.catalog.guard import ProductChanges
from app.catalog.service import ProductDTO, ProductService, SellerDTO, get_product_service
from app.infrastructure.config import settings
from app.infrastructure.database import get_session

router = APIRouter(prefix="/products", tags=["Products"])
sellers_router = APIRouter(prefix="/sellers", tags=["Sellers"])


# ============================================================================
# Dependencies
# ============================================================================


def get_service(session: Annotated[AsyncSession, Depends(get_session)]) -> ProductService:
    """Get product service bound to the request session."""
    return get_product_service(session)


def get_page(
    page: int = Query(
        default=0,
        ge=0,
        le=MAX_OFFSET // settings.max_page_size,
        description="Page index (0-based)",
    ),
    size: int = Query(
        default=settings.default_page_size,
        ge=1,
        le=settings.max_page_size,
        description="Items per page",
    ),
) -> PageRequest:
    """Get page cursor from query parameters."""
    return PageRequest(page=page, size=size)


ServiceDep = Annotated[ProductService, Depends(get_service)]
PageDep = Annotated[PageRequest, Depends(get_page)]

NOT_FOUND = {404: {"model": ErrorResponse}}


# ============================================================================
# Converters
# ============================================================================


def product_to_response(product: ProductDTO) -> ProductResponse:
    """Convert ProductDTO to ProductResponse."""
    return ProductResponse(
        id=product.id,
        name=product.name,
        brand=product.brand,
        category=product.category,
        image_url=product.image_url,
    )


def products_to_response(result: PaginatedResult[ProductDTO]) -> ProductsListResponse:
    """Convert a page of ProductDTOs to ProductsListResponse."""
    return ProductsListResponse(
        items=[product_to_response(p) for p in result.items],
        total_pages=result.total_pages,
        total=result.total,
        page=result.page,
        size=result.size,
    )


def sellers_to_response(result: PaginatedResult[SellerDTO]) -> SellersListResponse:
    """Convert a page of SellerDTOs to SellersListResponse."""
    return SellersListResponse(
        items=[SellerResponse(id=s.id, name=s.name) for s in result.items],
        total_pages=result.total_pages,
        total=result.total,
        page=result.page,
        size=result.size,
    )


def to_filter(request: ProductFilterRequest) -> ProductFilter:
    """Convert a filter request body to a normalized ProductFilter."""
    return ProductFilter.of(
        names=request.names,
        categories=request.categories,
        brands=request.brands,
    )


# ============================================================================
# Listing Endpoints
# ============================================================================


@router.get(
    "",
    response_model=ProductsListResponse,
    summary="List products",
    description="Get a paginated list of every product in the catalog.",
)
async def list_products(service: ServiceDep, page: PageDep) -> ProductsListResponse:
    """List all products."""
    return products_to_response(await service.get_all(page))


@router.get(
    "/available/{user_id}",
    response_model=ProductsListResponse,
    responses=NOT_FOUND,
    summary="List products available to a user",
    description=(
        "Get products listed by at least one seller the user has not blacklisted. "
        "Products without sellers are not included."
    ),
)
async def list_available_products(
    user_id: str,
    service: ServiceDep,
    page: PageDep,
) -> ProductsListResponse:
    """List products visible to a user.

    Args:
        user_id: User identifier.
        service: Product service.
        page: Page cursor.

    Returns:
        Paginated list of products.
    """
    return products_to_response(await service.get_available_for_user(user_id, page))


@router.post(
    "/filter",
    response_model=ProductsListResponse,
    responses=NOT_FOUND,
    summary="Filter products",
    description="Filter all products by names, categories and brands.",
)
async def filter_products(
    request: ProductFilterRequest,
    service: ServiceDep,
    page: PageDep,
) -> ProductsListResponse:
    """Filter the whole catalog.

    Returns 404 with NO_MATCHING_PRODUCTS when the requested page is empty.
    """
    return products_to_response(await service.filter_global(to_filter(request), page))


@router.post(
    "/filter/{user_id}",
    response_model=ProductsListResponse,
    responses=NOT_FOUND,
    summary="Filter products available to a user",
    description="Filter the products a user can see by names, categories and brands.",
)
async def filter_available_products(
    user_id: str,
    request: ProductFilterRequest,
    service: ServiceDep,
    page: PageDep,
) -> ProductsListResponse:
    """Filter products visible to a user."""
    result = await service.filter_for_user(user_id, to_filter(request), page)
    return products_to_response(result)


# ============================================================================
# Product Endpoints
# ============================================================================


@router.post(
    "",
    response_model=ProductResponse,
    status_code=status.HTTP_201_CREATED,
    responses={409: {"model": ErrorResponse}},
    summary="Create product",
    description="Create a product. Name, brand and category must be unique together.",
)
async def create_product(
    request: ProductCreateRequest,
    service: ServiceDep,
) -> ProductResponse:
    """Create a product.

    Args:
        request: Product fields.
        service: Product service.

    Returns:
        Created product.
    """
    product = await service.create(
        name=request.name,
        brand=request.brand,
        category=request.category,
        image_url=request.image_url,
    )
    return product_to_response(product)


@router.get(
    "/{product_id}",
    response_model=ProductResponse,
    responses=NOT_FOUND,
    summary="Get product",
)
async def get_product(product_id: str, service: ServiceDep) -> ProductResponse:
    """Get a product by ID."""
    return product_to_response(await service.get_by_id(product_id))


@router.patch(
    "/{product_id}",
    response_model=ProductResponse,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
    summary="Update product",
    description="Overwrite the supplied, non-blank fields of a product.",
)
async def update_product(
    product_id: str,
    request: ProductUpdateRequest,
    service: ServiceDep,
) -> ProductResponse:
    """Partially update a product."""
    changes = ProductChanges(
        name=request.name,
        brand=request.brand,
        category=request.category,
        image_url=request.image_url,
    )
    return product_to_response(await service.update(product_id, changes))


@router.delete(
    "/{product_id}",
    response_model=ProductResponse,
    responses=NOT_FOUND,
    summary="Delete product",
    description="Delete a product and remove it from every seller and favorites list.",
)
async def delete_product(product_id: str, service: ServiceDep) -> ProductResponse:
    """Delete a product, returning its last state."""
    return product_to_response(await service.delete_by_id(product_id))


@router.get(
    "/{product_id}/sellers",
    response_model=SellersListResponse,
    responses=NOT_FOUND,
    summary="List sellers of a product",
)
async def list_product_sellers(
    product_id: str,
    service: ServiceDep,
    page: PageDep,
) -> SellersListResponse:
    """List sellers that list a product."""
    return sellers_to_response(await service.get_sellers_by_product_id(product_id, page))


# ============================================================================
# Seller Endpoints
# ============================================================================


@sellers_router.get(
    "/{seller_id}/products",
    response_model=ProductsListResponse,
    responses=NOT_FOUND,
    summary="List products of a seller",
)
async def list_seller_products(
    seller_id: str,
    service: ServiceDep,
    page: PageDep,
) -> ProductsListResponse:
    """List products a seller lists."""
    return products_to_response(await service.get_products_by_seller_id(seller_id, page))
