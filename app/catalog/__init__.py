"""Product Catalog Service.

Provides product visibility, filtering and consistency-checked
mutations over the product/seller/user model.
"""

from app.catalog.filters import PageRequest, PaginatedResult, ProductFilter
from app.catalog.guard import ConsistencyGuard, ProductChanges
from app.catalog.models import Product, Seller, User
from app.catalog.repository import ProductRepository, SellerRepository, UserRepository
from app.catalog.service import ProductDTO, ProductService, SellerDTO

__all__ = [
    # Models
    "Product",
    "Seller",
    "User",
    # Repository
    "ProductRepository",
    "SellerRepository",
    "UserRepository",
    # Filters
    "PageRequest",
    "PaginatedResult",
    "ProductFilter",
    # Guard
    "ConsistencyGuard",
    "ProductChanges",
    # Service
    "ProductDTO",
    "ProductService",
    "SellerDTO",
]
