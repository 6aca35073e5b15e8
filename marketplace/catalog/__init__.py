"""Product Catalog & Inventory.

Entities, store bindings and the catalog service that mediates between
the relational store and the product cache.
"""

from marketplace.catalog.entities import (
    Category,
    PageResult,
    Product,
    ProductFilter,
    ProductStatus,
    ProductVariant,
    ProductWithVariants,
)
from marketplace.catalog.memory import (
    InMemoryCategoryRepository,
    InMemoryProductRepository,
    InMemoryVariantRepository,
    MemoryDatabase,
)
from marketplace.catalog.requests import (
    CreateCategoryRequest,
    CreateProductRequest,
    CreateVariantRequest,
    UpdateProductRequest,
    UpdateVariantRequest,
)
from marketplace.catalog.service import CatalogService, product_cache_key
from marketplace.catalog.store import InvalidQueryError, RecordNotFoundError, StoreError

__all__ = [
    # Entities
    "Category",
    "PageResult",
    "Product",
    "ProductFilter",
    "ProductStatus",
    "ProductVariant",
    "ProductWithVariants",
    # Requests
    "CreateCategoryRequest",
    "CreateProductRequest",
    "CreateVariantRequest",
    "UpdateProductRequest",
    "UpdateVariantRequest",
    # Stores
    "InMemoryCategoryRepository",
    "InMemoryProductRepository",
    "InMemoryVariantRepository",
    "InvalidQueryError",
    "MemoryDatabase",
    "RecordNotFoundError",
    "StoreError",
    # Service
    "CatalogService",
    "product_cache_key",
]
