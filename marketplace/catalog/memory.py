"""In-memory catalog repositories.

Same contracts as the SQLAlchemy repositories, backed by dictionaries.
Used by the test suite and by ``STORAGE_BACKEND=memory`` for local runs.
Entities are copied on the way in and out so callers never hold a
reference to stored state.
"""

from dataclasses import dataclass, field
from typing import Any
from uuid import UUID

from marketplace.catalog.entities import (
    Category,
    Product,
    ProductFilter,
    ProductVariant,
    utcnow,
)
from marketplace.catalog.store import InvalidQueryError, RecordNotFoundError


@dataclass
class MemoryDatabase:
    """Tables shared by the in-memory repositories."""

    categories: dict[UUID, Category] = field(default_factory=dict)
    products: dict[UUID, Product] = field(default_factory=dict)
    variants: dict[UUID, ProductVariant] = field(default_factory=dict)


def _sort_key(value: Any) -> Any:
    return getattr(value, "value", value)


def _page(items: list, filters: ProductFilter) -> list:
    if not filters.paginated:
        return items
    return items[filters.offset : filters.offset + filters.limit]


class InMemoryProductRepository:
    """In-memory repository for products."""

    def __init__(self, db: MemoryDatabase) -> None:
        self.db = db

    async def create(self, product: Product) -> Product:
        stored = product.model_copy(deep=True)
        self.db.products[stored.id] = stored
        return stored.model_copy(deep=True)

    async def get_by_id(self, product_id: UUID) -> Product:
        product = self.db.products.get(product_id)
        if product is None:
            raise RecordNotFoundError("products", product_id)
        return product.model_copy(deep=True)

    async def get_by_sku(self, sku: str) -> Product:
        for product in self.db.products.values():
            if product.sku == sku:
                return product.model_copy(deep=True)
        raise RecordNotFoundError("products", sku)

    async def update(self, product: Product) -> Product:
        if product.id not in self.db.products:
            raise RecordNotFoundError("products", product.id)
        stored = product.model_copy(deep=True, update={"updated_at": utcnow()})
        self.db.products[stored.id] = stored
        return stored.model_copy(deep=True)

    async def delete(self, product_id: UUID) -> None:
        """Delete a product and, like the ON DELETE CASCADE, its variants."""
        if self.db.products.pop(product_id, None) is None:
            return
        for variant_id in [v.id for v in self.db.variants.values() if v.product_id == product_id]:
            del self.db.variants[variant_id]

    async def find_all(self, filters: ProductFilter) -> tuple[list[Product], int]:
        """List products with filtering, sorting and pagination."""
        return self._select(list(self.db.products.values()), filters)

    async def search(self, query: str, filters: ProductFilter) -> tuple[list[Product], int]:
        """Case-insensitive substring match on name or description."""
        needle = query.lower()
        matches = [
            p
            for p in self.db.products.values()
            if needle in p.name.lower() or needle in p.description.lower()
        ]
        return self._select(matches, filters)

    def _select(self, products: list[Product], filters: ProductFilter) -> tuple[list[Product], int]:
        if filters.category_id is not None:
            products = [p for p in products if p.category_id == filters.category_id]
        if filters.status:
            products = [p for p in products if p.status.value == filters.status]

        total = len(products)

        if filters.sort_by:
            if filters.sort_by not in Product.model_fields:
                raise InvalidQueryError(f"cannot sort products by {filters.sort_by!r}")
            products = sorted(
                products,
                key=lambda p: _sort_key(getattr(p, filters.sort_by)),
                reverse=filters.descending,
            )

        return [p.model_copy(deep=True) for p in _page(products, filters)], total


class InMemoryVariantRepository:
    """In-memory repository for product variants."""

    def __init__(self, db: MemoryDatabase) -> None:
        self.db = db

    async def create(self, variant: ProductVariant) -> ProductVariant:
        stored = variant.model_copy(deep=True)
        self.db.variants[stored.id] = stored
        return stored.model_copy(deep=True)

    async def get_by_id(self, variant_id: UUID) -> ProductVariant:
        variant = self.db.variants.get(variant_id)
        if variant is None:
            raise RecordNotFoundError("product_variants", variant_id)
        return variant.model_copy(deep=True)

    async def get_by_product_id(self, product_id: UUID) -> list[ProductVariant]:
        return [
            v.model_copy(deep=True)
            for v in self.db.variants.values()
            if v.product_id == product_id
        ]

    async def get_by_seller_id(
        self,
        seller_id: UUID,
        filters: ProductFilter,
    ) -> tuple[list[ProductVariant], int]:
        """Variants for a seller filtered by price range and stock; never sorted."""
        variants = [v for v in self.db.variants.values() if v.seller_id == seller_id]
        if filters.min_price is not None:
            variants = [v for v in variants if v.price >= filters.min_price]
        if filters.max_price is not None:
            variants = [v for v in variants if v.price <= filters.max_price]
        if filters.in_stock:
            variants = [v for v in variants if v.stock > 0]

        total = len(variants)
        return [v.model_copy(deep=True) for v in _page(variants, filters)], total

    async def update(self, variant: ProductVariant) -> ProductVariant:
        if variant.id not in self.db.variants:
            raise RecordNotFoundError("product_variants", variant.id)
        stored = variant.model_copy(deep=True, update={"updated_at": utcnow()})
        self.db.variants[stored.id] = stored
        return stored.model_copy(deep=True)

    async def delete(self, variant_id: UUID) -> None:
        self.db.variants.pop(variant_id, None)

    async def update_stock(self, variant_id: UUID, quantity: int) -> None:
        """Add ``quantity`` to stock without yielding to the event loop."""
        variant = self.db.variants.get(variant_id)
        if variant is None:
            return
        self.db.variants[variant_id] = variant.model_copy(
            update={"stock": variant.stock + quantity, "updated_at": utcnow()}
        )


class InMemoryCategoryRepository:
    """In-memory repository for categories."""

    def __init__(self, db: MemoryDatabase) -> None:
        self.db = db

    async def create(self, category: Category) -> Category:
        self.db.categories[category.id] = category.model_copy(deep=True)
        return category.model_copy(deep=True)

    async def get_by_id(self, category_id: UUID) -> Category:
        category = self.db.categories.get(category_id)
        if category is None:
            raise RecordNotFoundError("categories", category_id)
        return category.model_copy(deep=True)

    async def find_all(self) -> list[Category]:
        active = [c for c in self.db.categories.values() if c.is_active]
        return [c.model_copy(deep=True) for c in sorted(active, key=lambda c: c.name)]


# Global database instance
_memory_db: MemoryDatabase | None = None


def get_memory_database() -> MemoryDatabase:
    """Get in-memory database singleton."""
    global _memory_db
    if _memory_db is None:
        _memory_db = MemoryDatabase()
    return _memory_db


def reset_memory_database() -> None:
    """Reset in-memory database (for testing)."""
    global _memory_db
    _memory_db = MemoryDatabase()
