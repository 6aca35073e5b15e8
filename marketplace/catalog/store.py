"""Store contracts for the catalog.

The catalog service depends only on these protocols. Two bindings exist:
SQLAlchemy repositories (``marketplace.catalog.repository``) and
in-memory repositories (``marketplace.catalog.memory``).
"""

from typing import Protocol
from uuid import UUID

from marketplace.catalog.entities import Category, Product, ProductFilter, ProductVariant


class StoreError(Exception):
    """Any failure raised by a store binding."""


class RecordNotFoundError(StoreError):
    """No row matched a point lookup."""

    def __init__(self, table: str, key: object) -> None:
        super().__init__(f"no {table} row for {key}")
        self.table = table
        self.key = key


class InvalidQueryError(StoreError):
    """The binding could not express the requested query (e.g. unknown sort column)."""


class DuplicateRecordError(StoreError):
    """An insert collided with a unique constraint."""

    def __init__(self, table: str, constraint: str) -> None:
        super().__init__(f"duplicate {table} row violates {constraint}")
        self.table = table
        self.constraint = constraint


class ProductStore(Protocol):
    """Persistence for products."""

    async def create(self, product: Product) -> Product: ...

    async def get_by_id(self, product_id: UUID) -> Product: ...

    async def get_by_sku(self, sku: str) -> Product: ...

    async def update(self, product: Product) -> Product: ...

    async def delete(self, product_id: UUID) -> None: ...

    async def find_all(self, filters: ProductFilter) -> tuple[list[Product], int]: ...

    async def search(self, query: str, filters: ProductFilter) -> tuple[list[Product], int]: ...


class VariantStore(Protocol):
    """Persistence for product variants."""

    async def create(self, variant: ProductVariant) -> ProductVariant: ...

    async def get_by_id(self, variant_id: UUID) -> ProductVariant: ...

    async def get_by_product_id(self, product_id: UUID) -> list[ProductVariant]: ...

    async def get_by_seller_id(
        self, seller_id: UUID, filters: ProductFilter
    ) -> tuple[list[ProductVariant], int]: ...

    async def update(self, variant: ProductVariant) -> ProductVariant: ...

    async def delete(self, variant_id: UUID) -> None: ...

    async def update_stock(self, variant_id: UUID, quantity: int) -> None: ...


class CategoryStore(Protocol):
    """Persistence for categories."""

    async def create(self, category: Category) -> Category: ...

    async def get_by_id(self, category_id: UUID) -> Category: ...

    async def find_all(self) -> list[Category]: ...

