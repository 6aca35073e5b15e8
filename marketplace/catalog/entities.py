"""Catalog entities.

Plain pydantic models that travel between the store, the cache and the
HTTP layer. They carry no persistence behaviour of their own; the ORM
rows in ``marketplace.catalog.models`` are converted into these at the
repository boundary.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Any, Generic, TypeVar
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T")


def utcnow() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


class ProductStatus(str, Enum):
    """Product lifecycle status."""

    ACTIVE = "active"
    INACTIVE = "inactive"


class Category(BaseModel):
    """Node of the category tree.

    Attributes:
        id: Category identifier.
        name: Display name.
        parent_id: Parent category, None for roots.
        is_active: Whether the category is listed.
    """

    model_config = ConfigDict(from_attributes=True)

    id: UUID = Field(default_factory=uuid4)
    name: str
    parent_id: UUID | None = None
    is_active: bool = True
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)


class Product(BaseModel):
    """Catalog product.

    The SKU is the immutable business key; uniqueness is checked by the
    catalog service before insert.

    Attributes:
        id: Product identifier.
        name: Product name.
        description: Long description.
        category_id: Owning category.
        brand: Brand name.
        sku: Stock Keeping Unit.
        status: "active" or "inactive".
        images: Ordered image references.
    """

    model_config = ConfigDict(from_attributes=True)

    id: UUID = Field(default_factory=uuid4)
    name: str
    description: str = ""
    category_id: UUID
    brand: str = ""
    sku: str
    status: ProductStatus = ProductStatus.ACTIVE
    images: list[str] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)


class ProductVariant(BaseModel):
    """Seller-specific sellable unit of a product.

    Attributes:
        id: Variant identifier.
        product_id: Parent product.
        seller_id: Seller offering this variant.
        price: Regular price, strictly positive.
        discount_price: Optional sale price, strictly below ``price``.
        stock: Units on hand.
        attributes: Free-form attributes (color, size, ...).
        is_active: Whether the variant is sellable.
    """

    model_config = ConfigDict(from_attributes=True)

    id: UUID = Field(default_factory=uuid4)
    product_id: UUID
    seller_id: UUID
    price: Decimal
    discount_price: Decimal | None = None
    stock: int = 0
    attributes: dict[str, Any] = Field(default_factory=dict)
    is_active: bool = True
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)


class ProductWithVariants(BaseModel):
    """Read-only projection of a product and its variants.

    Built by the catalog service and cached; never persisted.
    """

    product: Product
    variants: list[ProductVariant] = Field(default_factory=list)


@dataclass
class ProductFilter:
    """Query descriptor for product and variant listings.

    Attributes:
        category_id: Filter by category.
        seller_id: Filter by seller (variant listings).
        min_price: Minimum variant price (variant listings).
        max_price: Maximum variant price (variant listings).
        in_stock: Only variants with stock on hand (variant listings).
        status: Filter by product status.
        page: Page number (1-indexed).
        limit: Items per page.
        sort_by: Column name to sort on; empty for store order.
        sort_order: "asc" or "desc".
    """

    category_id: UUID | None = None
    seller_id: UUID | None = None
    min_price: Decimal | None = None
    max_price: Decimal | None = None
    in_stock: bool | None = None
    status: str | None = None
    page: int = 1
    limit: int = 20
    sort_by: str = ""
    sort_order: str = "asc"

    @property
    def offset(self) -> int:
        """Calculate offset from page number."""
        return (self.page - 1) * self.limit

    @property
    def paginated(self) -> bool:
        """Whether the store should apply offset/limit."""
        return self.page > 0 and self.limit > 0

    @property
    def descending(self) -> bool:
        """Whether sorting is descending."""
        return self.sort_order == "desc"


@dataclass
class PageResult(Generic[T]):
    """One page of a listing plus the unpaginated total.

    Attributes:
        items: Items on this page.
        total: Count of the full filtered set.
        page: Requested page.
        limit: Requested page size.
    """

    items: list[T]
    total: int
    page: int
    limit: int
