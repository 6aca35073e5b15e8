"""Catalog request models.

Update requests are sparse patches: a field that was not sent is absent
from ``model_fields_set`` and is left untouched, while a field sent as
``null`` is present and explicitly clears the value where that is allowed.
"""

from decimal import Decimal
from typing import Any, ClassVar
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, model_validator

from marketplace.catalog.entities import ProductStatus


class CreateProductRequest(BaseModel):
    """Fields accepted when creating a product.

    ``status`` is accepted for compatibility but ignored: new products
    always start active.
    """

    model_config = ConfigDict(extra="ignore")

    name: str = Field(..., min_length=3, max_length=255)
    description: str = Field(default="", max_length=5000)
    category_id: UUID
    brand: str = Field(default="", max_length=100)
    sku: str = Field(..., min_length=1, max_length=100)
    images: list[str] = Field(default_factory=list)
    status: ProductStatus | None = None


class SparsePatch(BaseModel):
    """Base for partial updates."""

    model_config = ConfigDict(extra="ignore")

    # Fields that may legitimately be cleared with an explicit null.
    nullable_fields: ClassVar[frozenset[str]] = frozenset()

    @model_validator(mode="after")
    def reject_null_for_required(self) -> "SparsePatch":
        for name in self.model_fields_set:
            if name not in self.nullable_fields and getattr(self, name) is None:
                raise ValueError(f"{name} may not be null")
        return self

    def changes(self) -> dict[str, Any]:
        """Fields present in the request, with their new values."""
        return {name: getattr(self, name) for name in self.model_fields_set}


class UpdateProductRequest(SparsePatch):
    """Partial product update."""

    name: str | None = Field(default=None, min_length=3, max_length=255)
    description: str | None = Field(default=None, max_length=5000)
    category_id: UUID | None = None
    brand: str | None = Field(default=None, max_length=100)
    images: list[str] | None = None
    status: ProductStatus | None = None


class CreateVariantRequest(BaseModel):
    """Fields accepted when adding a variant to a product."""

    model_config = ConfigDict(extra="ignore")

    product_id: UUID
    seller_id: UUID
    price: Decimal = Field(..., gt=0, max_digits=12, decimal_places=2)
    discount_price: Decimal | None = Field(default=None, gt=0, max_digits=12, decimal_places=2)
    stock: int = Field(default=0, ge=0)
    attributes: dict[str, Any] = Field(default_factory=dict)


class UpdateVariantRequest(SparsePatch):
    """Partial variant update. ``discount_price: null`` removes the discount."""

    nullable_fields: ClassVar[frozenset[str]] = frozenset({"discount_price"})

    price: Decimal | None = Field(default=None, gt=0, max_digits=12, decimal_places=2)
    discount_price: Decimal | None = Field(default=None, gt=0, max_digits=12, decimal_places=2)
    stock: int | None = Field(default=None, ge=0)
    attributes: dict[str, Any] | None = None
    is_active: bool | None = None


class CreateCategoryRequest(BaseModel):
    """Fields accepted when creating a category."""

    model_config = ConfigDict(extra="ignore")

    name: str = Field(..., min_length=1, max_length=255)
    parent_id: UUID | None = None
    is_active: bool = True
