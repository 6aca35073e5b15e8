"""API schemas for the catalog API.

Pydantic models for request/response validation and serialization that
are specific to the HTTP boundary. Entities and write requests are
reused from ``marketplace.catalog`` as-is.
"""

from uuid import UUID

from pydantic import BaseModel, Field

from marketplace.catalog.entities import PageResult, ProductVariant, ProductWithVariants


# ============================================================================
# Common Schemas
# ============================================================================


class ErrorDetail(BaseModel):
    """Detailed error information."""

    field: str | None = Field(default=None, description="Field that caused the error")
    message: str = Field(..., description="Error message")


class ErrorResponse(BaseModel):
    """Standard error response.

    All API errors follow this format for consistency.
    """

    error_code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error message")
    details: list[ErrorDetail] | dict = Field(
        default_factory=list, description="Additional error details"
    )
    request_id: str | None = Field(
        default=None, description="Request ID for correlation"
    )


class PaginatedResponse(BaseModel):
    """Base paginated response."""

    total: int = Field(..., description="Total number of items")
    page: int = Field(..., description="Current page number")
    limit: int = Field(..., description="Items per page")
    total_pages: int = Field(..., description="Number of pages")
    has_next: bool = Field(..., description="Whether a later page exists")
    has_prev: bool = Field(..., description="Whether an earlier page exists")


def page_metadata(result: PageResult) -> dict[str, int | bool]:
    """Derive page counters from a service page result."""
    total_pages = (result.total + result.limit - 1) // result.limit if result.limit > 0 else 0
    return {
        "total": result.total,
        "page": result.page,
        "limit": result.limit,
        "total_pages": total_pages,
        "has_next": result.page < total_pages,
        "has_prev": result.page > 1,
    }


# ============================================================================
# Product Schemas
# ============================================================================


class ProductListResponse(PaginatedResponse):
    """Paginated list of products with their variants."""

    items: list[ProductWithVariants] = Field(..., description="Products on this page")


class VariantListResponse(PaginatedResponse):
    """Paginated list of variants."""

    items: list[ProductVariant] = Field(..., description="Variants on this page")


# ============================================================================
# Inventory Schemas
# ============================================================================


class StockUpdateRequest(BaseModel):
    """Stock adjustment. Negative quantities decrement."""

    quantity: int = Field(..., description="Units to add (negative to remove)")


class StockCheckResponse(BaseModel):
    """Result of a stock availability check."""

    variant_id: UUID
    quantity: int
    available: bool
