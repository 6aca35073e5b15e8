"""Product and variant API endpoints.

Provides endpoints for the product catalog:
- POST /products - create product
- GET /products - list products (paginated, filtered)
- GET /products/search - search products by name or description
- GET /products/{id} - product with its variants
- PUT /products/{id} - partial product update
- DELETE /products/{id} - delete product
- GET /products/{id}/variants - variants of a product
- POST /products/variants - add variant
- PUT /products/variants/{id} - partial variant update
- DELETE /products/variants/{id} - delete variant
- PATCH /products/variants/{id}/stock - adjust stock
- GET /products/variants/{id}/stock - check availability
"""

from decimal import Decimal
from typing import Annotated, Literal
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from marketplace.api.dependencies import get_catalog_service
from marketplace.api.schemas import (
    ErrorResponse,
    ProductListResponse,
    StockCheckResponse,
    StockUpdateRequest,
    page_metadata,
)
from marketplace.catalog.entities import (
    Product,
    ProductFilter,
    ProductVariant,
    ProductWithVariants,
)
from marketplace.catalog.requests import (
    CreateProductRequest,
    CreateVariantRequest,
    UpdateProductRequest,
    UpdateVariantRequest,
)
from marketplace.catalog.service import CatalogService
from marketplace.infrastructure.config import settings

router = APIRouter(prefix="/products", tags=["Products"])

Service = Annotated[CatalogService, Depends(get_catalog_service)]


# ============================================================================
# Dependencies
# ============================================================================


def product_filter(
    category_id: UUID | None = None,
    seller_id: UUID | None = None,
    min_price: Decimal | None = None,
    max_price: Decimal | None = None,
    in_stock: bool | None = None,
    status: str | None = None,
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=settings.default_page_size, ge=1, le=settings.max_page_size),
    sort_by: str = "",
    sort_order: Literal["asc", "desc"] = "asc",
) -> ProductFilter:
    """Parse listing query parameters."""
    return ProductFilter(
        category_id=category_id,
        seller_id=seller_id,
        min_price=min_price,
        max_price=max_price,
        in_stock=in_stock,
        status=status,
        page=page,
        limit=limit,
        sort_by=sort_by,
        sort_order=sort_order,
    )


Filters = Annotated[ProductFilter, Depends(product_filter)]


# ============================================================================
# Product Endpoints
# ============================================================================


@router.post(
    "",
    response_model=Product,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
    },
)
async def create_product(body: CreateProductRequest, service: Service) -> Product:
    """Create a product."""
    return await service.create_product(body)


@router.get("", response_model=ProductListResponse)
async def list_products(filters: Filters, service: Service) -> ProductListResponse:
    """List products filtered by category and status."""
    result = await service.list_products(filters)
    return ProductListResponse(items=result.items, **page_metadata(result))


@router.get(
    "/search",
    response_model=ProductListResponse,
    responses={400: {"model": ErrorResponse}},
)
async def search_products(
    filters: Filters,
    service: Service,
    q: str = "",
) -> ProductListResponse:
    """Search products by name or description."""
    if not q.strip():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={
                "error_code": "VALIDATION_ERROR",
                "message": "Search query is required",
            },
        )
    result = await service.search_products(q, filters)
    return ProductListResponse(items=result.items, **page_metadata(result))


# ============================================================================
# Variant Endpoints
# ============================================================================


@router.post(
    "/variants",
    response_model=ProductVariant,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def add_product_variant(body: CreateVariantRequest, service: Service) -> ProductVariant:
    """Add a seller variant to a product."""
    return await service.add_product_variant(body)


@router.put(
    "/variants/{variant_id}",
    response_model=ProductVariant,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def update_product_variant(
    variant_id: UUID,
    body: UpdateVariantRequest,
    service: Service,
) -> ProductVariant:
    """Partially update a variant."""
    return await service.update_product_variant(variant_id, body)


@router.delete(
    "/variants/{variant_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"model": ErrorResponse}},
)
async def delete_product_variant(variant_id: UUID, service: Service) -> Response:
    """Delete a variant."""
    await service.delete_product_variant(variant_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.patch(
    "/variants/{variant_id}/stock",
    status_code=status.HTTP_204_NO_CONTENT,
)
async def update_stock(
    variant_id: UUID,
    body: StockUpdateRequest,
    service: Service,
) -> Response:
    """Add to (or, with a negative quantity, remove from) a variant's stock."""
    await service.update_stock(variant_id, body.quantity)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get(
    "/variants/{variant_id}/stock",
    response_model=StockCheckResponse,
    responses={404: {"model": ErrorResponse}},
)
async def check_stock(
    variant_id: UUID,
    service: Service,
    quantity: int = Query(default=1, ge=0),
) -> StockCheckResponse:
    """Check whether a variant has at least ``quantity`` units in stock."""
    available = await service.check_stock(variant_id, quantity)
    return StockCheckResponse(variant_id=variant_id, quantity=quantity, available=available)


# ============================================================================
# Single Product Endpoints
# ============================================================================


@router.get(
    "/{product_id}",
    response_model=ProductWithVariants,
    responses={404: {"model": ErrorResponse}},
)
async def get_product(product_id: UUID, service: Service) -> ProductWithVariants:
    """Get a product with its variants."""
    return await service.get_product(product_id)


@router.put(
    "/{product_id}",
    response_model=Product,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def update_product(
    product_id: UUID,
    body: UpdateProductRequest,
    service: Service,
) -> Product:
    """Partially update a product; omitted fields are left unchanged."""
    return await service.update_product(product_id, body)


@router.delete("/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_product(product_id: UUID, service: Service) -> Response:
    """Delete a product and its variants."""
    await service.delete_product(product_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{product_id}/variants", response_model=list[ProductVariant])
async def get_variants_by_product(product_id: UUID, service: Service) -> list[ProductVariant]:
    """List the variants of a product."""
    return await service.get_variants_by_product(product_id)
