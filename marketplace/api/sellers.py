"""Seller inventory endpoints.

- GET /sellers/{seller_id}/variants - variants offered by a seller
"""

from uuid import UUID

from fastapi import APIRouter

from marketplace.api.products import Filters, Service
from marketplace.api.schemas import VariantListResponse, page_metadata

router = APIRouter(prefix="/sellers", tags=["Sellers"])


@router.get("/{seller_id}/variants", response_model=VariantListResponse)
async def get_variants_by_seller(
    seller_id: UUID,
    filters: Filters,
    service: Service,
) -> VariantListResponse:
    """List a seller's variants, filtered by price range and stock.

    ``sort_by`` and ``sort_order`` are accepted but not applied.
    """
    result = await service.get_variants_by_seller(seller_id, filters)
    return VariantListResponse(items=result.items, **page_metadata(result))
