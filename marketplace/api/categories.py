"""Category endpoints.

- POST /categories - create category
- GET /categories - active categories
- GET /categories/{id} - category details
"""

from uuid import UUID

from fastapi import APIRouter, status

from marketplace.api.products import Service
from marketplace.api.schemas import ErrorResponse
from marketplace.catalog.entities import Category
from marketplace.catalog.requests import CreateCategoryRequest

router = APIRouter(prefix="/categories", tags=["Categories"])


@router.post("", response_model=Category, status_code=status.HTTP_201_CREATED)
async def create_category(body: CreateCategoryRequest, service: Service) -> Category:
    """Create a category."""
    return await service.create_category(body)


@router.get("", response_model=list[Category])
async def list_categories(service: Service) -> list[Category]:
    """List active categories by name."""
    return await service.list_categories()


@router.get(
    "/{category_id}",
    response_model=Category,
    responses={404: {"model": ErrorResponse}},
)
async def get_category(category_id: UUID, service: Service) -> Category:
    """Get a category."""
    return await service.get_category(category_id)
