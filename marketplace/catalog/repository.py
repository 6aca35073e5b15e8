"""SQLAlchemy repositories for the catalog.

Provides CRUD, filtered listing and atomic stock updates for products,
variants and categories. Every SQLAlchemy failure is re-raised as a
``StoreError`` so the service can tell "no such row" apart from
everything else.
"""

from collections.abc import Awaitable, Callable
from functools import wraps
from typing import Any, ParamSpec, TypeVar
from uuid import UUID

from sqlalchemy import Select, delete, func, or_, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from marketplace.catalog.entities import Category, Product, ProductFilter, ProductVariant
from marketplace.catalog.models import SKU_CONSTRAINT, CategoryModel, ProductModel, ProductVariantModel
from marketplace.catalog.store import (
    DuplicateRecordError,
    InvalidQueryError,
    RecordNotFoundError,
    StoreError,
)

P = ParamSpec("P")
R = TypeVar("R")


def translate_errors(method: Callable[P, Awaitable[R]]) -> Callable[P, Awaitable[R]]:
    """Re-raise SQLAlchemy errors as ``StoreError``."""

    @wraps(method)
    async def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
        try:
            return await method(*args, **kwargs)
        except SQLAlchemyError as e:
            raise StoreError(str(e)) from e

    return wrapper


def _paginate(query: Select, filters: ProductFilter) -> Select:
    if filters.paginated:
        query = query.offset(filters.offset).limit(filters.limit)
    return query


async def _count(session: AsyncSession, query: Select) -> int:
    result = await session.execute(
        select(func.count()).select_from(query.order_by(None).subquery())
    )
    return result.scalar_one()


class ProductRepository:
    """Repository for Product database operations.

    Handles all database interactions for products including
    filtering, sorting, and pagination.

    Example usage:
        async with async_session_factory() as session:
            repo = ProductRepository(session)
            products, total = await repo.find_all(
                ProductFilter(category_id=category_id, page=1, limit=20),
            )
    """

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: Async SQLAlchemy session.
        """
        self.session = session

    @translate_errors
    async def create(self, product: Product) -> Product:
        """Insert a product.

        Args:
            product: Product to insert.

        Returns:
            Stored product.

        Raises:
            DuplicateRecordError: If another product took the SKU after the
                service checked it.
        """
        row = ProductModel(**product.model_dump(mode="python"))
        self.session.add(row)
        try:
            await self.session.commit()
        except IntegrityError as e:
            await self.session.rollback()
            if SKU_CONSTRAINT in str(e.orig):
                raise DuplicateRecordError("products", SKU_CONSTRAINT) from e
            raise
        await self.session.refresh(row)
        return Product.model_validate(row)

    @translate_errors
    async def get_by_id(self, product_id: UUID) -> Product:
        """Get product by ID.

        Raises:
            RecordNotFoundError: If no product has this ID.
        """
        row = await self.session.get(ProductModel, product_id)
        if row is None:
            raise RecordNotFoundError("products", product_id)
        return Product.model_validate(row)

    @translate_errors
    async def get_by_sku(self, sku: str) -> Product:
        """Get product by SKU.

        Raises:
            RecordNotFoundError: If no product has this SKU.
        """
        result = await self.session.execute(select(ProductModel).where(ProductModel.sku == sku))
        row = result.scalar_one_or_none()
        if row is None:
            raise RecordNotFoundError("products", sku)
        return Product.model_validate(row)

    @translate_errors
    async def update(self, product: Product) -> Product:
        """Write every column of ``product`` over the stored row.

        Raises:
            RecordNotFoundError: If the product no longer exists.
        """
        row = await self.session.get(ProductModel, product.id)
        if row is None:
            raise RecordNotFoundError("products", product.id)
        for name, value in product.model_dump(exclude={"id", "created_at", "updated_at"}).items():
            setattr(row, name, value)
        await self.session.commit()
        await self.session.refresh(row)
        return Product.model_validate(row)

    @translate_errors
    async def delete(self, product_id: UUID) -> None:
        """Delete a product. Deleting a missing product is a no-op."""
        await self.session.execute(delete(ProductModel).where(ProductModel.id == product_id))
        await self.session.commit()

    @translate_errors
    async def find_all(self, filters: ProductFilter) -> tuple[list[Product], int]:
        """Find products by category and status, sorted and paginated.

        Args:
            filters: Filter, sort and pagination parameters.

        Returns:
            Products on the requested page and the total match count.
        """
        query = self._apply_filters(select(ProductModel), filters)
        return await self._page(query, filters)

    @translate_errors
    async def search(self, query: str, filters: ProductFilter) -> tuple[list[Product], int]:
        """Case-insensitive substring search on name or description.

        Args:
            query: Text to look for.
            filters: Filter, sort and pagination parameters.

        Returns:
            Matching products on the requested page and the total match count.
        """
        pattern = f"%{query}%"
        stmt = select(ProductModel).where(
            or_(
                ProductModel.name.ilike(pattern),
                ProductModel.description.ilike(pattern),
            )
        )
        stmt = self._apply_filters(stmt, filters)
        return await self._page(stmt, filters)

    async def _page(self, query: Select, filters: ProductFilter) -> tuple[list[Product], int]:
        total = await _count(self.session, query)

        if filters.sort_by:
            column = self._get_sort_column(filters.sort_by)
            query = query.order_by(
                column.desc() if filters.descending else column.asc(),
                ProductModel.id.asc(),
            )
        else:
            # OFFSET/LIMIT needs a total order for pages to be stable.
            query = query.order_by(ProductModel.created_at.asc(), ProductModel.id.asc())

        query = _paginate(query, filters)
        result = await self.session.execute(query)
        return [Product.model_validate(row) for row in result.scalars().all()], total

    def _apply_filters(self, query: Select, filters: ProductFilter) -> Select:
        if filters.category_id is not None:
            query = query.where(ProductModel.category_id == filters.category_id)
        if filters.status:
            query = query.where(ProductModel.status == filters.status)
        return query

    def _get_sort_column(self, sort_by: str) -> Any:
        """Resolve a caller-supplied sort name to a column.

        Args:
            sort_by: Sort field name.

        Returns:
            SQLAlchemy column.

        Raises:
            InvalidQueryError: If the name is not a products column.
        """
        column = ProductModel.__table__.columns.get(sort_by)
        if column is None:
            raise InvalidQueryError(f"cannot sort products by {sort_by!r}")
        return column


class ProductVariantRepository:
    """Repository for ProductVariant database operations."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: Async SQLAlchemy session.
        """
        self.session = session

    @translate_errors
    async def create(self, variant: ProductVariant) -> ProductVariant:
        """Insert a variant."""
        row = ProductVariantModel(**variant.model_dump(mode="python"))
        self.session.add(row)
        await self.session.commit()
        await self.session.refresh(row)
        return ProductVariant.model_validate(row)

    @translate_errors
    async def get_by_id(self, variant_id: UUID) -> ProductVariant:
        """Get variant by ID.

        Raises:
            RecordNotFoundError: If no variant has this ID.
        """
        # Stock may have been changed by a bulk UPDATE in this session.
        row = await self.session.get(ProductVariantModel, variant_id, populate_existing=True)
        if row is None:
            raise RecordNotFoundError("product_variants", variant_id)
        return ProductVariant.model_validate(row)

    @translate_errors
    async def get_by_product_id(self, product_id: UUID) -> list[ProductVariant]:
        """All variants of a product, active or not, oldest first."""
        result = await self.session.execute(
            select(ProductVariantModel)
            .where(ProductVariantModel.product_id == product_id)
            .order_by(ProductVariantModel.created_at.asc())
        )
        return [ProductVariant.model_validate(row) for row in result.scalars().all()]

    @translate_errors
    async def get_by_seller_id(
        self,
        seller_id: UUID,
        filters: ProductFilter,
    ) -> tuple[list[ProductVariant], int]:
        """Variants offered by a seller, filtered by price range and stock.

        Sorting fields on ``filters`` are not applied.
        """
        query = select(ProductVariantModel).where(ProductVariantModel.seller_id == seller_id)

        if filters.min_price is not None:
            query = query.where(ProductVariantModel.price >= filters.min_price)
        if filters.max_price is not None:
            query = query.where(ProductVariantModel.price <= filters.max_price)
        if filters.in_stock:
            query = query.where(ProductVariantModel.stock > 0)

        total = await _count(self.session, query)
        result = await self.session.execute(_paginate(query, filters))
        return [ProductVariant.model_validate(row) for row in result.scalars().all()], total

    @translate_errors
    async def update(self, variant: ProductVariant) -> ProductVariant:
        """Write every column of ``variant`` over the stored row.

        Raises:
            RecordNotFoundError: If the variant no longer exists.
        """
        row = await self.session.get(ProductVariantModel, variant.id)
        if row is None:
            raise RecordNotFoundError("product_variants", variant.id)
        for name, value in variant.model_dump(exclude={"id", "created_at", "updated_at"}).items():
            setattr(row, name, value)
        await self.session.commit()
        await self.session.refresh(row)
        return ProductVariant.model_validate(row)

    @translate_errors
    async def delete(self, variant_id: UUID) -> None:
        """Delete a variant. Deleting a missing variant is a no-op."""
        await self.session.execute(
            delete(ProductVariantModel).where(ProductVariantModel.id == variant_id)
        )
        await self.session.commit()

    @translate_errors
    async def update_stock(self, variant_id: UUID, quantity: int) -> None:
        """Add ``quantity`` (may be negative) to stock in one statement.

        Runs as ``UPDATE ... SET stock = stock + :quantity`` so concurrent
        callers never lose an update.
        """
        await self.session.execute(
            update(ProductVariantModel)
            .where(ProductVariantModel.id == variant_id)
            .values(stock=ProductVariantModel.stock + quantity)
            .execution_options(synchronize_session=False)
        )
        await self.session.commit()


class CategoryRepository:
    """Repository for Category database operations."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    @translate_errors
    async def create(self, category: Category) -> Category:
        row = CategoryModel(**category.model_dump(mode="python"))
        self.session.add(row)
        await self.session.commit()
        await self.session.refresh(row)
        return Category.model_validate(row)

    @translate_errors
    async def get_by_id(self, category_id: UUID) -> Category:
        row = await self.session.get(CategoryModel, category_id)
        if row is None:
            raise RecordNotFoundError("categories", category_id)
        return Category.model_validate(row)

    @translate_errors
    async def find_all(self) -> list[Category]:
        """Active categories ordered by name."""
        result = await self.session.execute(
            select(CategoryModel)
            .where(CategoryModel.is_active.is_(True))
            .order_by(CategoryModel.name)
        )
        return [Category.model_validate(row) for row in result.scalars().all()]
