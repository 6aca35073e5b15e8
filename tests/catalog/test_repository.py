"""Tests for SQLAlchemy repository behaviour that needs no database."""

from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from marketplace.catalog.entities import Product, ProductFilter
from marketplace.catalog.models import ProductModel
from marketplace.catalog.repository import ProductRepository, ProductVariantRepository
from marketplace.catalog.store import (
    DuplicateRecordError,
    InvalidQueryError,
    RecordNotFoundError,
    StoreError,
)


@pytest.fixture
def session() -> AsyncMock:
    return AsyncMock()


class TestSortColumn:
    """Tests for sort field resolution."""

    @pytest.mark.parametrize("name", ["name", "sku", "created_at", "updated_at", "brand"])
    def test_known_columns(self, session: AsyncMock, name: str) -> None:
        """Column names resolve to table columns."""
        column = ProductRepository(session)._get_sort_column(name)
        assert column is ProductModel.__table__.columns[name]

    @pytest.mark.parametrize("name", ["price", "name desc", "1; DROP TABLE products"])
    def test_unknown_columns(self, session: AsyncMock, name: str) -> None:
        """Anything that is not a column is rejected."""
        with pytest.raises(InvalidQueryError):
            ProductRepository(session)._get_sort_column(name)

    async def test_unknown_sort_rejected_before_query(self, session: AsyncMock) -> None:
        """The page query is never issued for an invalid sort name."""
        repo = ProductRepository(session)
        session.execute.return_value = MagicMock(**{"scalar_one.return_value": 0})

        with pytest.raises(InvalidQueryError):
            await repo.find_all(ProductFilter(sort_by="bogus"))

        # only the count query ran
        assert session.execute.await_count == 1


class TestErrorTranslation:
    """Tests for SQLAlchemy error translation."""

    async def test_missing_row(self, session: AsyncMock) -> None:
        """A missing row is reported as RecordNotFoundError."""
        session.get.return_value = None

        with pytest.raises(RecordNotFoundError):
            await ProductRepository(session).get_by_id(uuid4())

    async def test_driver_failure(self, session: AsyncMock) -> None:
        """SQLAlchemy errors become StoreError."""
        session.execute.side_effect = SQLAlchemyError("connection lost")

        with pytest.raises(StoreError) as exc_info:
            await ProductVariantRepository(session).update_stock(uuid4(), -1)

        assert not isinstance(exc_info.value, RecordNotFoundError)
        session.commit.assert_not_awaited()

    async def test_stock_update_commits(self, session: AsyncMock) -> None:
        """Stock updates commit their own transaction."""
        await ProductVariantRepository(session).update_stock(uuid4(), 2)

        session.execute.assert_awaited_once()
        session.commit.assert_awaited_once()


class TestListingOrder:
    """Tests for the ORDER BY of paginated product queries."""

    @pytest.fixture
    def repo(self, session: AsyncMock) -> ProductRepository:
        session.execute.return_value = MagicMock(**{"scalar_one.return_value": 0})
        return ProductRepository(session)

    async def test_default_order_is_total(self, repo: ProductRepository, session: AsyncMock) -> None:
        """Without a sort field pages are ordered by creation time then id."""
        await repo.find_all(ProductFilter(page=2, limit=10))

        page_query = str(session.execute.await_args_list[1].args[0])
        assert "ORDER BY products.created_at ASC, products.id ASC" in page_query

    async def test_sort_field_breaks_ties_by_id(self, repo: ProductRepository, session: AsyncMock) -> None:
        """Requested sort comes first, id keeps equal values stable."""
        await repo.search("lamp", ProductFilter(sort_by="name", sort_order="desc"))

        page_query = str(session.execute.await_args_list[1].args[0])
        assert "ORDER BY products.name DESC, products.id ASC" in page_query


class TestDuplicateSku:
    """Tests for unique-constraint violations on insert."""

    @pytest.fixture
    def product(self) -> Product:
        return Product(name="Lamp", category_id=uuid4(), sku="LMP-1")

    async def test_sku_violation(self, session: AsyncMock, product: Product) -> None:
        """A hit on the SKU constraint is reported as a duplicate record."""
        session.add = MagicMock()
        session.commit.side_effect = IntegrityError(
            "INSERT INTO products",
            {},
            Exception('duplicate key value violates unique constraint "uq_products_sku"'),
        )

        with pytest.raises(DuplicateRecordError) as exc_info:
            await ProductRepository(session).create(product)

        assert exc_info.value.constraint == "uq_products_sku"
        session.rollback.assert_awaited_once()

    async def test_other_integrity_error(self, session: AsyncMock, product: Product) -> None:
        """Other constraint failures stay generic store errors."""
        session.add = MagicMock()
        session.commit.side_effect = IntegrityError(
            "INSERT INTO products",
            {},
            Exception('insert violates foreign key constraint "products_category_id_fkey"'),
        )

        with pytest.raises(StoreError) as exc_info:
            await ProductRepository(session).create(product)

        assert not isinstance(exc_info.value, DuplicateRecordError)
