"""Catalog service for product and inventory operations.

Owns the catalog invariants (unique SKU, discount below price) and the
cache-aside read path for product composites. Store failures propagate
as domain errors; cache failures are logged and dropped because the cache
only ever holds a derived copy of store data.
"""

from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from decimal import Decimal
from typing import Any, TypeVar
from uuid import UUID

import structlog
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from marketplace.catalog.entities import (
    Category,
    PageResult,
    Product,
    ProductFilter,
    ProductStatus,
    ProductVariant,
    ProductWithVariants,
)
from marketplace.catalog.requests import (
    CreateCategoryRequest,
    CreateProductRequest,
    CreateVariantRequest,
    UpdateProductRequest,
    UpdateVariantRequest,
)
from marketplace.catalog.store import (
    CategoryStore,
    DuplicateRecordError,
    InvalidQueryError,
    ProductStore,
    RecordNotFoundError,
    StoreError,
    VariantStore,
)
from marketplace.domain.exceptions import (
    DiscountNotBelowPriceError,
    DuplicateSkuError,
    InternalError,
    NotFoundError,
    ValidationError,
)
from marketplace.infrastructure.cache import Cache, CacheError

logger = structlog.get_logger()

R = TypeVar("R", bound=BaseModel)

DEFAULT_CACHE_TTL = 300


def product_cache_key(product_id: UUID) -> str:
    """Cache key of a product composite."""
    return f"product:{product_id}"


def _parse(model: type[R], request: R | Mapping[str, Any]) -> R:
    """Accept a request model or a raw mapping and validate the latter."""
    if isinstance(request, model):
        return request
    try:
        return model.model_validate(request)
    except PydanticValidationError as e:
        raise ValidationError.from_pydantic(e) from e


def _check_discount(price: Decimal, discount_price: Decimal | None) -> None:
    if discount_price is not None and discount_price >= price:
        raise DiscountNotBelowPriceError(price, discount_price)


@contextmanager
def store_errors(
    action: str,
    entity_type: str | None = None,
    entity_id: Any = None,
) -> Iterator[None]:
    """Translate store failures into domain errors.

    Args:
        action: What was being attempted, for messages and logs.
        entity_type: Entity reported in ``NotFoundError`` when the store
            finds no row. Without it a missing row is an internal error.
        entity_id: Identifier reported in ``NotFoundError``.
    """
    try:
        yield
    except RecordNotFoundError as e:
        if entity_type is None:
            raise InternalError(f"failed to {action}: {e}") from e
        raise NotFoundError(entity_type, entity_id) from e
    except InvalidQueryError as e:
        raise ValidationError(str(e)) from e
    except StoreError as e:
        logger.error("Store operation failed", action=action, error=str(e))
        raise InternalError(f"failed to {action}", details={"error": str(e)}) from e


class CatalogService:
    """Service for catalog operations.

    Stateless between calls: it holds references to its stores and to a
    long-lived cache client, nothing else. No locks are taken, so a
    read-modify-write such as ``get_product`` followed by
    ``update_product`` can lose updates between concurrent editors; only
    ``update_stock`` is atomic at the store level.

    Example usage:
        service = CatalogService(
            products=ProductRepository(session),
            variants=ProductVariantRepository(session),
            categories=CategoryRepository(session),
            cache=RedisCache.from_url("redis://localhost:6379/0"),
        )
        composite = await service.get_product(product_id)
    """

    def __init__(
        self,
        products: ProductStore,
        variants: VariantStore,
        categories: CategoryStore,
        cache: Cache,
        cache_ttl: int = DEFAULT_CACHE_TTL,
    ) -> None:
        """Initialize service with its collaborators.

        Args:
            products: Product store.
            variants: Variant store.
            categories: Category store.
            cache: Cache for product composites.
            cache_ttl: Lifetime of cached composites in seconds.
        """
        self.products = products
        self.variants = variants
        self.categories = categories
        self.cache = cache
        self.cache_ttl = cache_ttl

    # ------------------------------------------------------------------
    # Products
    # ------------------------------------------------------------------

    async def create_product(
        self,
        request: CreateProductRequest | Mapping[str, Any],
    ) -> Product:
        """Create a product.

        The SKU must be unused and the category must exist. New products
        are always active, whatever status the request carries.

        Args:
            request: Product fields.

        Returns:
            The stored product.

        Raises:
            ValidationError: If a field is malformed.
            ConflictError: If the SKU already exists.
            NotFoundError: If the category does not exist.
            InternalError: If the store fails.
        """
        req = _parse(CreateProductRequest, request)

        try:
            await self.products.get_by_sku(req.sku)
        except RecordNotFoundError:
            pass
        except StoreError as e:
            raise InternalError(f"failed to check if sku {req.sku} exists") from e
        else:
            raise DuplicateSkuError(req.sku)

        with store_errors("load category", "category", req.category_id):
            await self.categories.get_by_id(req.category_id)

        product = Product(
            name=req.name,
            description=req.description,
            category_id=req.category_id,
            brand=req.brand,
            sku=req.sku,
            status=ProductStatus.ACTIVE,
            images=list(req.images),
        )

        with store_errors("create product"):
            try:
                created = await self.products.create(product)
            except DuplicateRecordError as e:
                raise DuplicateSkuError(req.sku) from e

        logger.info("Product created", product_id=str(created.id), sku=created.sku)
        return created

    async def get_product(self, product_id: UUID) -> ProductWithVariants:
        """Get a product with all of its variants.

        Served from the cache when present; a cached entry is returned as
        is until it expires or a write invalidates it. On a miss the
        composite is loaded from the store and cached.

        Args:
            product_id: Product ID.

        Returns:
            Product and variants.

        Raises:
            NotFoundError: If the product does not exist.
            InternalError: If the store fails.
        """
        key = product_cache_key(product_id)

        cached = await self._cache_get(key)
        if cached is not None:
            return cached

        with store_errors("load product", "product", product_id):
            product = await self.products.get_by_id(product_id)

        with store_errors("load product variants"):
            variants = await self.variants.get_by_product_id(product_id)

        composite = ProductWithVariants(product=product, variants=variants)
        await self._cache_set(key, composite)
        return composite

    async def update_product(
        self,
        product_id: UUID,
        request: UpdateProductRequest | Mapping[str, Any],
    ) -> Product:
        """Apply a partial update to a product.

        Only the fields present in the request are changed. A new
        category must exist.

        Raises:
            ValidationError: If a field is malformed.
            NotFoundError: If the product or the new category does not exist.
            InternalError: If the store fails.
        """
        req = _parse(UpdateProductRequest, request)

        with store_errors("load product", "product", product_id):
            product = await self.products.get_by_id(product_id)

        changes = req.changes()
        if "category_id" in changes:
            with store_errors("load category", "category", changes["category_id"]):
                await self.categories.get_by_id(changes["category_id"])

        with store_errors("update product", "product", product_id):
            updated = await self.products.update(product.model_copy(update=changes))

        await self._invalidate(product_id)
        logger.info("Product updated", product_id=str(product_id), fields=sorted(changes))
        return updated

    async def delete_product(self, product_id: UUID) -> None:
        """Delete a product. Deleting a missing product succeeds.

        Raises:
            InternalError: If the store fails.
        """
        with store_errors("delete product"):
            await self.products.delete(product_id)

        await self._invalidate(product_id)
        logger.info("Product deleted", product_id=str(product_id))

    async def list_products(self, filters: ProductFilter) -> PageResult[ProductWithVariants]:
        """List products filtered by category and status.

        Price, seller and stock fields of ``filters`` are ignored here;
        they only apply to variant listings. Page and limit are used as
        given.

        Args:
            filters: Filter, sort and pagination parameters.

        Returns:
            Composites on the requested page and the total match count.

        Raises:
            ValidationError: If the sort field is not understood by the store.
            InternalError: If the store fails.
        """
        with store_errors("list products"):
            products, total = await self.products.find_all(filters)
        return await self._assemble(products, total, filters)

    async def search_products(
        self,
        query: str,
        filters: ProductFilter,
    ) -> PageResult[ProductWithVariants]:
        """Search products by name or description (case-insensitive substring).

        Category and status filters, sorting and pagination apply as in
        ``list_products``.

        Raises:
            ValidationError: If the sort field is not understood by the store.
            InternalError: If the store fails.
        """
        with store_errors("search products"):
            products, total = await self.products.search(query, filters)
        return await self._assemble(products, total, filters)

    async def _assemble(
        self,
        products: list[Product],
        total: int,
        filters: ProductFilter,
    ) -> PageResult[ProductWithVariants]:
        items = []
        for product in products:
            with store_errors(f"get variants for product {product.id}"):
                variants = await self.variants.get_by_product_id(product.id)
            items.append(ProductWithVariants(product=product, variants=variants))
        return PageResult(items=items, total=total, page=filters.page, limit=filters.limit)

    # ------------------------------------------------------------------
    # Variants
    # ------------------------------------------------------------------

    async def add_product_variant(
        self,
        request: CreateVariantRequest | Mapping[str, Any],
    ) -> ProductVariant:
        """Add a seller variant to an existing product.

        Raises:
            ValidationError: If a field is malformed or the discount is
                not below the price.
            NotFoundError: If the product does not exist.
            InternalError: If the store fails.
        """
        req = _parse(CreateVariantRequest, request)

        with store_errors("load product", "product", req.product_id):
            await self.products.get_by_id(req.product_id)

        _check_discount(req.price, req.discount_price)

        variant = ProductVariant(
            product_id=req.product_id,
            seller_id=req.seller_id,
            price=req.price,
            discount_price=req.discount_price,
            stock=req.stock,
            attributes=dict(req.attributes),
            is_active=True,
        )

        with store_errors("create variant"):
            created = await self.variants.create(variant)

        await self._invalidate(created.product_id)
        logger.info(
            "Variant created",
            variant_id=str(created.id),
            product_id=str(created.product_id),
            seller_id=str(created.seller_id),
        )
        return created

    async def update_product_variant(
        self,
        variant_id: UUID,
        request: UpdateVariantRequest | Mapping[str, Any],
    ) -> ProductVariant:
        """Apply a partial update to a variant.

        The discount rule is checked on the merged result, so changing
        only the discount can fail against the existing price.

        Raises:
            ValidationError: If a field is malformed or the merged discount
                is not below the merged price.
            NotFoundError: If the variant does not exist.
            InternalError: If the store fails.
        """
        req = _parse(UpdateVariantRequest, request)

        with store_errors("load variant", "variant", variant_id):
            variant = await self.variants.get_by_id(variant_id)

        changes = req.changes()
        merged = variant.model_copy(update=changes)
        _check_discount(merged.price, merged.discount_price)

        with store_errors("update variant", "variant", variant_id):
            updated = await self.variants.update(merged)

        await self._invalidate(updated.product_id)
        logger.info("Variant updated", variant_id=str(variant_id), fields=sorted(changes))
        return updated

    async def delete_product_variant(self, variant_id: UUID) -> None:
        """Delete a variant.

        The variant is loaded first to find the product whose cached
        composite must be dropped.

        Raises:
            NotFoundError: If the variant does not exist.
            InternalError: If the store fails.
        """
        with store_errors("load variant", "variant", variant_id):
            variant = await self.variants.get_by_id(variant_id)

        with store_errors("delete variant"):
            await self.variants.delete(variant_id)

        await self._invalidate(variant.product_id)
        logger.info("Variant deleted", variant_id=str(variant_id))

    async def get_variants_by_product(self, product_id: UUID) -> list[ProductVariant]:
        """All variants of a product, straight from the store."""
        with store_errors("get variants"):
            return await self.variants.get_by_product_id(product_id)

    async def get_variants_by_seller(
        self,
        seller_id: UUID,
        filters: ProductFilter,
    ) -> PageResult[ProductVariant]:
        """Variants offered by a seller.

        Price range and in-stock filters and pagination apply; the sort
        fields of ``filters`` are not applied.
        """
        with store_errors("get variants"):
            variants, total = await self.variants.get_by_seller_id(seller_id, filters)
        return PageResult(items=variants, total=total, page=filters.page, limit=filters.limit)

    # ------------------------------------------------------------------
    # Inventory
    # ------------------------------------------------------------------

    async def update_stock(self, variant_id: UUID, quantity: int) -> None:
        """Add ``quantity`` to a variant's stock atomically.

        ``quantity`` may be negative. Nothing clamps the result at zero;
        callers that must not oversell have to guard that themselves.
        Cache invalidation afterwards is best effort.

        Raises:
            InternalError: If the store fails.
        """
        with store_errors("update stock"):
            await self.variants.update_stock(variant_id, quantity)

        try:
            variant = await self.variants.get_by_id(variant_id)
        except StoreError as e:
            logger.debug(
                "Skipping cache invalidation after stock update",
                variant_id=str(variant_id),
                error=str(e),
            )
            return

        await self._invalidate(variant.product_id)
        logger.info("Stock updated", variant_id=str(variant_id), delta=quantity)

    async def check_stock(self, variant_id: UUID, quantity: int) -> bool:
        """Whether the variant currently has at least ``quantity`` units.

        Advisory only: nothing is reserved, so a concurrent decrement may
        make the answer stale immediately.

        Raises:
            NotFoundError: If the variant does not exist.
            InternalError: If the store fails.
        """
        with store_errors("load variant", "variant", variant_id):
            variant = await self.variants.get_by_id(variant_id)
        return variant.stock >= quantity

    # ------------------------------------------------------------------
    # Categories
    # ------------------------------------------------------------------

    async def create_category(
        self,
        request: CreateCategoryRequest | Mapping[str, Any],
    ) -> Category:
        """Create a category. The parent reference is stored unchecked."""
        req = _parse(CreateCategoryRequest, request)
        category = Category(name=req.name, parent_id=req.parent_id, is_active=req.is_active)

        with store_errors("create category"):
            created = await self.categories.create(category)

        logger.info("Category created", category_id=str(created.id), name=created.name)
        return created

    async def get_category(self, category_id: UUID) -> Category:
        """Get a category by ID.

        Raises:
            NotFoundError: If the category does not exist.
        """
        with store_errors("load category", "category", category_id):
            return await self.categories.get_by_id(category_id)

    async def list_categories(self) -> list[Category]:
        """Active categories ordered by name."""
        with store_errors("list categories"):
            return await self.categories.find_all()

    # ------------------------------------------------------------------
    # Cache helpers: failures are logged, never raised
    # ------------------------------------------------------------------

    async def _cache_get(self, key: str) -> ProductWithVariants | None:
        try:
            return await self.cache.get(key, ProductWithVariants)
        except CacheError as e:
            logger.warning("Cache read failed", key=key, error=str(e))
            return None

    async def _cache_set(self, key: str, value: ProductWithVariants) -> None:
        try:
            await self.cache.set(key, value, self.cache_ttl)
        except CacheError as e:
            logger.warning("Cache write failed", key=key, error=str(e))

    async def _invalidate(self, product_id: UUID) -> None:
        key = product_cache_key(product_id)
        try:
            await self.cache.delete(key)
        except CacheError as e:
            logger.warning("Cache invalidation failed", key=key, error=str(e))
