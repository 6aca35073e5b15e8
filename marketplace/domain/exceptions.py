"""Domain exceptions.

All errors the catalog service surfaces to its callers. Each kind maps to
exactly one HTTP status at the API boundary.
"""

from typing import Any


class DomainError(Exception):
    """Base class for all domain exceptions.

    All domain errors should inherit from this class to allow
    catching domain-specific errors at the application layer.
    """

    error_code: str = "DOMAIN_ERROR"

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """Initialize domain error.

        Args:
            message: Human-readable error message.
            details: Optional dictionary with additional error context.
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ValidationError(DomainError):
    """Raised when input violates a field constraint or a pricing rule."""

    error_code = "VALIDATION_ERROR"

    @classmethod
    def from_pydantic(cls, exc: Any) -> "ValidationError":
        """Build from a pydantic ``ValidationError``.

        Args:
            exc: The pydantic exception.

        Returns:
            Domain validation error listing each failing field.
        """
        errors = [
            {
                "field": ".".join(str(part) for part in err.get("loc", ())),
                "message": err.get("msg", ""),
            }
            for err in exc.errors()
        ]
        return cls("validation error", details={"errors": errors})


class DiscountNotBelowPriceError(ValidationError):
    """Raised when a discount price is not strictly below the price."""

    def __init__(self, price: Any, discount_price: Any) -> None:
        """Initialize discount error.

        Args:
            price: Effective variant price.
            discount_price: Offending discount price.
        """
        super().__init__(
            "discount price must be less than price",
            details={"price": str(price), "discount_price": str(discount_price)},
        )


class ConflictError(DomainError):
    """Raised when a uniqueness rule is violated."""

    error_code = "CONFLICT"


class DuplicateSkuError(ConflictError):
    """Raised when a product SKU is already taken."""

    def __init__(self, sku: str) -> None:
        """Initialize duplicate SKU error.

        Args:
            sku: The SKU that already exists.
        """
        super().__init__(f"sku {sku} already exists", details={"sku": sku})


class NotFoundError(DomainError):
    """Raised when a referenced product, variant or category is absent."""

    error_code = "NOT_FOUND"

    def __init__(self, entity_type: str, entity_id: Any) -> None:
        """Initialize not found error.

        Args:
            entity_type: Kind of entity (e.g. "product", "category").
            entity_id: Identifier that was looked up.
        """
        super().__init__(
            f"{entity_type} {entity_id} not found",
            details={"entity_type": entity_type, "entity_id": str(entity_id)},
        )
        self.entity_type = entity_type
        self.entity_id = entity_id


class InternalError(DomainError):
    """Raised when the store fails in a way the caller cannot fix."""

    error_code = "INTERNAL_ERROR"
