"""Domain layer.

Error taxonomy shared by the catalog service and the HTTP boundary.
"""

from marketplace.domain.exceptions import (
    ConflictError,
    DiscountNotBelowPriceError,
    DomainError,
    DuplicateSkuError,
    InternalError,
    NotFoundError,
    ValidationError,
)

__all__ = [
    "ConflictError",
    "DiscountNotBelowPriceError",
    "DomainError",
    "DuplicateSkuError",
    "InternalError",
    "NotFoundError",
    "ValidationError",
]
