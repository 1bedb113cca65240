"""
Domain error taxonomy.

CRITICAL: This file must contain ZERO imports from:
- sqlalchemy
- pydantic
- fastapi

Every error carries a stable ``code`` so the API layer can report a
specific reason without leaking storage details.
"""
from typing import Optional


class FurniblesError(Exception):
    """Base class for all expected, user-facing domain errors."""

    code = "furnibles_error"

    def __init__(self, message: str = "", **details):
        super().__init__(message or self.code)
        self.message = message or self.code
        self.details = details

    def to_dict(self) -> dict:
        return {"code": self.code, "message": self.message, **self.details}


# =============================================================================
# VALIDATION
# =============================================================================

class ValidationError(FurniblesError):
    """Bad input shape or range."""

    code = "validation_error"


class ProductUnavailableError(ValidationError):
    """A product is not currently purchasable."""

    code = "product_unavailable"

    def __init__(self, product_id: str, reason: Optional[str] = None):
        message = f"Product {product_id} is not available for purchase"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message, product_id=product_id)
        self.product_id = product_id


class PurchaseNotVerifiedError(ValidationError):
    """Buyer has no completed order containing the product."""

    code = "purchase_not_verified"


# =============================================================================
# LOOKUP / UNIQUENESS
# =============================================================================

class NotFoundError(FurniblesError):
    """Entity reference does not resolve."""

    code = "not_found"


class ConflictError(FurniblesError):
    """Uniqueness or duplicate-action violation."""

    code = "conflict"


class DuplicateReviewError(ConflictError):
    """A review already exists for (order, product, buyer)."""

    code = "duplicate_review"


# =============================================================================
# STATE MACHINE
# =============================================================================

class InvalidStateTransition(FurniblesError):
    """Transition not permitted from the current state."""

    code = "invalid_state_transition"

    def __init__(self, current: str, target: str, entity: str = "order"):
        super().__init__(
            f"Cannot transition {entity} from {current} to {target}",
            current=current,
            target=target,
        )
        self.current = current
        self.target = target


# =============================================================================
# DOWNLOAD ENTITLEMENTS
# =============================================================================

class EntitlementError(FurniblesError):
    """Download token cannot be used."""

    code = "entitlement_error"


class TokenNotFoundError(EntitlementError):
    code = "token_not_found"


class TokenRevokedError(EntitlementError):
    code = "token_revoked"


class TokenExpiredError(EntitlementError):
    code = "token_expired"


class DownloadLimitExceededError(EntitlementError):
    code = "download_limit_exceeded"


# =============================================================================
# COLLABORATORS
# =============================================================================

class ExternalDependencyError(FurniblesError):
    """Gateway, storage or notification failure. Retryable."""

    code = "external_dependency_error"

    def __init__(self, message: str = "", dependency: str = "unknown"):
        super().__init__(message, dependency=dependency)
        self.dependency = dependency


__all__ = [
    "FurniblesError",
    "ValidationError",
    "ProductUnavailableError",
    "PurchaseNotVerifiedError",
    "NotFoundError",
    "ConflictError",
    "DuplicateReviewError",
    "InvalidStateTransition",
    "EntitlementError",
    "TokenNotFoundError",
    "TokenRevokedError",
    "TokenExpiredError",
    "DownloadLimitExceededError",
    "ExternalDependencyError",
]
