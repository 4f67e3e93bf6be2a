"""Domain exceptions.

All domain-level errors raised by the catalog. The service layer
surfaces store errors unchanged; the HTTP layer maps each error class
to a status code and a machine-readable error code.
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


# ============================================================================
# State Machine Errors
# ============================================================================


class InvalidStateTransitionError(DomainError):
    """Raised when an invalid state transition is attempted."""

    error_code = "INVALID_STATE_TRANSITION"

    def __init__(
        self,
        entity_type: str,
        entity_id: str,
        current_state: str,
        target_state: str,
        allowed_transitions: list[str] | None = None,
    ) -> None:
        """Initialize invalid state transition error.

        Args:
            entity_type: Type of entity (e.g., "Product").
            entity_id: ID of the entity.
            current_state: Current state of the entity.
            target_state: Attempted target state.
            allowed_transitions: List of allowed target states from current state.
        """
        allowed = allowed_transitions or []
        message = (
            f"Cannot transition {entity_type}({entity_id}) "
            f"from '{current_state}' to '{target_state}'. "
            f"Allowed transitions: {allowed}"
        )
        super().__init__(
            message,
            details={
                "entity_type": entity_type,
                "entity_id": entity_id,
                "current_state": current_state,
                "target_state": target_state,
                "allowed_transitions": allowed,
            },
        )


# ============================================================================
# Catalog Errors
# ============================================================================


class CatalogError(DomainError):
    """Base class for catalog errors."""

    error_code = "CATALOG_ERROR"


class InvalidInputError(CatalogError):
    """Raised when required fields are missing or malformed."""

    error_code = "INVALID_INPUT"

    def __init__(
        self,
        message: str = "Invalid input",
        fields: list[str] | None = None,
    ) -> None:
        """Initialize invalid input error.

        Args:
            message: Explanation of what is wrong.
            fields: Names of the offending fields.
        """
        super().__init__(message, details={"fields": fields or []})
        self.fields = fields or []


class InvalidProductTypeError(CatalogError):
    """Raised when a product-type tag is not one of the known kinds."""

    error_code = "INVALID_PRODUCT_TYPE"

    def __init__(self, product_type: str, allowed: list[str] | None = None) -> None:
        """Initialize invalid product type error.

        Args:
            product_type: The rejected tag.
            allowed: Tags that would have been accepted.
        """
        allowed = allowed or []
        super().__init__(
            f"Invalid product type '{product_type}'. Allowed types: {allowed}",
            details={"product_type": product_type, "allowed": allowed},
        )
        self.product_type = product_type


class UnauthorizedError(CatalogError):
    """Raised when the caller does not own the product it tries to mutate."""

    error_code = "UNAUTHORIZED"

    def __init__(self, product_id: str, shop_id: str) -> None:
        """Initialize unauthorized error.

        Args:
            product_id: ID of the product.
            shop_id: Identity of the caller.
        """
        super().__init__(
            f"Shop {shop_id} is not allowed to modify product {product_id}",
            details={"product_id": product_id, "shop_id": shop_id},
        )


class NotFoundError(CatalogError):
    """Raised when an identifier does not resolve to a record."""

    error_code = "NOT_FOUND"

    def __init__(self, entity_type: str, entity_id: str) -> None:
        """Initialize not found error.

        Args:
            entity_type: Kind of record looked up.
            entity_id: Identifier that did not resolve.
        """
        super().__init__(
            f"{entity_type} not found: {entity_id}",
            details={"entity_type": entity_type, "entity_id": entity_id},
        )


class ConstraintViolationError(CatalogError):
    """Raised when a write violates a uniqueness or integrity constraint."""

    error_code = "CONSTRAINT_VIOLATION"


class StoreError(CatalogError):
    """Raised when the underlying persistence layer fails."""

    error_code = "STORE_ERROR"
