"""Domain layer - state machines and exceptions.

Example usage:
    from shopcatalog.domain import PublicationStatus

    status = PublicationStatus.from_flags(is_draft=True, is_published=False)
    status.can_transition_to(PublicationStatus.PUBLISHED)  # True
"""

from shopcatalog.domain.exceptions import (
    CatalogError,
    ConstraintViolationError,
    DomainError,
    InvalidInputError,
    InvalidProductTypeError,
    InvalidStateTransitionError,
    NotFoundError,
    StoreError,
    UnauthorizedError,
)
from shopcatalog.domain.state_machines import (
    PublicationStatus,
    validate_publication_transition,
)

__all__ = [
    # State machines
    "PublicationStatus",
    "validate_publication_transition",
    # Exceptions
    "CatalogError",
    "ConstraintViolationError",
    "DomainError",
    "InvalidInputError",
    "InvalidProductTypeError",
    "InvalidStateTransitionError",
    "NotFoundError",
    "StoreError",
    "UnauthorizedError",
]
