"""State machines for domain entities.

The product publication lifecycle is a two-state cycle. Unpublishing a
product stores it as a draft again, so "unpublished" and "draft" are the
same state.
"""

from enum import Enum

from shopcatalog.domain.exceptions import InvalidStateTransitionError


# ============================================================================
# Publication State Machine
# ============================================================================


class PublicationStatus(str, Enum):
    """Product publication states.

    State diagram:
        DRAFT ──── publish ────► PUBLISHED
          ▲                         │
          └─────── unpublish ───────┘

    Both states also transition to themselves, which makes publish and
    unpublish idempotent. There is no terminal state.
    """

    DRAFT = "draft"
    PUBLISHED = "published"

    @classmethod
    def from_flags(cls, is_draft: bool, is_published: bool) -> "PublicationStatus":
        """Read the state from stored draft/published flags.

        Args:
            is_draft: Stored draft flag.
            is_published: Stored published flag.

        Returns:
            The matching status.
        """
        if is_published and not is_draft:
            return cls.PUBLISHED
        return cls.DRAFT

    def flags(self) -> tuple[bool, bool]:
        """Get the (is_draft, is_published) pair stored for this state."""
        if self is PublicationStatus.PUBLISHED:
            return False, True
        return True, False

    def can_transition_to(self, target: "PublicationStatus") -> bool:
        """Check if transition to target state is valid.

        Args:
            target: Target state to transition to.

        Returns:
            True if transition is valid.
        """
        return target in _PUBLICATION_TRANSITIONS.get(self, set())

    def allowed_transitions(self) -> list["PublicationStatus"]:
        """Get list of valid target states."""
        return list(_PUBLICATION_TRANSITIONS.get(self, set()))

    def is_visible(self) -> bool:
        """Check if the product shows up in storefront listings."""
        return self is PublicationStatus.PUBLISHED


# Complete for the two current states: validate_publication_transition only
# raises for states added later without a full row here.
_PUBLICATION_TRANSITIONS: dict[PublicationStatus, set[PublicationStatus]] = {
    PublicationStatus.DRAFT: {PublicationStatus.DRAFT, PublicationStatus.PUBLISHED},
    PublicationStatus.PUBLISHED: {PublicationStatus.PUBLISHED, PublicationStatus.DRAFT},
}


def validate_publication_transition(
    product_id: str,
    current_status: PublicationStatus,
    target_status: PublicationStatus,
) -> None:
    """Validate and raise if a publication transition is invalid.

    Args:
        product_id: Product identifier for error message.
        current_status: Current publication status.
        target_status: Target publication status.

    Raises:
        InvalidStateTransitionError: If transition is not valid.
    """
    if not current_status.can_transition_to(target_status):
        raise InvalidStateTransitionError(
            entity_type="Product",
            entity_id=product_id,
            current_state=current_status.value,
            target_state=target_status.value,
            allowed_transitions=[s.value for s in current_status.allowed_transitions()],
        )
