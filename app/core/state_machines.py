"""Allowed status transitions for every entity with a lifecycle."""

from collections.abc import Mapping

from app.core.exceptions import InvalidTransitionException


class StateMachine:
    """A named transition table; states absent as keys are terminal."""

    def __init__(self, entity: str, transitions: Mapping[str, frozenset[str]]):
        self.entity = entity
        self.transitions = transitions

    def can_transition(self, current: str, target: str) -> bool:
        return target in self.transitions.get(current, frozenset())

    def is_terminal(self, state: str) -> bool:
        return not self.transitions.get(state)

    def ensure(self, current: str, target: str) -> None:
        """Raise if ``current -> target`` is not allowed."""
        if not self.can_transition(current, target):
            raise InvalidTransitionException(self.entity, current, target)


APPOINTMENT_LIFECYCLE = StateMachine(
    "appointment",
    {
        "pending_payment": frozenset({"confirmed", "cancelled"}),
        "confirmed": frozenset({"in_progress", "cancelled", "no_show"}),
        "in_progress": frozenset({"completed", "cancelled"}),
    },
)

ORDER_LIFECYCLE = StateMachine(
    "order",
    {
        "pending_payment": frozenset({"placed", "cancelled"}),
        "placed": frozenset({"processing", "cancelled"}),
        "processing": frozenset({"dispatched", "cancelled"}),
        "dispatched": frozenset({"delivered"}),
    },
)

PAYMENT_LIFECYCLE = StateMachine(
    "payment",
    {
        "pending": frozenset({"completed", "failed"}),
        "completed": frozenset({"refunded"}),
    },
)

# No path leads back to pending once a decision is made.
VERIFICATION_LIFECYCLE = StateMachine(
    "doctor verification",
    {
        "pending": frozenset({"verified", "rejected"}),
    },
)
