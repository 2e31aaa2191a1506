"""Tests for lifecycle transition tables."""

import pytest

from app.core.exceptions import InvalidTransitionException
from app.core.state_machines import (
    APPOINTMENT_LIFECYCLE,
    ORDER_LIFECYCLE,
    PAYMENT_LIFECYCLE,
    VERIFICATION_LIFECYCLE,
)


@pytest.mark.parametrize(
    ("current", "target"),
    [
        ("pending_payment", "confirmed"),
        ("pending_payment", "cancelled"),
        ("confirmed", "in_progress"),
        ("confirmed", "no_show"),
        ("in_progress", "completed"),
    ],
)
def test_appointment_allowed_transitions(current: str, target: str) -> None:
    assert APPOINTMENT_LIFECYCLE.can_transition(current, target)


@pytest.mark.parametrize("terminal", ["completed", "cancelled", "no_show"])
def test_appointment_terminal_states(terminal: str) -> None:
    assert APPOINTMENT_LIFECYCLE.is_terminal(terminal)
    assert not APPOINTMENT_LIFECYCLE.can_transition(terminal, "confirmed")


def test_appointment_cannot_skip_payment() -> None:
    assert not APPOINTMENT_LIFECYCLE.can_transition("pending_payment", "in_progress")


def test_ensure_raises_conflict() -> None:
    with pytest.raises(InvalidTransitionException) as exc_info:
        ORDER_LIFECYCLE.ensure("dispatched", "cancelled")
    assert exc_info.value.status_code == 409
    assert exc_info.value.current == "dispatched"


def test_payment_refund_only_after_completion() -> None:
    assert PAYMENT_LIFECYCLE.can_transition("completed", "refunded")
    assert not PAYMENT_LIFECYCLE.can_transition("pending", "refunded")


def test_verification_is_one_way() -> None:
    assert VERIFICATION_LIFECYCLE.can_transition("pending", "verified")
    assert not VERIFICATION_LIFECYCLE.can_transition("verified", "pending")
    assert not VERIFICATION_LIFECYCLE.can_transition("rejected", "verified")
