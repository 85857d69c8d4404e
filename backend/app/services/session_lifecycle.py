# backend/app/services/session_lifecycle.py
"""
Session status lifecycle.

pending -> approved | rejected | cancelled
approved -> in-progress | cancelled
in-progress -> completed | cancelled

completed, rejected, cancelled and no-show are terminal. Transitions are
driven by the booking workflow; the conflict checker only reads the
current status to decide whether a session still holds its slot.
"""

from __future__ import annotations

from typing import Dict, FrozenSet, Union

from ..core.enums import SessionStatus
from ..core.exceptions import InvalidStatusTransitionException

StatusLike = Union[SessionStatus, str]

VALID_TRANSITIONS: Dict[SessionStatus, FrozenSet[SessionStatus]] = {
    SessionStatus.PENDING: frozenset(
        {SessionStatus.APPROVED, SessionStatus.REJECTED, SessionStatus.CANCELLED}
    ),
    SessionStatus.APPROVED: frozenset({SessionStatus.IN_PROGRESS, SessionStatus.CANCELLED}),
    SessionStatus.IN_PROGRESS: frozenset({SessionStatus.COMPLETED, SessionStatus.CANCELLED}),
    SessionStatus.COMPLETED: frozenset(),
    SessionStatus.REJECTED: frozenset(),
    SessionStatus.CANCELLED: frozenset(),
    SessionStatus.NO_SHOW: frozenset(),
}

OCCUPYING_STATUSES: FrozenSet[SessionStatus] = frozenset(
    {SessionStatus.PENDING, SessionStatus.APPROVED, SessionStatus.IN_PROGRESS}
)

# Sessions that may still be moved to another slot
RESCHEDULABLE_STATUSES: FrozenSet[SessionStatus] = frozenset(
    {SessionStatus.PENDING, SessionStatus.APPROVED}
)


def is_occupying(status: StatusLike) -> bool:
    """True when a session in this status reserves its time slot."""
    return SessionStatus(status) in OCCUPYING_STATUSES


def is_reschedulable(status: StatusLike) -> bool:
    return SessionStatus(status) in RESCHEDULABLE_STATUSES


def is_terminal(status: StatusLike) -> bool:
    return not VALID_TRANSITIONS[SessionStatus(status)]


def can_transition(current: StatusLike, target: StatusLike) -> bool:
    return SessionStatus(target) in VALID_TRANSITIONS[SessionStatus(current)]


def ensure_transition(current: StatusLike, target: StatusLike) -> SessionStatus:
    """
    Validate a status change.

    Returns:
        The target status as a SessionStatus.

    Raises:
        InvalidStatusTransitionException: If the lifecycle forbids the change.
    """
    current_status = SessionStatus(current)
    target_status = SessionStatus(target)
    if target_status not in VALID_TRANSITIONS[current_status]:
        raise InvalidStatusTransitionException(current_status.value, target_status.value)
    return target_status
