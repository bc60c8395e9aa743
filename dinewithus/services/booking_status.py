"""
Booking status normalization and the UI actions each status permits.

The backend reports statuses in whatever case it likes ("CONFIRMED",
"Confirmed", ...). Everything in here is pure and never raises.
"""
from typing import Dict, FrozenSet, NamedTuple, Optional, Union

from dinewithus.core.logger import logger
from dinewithus.models.enums import Action, BookingStatus, ViewerRole

NO_ACTIONS: FrozenSet[Action] = frozenset()

# Allowed transitions. `completed` is reached by time, the rest by guest or host
BOOKING_TRANSITIONS: Dict[BookingStatus, FrozenSet[BookingStatus]] = {
    BookingStatus.PENDING: frozenset({BookingStatus.CONFIRMED, BookingStatus.CANCELLED}),
    BookingStatus.CONFIRMED: frozenset({BookingStatus.COMPLETED, BookingStatus.CANCELLED}),
    BookingStatus.COMPLETED: frozenset(),
    BookingStatus.CANCELLED: frozenset(),
}


class StatusClassification(NamedTuple):
    status: BookingStatus
    recognized: bool
    raw: Optional[str]


def classify_status(raw: Optional[str]) -> StatusClassification:
    """
    Map a backend status string onto the canonical set.
    Unknown values fall back to `pending` with `recognized=False` so callers
    can tell contract drift apart from a genuine pending booking.
    """
    if isinstance(raw, BookingStatus):
        return StatusClassification(raw, True, raw.value)

    if isinstance(raw, str):
        try:
            return StatusClassification(BookingStatus(raw.strip().lower()), True, raw)
        except ValueError:
            pass

    return StatusClassification(BookingStatus.PENDING, False, raw)


def normalize_status(raw: Optional[str]) -> BookingStatus:
    result = classify_status(raw)
    if not result.recognized:
        logger.warning(f"⚠️ Unknown booking status {raw!r}, treating as pending")
    return result.status


def allowed_actions(status: Union[BookingStatus, str], viewer_role: Union[ViewerRole, str]) -> FrozenSet[Action]:
    """
    Actions the viewer may take on a booking in `status`.
    Whether a guest already reviewed the booking is the caller's check.
    """
    try:
        status = BookingStatus(status)
        role = ViewerRole(viewer_role)
    except ValueError:
        return NO_ACTIONS

    if role is ViewerRole.GUEST:
        if status is BookingStatus.COMPLETED:
            return frozenset({Action.WRITE_REVIEW})
        if status in (BookingStatus.CONFIRMED, BookingStatus.PENDING):
            return frozenset({Action.CANCEL})
        return NO_ACTIONS

    if status is BookingStatus.PENDING:
        return frozenset({Action.ACCEPT, Action.DECLINE})
    return NO_ACTIONS


def can_transition(current: BookingStatus, target: BookingStatus) -> bool:
    return target in BOOKING_TRANSITIONS.get(current, frozenset())
