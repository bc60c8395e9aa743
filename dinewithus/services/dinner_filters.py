from datetime import datetime
from typing import Iterable, List

from dinewithus.models.dinner import Dinner
from dinewithus.models.enums import DinnerStatus
from dinewithus.services.cancellation_policy import align_datetimes


def is_dinner_past(dinner: Dinner, now: datetime) -> bool:
    """
    A dinner is past from its start time on.
    Bookings stay open right up to the start.
    """
    start, now = align_datetimes(dinner.start, now)
    return start <= now


def is_dinner_booked(dinner: Dinner) -> bool:
    return dinner.available <= 0


def should_show_in_listings(dinner: Dinner, now: datetime) -> bool:
    """Home page and search only show dinners that can still be booked."""
    if is_dinner_booked(dinner):
        return False
    if is_dinner_past(dinner, now):
        return False
    return True


def get_dinner_status(dinner: Dinner, now: datetime, is_active: bool = True) -> DinnerStatus:
    """Status badge on the host dashboard."""
    if not is_active:
        return DinnerStatus.DRAFT

    if is_dinner_booked(dinner) or is_dinner_past(dinner, now):
        return DinnerStatus.COMPLETED

    return DinnerStatus.UPCOMING


def filter_listings(dinners: Iterable[Dinner], now: datetime) -> List[Dinner]:
    return [d for d in dinners if should_show_in_listings(d, now)]
