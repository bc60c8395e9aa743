"""
Cancellation refund preview.

Given what a guest paid, when the dinner starts and the host's cancellation
policy, work out how much of the money comes back. The result is shown in the
confirmation dialog before the backend is asked to cancel; the backend stays
the authority on what is actually refunded.

Policies:
- flexible: full refund up to 24 hours before the dinner
- moderate: full refund up to 5 days before the dinner
- strict: 50% refund up to 7 days before the dinner

Thresholds are inclusive. Any unknown or missing policy is treated as flexible.
"""
import math
from datetime import date, datetime, time as dt_time
from decimal import Decimal, ROUND_HALF_UP
from numbers import Real
from typing import NamedTuple, Optional, Union
from zoneinfo import ZoneInfo

from dinewithus.core.config import settings
from dinewithus.core.exceptions import InvalidAmountError, InvalidDateError
from dinewithus.models.booking import Booking, CancellationDecision
from dinewithus.models.enums import CancellationPolicy

TZ = ZoneInfo(settings.TIMEZONE)

SECONDS_PER_HOUR = 3600
HOURS_PER_DAY = 24
CENT = Decimal("0.01")


class PolicyRule(NamedTuple):
    threshold: float
    in_days: bool
    refund_percentage: int
    met_message: str
    missed_message: str


POLICY_RULES = {
    CancellationPolicy.FLEXIBLE: PolicyRule(
        24, False, 100,
        "Full refund - cancelled 24+ hours before dinner",
        "No refund - cancelled less than 24 hours before dinner",
    ),
    CancellationPolicy.MODERATE: PolicyRule(
        5, True, 100,
        "Full refund - cancelled 5+ days before dinner",
        "No refund - cancelled less than 5 days before dinner",
    ),
    CancellationPolicy.STRICT: PolicyRule(
        7, True, 50,
        "50% refund - cancelled 7+ days before dinner",
        "No refund - cancelled less than 7 days before dinner",
    ),
}

POLICY_DESCRIPTIONS = {
    CancellationPolicy.FLEXIBLE: "Flexible - Full refund 24h before",
    CancellationPolicy.MODERATE: "Moderate - Full refund 5 days before",
    CancellationPolicy.STRICT: "Strict - 50% refund up to 7 days before",
}


def normalize_policy(raw: Optional[Union[str, CancellationPolicy]]) -> CancellationPolicy:
    """Unknown, empty and missing policies all mean flexible."""
    if isinstance(raw, CancellationPolicy):
        return raw
    if isinstance(raw, str):
        try:
            return CancellationPolicy(raw.strip().lower())
        except ValueError:
            pass
    return CancellationPolicy.FLEXIBLE


def describe_policy(raw: Optional[Union[str, CancellationPolicy]]) -> str:
    return POLICY_DESCRIPTIONS[normalize_policy(raw)]


def _parse_time(value: str) -> dt_time:
    for fmt in ("%H:%M:%S", "%H:%M"):
        try:
            return datetime.strptime(value.strip(), fmt).time()
        except ValueError:
            continue
    raise InvalidDateError(f"Invalid dinner time: {value!r}")


def parse_dinner_start(value, time_of_day: Optional[str] = None) -> datetime:
    """
    Build the dinner start instant from what the backend sends.

    `value` is a datetime, a date or an ISO-8601 string. When `time_of_day`
    ("HH:MM" or "HH:MM:SS") is given, only the calendar day of `value` is used
    and the time comes from `time_of_day`, the way the dinner pages display it.
    Raises InvalidDateError instead of guessing.
    """
    if isinstance(value, datetime):
        if time_of_day:
            return datetime.combine(value.date(), _parse_time(time_of_day), tzinfo=value.tzinfo)
        return value

    if isinstance(value, date):
        return datetime.combine(value, _parse_time(time_of_day) if time_of_day else dt_time.min)

    if not isinstance(value, str) or not value.strip():
        raise InvalidDateError(f"Invalid dinner date: {value!r}")

    text = value.strip()
    try:
        if time_of_day:
            day = datetime.strptime(text[:10], "%Y-%m-%d").date()
            return datetime.combine(day, _parse_time(time_of_day))
        return datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError as e:
        raise InvalidDateError(f"Invalid dinner date: {value!r}") from e


def align_datetimes(dinner_start: datetime, now: datetime):
    # Naive values are local time in the configured zone
    if (dinner_start.tzinfo is None) == (now.tzinfo is None):
        return dinner_start, now
    if dinner_start.tzinfo is None:
        return dinner_start.replace(tzinfo=TZ), now
    return dinner_start, now.replace(tzinfo=TZ)


def _validate_amount(total_amount) -> Decimal:
    if isinstance(total_amount, bool) or not isinstance(total_amount, (Real, Decimal)):
        raise InvalidAmountError(f"Invalid booking amount: {total_amount!r}")
    if isinstance(total_amount, Decimal):
        if not total_amount.is_finite() or total_amount < 0:
            raise InvalidAmountError(f"Invalid booking amount: {total_amount!r}")
        return total_amount
    if not math.isfinite(total_amount) or total_amount < 0:
        raise InvalidAmountError(f"Invalid booking amount: {total_amount!r}")
    return Decimal(str(total_amount))


def compute_cancellation_decision(
    total_amount: Union[float, int, Decimal],
    dinner_datetime: Union[datetime, str],
    cancellation_policy: Optional[Union[str, CancellationPolicy]],
    now: datetime,
) -> CancellationDecision:
    """
    Refund preview for cancelling a booking at `now`.
    Pure: the same inputs always give the same decision.
    """
    # Amounts are money: work in whole cents throughout
    amount = _validate_amount(total_amount).quantize(CENT, rounding=ROUND_HALF_UP)
    dinner_start = parse_dinner_start(dinner_datetime)
    dinner_start, now = align_datetimes(dinner_start, now)

    policy = normalize_policy(cancellation_policy)
    rule = POLICY_RULES[policy]

    hours_until = (dinner_start - now).total_seconds() / SECONDS_PER_HOUR
    days_until = hours_until / HOURS_PER_DAY

    remaining = days_until if rule.in_days else hours_until
    if remaining >= rule.threshold:
        percentage, message = rule.refund_percentage, rule.met_message
    else:
        percentage, message = 0, rule.missed_message

    refund = (amount * percentage / 100).quantize(CENT, rounding=ROUND_HALF_UP)
    refund = min(refund, amount)

    return CancellationDecision(
        policy=policy,
        total_amount=float(amount),
        hours_until_dinner=hours_until,
        days_until_dinner=days_until,
        refund_percentage=percentage,
        refund_amount=float(refund),
        non_refundable_amount=float(amount - refund),
        message=message,
    )


def preview_cancellation(booking: Booking, now: datetime) -> CancellationDecision:
    dinner = booking.dinner
    if dinner is None or dinner.start is None:
        raw = dinner.raw_date if dinner else None
        raise InvalidDateError(f"Booking {booking.id} has no usable dinner date ({raw!r})")

    return compute_cancellation_decision(
        booking.total_amount, dinner.start, dinner.cancellation_policy, now
    )
