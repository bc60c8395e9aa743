"""
Turn backend JSON into typed records.

The backend is not consistent about shapes: list fields sometimes arrive as
real arrays, sometimes as JSON encoded inside a string, and `location` may be
an object or a JSON string. All of that is sorted out here, once.
"""
import json
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from dinewithus.core.config import settings
from dinewithus.core.exceptions import InvalidDateError
from dinewithus.core.logger import logger
from dinewithus.models.booking import Booking, DinnerSnapshot, Review
from dinewithus.models.dinner import Dinner, Host, Location
from dinewithus.services.booking_status import normalize_status
from dinewithus.services.cancellation_policy import normalize_policy, parse_dinner_start

DEFAULT_DINNER_TIME = "19:00"


def normalize_string_list(value: Any) -> List[str]:
    """
    Normalize a "string or string array" field to a list of strings.
    Accepts a list, a JSON-encoded list, a comma separated string or None.
    """
    if value is None:
        return []

    if isinstance(value, (list, tuple)):
        items = []
        for item in value:
            if item is None:
                continue
            text = str(item).strip()
            if text:
                items.append(text)
        return items

    if isinstance(value, str):
        text = value.strip()
        if not text:
            return []
        if text.startswith("["):
            try:
                decoded = json.loads(text)
            except json.JSONDecodeError:
                decoded = None
            if isinstance(decoded, list):
                return normalize_string_list(decoded)
        return [part.strip() for part in text.split(",") if part.strip()]

    return [str(value)]


def _decode_object(value: Any) -> Dict[str, Any]:
    if isinstance(value, dict):
        return value
    if isinstance(value, str) and value.strip().startswith("{"):
        try:
            decoded = json.loads(value)
        except json.JSONDecodeError:
            return {}
        return decoded if isinstance(decoded, dict) else {}
    return {}


def _valid_images(value: Any) -> List[str]:
    # Blob URLs left over from unfinished uploads are dropped
    return [img for img in normalize_string_list(value) if img.startswith(("http://", "https://"))]


def transform_location(value: Any) -> Location:
    data = _decode_object(value)
    coordinates = data.get("coordinates")
    return Location(
        address=data.get("address") or "",
        city=data.get("city") or "",
        state=data.get("state") or "",
        neighborhood=data.get("neighborhood") or data.get("city") or "",
        coordinates=coordinates if isinstance(coordinates, dict) else None,
    )


def transform_review(value: Any) -> Optional[Review]:
    if not isinstance(value, dict) or value.get("rating") is None:
        return None
    try:
        return Review(rating=value["rating"], comment=value.get("comment"))
    except ValidationError as e:
        logger.warning(f"⚠️ Ignoring malformed review: {e}")
        return None


def transform_dinner(payload: Dict[str, Any]) -> Dinner:
    """
    Backend dinner object to a listing Dinner.
    Raises InvalidDateError when the dinner date cannot be read.
    """
    images = _valid_images(payload.get("images"))
    host_data = payload.get("host") or {}
    capacity = payload.get("capacity") or 0
    available = payload.get("available")

    host = Host(
        id=host_data.get("id") or payload.get("hostId") or "",
        name=host_data.get("name") or "Unknown Host",
        avatar=host_data.get("image") or host_data.get("avatar"),
        superhost=bool(host_data.get("superhost")),
        joined_date=host_data.get("createdAt") or host_data.get("joinedDate"),
        response_rate=host_data.get("responseRate") or 0,
        response_time=host_data.get("responseTime") or "within 24 hours",
        bio=host_data.get("bio"),
    )

    return Dinner(
        id=str(payload.get("id")),
        title=payload.get("title") or "",
        description=payload.get("description") or "",
        price=payload.get("price") or 0,
        currency=payload.get("currency") or settings.CURRENCY,
        cuisine=payload.get("cuisine") or "Other",
        start=parse_dinner_start(payload.get("date"), payload.get("time") or DEFAULT_DINNER_TIME),
        duration=payload.get("duration"),
        capacity=capacity,
        available=capacity if available is None else available,
        instant_book=bool(payload.get("instantBook")),
        rating=payload.get("rating") or 0,
        review_count=payload.get("reviewCount") or 0,
        thumbnail=payload.get("thumbnail") or (images[0] if images else None),
        images=images,
        host=host,
        location=transform_location(payload.get("location")),
        menu=normalize_string_list(payload.get("menu")),
        included=normalize_string_list(payload.get("included")),
        house_rules=normalize_string_list(payload.get("houseRules")),
        dietary=normalize_string_list(payload.get("dietary")),
        languages=normalize_string_list(payload.get("languages")),
        cancellation_policy=normalize_policy(payload.get("cancellationPolicy")),
        is_active=payload.get("isActive") is not False,
    )


def transform_dinner_snapshot(payload: Dict[str, Any]) -> DinnerSnapshot:
    raw_date = payload.get("date")
    try:
        start = parse_dinner_start(raw_date, payload.get("time"))
    except InvalidDateError:
        # Keep the booking listable, the refund preview will refuse it
        logger.warning(f"⚠️ Dinner {payload.get('id')} has an unreadable date: {raw_date!r}")
        start = None

    images = _valid_images(payload.get("images"))
    host = payload.get("host") or {}

    return DinnerSnapshot(
        id=payload.get("id"),
        title=payload.get("title") or "",
        start=start,
        raw_date=None if raw_date is None else str(raw_date),
        cancellation_policy=normalize_policy(payload.get("cancellationPolicy")),
        price=payload.get("price"),
        capacity=payload.get("capacity"),
        image=payload.get("thumbnail") or (images[0] if images else None),
        location=transform_location(payload.get("location")).display(),
        host_id=host.get("id") or payload.get("hostId"),
        host_name=host.get("name"),
    )


def transform_booking(payload: Dict[str, Any]) -> Booking:
    """Backend BookingResponse to a Booking. Raises ValidationError on a broken record."""
    dinner = payload.get("dinner")
    user = payload.get("user") or {}

    total = payload.get("totalPrice")
    if total is None:
        total = payload.get("totalAmount")

    return Booking(
        id=str(payload.get("id") or ""),
        status=normalize_status(payload.get("status")),
        guests=payload.get("guests") or 1,
        total_amount=0 if total is None else total,
        message=payload.get("message"),
        created_at=payload.get("createdAt"),
        guest_id=user.get("id") or payload.get("userId"),
        guest_name=user.get("name"),
        dinner=transform_dinner_snapshot(dinner) if isinstance(dinner, dict) else None,
        review=transform_review(payload.get("review")),
        host_review=transform_review(payload.get("hostReview")),
    )
