from datetime import datetime
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Query
from pydantic import ValidationError

from dinewithus.core.logger import logger
from dinewithus.core.security import get_bearer_token
from dinewithus.models.booking import Booking, BookingView, CancellationDecision, CreateBookingRequest
from dinewithus.models.enums import ViewerRole
from dinewithus.services.booking_service import BookingService
from dinewithus.services.transforms import transform_booking

router = APIRouter()
booking_service = BookingService()


def get_booking_service() -> BookingService:
    return booking_service


@router.get("/bookings/guest/{user_id}", response_model=List[BookingView])
async def list_guest_bookings(
    user_id: str,
    token: str = Depends(get_bearer_token),
    service: BookingService = Depends(get_booking_service),
):
    return await service.list_bookings(user_id, ViewerRole.GUEST, token)


@router.get("/bookings/host/{host_id}", response_model=List[BookingView])
async def list_host_bookings(
    host_id: str,
    token: str = Depends(get_bearer_token),
    service: BookingService = Depends(get_booking_service),
):
    return await service.list_bookings(host_id, ViewerRole.HOST, token)


@router.post("/bookings", response_model=Booking)
async def create_booking(
    req: CreateBookingRequest,
    token: str = Depends(get_bearer_token),
    service: BookingService = Depends(get_booking_service),
):
    return await service.create_booking(req, token)


@router.get("/bookings/{booking_id}/cancellation-preview", response_model=CancellationDecision)
async def cancellation_preview(
    booking_id: str,
    user_id: str = Query(..., alias="userId"),
    now: Optional[datetime] = None,
    token: str = Depends(get_bearer_token),
    service: BookingService = Depends(get_booking_service),
):
    """Refund preview for one of the guest's bookings, as currently known to the backend."""
    booking = await service.get_booking(booking_id, user_id, token)
    if booking is None:
        raise HTTPException(status_code=404, detail="Booking not found")
    return service.preview_cancellation(booking, now)


@router.post("/bookings/{booking_id}/cancellation-preview", response_model=CancellationDecision)
async def cancellation_preview_from_payload(
    booking_id: str,
    payload: Dict[str, Any] = Body(...),
    now: Optional[datetime] = None,
    service: BookingService = Depends(get_booking_service),
):
    """
    Refund preview for a booking the caller already holds (raw backend JSON).
    No backend call is made.
    """
    try:
        booking = transform_booking(payload)
    except ValidationError as e:
        logger.warning(f"⚠️ Rejecting malformed booking payload for {booking_id}: {e.error_count()} errors")
        raise HTTPException(status_code=422, detail="Malformed booking")

    if booking.id != booking_id:
        raise HTTPException(status_code=422, detail="Booking id does not match the URL")

    return service.preview_cancellation(booking, now)


@router.post("/bookings/{booking_id}/cancel", response_model=List[BookingView])
async def cancel_booking(
    booking_id: str,
    user_id: str = Query(..., alias="userId"),
    token: str = Depends(get_bearer_token),
    service: BookingService = Depends(get_booking_service),
):
    return await service.cancel_booking(booking_id, user_id, token)


@router.post("/bookings/{booking_id}/accept", response_model=List[BookingView])
async def accept_booking(
    booking_id: str,
    host_id: str = Query(..., alias="hostId"),
    token: str = Depends(get_bearer_token),
    service: BookingService = Depends(get_booking_service),
):
    return await service.respond_to_booking(booking_id, True, host_id, token)


@router.post("/bookings/{booking_id}/decline", response_model=List[BookingView])
async def decline_booking(
    booking_id: str,
    host_id: str = Query(..., alias="hostId"),
    token: str = Depends(get_bearer_token),
    service: BookingService = Depends(get_booking_service),
):
    return await service.respond_to_booking(booking_id, False, host_id, token)
