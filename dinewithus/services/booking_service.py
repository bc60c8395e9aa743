import asyncio
from datetime import datetime
from typing import List, Optional

from pydantic import ValidationError

from dinewithus.core.exceptions import BookingActionError, BookingNotFoundError
from dinewithus.core.logger import logger
from dinewithus.models.booking import Booking, BookingView, CancellationDecision, CreateBookingRequest
from dinewithus.models.enums import Action, BookingStatus, ViewerRole
from dinewithus.models.user import User
from dinewithus.services.backend_client import BackendClient, backend_client
from dinewithus.services.booking_status import allowed_actions, can_transition
from dinewithus.services.cancellation_policy import TZ, preview_cancellation
from dinewithus.services.transforms import transform_booking

ACTION_ORDER = [Action.WRITE_REVIEW, Action.CANCEL, Action.ACCEPT, Action.DECLINE]


class BookingService:
    def __init__(self, client: BackendClient = None):
        self.client = client or backend_client

    def _transform_all(self, payloads: List[dict]) -> List[Booking]:
        bookings = []
        for payload in payloads:
            try:
                bookings.append(transform_booking(payload))
            except ValidationError as e:
                logger.error(f"❌ Skipping malformed booking {payload.get('id')!r}: {e}")
        return bookings

    async def _load(self, viewer_id: str, role: ViewerRole, token: str) -> List[Booking]:
        if role is ViewerRole.HOST:
            payloads = await asyncio.to_thread(self.client.get_host_bookings, viewer_id, token)
        else:
            payloads = await asyncio.to_thread(self.client.get_user_bookings, viewer_id, token)
        return self._transform_all(payloads)

    def _require(self, booking: Booking, role: ViewerRole, action: Action, target: Optional[BookingStatus] = None):
        """Refuse an action the booking's current status does not offer the viewer."""
        allowed = action in allowed_actions(booking.status, role)
        if allowed and target is not None:
            allowed = can_transition(booking.status, target)
        if not allowed:
            logger.warning(f"⛔ {action.value} refused for {booking.status.value} booking {booking.id}")
            raise BookingActionError(f"Cannot {action.value.replace('_', ' ')} a {booking.status.value} booking")

    def build_view(self, booking: Booking, role: ViewerRole) -> BookingView:
        actions = set(allowed_actions(booking.status, role))
        # One review per booking
        if booking.review is not None:
            actions.discard(Action.WRITE_REVIEW)
        return BookingView(booking=booking, actions=[a for a in ACTION_ORDER if a in actions])

    async def list_bookings(self, viewer_id: str, role: ViewerRole, token: str) -> List[BookingView]:
        """
        Bookings of a guest (their reservations) or a host (reservations for their dinners),
        each with the actions the viewer may take.
        """
        role = ViewerRole(role)
        bookings = await self._load(viewer_id, role, token)
        logger.info(f"📋 Loaded {len(bookings)} bookings for {role.value} {viewer_id}")
        return [self.build_view(b, role) for b in bookings]

    async def get_booking(self, booking_id: str, viewer_id: str, token: str,
                          role: ViewerRole = ViewerRole.GUEST) -> Optional[Booking]:
        for booking in await self._load(viewer_id, ViewerRole(role), token):
            if booking.id == booking_id:
                return booking
        return None

    async def _get_existing(self, booking_id: str, viewer_id: str, token: str, role: ViewerRole) -> Booking:
        booking = await self.get_booking(booking_id, viewer_id, token, role)
        if booking is None:
            raise BookingNotFoundError(f"Booking {booking_id} not found for {role.value} {viewer_id}")
        return booking

    def preview_cancellation(self, booking: Booking, now: Optional[datetime] = None) -> CancellationDecision:
        """Refund preview for a booking the guest can still cancel. Reads the clock when `now` is not given."""
        # A cancelled or completed booking has nothing left to refund
        self._require(booking, ViewerRole.GUEST, Action.CANCEL)
        if now is None:
            now = datetime.now(TZ)
        decision = preview_cancellation(booking, now)
        logger.info(
            f"💶 Cancellation preview for {booking.id}: {decision.refund_percentage}% "
            f"({decision.refund_amount:.2f} of {decision.total_amount:.2f})"
        )
        return decision

    async def create_booking(self, request: CreateBookingRequest, token: str) -> Booking:
        payload = await asyncio.to_thread(self.client.create_booking, request, token)
        booking = transform_booking(payload)
        logger.info(f"✅ Booking {booking.id} created ({booking.status.value})")
        return booking

    async def cancel_booking(self, booking_id: str, viewer_id: str, token: str) -> List[BookingView]:
        """Ask the backend to cancel, then return the refreshed guest list."""
        booking = await self._get_existing(booking_id, viewer_id, token, ViewerRole.GUEST)
        self._require(booking, ViewerRole.GUEST, Action.CANCEL, BookingStatus.CANCELLED)

        logger.info(f"🗑️ Cancelling booking {booking_id} for guest {viewer_id}")
        await asyncio.to_thread(self.client.cancel_booking, booking_id, token)
        return await self.list_bookings(viewer_id, ViewerRole.GUEST, token)

    async def respond_to_booking(self, booking_id: str, accept: bool, host_id: str, token: str) -> List[BookingView]:
        """Host accepts or declines a pending booking, then gets the refreshed host list."""
        action, status = (Action.ACCEPT, BookingStatus.CONFIRMED) if accept else (Action.DECLINE, BookingStatus.CANCELLED)
        booking = await self._get_existing(booking_id, host_id, token, ViewerRole.HOST)
        self._require(booking, ViewerRole.HOST, action, status)

        logger.info(f"{'👍' if accept else '👎'} Host {host_id} {'accepts' if accept else 'declines'} booking {booking_id}")
        await asyncio.to_thread(self.client.update_booking_status, booking_id, status, token)
        return await self.list_bookings(host_id, ViewerRole.HOST, token)

    async def get_current_user(self, token: str) -> User:
        payload = await asyncio.to_thread(self.client.get_current_user, token)
        return User.model_validate(payload)
