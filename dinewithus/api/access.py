from fastapi import APIRouter, Depends

from dinewithus.core.security import get_bearer_token
from dinewithus.api.bookings import get_booking_service
from dinewithus.services.access_control import (
    can_access_host_dashboard,
    can_book_dinners,
    can_create_dinners,
    get_access_denied_message,
    get_access_denied_message_for_host_dashboard,
    get_redirect_url,
    get_role_based_redirect,
)
from dinewithus.services.booking_service import BookingService

router = APIRouter()


@router.get("/access")
async def access_summary(
    token: str = Depends(get_bearer_token),
    service: BookingService = Depends(get_booking_service),
):
    """What the signed-in user may do, and where the UI should send them."""
    user = await service.get_current_user(token)

    can_book = can_book_dinners(user)
    can_host = can_access_host_dashboard(user)

    return {
        "role": user.role,
        "canBookDinners": can_book,
        "canCreateDinners": can_create_dinners(user),
        "canAccessHostDashboard": can_host,
        "bookingDeniedMessage": None if can_book else get_access_denied_message(user),
        "dashboardDeniedMessage": None if can_host else get_access_denied_message_for_host_dashboard(user),
        "redirectUrl": get_redirect_url(user),
        "deniedRedirectUrl": get_role_based_redirect(user),
    }
