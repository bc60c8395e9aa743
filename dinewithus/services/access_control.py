from typing import Optional

from dinewithus.models.enums import ViewerRole
from dinewithus.models.user import User


def can_book_dinners(user: Optional[User]) -> bool:
    # Guests need a phone number on file before they can book
    if not user or user.role != ViewerRole.GUEST.value:
        return False
    return user.has_phone


def can_create_dinners(user: Optional[User]) -> bool:
    return bool(user) and user.role == ViewerRole.HOST.value


def can_access_host_dashboard(user: Optional[User]) -> bool:
    return bool(user) and user.role == ViewerRole.HOST.value


def get_access_denied_message(user: Optional[User]) -> str:
    if not user:
        return "You must be logged in to book dinners."
    if user.role == ViewerRole.HOST.value:
        return "Host accounts cannot book dinners. Switch to a guest account to make bookings."
    if not user.has_phone:
        return "You must add a phone number to your profile before you can book dinners. Please update your profile."
    return "You must be logged in as a guest to book dinners."


def get_access_denied_message_for_host_dashboard(user: Optional[User]) -> str:
    if user and user.role == ViewerRole.GUEST.value:
        return "Guest accounts cannot access the host dashboard. Switch to a host account or sign up as a host."
    return "You must be logged in as a host to access the dashboard."


def get_role_based_redirect(user: Optional[User]) -> str:
    """Where to send a user who hit a page their role cannot use."""
    if user and user.role == ViewerRole.HOST.value:
        return "/host/dashboard"
    if user and user.role == ViewerRole.GUEST.value and not user.has_phone:
        return "/profile?tab=overview"
    return "/auth/signin"


def get_redirect_url(user: Optional[User]) -> str:
    """Landing page right after sign-in."""
    if not user:
        return "/"
    if user.needs_profile_completion:
        return "/auth/complete-profile"
    if user.needs_role_selection:
        return "/auth/role-selection"
    if user.role == ViewerRole.HOST.value:
        return "/host/dashboard"
    return "/"
