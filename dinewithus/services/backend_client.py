import requests
from typing import Any, Dict, List, Optional

from dinewithus.core.config import settings
from dinewithus.core.exceptions import BackendError
from dinewithus.core.logger import logger
from dinewithus.models.booking import CreateBookingRequest
from dinewithus.models.enums import BookingStatus


class BackendClient:
    """
    Blocking HTTP client for the booking backend.

    Responses come wrapped as {"success", "data", "pagination", "error", "code"};
    methods return the unwrapped `data`. Failures raise BackendError, there is
    no retry here.
    """

    def __init__(self, base_url: str = None, timeout: float = None, session: Optional[requests.Session] = None):
        self.base_url = (base_url or settings.BASE_URL).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.API_TIMEOUT
        self.session = session or requests.Session()

    def url(self, endpoint: str) -> str:
        path = endpoint if endpoint.startswith("/") else f"/{endpoint}"
        return f"{self.base_url}{path}"

    def _headers(self, token: Optional[str]) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    def request(self, method: str, endpoint: str, token: Optional[str] = None,
                json: Optional[dict] = None, params: Optional[dict] = None) -> Any:
        url = self.url(endpoint)
        try:
            response = self.session.request(
                method, url, json=json, params=params,
                headers=self._headers(token), timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.error(f"❌ Backend unreachable ({method} {url}): {e}")
            raise BackendError("Network error") from e

        try:
            body = response.json()
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {"data": body}

        if not response.ok:
            message = body.get("error") or body.get("message") or "Request failed"
            logger.error(f"❌ Backend Error {response.status_code} ({method} {url}): {message}")
            raise BackendError(message, status_code=response.status_code, code=body.get("code"))

        return body.get("data", body)

    # Bookings

    def get_user_bookings(self, user_id: str, token: str, status: Optional[str] = None) -> List[dict]:
        params = {"status": status.upper()} if status else None
        data = self.request("GET", f"/bookings/user/{user_id}", token, params=params)
        return data if isinstance(data, list) else []

    def get_host_bookings(self, host_id: str, token: str) -> List[dict]:
        data = self.request("GET", f"/bookings/host/{host_id}", token)
        return data if isinstance(data, list) else []

    def create_booking(self, booking: CreateBookingRequest, token: str) -> dict:
        logger.info(f"📥 Creating booking for dinner {booking.dinner_id} ({booking.guests} guests)")
        return self.request("POST", "/bookings", token, json=booking.to_backend())

    def update_booking_status(self, booking_id: str, status: BookingStatus, token: str) -> dict:
        status = BookingStatus(status)
        logger.info(f"✏️ Booking {booking_id} -> {status.value.upper()}")
        return self.request(
            "PATCH", f"/bookings/{booking_id}/status", token,
            json={"status": status.value.upper()},
        )

    def cancel_booking(self, booking_id: str, token: str) -> dict:
        return self.update_booking_status(booking_id, BookingStatus.CANCELLED, token)

    # Dinners

    def get_dinners(self, limit: int = 20, page: int = 1) -> List[dict]:
        data = self.request("GET", "/dinners", params={"limit": limit, "page": page})
        return data if isinstance(data, list) else []

    def get_host_dinners(self, host_id: str, token: str) -> List[dict]:
        data = self.request("GET", f"/host/{host_id}/dinners", token)
        return data if isinstance(data, list) else []

    # Auth

    def get_current_user(self, token: str) -> dict:
        return self.request("GET", "/auth/current-user", token)


backend_client = BackendClient()
