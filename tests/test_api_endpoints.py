import pytest
from fastapi.testclient import TestClient
from unittest.mock import MagicMock

from dinewithus.main import app
from dinewithus.api.bookings import get_booking_service
from dinewithus.api.dinners import get_dinner_service
from dinewithus.core.exceptions import BackendError
from dinewithus.services.booking_service import BookingService
from dinewithus.services.dinner_service import DinnerService

client = TestClient(app)
AUTH = {"Authorization": "Bearer tok"}


def backend_booking(id="bk_1", status="CONFIRMED", total=170, policy="flexible", date="2025-06-14T00:00:00.000Z"):
    return {
        "id": id,
        "status": status,
        "guests": 2,
        "totalPrice": total,
        "dinner": {"id": "d_1", "title": "Paella", "date": date, "time": "19:30", "cancellationPolicy": policy},
    }


@pytest.fixture
def backend():
    # Swap the real HTTP client for a mock for the duration of a test
    mock = MagicMock()
    mock.get_user_bookings.return_value = []
    mock.get_host_bookings.return_value = []
    app.dependency_overrides[get_booking_service] = lambda: BookingService(client=mock)
    yield mock
    app.dependency_overrides.clear()


def test_health():
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"

def test_token_is_required(backend):
    response = client.get("/api/bookings/guest/u_1")
    assert response.status_code == 401

    response = client.get("/api/bookings/guest/u_1", headers={"Authorization": "Basic abc"})
    assert response.status_code == 401

def test_guest_bookings(backend):
    backend.get_user_bookings.return_value = [backend_booking(), backend_booking(id="bk_2", status="COMPLETED")]

    response = client.get("/api/bookings/guest/u_1", headers=AUTH)

    assert response.status_code == 200
    data = response.json()
    assert data[0]["booking"]["id"] == "bk_1"
    assert data[0]["booking"]["status"] == "confirmed"
    assert data[0]["booking"]["totalAmount"] == 170
    assert data[0]["actions"] == ["cancel"]
    assert data[1]["actions"] == ["write_review"]
    backend.get_user_bookings.assert_called_once_with("u_1", "tok")

def test_host_bookings(backend):
    backend.get_host_bookings.return_value = [backend_booking(status="PENDING")]

    response = client.get("/api/bookings/host/h_1", headers=AUTH)

    assert response.status_code == 200
    assert response.json()[0]["actions"] == ["accept", "decline"]

def test_cancellation_preview(backend):
    backend.get_user_bookings.return_value = [backend_booking(total=200, policy="strict")]

    response = client.get(
        "/api/bookings/bk_1/cancellation-preview",
        params={"userId": "u_1", "now": "2025-06-06T19:30:00"},
        headers=AUTH,
    )

    assert response.status_code == 200
    data = response.json()
    assert data["refundPercentage"] == 50
    assert data["refundAmount"] == 100
    assert data["nonRefundableAmount"] == 100
    assert data["daysUntilDinner"] == 8
    assert data["message"] == "50% refund - cancelled 7+ days before dinner"

def test_cancellation_preview_unknown_booking(backend):
    response = client.get("/api/bookings/nope/cancellation-preview", params={"userId": "u_1"}, headers=AUTH)
    assert response.status_code == 404

def test_cancellation_preview_from_payload(backend):
    response = client.post(
        "/api/bookings/bk_1/cancellation-preview",
        params={"now": "2025-06-14T09:30:00"},
        json=backend_booking(total=170),
    )

    assert response.status_code == 200
    data = response.json()
    assert data["refundPercentage"] == 0
    assert data["refundAmount"] == 0
    assert data["hoursUntilDinner"] == 10
    backend.get_user_bookings.assert_not_called()

def test_cancellation_preview_with_bad_date_blocks_the_flow(backend):
    response = client.post(
        "/api/bookings/bk_1/cancellation-preview",
        json=backend_booking(date="someday"),
    )
    assert response.status_code == 422
    assert response.json()["code"] == "INVALID_DATE"

def test_cancellation_preview_with_negative_amount(backend):
    response = client.post(
        "/api/bookings/bk_1/cancellation-preview",
        params={"now": "2025-06-01T12:00:00"},
        json=backend_booking(total=-10),
    )
    assert response.status_code == 422
    assert response.json()["code"] == "INVALID_AMOUNT"

def test_cancellation_preview_id_mismatch(backend):
    response = client.post("/api/bookings/other/cancellation-preview", json=backend_booking())
    assert response.status_code == 422

def test_cancel_booking(backend):
    backend.get_user_bookings.side_effect = [[backend_booking()], [backend_booking(status="CANCELLED")]]

    response = client.post("/api/bookings/bk_1/cancel", params={"userId": "u_1"}, headers=AUTH)

    assert response.status_code == 200
    assert response.json()[0]["booking"]["status"] == "cancelled"
    backend.cancel_booking.assert_called_once_with("bk_1", "tok")

def test_cancel_completed_booking_conflicts(backend):
    backend.get_user_bookings.return_value = [backend_booking(status="COMPLETED")]

    response = client.post("/api/bookings/bk_1/cancel", params={"userId": "u_1"}, headers=AUTH)

    assert response.status_code == 409
    assert response.json()["code"] == "ACTION_NOT_ALLOWED"
    backend.cancel_booking.assert_not_called()

def test_cancel_unknown_booking(backend):
    response = client.post("/api/bookings/nope/cancel", params={"userId": "u_1"}, headers=AUTH)
    assert response.status_code == 404
    assert response.json()["code"] == "BOOKING_NOT_FOUND"

def test_cancel_booking_backend_down(backend):
    backend.get_user_bookings.return_value = [backend_booking()]
    backend.cancel_booking.side_effect = BackendError("Network error")

    response = client.post("/api/bookings/bk_1/cancel", params={"userId": "u_1"}, headers=AUTH)

    assert response.status_code == 502
    assert response.json()["code"] == "NETWORK_ERROR"

def test_backend_client_errors_pass_through(backend):
    backend.get_user_bookings.return_value = [backend_booking()]
    backend.cancel_booking.side_effect = BackendError("Forbidden", status_code=403, code="FORBIDDEN")

    response = client.post("/api/bookings/bk_1/cancel", params={"userId": "u_1"}, headers=AUTH)

    assert response.status_code == 403
    assert response.json()["code"] == "FORBIDDEN"

def test_accept_and_decline(backend):
    backend.get_host_bookings.return_value = [backend_booking(status="PENDING")]

    response = client.post("/api/bookings/bk_1/accept", params={"hostId": "h_1"}, headers=AUTH)
    assert response.status_code == 200
    assert backend.update_booking_status.call_args[0][:2] == ("bk_1", "confirmed")

    response = client.post("/api/bookings/bk_1/decline", params={"hostId": "h_1"}, headers=AUTH)
    assert response.status_code == 200
    assert backend.update_booking_status.call_args[0][:2] == ("bk_1", "cancelled")

def test_accepting_cancelled_booking_conflicts(backend):
    backend.get_host_bookings.return_value = [backend_booking(status="CANCELLED")]

    response = client.post("/api/bookings/bk_1/accept", params={"hostId": "h_1"}, headers=AUTH)

    assert response.status_code == 409
    backend.update_booking_status.assert_not_called()

def test_no_preview_for_cancelled_booking(backend):
    response = client.post(
        "/api/bookings/bk_1/cancellation-preview",
        params={"now": "2025-06-01T12:00:00"},
        json=backend_booking(status="CANCELLED"),
    )
    assert response.status_code == 409
    assert response.json()["code"] == "ACTION_NOT_ALLOWED"

def test_create_booking(backend):
    backend.create_booking.return_value = {"id": "bk_9", "status": "PENDING", "guests": 2, "totalPrice": 170}

    response = client.post("/api/bookings", headers=AUTH, json={
        "dinnerId": "d_1", "guests": 2, "contactName": "Ana", "contactEmail": "ana@example.com",
    })

    assert response.status_code == 200
    assert response.json()["id"] == "bk_9"
    assert response.json()["status"] == "pending"

def test_access_summary(backend):
    backend.get_current_user.return_value = {"email": "host@example.com", "role": "host"}

    response = client.get("/api/access", headers=AUTH)

    assert response.status_code == 200
    data = response.json()
    assert data["canAccessHostDashboard"] is True
    assert data["canBookDinners"] is False
    assert data["bookingDeniedMessage"].startswith("Host accounts cannot book dinners.")
    assert data["redirectUrl"] == "/host/dashboard"

# --- Dinners ---

def backend_dinner(id="d_1", date="2025-06-14T00:00:00.000Z", capacity=8, available=3, **extra):
    payload = {"id": id, "title": "Paella", "date": date, "time": "19:30", "capacity": capacity, "available": available}
    payload.update(extra)
    return payload

@pytest.fixture
def dinners_backend():
    mock = MagicMock()
    app.dependency_overrides[get_dinner_service] = lambda: DinnerService(client=mock)
    yield mock
    app.dependency_overrides.clear()

def test_listings_hide_past_and_sold_out_dinners(dinners_backend):
    dinners_backend.get_dinners.return_value = [
        backend_dinner(id="a"),
        backend_dinner(id="b", available=0),
        backend_dinner(id="c", date="2025-05-01T00:00:00.000Z"),
        backend_dinner(id="d", date="not a date"),
    ]

    response = client.get("/api/dinners", params={"now": "2025-06-10T12:00:00"})

    assert response.status_code == 200
    data = response.json()
    assert [d["id"] for d in data] == ["a"]
    assert data[0]["date"] == "2025-06-14"
    assert data[0]["time"] == "19:30"
    dinners_backend.get_dinners.assert_called_once_with(20, 1)

def test_host_dashboard_dinners(dinners_backend):
    dinners_backend.get_host_dinners.return_value = [
        backend_dinner(id="a", cancellationPolicy="strict"),
        backend_dinner(id="b", available=0),
        backend_dinner(id="c", isActive=False),
    ]

    response = client.get("/api/dinners/host/h_1", params={"now": "2025-06-10T12:00:00"}, headers=AUTH)

    assert response.status_code == 200
    data = response.json()
    assert [d["status"] for d in data] == ["upcoming", "completed", "draft"]
    assert data[0]["guestsBooked"] == 5
    assert data[0]["policyDescription"] == "Strict - 50% refund up to 7 days before"
    dinners_backend.get_host_dinners.assert_called_once_with("h_1", "tok")

def test_host_dashboard_needs_token(dinners_backend):
    response = client.get("/api/dinners/host/h_1")
    assert response.status_code == 401
