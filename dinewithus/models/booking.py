from typing import Optional, List
from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field, computed_field
from pydantic.alias_generators import to_camel

from dinewithus.models.enums import Action, BookingStatus, CancellationPolicy


class CamelModel(BaseModel):
    # The presentation layer speaks camelCase, Python code uses snake_case
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Review(CamelModel):
    rating: int = Field(ge=1, le=5)
    comment: Optional[str] = None


class DinnerSnapshot(CamelModel):
    """Copy of the dinner taken when the booking was fetched. Not kept in sync."""
    id: Optional[str] = None
    title: str = ""
    start: Optional[datetime] = None
    raw_date: Optional[str] = None # what the backend sent, kept for error messages
    cancellation_policy: CancellationPolicy = CancellationPolicy.FLEXIBLE
    price: Optional[float] = None
    capacity: Optional[int] = None
    image: Optional[str] = None
    location: str = ""
    host_id: Optional[str] = None
    host_name: Optional[str] = None

    @computed_field
    @property
    def date(self) -> Optional[str]:
        return self.start.strftime("%Y-%m-%d") if self.start else None

    @computed_field
    @property
    def time(self) -> Optional[str]:
        # Derived from `start` so the two can never disagree
        return self.start.strftime("%H:%M") if self.start else None


class Booking(CamelModel):
    id: str = Field(min_length=1)
    status: BookingStatus = BookingStatus.PENDING
    guests: int = Field(default=1, ge=1)
    total_amount: float = 0.0
    message: Optional[str] = None
    created_at: Optional[datetime] = None
    guest_id: Optional[str] = None
    guest_name: Optional[str] = None
    dinner: Optional[DinnerSnapshot] = None
    review: Optional[Review] = None
    host_review: Optional[Review] = None


class CancellationDecision(CamelModel):
    model_config = ConfigDict(frozen=True)

    policy: CancellationPolicy
    total_amount: float
    hours_until_dinner: float
    days_until_dinner: float
    refund_percentage: int
    refund_amount: float
    non_refundable_amount: float
    message: str


class BookingView(CamelModel):
    """A booking as handed to the presentation layer, with the buttons it may render."""
    booking: Booking
    actions: List[Action] = Field(default_factory=list)


class CreateBookingRequest(CamelModel):
    dinner_id: str
    guests: int = Field(ge=1, le=50)
    message: Optional[str] = None
    contact_name: str
    contact_email: str
    contact_phone: Optional[str] = None

    def to_backend(self) -> dict:
        payload = {
            "dinnerId": self.dinner_id,
            "guests": self.guests,
            "contactInfo": {
                "name": self.contact_name,
                "email": self.contact_email,
            },
        }
        if self.message:
            payload["message"] = self.message
        if self.contact_phone:
            payload["contactInfo"]["phone"] = self.contact_phone
        return payload
