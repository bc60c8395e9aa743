from enum import Enum


class BookingStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class CancellationPolicy(str, Enum):
    FLEXIBLE = "flexible"
    MODERATE = "moderate"
    STRICT = "strict"


class ViewerRole(str, Enum):
    GUEST = "guest"
    HOST = "host"


class Action(str, Enum):
    WRITE_REVIEW = "write_review"
    CANCEL = "cancel"
    ACCEPT = "accept"
    DECLINE = "decline"


class DinnerStatus(str, Enum):
    UPCOMING = "upcoming"
    COMPLETED = "completed"
    DRAFT = "draft"
