from typing import Optional, List
from datetime import datetime
from pydantic import Field, computed_field

from dinewithus.models.booking import CamelModel
from dinewithus.models.enums import CancellationPolicy, DinnerStatus


class Coordinates(CamelModel):
    lat: float
    lng: float


class Location(CamelModel):
    address: str = ""
    city: str = ""
    state: str = ""
    neighborhood: str = ""
    coordinates: Optional[Coordinates] = None

    def display(self) -> str:
        parts = [p for p in (self.neighborhood, self.city) if p]
        return ", ".join(parts) or "Location not available"


class Host(CamelModel):
    id: str = ""
    name: str = "Unknown Host"
    avatar: Optional[str] = None
    superhost: bool = False
    joined_date: Optional[str] = None
    response_rate: float = 0
    response_time: str = "within 24 hours"
    bio: Optional[str] = None


class Dinner(CamelModel):
    id: str
    title: str
    description: str = ""
    price: float = 0
    currency: str = "EUR"
    cuisine: str = "Other"
    start: datetime
    duration: Optional[int] = None # minutes
    capacity: int = 0
    available: int = 0
    instant_book: bool = False
    rating: float = 0
    review_count: int = 0
    thumbnail: Optional[str] = None
    images: List[str] = Field(default_factory=list)
    host: Host = Field(default_factory=Host)
    location: Location = Field(default_factory=Location)
    menu: List[str] = Field(default_factory=list)
    included: List[str] = Field(default_factory=list)
    house_rules: List[str] = Field(default_factory=list)
    dietary: List[str] = Field(default_factory=list)
    languages: List[str] = Field(default_factory=list)
    cancellation_policy: CancellationPolicy = CancellationPolicy.FLEXIBLE
    is_active: bool = True

    @computed_field
    @property
    def date(self) -> str:
        return self.start.strftime("%Y-%m-%d")

    @computed_field
    @property
    def time(self) -> str:
        return self.start.strftime("%H:%M")


class HostDinnerView(CamelModel):
    """One row of the host dashboard."""
    dinner: Dinner
    status: DinnerStatus
    guests_booked: int = 0
    policy_description: str = ""
