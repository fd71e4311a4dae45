"""
Mock API data models.

Core records (users, rides, ride requests), request payloads and the
response bodies wrapped by the ApiResponse envelope.
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import EmailStr, Field, model_validator

from shared.models import ApiMeta, CamelModel


class UserVerificationStatus(str, Enum):
    """Identity verification state of a user."""

    UNVERIFIED = "unverified"
    PENDING = "pending"
    VERIFIED = "verified"
    REJECTED = "rejected"


class RideStatus(str, Enum):
    """Ride lifecycle status."""

    AVAILABLE = "available"
    FULL = "full"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class RideRequestStatus(str, Enum):
    """Passenger request lifecycle status."""

    PENDING = "pending"      # Recorded, seats not yet held
    CONFIRMED = "confirmed"  # Seats taken from the ride
    CANCELLED = "cancelled"
    COMPLETED = "completed"


class User(CamelModel):
    """A registered rider (the session principal)."""

    id: str = Field(..., description="User ID")
    email: str = Field(..., description="Institutional email address")
    first_name: str
    last_name: str
    phone_number: str = Field(..., description="10-digit phone number")
    is_verified: UserVerificationStatus = UserVerificationStatus.UNVERIFIED
    profile_picture: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None


class VehicleInfo(CamelModel):
    make: str
    model: str
    color: str
    license_plate: str
    year: Optional[int] = None


class Ride(CamelModel):
    """A transportation offer with a fixed cost and limited seats."""

    id: str
    pickup_location: str
    destination: str
    scheduled_time: datetime
    estimated_arrival: Optional[datetime] = None
    cost: float = 3.0
    available_seats: int = Field(..., ge=0)
    total_seats: int = Field(..., ge=1)
    status: RideStatus
    driver_id: str
    driver_name: Optional[str] = None
    driver_rating: Optional[float] = None
    vehicle_info: Optional[VehicleInfo] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

    @model_validator(mode="after")
    def check_seats(self) -> "Ride":
        """Available seats can never exceed the vehicle's capacity."""
        if self.available_seats > self.total_seats:
            raise ValueError(
                f"available_seats ({self.available_seats}) exceeds total_seats ({self.total_seats})"
            )
        return self


class RideRequest(CamelModel):
    """A passenger's request against a ride (references by id only)."""

    id: str
    user_id: str
    ride_id: str
    pickup_location: str
    requested_time: datetime
    status: RideRequestStatus = RideRequestStatus.PENDING
    passenger_count: int = Field(1, ge=1, le=4)
    special_instructions: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None


# Request payloads


class LoginData(CamelModel):
    email: EmailStr
    password: str
    remember_me: bool = False


class RegisterData(CamelModel):
    email: EmailStr
    password: str
    first_name: str
    last_name: str
    phone_number: str


class RideRequestPayload(CamelModel):
    pickup_location: str = Field(..., min_length=1)
    destination: str = Field(..., min_length=1)
    requested_time: datetime
    passenger_count: int = Field(1, ge=1, le=4)
    special_instructions: Optional[str] = None
    ride_id: Optional[str] = Field(None, description="Target ride, if already chosen")


class UpdateProfileRequest(CamelModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone_number: Optional[str] = None
    profile_picture: Optional[str] = None


# Response bodies


class AuthResponse(CamelModel):
    user: User
    token: str
    refresh_token: str
    expires_at: int = Field(..., description="Session expiry (epoch ms)")


class LogoutResponse(CamelModel):
    success: bool = True


class RideListResponse(CamelModel):
    rides: list[Ride]
    meta: ApiMeta


class RideHistoryResponse(CamelModel):
    rides: list[Ride]
    requests: list[RideRequest]
    meta: ApiMeta
