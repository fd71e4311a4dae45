"""
Synthetic data generator for the mock API.

Produces realistic users, rides and ride requests around the Purdue campus.
Pass a seed for reproducible datasets.
"""

import random
import string
from datetime import datetime, timedelta, timezone
from typing import Optional

from .models import (
    Ride,
    RideRequest,
    RideRequestStatus,
    RideStatus,
    User,
    UserVerificationStatus,
    VehicleInfo,
)

CAMPUS_LOCATIONS = [
    "Purdue Memorial Union",
    "Armstrong Hall",
    "Krannert Building",
    "Lawson Computer Science Building",
    "Purdue Mall",
    "Chauncey Hill",
    "Ross-Ade Stadium",
    "Mackey Arena",
    "Earhart Hall",
    "Wiley Dining Court",
    "Hillenbrand Hall",
    "Cary Quadrangle",
    "Hawkins Hall",
    "Shreve Hall",
    "Windsor Halls",
    "Tarkington Hall",
    "Hicks Undergraduate Library",
    "Purdue University Airport",
    "Córdova Recreational Sports Center",
    "Beering Hall",
]

OFF_CAMPUS_LOCATIONS = [
    "Chauncey Square Apartments",
    "The Hub On Campus",
    "Rise on Chauncey",
    "Aspire at Discovery Park",
    "Fuse West Lafayette",
    "Wabash Landing",
    "Village West Apartments",
    "Blackbird Farms",
    "The Cottages on Lindberg",
    "Waldron Street Apartments",
    "Campus Edge on Pierce",
    "Waterford Court Apartments",
    "South Street Station",
    "The Exponent Building",
    "Vons Shops",
    "Tippecanoe Mall",
    "West Lafayette Public Library",
    "Greyhouse Coffee",
    "Vienna Coffee Shop",
    "Fresh Thyme Market",
]

VEHICLES = {
    "Toyota": ["Camry", "Corolla", "RAV4", "Prius"],
    "Honda": ["Civic", "Accord", "CR-V", "Fit"],
    "Ford": ["Focus", "Fusion", "Escape", "Explorer"],
    "Chevrolet": ["Malibu", "Cruze", "Equinox", "Impala"],
    "Nissan": ["Altima", "Sentra", "Rogue", "Versa"],
}

VEHICLE_COLORS = ["Black", "White", "Silver", "Gray", "Blue", "Red", "Green", "Gold"]
PLATE_STATES = ["IN", "IL", "OH", "MI", "KY"]

FIRST_NAMES = [
    "James", "Mary", "John", "Patricia", "Robert", "Jennifer", "Michael", "Linda",
    "William", "Elizabeth", "David", "Susan", "Richard", "Jessica", "Joseph", "Sarah",
    "Thomas", "Karen", "Charles", "Nancy", "Emma", "Olivia", "Noah", "Liam", "Sophia",
    "Ava", "Isabella", "Mia", "Ethan", "Jacob",
]

LAST_NAMES = [
    "Smith", "Johnson", "Williams", "Jones", "Brown", "Davis", "Miller", "Wilson",
    "Moore", "Taylor", "Anderson", "Thomas", "Jackson", "White", "Harris", "Martin",
    "Thompson", "Garcia", "Martinez", "Robinson", "Clark", "Rodriguez", "Lewis", "Lee",
    "Walker", "Hall", "Allen", "Young", "Hernandez", "King",
]

RIDE_COST = 3.0


class MockDataGenerator:
    """Generates mock records from an injectable random source."""

    def __init__(self, seed: Optional[int] = None, rng: Optional[random.Random] = None):
        self._rng = rng or random.Random(seed)

    @property
    def rng(self) -> random.Random:
        return self._rng

    def generate_id(self) -> str:
        alphabet = string.ascii_lowercase + string.digits
        return "".join(self._rng.choice(alphabet) for _ in range(22))

    def _random_datetime(self, start: datetime, end: datetime) -> datetime:
        span = (end - start).total_seconds()
        return start + timedelta(seconds=self._rng.random() * span)

    def _portrait_url(self) -> str:
        gender = "men" if self._rng.random() > 0.5 else "women"
        return f"https://randomuser.me/api/portraits/{gender}/{self._rng.randrange(100)}.jpg"

    def user(self) -> User:
        now = datetime.now(timezone.utc)
        first_name = self._rng.choice(FIRST_NAMES)
        last_name = self._rng.choice(LAST_NAMES)

        return User(
            id=self.generate_id(),
            email=f"{first_name.lower()}.{last_name.lower()}@purdue.edu",
            first_name=first_name,
            last_name=last_name,
            phone_number=f"765{self._rng.randrange(10_000_000):07d}",
            is_verified=self._rng.choice([
                UserVerificationStatus.UNVERIFIED,
                UserVerificationStatus.PENDING,
                UserVerificationStatus.VERIFIED,
            ]),
            profile_picture=self._portrait_url() if self._rng.random() > 0.7 else None,
            created_at=self._random_datetime(now - timedelta(days=90), now),
            updated_at=now if self._rng.random() > 0.5 else None,
        )

    def vehicle(self) -> VehicleInfo:
        make = self._rng.choice(list(VEHICLES))
        suffix = "".join(self._rng.choice(string.ascii_uppercase) for _ in range(3))
        return VehicleInfo(
            make=make,
            model=self._rng.choice(VEHICLES[make]),
            color=self._rng.choice(VEHICLE_COLORS),
            license_plate=f"{self._rng.choice(PLATE_STATES)}-{self._rng.randrange(1000):03d}{suffix}",
            year=2015 + self._rng.randrange(9),
        )

    def ride(self) -> Ride:
        """Generate a ride 5 minutes to 24 hours out; a ride is full iff no seats remain."""
        now = datetime.now(timezone.utc)
        scheduled_time = self._random_datetime(
            now + timedelta(minutes=5),
            now + timedelta(hours=24),
        )

        total_seats = self._rng.randint(2, 4)
        available_seats = self._rng.randint(0, total_seats)
        if available_seats == 0:
            status = RideStatus.FULL
        else:
            status = self._rng.choice([RideStatus.AVAILABLE, RideStatus.IN_PROGRESS])

        driver_first = self._rng.choice(FIRST_NAMES)
        driver_last = self._rng.choice(LAST_NAMES)

        return Ride(
            id=self.generate_id(),
            pickup_location=self._rng.choice(OFF_CAMPUS_LOCATIONS),
            destination=self._rng.choice(CAMPUS_LOCATIONS),
            scheduled_time=scheduled_time,
            estimated_arrival=scheduled_time + timedelta(minutes=10),
            cost=RIDE_COST,
            available_seats=available_seats,
            total_seats=total_seats,
            status=status,
            driver_id=self.generate_id(),
            driver_name=f"{driver_first} {driver_last[0]}.",
            driver_rating=3 + self._rng.random() * 2,
            vehicle_info=self.vehicle(),
            created_at=scheduled_time - timedelta(hours=1),
            updated_at=now if self._rng.random() > 0.5 else None,
        )

    def ride_request(
        self,
        user_id: Optional[str] = None,
        ride_id: Optional[str] = None,
    ) -> RideRequest:
        now = datetime.now(timezone.utc)
        return RideRequest(
            id=self.generate_id(),
            user_id=user_id or self.generate_id(),
            ride_id=ride_id or self.generate_id(),
            pickup_location=self._rng.choice(OFF_CAMPUS_LOCATIONS),
            requested_time=self._random_datetime(
                now + timedelta(minutes=5),
                now + timedelta(hours=24),
            ),
            status=self._rng.choice(list(RideRequestStatus)),
            passenger_count=self._rng.randint(1, 3),
            special_instructions=(
                "Please call when you arrive." if self._rng.random() > 0.7 else None
            ),
            created_at=now,
            updated_at=now if self._rng.random() > 0.5 else None,
        )

    def users(self, count: int) -> list[User]:
        return [self.user() for _ in range(count)]

    def rides(self, count: int) -> list[Ride]:
        return [self.ride() for _ in range(count)]

    def ride_requests(self, count: int, user_id: Optional[str] = None) -> list[RideRequest]:
        return [self.ride_request(user_id) for _ in range(count)]
