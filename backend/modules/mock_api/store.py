"""
In-memory dataset backing the mock API.

A MockDataStore is constructed explicitly and injected wherever it is
needed, so tests get isolated instances. Every mutation runs under the
store's lock; uniqueness checks and inserts are atomic with respect to
each other.
"""

import asyncio
import logging
from typing import Optional

from .generator import MockDataGenerator
from .models import Ride, RideRequest, User

logger = logging.getLogger(__name__)


class MockDataStore:
    """Users, rides and ride requests shared by all mock API calls."""

    def __init__(self, generator: Optional[MockDataGenerator] = None):
        self.generator = generator or MockDataGenerator()
        self.users: list[User] = []
        self.rides: list[Ride] = []
        self.ride_requests: list[RideRequest] = []
        self.lock = asyncio.Lock()

    @classmethod
    def seeded(
        cls,
        users: int = 20,
        rides: int = 15,
        requests: int = 30,
        seed: Optional[int] = None,
    ) -> "MockDataStore":
        """Create a store pre-populated with generated records."""
        store = cls(MockDataGenerator(seed=seed))
        store.seed(users=users, rides=rides, requests=requests)
        return store

    def seed(self, users: int = 20, rides: int = 15, requests: int = 30) -> None:
        self.users.extend(self.generator.users(users))
        self.rides.extend(self.generator.rides(rides))
        self.ride_requests.extend(self.generator.ride_requests(requests))
        logger.info(
            f"Seeded mock data: {users} users, {rides} rides, {requests} ride requests"
        )

    def reset(self, users: int = 20, rides: int = 15, requests: int = 30) -> None:
        """Drop every record and regenerate a fresh dataset."""
        self.users.clear()
        self.rides.clear()
        self.ride_requests.clear()
        self.seed(users=users, rides=rides, requests=requests)

    # Lookups

    def find_user_by_email(self, email: str) -> Optional[User]:
        """Case-insensitive exact email match."""
        target = email.lower()
        return next((u for u in self.users if u.email.lower() == target), None)

    def find_user_by_id(self, user_id: str) -> Optional[User]:
        return next((u for u in self.users if u.id == user_id), None)

    def find_ride_by_id(self, ride_id: str) -> Optional[Ride]:
        return next((r for r in self.rides if r.id == ride_id), None)

    def find_request_by_id(self, request_id: str) -> Optional[RideRequest]:
        return next((r for r in self.ride_requests if r.id == request_id), None)

    def find_requests_by_user_id(self, user_id: str) -> list[RideRequest]:
        return [r for r in self.ride_requests if r.user_id == user_id]

    # Replacement helpers (records are immutable-by-convention; updates swap the object)

    def replace_user(self, user: User) -> None:
        self.users = [user if u.id == user.id else u for u in self.users]

    def replace_ride(self, ride: Ride) -> None:
        self.rides = [ride if r.id == ride.id else r for r in self.rides]

    def replace_request(self, request: RideRequest) -> None:
        self.ride_requests = [
            request if r.id == request.id else r for r in self.ride_requests
        ]
