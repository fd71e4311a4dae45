"""
Known test accounts for manual and automated testing.

The mock backend never checks passwords, so any password logs these in.
"""

import logging
import uuid
from datetime import datetime, timezone

from .models import User, UserVerificationStatus
from .store import MockDataStore

logger = logging.getLogger(__name__)

TEST_USER_EMAIL = "test@purdue.edu"
TEST_USER_PHONE = "7651234567"


def create_test_user(store: MockDataStore, email: str = TEST_USER_EMAIL) -> User:
    """
    Add a verified test user with the given email.

    An existing user with the same email is returned unchanged. The id is
    derived from the email, so the same account gets the same id in every run.
    """
    existing = store.find_user_by_email(email)
    if existing is not None:
        return existing

    now = datetime.now(timezone.utc)
    user = User(
        id=f"test-user-{uuid.uuid5(uuid.NAMESPACE_DNS, email.lower()).hex[:12]}",
        email=email,
        first_name="Test",
        last_name="User",
        phone_number=TEST_USER_PHONE,
        is_verified=UserVerificationStatus.VERIFIED,
        profile_picture="https://randomuser.me/api/portraits/men/1.jpg",
        created_at=now,
        updated_at=now,
    )
    store.users.append(user)
    logger.info(f"Test user created: {email}")
    return user


def create_test_users(store: MockDataStore, count: int) -> list[User]:
    """Add test1@purdue.edu ... testN@purdue.edu."""
    return [create_test_user(store, f"test{i}@purdue.edu") for i in range(1, count + 1)]
