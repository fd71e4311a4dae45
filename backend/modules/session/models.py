"""
Session module models.
"""

from typing import Optional

from pydantic import BaseModel, Field

from modules.mock_api.models import User

AUTH_TOKEN_KEY = "auth_token"
AUTH_USER_KEY = "auth_user"
AUTH_EXPIRY_KEY = "auth_expiry"

SESSION_KEYS = (AUTH_TOKEN_KEY, AUTH_USER_KEY, AUTH_EXPIRY_KEY)


class Session(BaseModel):
    """An authenticated session. Valid only while now < expires_at."""

    user: User
    token: str
    refresh_token: Optional[str] = Field(None, description="Not persisted; absent after restore")
    expires_at: int = Field(..., description="Epoch milliseconds")

    def is_expired(self, now: int) -> bool:
        return now >= self.expires_at


class SessionState(BaseModel):
    """Immutable snapshot of the session store, handed to subscribers."""

    user: Optional[User] = None
    session: Optional[Session] = None
    is_authenticated: bool = False
    is_loading: bool = False
    error: Optional[str] = None

    model_config = {"frozen": True}
