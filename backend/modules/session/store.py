"""
Client-side session store.

Holds the authenticated user and session, persists them through an
ISessionStorage under the ``auth_token``/``auth_user``/``auth_expiry``
keys, and restores them at startup if they have not expired.

Operations are serialized with an asyncio.Lock, so when two logins race
the one issued last determines the final state.
"""

import asyncio
import logging
from typing import Callable, Optional

from shared.models import ApiResponse, now_ms

from modules.mock_api.interfaces import IRideApi
from modules.mock_api.models import AuthResponse, RegisterData, User
from modules.mock_api.simulator import call_api

from .exceptions import StorageError
from .interfaces import ISessionStorage
from .models import (
    AUTH_EXPIRY_KEY,
    AUTH_TOKEN_KEY,
    AUTH_USER_KEY,
    SESSION_KEYS,
    Session,
    SessionState,
)

logger = logging.getLogger(__name__)

SessionListener = Callable[[SessionState], None]


class SessionStore:
    """
    Authenticated-user state with durable persistence.

    API failures (domain or transient) never raise out of login/register;
    they land in ``error`` and are returned as a failure envelope.
    """

    def __init__(
        self,
        api: IRideApi,
        storage: ISessionStorage,
        clock: Callable[[], int] = now_ms,
    ):
        self._api = api
        self._storage = storage
        self._clock = clock
        self._lock = asyncio.Lock()
        self._listeners: list[SessionListener] = []

        self._user: Optional[User] = None
        self._session: Optional[Session] = None
        self._is_loading = False
        self._error: Optional[str] = None

    # State

    @property
    def user(self) -> Optional[User]:
        return self._user

    @property
    def session(self) -> Optional[Session]:
        return self._session

    @property
    def is_authenticated(self) -> bool:
        return self._user is not None

    @property
    def is_loading(self) -> bool:
        return self._is_loading

    @property
    def error(self) -> Optional[str]:
        return self._error

    @property
    def state(self) -> SessionState:
        return SessionState(
            user=self._user,
            session=self._session,
            is_authenticated=self.is_authenticated,
            is_loading=self._is_loading,
            error=self._error,
        )

    def subscribe(self, listener: SessionListener) -> Callable[[], None]:
        """
        Register a listener called with a snapshot after every change.

        Returns:
            A function that removes the listener
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        snapshot = self.state
        for listener in list(self._listeners):
            listener(snapshot)

    def _set(self, **changes) -> None:
        for name, value in changes.items():
            setattr(self, f"_{name}", value)
        self._notify()

    # Persistence

    async def _persist(self, auth: AuthResponse) -> None:
        await self._storage.set_item(AUTH_TOKEN_KEY, auth.token)
        await self._storage.set_item(AUTH_USER_KEY, auth.user.model_dump_json(by_alias=True))
        await self._storage.set_item(AUTH_EXPIRY_KEY, str(auth.expires_at))

    async def _clear_storage(self) -> None:
        for key in SESSION_KEYS:
            await self._storage.remove_item(key)

    async def _authenticate(self, request) -> ApiResponse[AuthResponse]:
        self._set(is_loading=True, error=None)
        try:
            response = await call_api(request)
            if response.success and response.data is not None:
                auth: AuthResponse = response.data
                await self._persist(auth)
                self._user = auth.user
                self._session = Session(
                    user=auth.user,
                    token=auth.token,
                    refresh_token=auth.refresh_token,
                    expires_at=auth.expires_at,
                )
            else:
                self._error = response.error.message if response.error else "An unexpected error occurred"
            return response
        finally:
            self._set(is_loading=False)

    # Operations

    async def login(
        self,
        email: str,
        password: str,
        remember_me: bool = False,
    ) -> ApiResponse[AuthResponse]:
        """
        Authenticate and persist the session.

        ``remember_me`` is accepted for form parity; the session is
        persisted either way and bounded by its expiry.
        """
        async with self._lock:
            response = await self._authenticate(self._api.login(email, password))
            if response.success:
                logger.info(f"User {self._user.id} logged in (remember_me={remember_me})")
            return response

    async def register(self, data: RegisterData) -> ApiResponse[AuthResponse]:
        """Create an account and log straight into it."""
        async with self._lock:
            response = await self._authenticate(self._api.register(data))
            if response.success:
                logger.info(f"User {self._user.id} registered")
            return response

    async def logout(self) -> None:
        """
        End the session.

        Server-side logout is best-effort: local state and storage are
        cleared whatever the API call does.
        """
        async with self._lock:
            self._set(is_loading=True)
            try:
                response = await self._api.logout()
                if not response.success:
                    logger.warning(f"Logout reported failure: {response.error.message}")
            except Exception as e:
                logger.warning(f"Logout failed, clearing local session anyway: {e}")
            finally:
                await self._clear_storage()
                self._set(user=None, session=None, is_loading=False)

    async def restore(self) -> bool:
        """
        Rebuild the session from storage.

        Expired or unreadable data is removed. A storage backend that cannot
        be read is logged and leaves the store unauthenticated.

        Returns:
            True if a live session was restored
        """
        async with self._lock:
            self._set(is_loading=True)
            try:
                try:
                    raw_user = await self._storage.get_item(AUTH_USER_KEY)
                    raw_expiry = await self._storage.get_item(AUTH_EXPIRY_KEY)
                except StorageError as e:
                    logger.error(f"Cannot read stored session: {e.message}")
                    return False
                if raw_user is None or raw_expiry is None:
                    return False

                try:
                    expires_at = int(raw_expiry)
                except ValueError:
                    logger.warning(f"Stored session expiry {raw_expiry!r} is not a number, clearing it")
                    await self._clear_storage()
                    return False

                if expires_at <= self._clock():
                    logger.info("Stored session has expired, clearing it")
                    await self._clear_storage()
                    return False

                try:
                    user = User.model_validate_json(raw_user)
                except ValueError as e:
                    logger.error(f"Discarding unreadable stored session: {e}")
                    await self._clear_storage()
                    return False

                token = await self._storage.get_item(AUTH_TOKEN_KEY) or ""
                self._user = user
                self._session = Session(user=user, token=token, expires_at=expires_at)
                logger.info(f"Restored session for user {user.id}")
                return True
            finally:
                self._set(is_loading=False)

    async def check_expiry(self) -> bool:
        """
        Drop the session if it has expired.

        Returns:
            True if the session was expired and has been cleared
        """
        async with self._lock:
            if self._session is None or not self._session.is_expired(self._clock()):
                return False
            logger.info(f"Session for user {self._session.user.id} expired")
            await self._clear_storage()
            self._set(user=None, session=None)
            return True

    async def update_user(self, user: User) -> None:
        """Replace the session user (after a profile edit) and persist it."""
        async with self._lock:
            if self._session is None:
                return
            await self._storage.set_item(AUTH_USER_KEY, user.model_dump_json(by_alias=True))
            self._set(user=user, session=self._session.model_copy(update={"user": user}))

    def clear_error(self) -> None:
        self._set(error=None)
