"""
Form controllers.

Each controller owns a FormValidator plus the submission state of one
form. submit() validates first and only calls out when every field
passes; a successful submission resets the form.
"""

import logging
from abc import ABC, abstractmethod
from datetime import datetime, timedelta
from typing import Any, Callable, Generic, Optional, TypeVar

from shared.exceptions import ErrorCode
from shared.models import ApiResponse

from modules.mock_api.interfaces import IRideApi
from modules.mock_api.models import (
    RegisterData,
    RideRequest,
    RideRequestPayload,
    UpdateProfileRequest,
    User,
)
from modules.mock_api.simulator import call_api
from modules.notifications.models import NotificationType
from modules.notifications.queue import NotificationQueue
from modules.session.store import SessionStore

from .models import (
    LoginFormData,
    ProfileFormData,
    RegisterFormData,
    RideRequestFormData,
    ValidationRules,
)
from .validation import FormValidator
from .validators import (
    clean_phone_number,
    confirm_password_rule,
    name_rule,
    parse_datetime,
    passenger_count_rule,
    password_rule,
    phone_rule,
    purdue_email_rule,
    required_rule,
    requested_time_rule,
)

logger = logging.getLogger(__name__)

V = TypeVar("V")

DEFAULT_DESTINATION = "Purdue University"
DEFAULT_PICKUP_LEAD = timedelta(minutes=15)

LOGIN_RULES: ValidationRules = {
    "email": purdue_email_rule(),
    "password": required_rule("Password is required"),
}

REGISTER_RULES: ValidationRules = {
    "email": purdue_email_rule(),
    "password": password_rule(),
    "confirm_password": confirm_password_rule(),
    "first_name": required_rule("First name is required"),
    "last_name": required_rule("Last name is required"),
    "phone_number": phone_rule(),
}

PROFILE_RULES: ValidationRules = {
    "first_name": name_rule(field_label="First name"),
    "last_name": name_rule(field_label="Last name"),
    "phone_number": phone_rule(),
}

RIDE_REQUEST_RULES: ValidationRules = {
    "pickup_location": required_rule("Please enter your pickup location"),
    "destination": required_rule("Please enter your destination"),
    "requested_time": requested_time_rule(),
    "passenger_count": passenger_count_rule(),
}


class FormController(ABC, Generic[V]):
    """
    Base class for a submittable form.

    Subclasses implement _send() and may override _on_success().
    """

    def __init__(self, initial_values: V, rules: ValidationRules):
        self.form: FormValidator[V] = FormValidator(initial_values, rules)
        self.is_submitting = False
        self.submission_error: Optional[str] = None

    @property
    def values(self) -> dict[str, Any]:
        return self.form.values

    @property
    def errors(self) -> dict[str, str]:
        return self.form.errors

    @abstractmethod
    async def _send(self, values: dict[str, Any]) -> ApiResponse:
        """Send validated values to the backend."""

    async def _on_success(self, response: ApiResponse) -> None:
        self.form.reset_form()

    async def submit(self) -> bool:
        """
        Validate and submit the form.

        Returns:
            True if the submission succeeded
        """
        if not self.form.validate_form():
            return False

        self.is_submitting = True
        self.submission_error = None
        try:
            response = await self._send(dict(self.form.values))
            if not response.success:
                self.submission_error = (
                    response.error.message if response.error else "An unexpected error occurred"
                )
                return False
            await self._on_success(response)
            return True
        finally:
            self.is_submitting = False


class LoginForm(FormController[LoginFormData]):
    """Login form bound to a session store."""

    def __init__(self, session: SessionStore):
        super().__init__(
            LoginFormData(email="", password="", remember_me=False),
            LOGIN_RULES,
        )
        self._session = session

    async def _send(self, values: dict[str, Any]) -> ApiResponse:
        return await self._session.login(
            values["email"],
            values["password"],
            bool(values.get("remember_me")),
        )


class RegisterForm(FormController[RegisterFormData]):
    """Registration form bound to a session store."""

    def __init__(self, session: SessionStore):
        super().__init__(
            RegisterFormData(
                email="",
                password="",
                confirm_password="",
                first_name="",
                last_name="",
                phone_number="",
            ),
            REGISTER_RULES,
        )
        self._session = session

    async def _send(self, values: dict[str, Any]) -> ApiResponse:
        return await self._session.register(
            RegisterData(
                email=values["email"],
                password=values["password"],
                first_name=values["first_name"],
                last_name=values["last_name"],
                phone_number=clean_phone_number(values["phone_number"]),
            )
        )


class ProfileForm(FormController[ProfileFormData]):
    """
    Profile editor for the session user.

    After a successful save the saved values become the form's initial
    values, so reset_form() returns to what is stored.
    """

    def __init__(self, api: IRideApi, session: SessionStore):
        self._api = api
        self._session = session
        super().__init__(self._values_for(session.user), PROFILE_RULES)

    @staticmethod
    def _values_for(user: Optional[User]) -> ProfileFormData:
        if user is None:
            return ProfileFormData(first_name="", last_name="", phone_number="")
        return ProfileFormData(
            first_name=user.first_name,
            last_name=user.last_name,
            phone_number=user.phone_number,
        )

    async def _send(self, values: dict[str, Any]) -> ApiResponse:
        user = self._session.user
        if user is None:
            return ApiResponse.fail("Authentication required", ErrorCode.AUTH_REQUIRED)
        return await call_api(
            self._api.update_profile(
                user.id,
                UpdateProfileRequest(
                    first_name=values["first_name"],
                    last_name=values["last_name"],
                    phone_number=clean_phone_number(values["phone_number"]),
                ),
            )
        )

    async def _on_success(self, response: ApiResponse) -> None:
        updated: User = response.data
        await self._session.update_user(updated)
        self.form = FormValidator(self._values_for(updated), PROFILE_RULES)
        logger.info(f"Profile updated for user {updated.id}")


class RideRequestForm(FormController[RideRequestFormData]):
    """
    Ride request form.

    Defaults the destination to campus and the pickup time to fifteen
    minutes from construction.
    """

    def __init__(
        self,
        api: IRideApi,
        session: Optional[SessionStore] = None,
        notifications: Optional[NotificationQueue] = None,
        on_submit: Optional[Callable[[RideRequest], None]] = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        super().__init__(
            RideRequestFormData(
                pickup_location="",
                destination=DEFAULT_DESTINATION,
                requested_time=(clock() + DEFAULT_PICKUP_LEAD).isoformat(timespec="minutes"),
                passenger_count=1,
                special_instructions="",
            ),
            RIDE_REQUEST_RULES,
        )
        self._api = api
        self._session = session
        self._notifications = notifications
        self._on_submit = on_submit
        self.last_request: Optional[RideRequest] = None

    async def _send(self, values: dict[str, Any]) -> ApiResponse:
        payload = RideRequestPayload(
            pickup_location=values["pickup_location"],
            destination=values["destination"],
            requested_time=parse_datetime(values["requested_time"]),
            passenger_count=int(values["passenger_count"]),
            special_instructions=values.get("special_instructions") or None,
        )
        user_id = self._session.user.id if self._session and self._session.user else None
        return await call_api(self._api.request_ride(payload, user_id=user_id))

    async def _on_success(self, response: ApiResponse) -> None:
        self.last_request = response.data
        if self._notifications is not None:
            self._notifications.add_notification(
                f"Your ride from {self.last_request.pickup_location} has been requested.",
                type=NotificationType.SUCCESS,
                title="Ride Requested",
            )
        if self._on_submit is not None:
            self._on_submit(self.last_request)
        self.form.reset_form()

