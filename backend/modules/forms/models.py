"""
Form validation data models.

Rule sets are keyed by field name and typed against the form's value
schema (a TypedDict), so each form declares exactly which fields carry rules.
"""

import re
from dataclasses import dataclass
from typing import Any, Callable, Mapping, Optional, TypedDict, Union

# validate(value, all_values) -> True when valid, False or a message when not
FieldCheck = Callable[[Any, Mapping[str, Any]], Union[bool, str]]


@dataclass(frozen=True)
class FieldRule:
    """Declarative validation rule for a single field.

    Attributes:
        required: Reject None and empty strings
        min_length: Minimum string length
        max_length: Maximum string length
        pattern: Regex the string value must match
        validate: Custom predicate receiving the value and every form value
        error_message: Message used when a check fails without its own message
    """

    required: bool = False
    min_length: Optional[int] = None
    max_length: Optional[int] = None
    pattern: Optional[Union[str, re.Pattern]] = None
    validate: Optional[FieldCheck] = None
    error_message: Optional[str] = None

    def compiled_pattern(self) -> Optional[re.Pattern]:
        if self.pattern is None or isinstance(self.pattern, re.Pattern):
            return self.pattern
        return re.compile(self.pattern)


ValidationRules = Mapping[str, FieldRule]


class LoginFormData(TypedDict):
    email: str
    password: str
    remember_me: bool


class RegisterFormData(TypedDict):
    email: str
    password: str
    confirm_password: str
    first_name: str
    last_name: str
    phone_number: str


class ProfileFormData(TypedDict):
    first_name: str
    last_name: str
    phone_number: str


class RideRequestFormData(TypedDict):
    pickup_location: str
    destination: str
    requested_time: str
    passenger_count: int
    special_instructions: str
