"""
Rule-driven form validation engine.

A FormValidator holds a form's current values together with per-field
error messages and touched flags. Field-level validation only runs for
touched fields so pristine inputs never show premature errors.
"""

import copy
from typing import Any, Generic, Optional, TypeVar

from .models import FieldRule, ValidationRules

V = TypeVar("V")

DEFAULT_REQUIRED_MESSAGE = "This field is required"
DEFAULT_FORMAT_MESSAGE = "Invalid format"
DEFAULT_INVALID_MESSAGE = "Invalid value"


def _is_empty(value: Any) -> bool:
    return value is None or value == ""


def check_field(rule: FieldRule, value: Any, values: dict[str, Any]) -> Optional[str]:
    """
    Evaluate one rule against one value.

    Checks run in order (required, length, pattern, custom) and the first
    failure wins.

    Returns:
        The error message, or None if the value passes
    """
    if rule.required and _is_empty(value):
        return rule.error_message or DEFAULT_REQUIRED_MESSAGE

    if isinstance(value, str):
        if rule.min_length is not None and len(value) < rule.min_length:
            return rule.error_message or f"Minimum length is {rule.min_length} characters"
        if rule.max_length is not None and len(value) > rule.max_length:
            return rule.error_message or f"Maximum length is {rule.max_length} characters"

        pattern = rule.compiled_pattern()
        if pattern is not None and not pattern.search(value):
            return rule.error_message or DEFAULT_FORMAT_MESSAGE

    if rule.validate is not None:
        result = rule.validate(value, values)
        if isinstance(result, str):
            return result
        if result is False:
            return rule.error_message or DEFAULT_INVALID_MESSAGE

    return None


class FormValidator(Generic[V]):
    """
    Stateful validator for a single form.

    Example:
        form = FormValidator[LoginFormData](
            {"email": "", "password": "", "remember_me": False},
            {"email": purdue_email_rule(), "password": required_rule("Password is required")},
        )
        form.handle_change("email", "jane@purdue.edu")
        if form.validate_form():
            ...
    """

    def __init__(self, initial_values: V, rules: ValidationRules):
        self._initial_values = copy.deepcopy(dict(initial_values))
        self._rules = dict(rules)
        self.values: dict[str, Any] = copy.deepcopy(self._initial_values)
        self.errors: dict[str, str] = {}
        self.touched: dict[str, bool] = {}

    @property
    def initial_values(self) -> dict[str, Any]:
        return copy.deepcopy(self._initial_values)

    @property
    def rules(self) -> dict[str, FieldRule]:
        return dict(self._rules)

    @property
    def is_valid(self) -> bool:
        """True when no field currently carries an error."""
        return not any(self.errors.values())

    def validate_field(self, name: str) -> bool:
        """Validate one field and record or clear its error."""
        rule = self._rules.get(name)
        if rule is None:
            self.errors.pop(name, None)
            return True

        error = check_field(rule, self.values.get(name), self.values)
        if error:
            self.errors[name] = error
            return False

        self.errors.pop(name, None)
        return True

    def validate_form(self) -> bool:
        """
        Mark every rule-bearing field touched and validate all of them.

        Returns:
            True if every field passes
        """
        is_valid = True
        for name in self._rules:
            self.touched[name] = True
            if not self.validate_field(name):
                is_valid = False
        return is_valid

    def handle_change(self, name: str, value: Any) -> None:
        """Apply an input change, revalidating only if the field was touched."""
        self.values[name] = value
        if self.touched.get(name):
            self.validate_field(name)

    def handle_blur(self, name: str) -> None:
        """Mark a field touched when it loses focus and validate it."""
        self.touched[name] = True
        self.validate_field(name)

    def set_field_value(self, name: str, value: Any) -> None:
        self.handle_change(name, value)

    def set_field_touched(self, name: str, is_touched: bool = True) -> None:
        self.touched[name] = is_touched
        if is_touched:
            self.validate_field(name)

    def reset_form(self) -> None:
        """Restore the initial values and clear all errors and touched flags."""
        self.values = copy.deepcopy(self._initial_values)
        self.errors = {}
        self.touched = {}
