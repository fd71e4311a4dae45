"""
Forms module.

Rule-driven field validation and the controllers for the login,
registration, profile and ride request forms.

Public API:
- FieldRule / ValidationRules: Declarative per-field rules
- FormValidator: Values, errors and touched state for one form
- check_field: Evaluate one rule against one value
- LoginForm / RegisterForm / ProfileForm / RideRequestForm: Submittable forms
- Domain validators and rule factories from validators.py
"""

from .models import (
    FieldCheck,
    FieldRule,
    LoginFormData,
    ProfileFormData,
    RegisterFormData,
    RideRequestFormData,
    ValidationRules,
)
from .validation import FormValidator, check_field
from .validators import (
    VALIDATION_MESSAGES,
    clean_phone_number,
    confirm_password_rule,
    format_phone_number,
    get_password_strength,
    get_password_strength_label,
    is_purdue_email,
    is_valid_email,
    is_valid_name,
    is_valid_password,
    is_valid_phone_number,
    name_rule,
    passenger_count_rule,
    password_rule,
    passwords_match,
    phone_rule,
    purdue_email_rule,
    required_rule,
    requested_time_rule,
)
from .controllers import (
    FormController,
    LoginForm,
    ProfileForm,
    RegisterForm,
    RideRequestForm,
)

__all__ = [
    # Models
    "FieldCheck",
    "FieldRule",
    "ValidationRules",
    "LoginFormData",
    "RegisterFormData",
    "ProfileFormData",
    "RideRequestFormData",
    # Engine
    "FormValidator",
    "check_field",
    # Validators
    "VALIDATION_MESSAGES",
    "is_valid_email",
    "is_purdue_email",
    "is_valid_password",
    "is_valid_phone_number",
    "is_valid_name",
    "passwords_match",
    "clean_phone_number",
    "format_phone_number",
    "get_password_strength",
    "get_password_strength_label",
    # Rule factories
    "required_rule",
    "purdue_email_rule",
    "password_rule",
    "confirm_password_rule",
    "phone_rule",
    "name_rule",
    "passenger_count_rule",
    "requested_time_rule",
    # Controllers
    "FormController",
    "LoginForm",
    "RegisterForm",
    "ProfileForm",
    "RideRequestForm",
]
