"""
Notification models.
"""

from enum import Enum
from typing import Optional

from pydantic import Field

from shared.models import CamelModel

DEFAULT_DISMISS_TIMEOUT_MS = 5000


class NotificationType(str, Enum):
    SUCCESS = "success"
    ERROR = "error"
    INFO = "info"
    WARNING = "warning"


class Notification(CamelModel):
    """A transient user-facing message."""

    id: str
    type: NotificationType
    message: str
    title: Optional[str] = None
    auto_dismiss: bool = True
    dismiss_timeout: int = Field(DEFAULT_DISMISS_TIMEOUT_MS, ge=0, description="Milliseconds")

    model_config = {"frozen": True}
