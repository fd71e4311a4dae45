"""
Session module exceptions.
"""

from shared.exceptions import ErrorCode, PurdueRideError


class StorageError(PurdueRideError):
    """Raised when durable session storage cannot be read or written."""

    def __init__(self, message: str, backend: str):
        super().__init__(
            message,
            code=ErrorCode.STORAGE_ERROR,
            details={"backend": backend},
        )
