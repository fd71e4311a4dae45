"""
Mock API module exceptions.
"""

from typing import Union

from shared.exceptions import ErrorCode, ExternalServiceError


class SimulatedApiError(ExternalServiceError):
    """
    Raised for a randomly injected transient failure.

    Domain failures (bad credentials, missing records) never raise; they are
    returned as failure envelopes.
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        code: Union[ErrorCode, str] = ErrorCode.ERR_UNKNOWN,
    ):
        super().__init__(message, service="mock_api", code=code)
