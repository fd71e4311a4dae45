"""
Error response helpers.

Routes return the ApiResponse envelope as the body; failure envelopes are
sent with the HTTP status matching their error code.
"""

from fastapi import status
from fastapi.responses import JSONResponse

from shared.exceptions import ErrorCode
from shared.models import ApiResponse

ERROR_STATUS_CODES: dict[str, int] = {
    ErrorCode.AUTH_INVALID_CREDENTIALS.value: status.HTTP_401_UNAUTHORIZED,
    ErrorCode.AUTH_REQUIRED.value: status.HTTP_401_UNAUTHORIZED,
    ErrorCode.AUTH_EMAIL_IN_USE.value: status.HTTP_409_CONFLICT,
    ErrorCode.AUTH_INVALID_EMAIL_DOMAIN.value: status.HTTP_422_UNPROCESSABLE_ENTITY,
    ErrorCode.USER_NOT_FOUND.value: status.HTTP_404_NOT_FOUND,
    ErrorCode.RIDE_NOT_FOUND.value: status.HTTP_404_NOT_FOUND,
    ErrorCode.REQUEST_NOT_FOUND.value: status.HTTP_404_NOT_FOUND,
    ErrorCode.RIDE_FULL.value: status.HTTP_409_CONFLICT,
    ErrorCode.INVALID_REQUEST_STATE.value: status.HTTP_409_CONFLICT,
}

# Anything not listed is a transient backend failure
DEFAULT_ERROR_STATUS = status.HTTP_503_SERVICE_UNAVAILABLE


def status_for(response: ApiResponse, success_status: int = status.HTTP_200_OK) -> int:
    """HTTP status code for an envelope."""
    if response.success:
        return success_status
    code = response.error.code if response.error else ErrorCode.ERR_UNKNOWN.value
    return ERROR_STATUS_CODES.get(code, DEFAULT_ERROR_STATUS)


def envelope_response(
    response: ApiResponse,
    success_status: int = status.HTTP_200_OK,
) -> JSONResponse:
    """Serialize an envelope with camelCase keys and the matching status."""
    return JSONResponse(
        content=response.model_dump(mode="json", by_alias=True, exclude_none=True),
        status_code=status_for(response, success_status),
    )
