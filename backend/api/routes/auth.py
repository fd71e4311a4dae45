"""
Authentication endpoints.

Login and registration return the AuthResponse envelope; the token in it
is the bearer token for every protected endpoint.
"""

import logging

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from modules.mock_api.interfaces import IRideApi
from modules.mock_api.models import LoginData, RegisterData
from modules.mock_api.simulator import call_api
from shared.models import AuthenticatedUser

from ..dependencies import get_ride_api
from ..middleware.auth import get_current_user
from ..models.errors import envelope_response

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/login")
async def login(
    data: LoginData,
    api: IRideApi = Depends(get_ride_api),
) -> JSONResponse:
    """Exchange credentials for a session token."""
    return envelope_response(await call_api(api.login(data.email, data.password)))


@router.post("/register")
async def register(
    data: RegisterData,
    api: IRideApi = Depends(get_ride_api),
) -> JSONResponse:
    """
    Create an account and return a session for it.

    Requires an institutional email address.
    """
    response = await call_api(api.register(data))
    return envelope_response(response, success_status=status.HTTP_201_CREATED)


@router.post("/logout")
async def logout(
    user: AuthenticatedUser = Depends(get_current_user),
    api: IRideApi = Depends(get_ride_api),
) -> JSONResponse:
    """
    End the session.

    Tokens are stateless, so the client discards its token; this call
    only clears the backend's current user.
    """
    logger.info(f"User {user.id} logged out")
    return envelope_response(await call_api(api.logout()))
