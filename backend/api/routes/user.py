"""
User profile endpoints.
"""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from modules.mock_api.interfaces import IRideApi
from modules.mock_api.models import UpdateProfileRequest
from modules.mock_api.simulator import call_api
from shared.models import AuthenticatedUser

from ..dependencies import get_ride_api
from ..middleware.auth import get_current_user
from ..models.errors import envelope_response

router = APIRouter()


@router.get("/profile")
async def get_profile(
    user: AuthenticatedUser = Depends(get_current_user),
    api: IRideApi = Depends(get_ride_api),
) -> JSONResponse:
    """
    Get the current user's profile.

    Requires authentication.
    """
    return envelope_response(await call_api(api.get_user(user.id)))


@router.put("/update")
async def update_profile(
    data: UpdateProfileRequest,
    user: AuthenticatedUser = Depends(get_current_user),
    api: IRideApi = Depends(get_ride_api),
) -> JSONResponse:
    """Update name, phone number or profile picture."""
    return envelope_response(await call_api(api.update_profile(user.id, data)))
