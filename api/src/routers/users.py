"""
User router for registration, login and the current user's profile.

Registration and login are public; the ``/current`` endpoints require the
``X-API-TOKEN`` header issued by login.
"""

import structlog
from fastapi import APIRouter, Depends

from api.src.dependencies import get_current_user, get_user_service
from api.src.models.common import DataResponse, ErrorResponse
from api.src.models.user import (
    LoginUserRequest,
    RegisterUserRequest,
    UpdateUserRequest,
    UserDB,
    UserResponse,
)
from api.src.services.user_service import UserService

logger = structlog.get_logger(__name__)

router = APIRouter(
    prefix="/users",
    tags=["Users"],
    responses={
        400: {"model": ErrorResponse, "description": "Validation Error"},
        401: {"model": ErrorResponse, "description": "Unauthorized"},
    }
)


@router.post(
    "",
    response_model=DataResponse[UserResponse],
    response_model_exclude_none=True,
    summary="Register User"
)
async def register(
    request: RegisterUserRequest,
    user_service: UserService = Depends(get_user_service)
) -> DataResponse[UserResponse]:
    """
    Register a new user.

    **Error Responses:**
    - 400: Validation error or username already exists
    """
    logger.info("register_attempt", username=request.username)
    user = await user_service.register(request)
    return DataResponse(data=user)


@router.post(
    "/login",
    response_model=DataResponse[UserResponse],
    response_model_exclude_none=True,
    summary="User Login"
)
async def login(
    request: LoginUserRequest,
    user_service: UserService = Depends(get_user_service)
) -> DataResponse[UserResponse]:
    """
    Authenticate with username and password.

    Returns the user together with a new API token to send as
    ``X-API-TOKEN`` on subsequent requests. Any previous token stops working.
    """
    logger.info("login_attempt", username=request.username)
    user = await user_service.login(request)
    return DataResponse(data=user)


@router.get(
    "/current",
    response_model=DataResponse[UserResponse],
    response_model_exclude_none=True,
    summary="Get Current User"
)
async def get_current(
    user: UserDB = Depends(get_current_user),
    user_service: UserService = Depends(get_user_service)
) -> DataResponse[UserResponse]:
    return DataResponse(data=await user_service.get(user))


@router.patch(
    "/current",
    response_model=DataResponse[UserResponse],
    response_model_exclude_none=True,
    summary="Update Current User"
)
async def update_current(
    request: UpdateUserRequest,
    user: UserDB = Depends(get_current_user),
    user_service: UserService = Depends(get_user_service)
) -> DataResponse[UserResponse]:
    """Change name and/or password; omitted fields are kept."""
    return DataResponse(data=await user_service.update(user, request))


@router.delete(
    "/current",
    response_model=DataResponse[str],
    summary="Logout"
)
async def logout(
    user: UserDB = Depends(get_current_user),
    user_service: UserService = Depends(get_user_service)
) -> DataResponse[str]:
    """Revoke the current API token."""
    return DataResponse(data=await user_service.logout(user))
