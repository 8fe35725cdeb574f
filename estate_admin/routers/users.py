"""
User API endpoints: the login upsert and the agent listing/profile views.
"""

from fastapi import APIRouter, Depends, Path, Query, Response, status
from typing import List, Optional
from uuid import UUID

from estate_admin.config import settings
from estate_admin.schemas.property import PropertyResponse
from estate_admin.schemas.user import UserLoginRequest, UserResponse, UserDetailResponse
from estate_admin.schemas.error import get_common_error_responses, get_crud_error_responses
from estate_admin.services.user import UserService
from estate_admin.utils.dependencies import get_user_service
from estate_admin.utils.pagination import set_total_count


router = APIRouter(prefix="/users", tags=["Users"])


@router.post(
    "",
    response_model=UserResponse,
    status_code=status.HTTP_200_OK,
    summary="Upsert user on login",
    description="Return the user with this email, creating it on first login.",
    responses=get_common_error_responses()
)
async def upsert_user(
    profile: UserLoginRequest,
    user_service: UserService = Depends(get_user_service)
) -> UserResponse:
    """
    Register or find the logging-in user.

    The profile is decoded from the sign-in credential by the client and is
    trusted as sent.
    """
    user, _ = await user_service.upsert_user(profile)
    return UserResponse.model_validate(user.to_dict())


@router.get(
    "",
    response_model=List[UserResponse],
    status_code=status.HTTP_200_OK,
    summary="List users",
    description="Offset-paginated user list. Total count is in `x-total-count`.",
    responses=get_common_error_responses()
)
async def list_users(
    response: Response,
    start: int = Query(0, alias="_start", ge=0, description="Offset of the first row"),
    end: Optional[int] = Query(None, alias="_end", ge=0, description="Offset after the last row"),
    user_service: UserService = Depends(get_user_service)
) -> List[UserResponse]:
    """List agents for the dashboard."""
    if end is None:
        end = start + settings.default_page_size

    users, total_count = await user_service.list_users(start, end)

    set_total_count(response, total_count)
    return [UserResponse.model_validate(user.to_dict()) for user in users]


@router.get(
    "/{user_id}",
    response_model=UserDetailResponse,
    status_code=status.HTTP_200_OK,
    summary="Get user profile",
    description="Get one user with their properties resolved.",
    responses=get_crud_error_responses()
)
async def get_user(
    user_id: UUID = Path(..., description="User ID"),
    user_service: UserService = Depends(get_user_service)
) -> UserDetailResponse:
    """
    Get an agent profile.

    Raises:
        UserNotFoundError: If user doesn't exist
    """
    user, properties = await user_service.get_user_with_properties(user_id)

    user_data = user.to_dict()
    user_data["allProperties"] = [
        PropertyResponse.model_validate(prop.to_dict()) for prop in properties
    ]
    return UserDetailResponse.model_validate(user_data)
