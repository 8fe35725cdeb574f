"""
Pydantic schemas for request/response validation.
"""

from estate_admin.schemas.user import UserLoginRequest, UserResponse, UserDetailResponse
from estate_admin.schemas.property import (
    PropertyCreate,
    PropertyUpdate,
    PropertyResponse,
    PropertyDetailResponse,
    MessageResponse
)
from estate_admin.schemas.error import ErrorResponse, ErrorDetail

# UserDetailResponse embeds PropertyResponse, which imports the user schemas
UserDetailResponse.model_rebuild(_types_namespace={"PropertyResponse": PropertyResponse})

__all__ = [
    "UserLoginRequest",
    "UserResponse",
    "UserDetailResponse",
    "PropertyCreate",
    "PropertyUpdate",
    "PropertyResponse",
    "PropertyDetailResponse",
    "MessageResponse",
    "ErrorResponse",
    "ErrorDetail",
]
