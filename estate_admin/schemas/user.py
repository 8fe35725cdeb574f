"""
Pydantic schemas for user requests and responses.
Handles the login upsert payload and user documents on the wire.
"""

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from typing import Optional, List, TYPE_CHECKING

if TYPE_CHECKING:
    from estate_admin.schemas.property import PropertyResponse


class UserLoginRequest(BaseModel):
    """Decoded identity profile sent by the dashboard on login."""

    name: str = Field(
        ...,
        min_length=1,
        max_length=255,
        description="User's display name",
        examples=["Jane Agent"]
    )

    email: EmailStr = Field(
        ...,
        description="User's email address",
        examples=["jane@agency.io"]
    )

    avatar: str = Field(
        "",
        max_length=1024,
        description="Avatar image URL",
        examples=["https://lh3.googleusercontent.com/a/photo.jpg"]
    )

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v):
        """Normalize email to lowercase."""
        return v.lower().strip()

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        """Validate and clean name."""
        if not v.strip():
            raise ValueError("Name cannot be empty")
        return v.strip()


class UserResponse(BaseModel):
    """User document as returned to the dashboard."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., alias="_id", description="User's unique identifier")
    name: str
    email: str
    avatar: str
    all_properties: List[str] = Field(
        default_factory=list,
        alias="allProperties",
        description="Identifiers of the user's properties"
    )
    created_at: Optional[str] = Field(None, alias="createdAt")
    updated_at: Optional[str] = Field(None, alias="updatedAt")


class UserDetailResponse(UserResponse):
    """User document with `allProperties` resolved into property documents."""

    all_properties: List["PropertyResponse"] = Field(
        default_factory=list,
        alias="allProperties",
        description="Properties created by the user"
    )
