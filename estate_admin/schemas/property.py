"""
Pydantic schemas for property requests and responses.
Field names follow the admin data provider's camelCase wire format.
"""

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from typing import Optional
from decimal import Decimal
from estate_admin.schemas.user import UserResponse


class PropertyBase(BaseModel):
    """Base property schema with common fields."""

    model_config = ConfigDict(populate_by_name=True)

    title: str = Field(
        ...,
        min_length=1,
        max_length=255,
        description="Property listing title",
        examples=["Sunny loft near the river"]
    )

    description: str = Field(
        ...,
        min_length=1,
        max_length=5000,
        description="Detailed property description"
    )

    property_type: str = Field(
        ...,
        alias="propertyType",
        min_length=1,
        max_length=64,
        description="Property type tag, e.g. Apartment, Villa, Office",
        examples=["Apartment"]
    )

    location: str = Field(
        ...,
        min_length=1,
        max_length=255,
        description="Property location/address",
        examples=["Lisbon, Portugal"]
    )

    price: Decimal = Field(
        ...,
        gt=0,
        max_digits=12,
        decimal_places=2,
        description="Property price",
        examples=[250000]
    )

    @field_validator("title", "description", "location", "property_type")
    @classmethod
    def strip_text(cls, v):
        """Strip surrounding whitespace and reject blank values."""
        if not v.strip():
            raise ValueError("Field cannot be empty")
        return v.strip()


class PropertyCreate(PropertyBase):
    """Schema for creating a property."""

    photo: str = Field(
        ...,
        min_length=1,
        description="Photo as a base64 data URI or a remote URL"
    )

    email: Optional[EmailStr] = Field(
        None,
        description="Email of the creating user; defaults to the request credential's email"
    )


class PropertyUpdate(BaseModel):
    """Schema for partially updating a property. Omitted fields are left unchanged."""

    model_config = ConfigDict(populate_by_name=True)

    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = Field(None, min_length=1, max_length=5000)
    property_type: Optional[str] = Field(None, alias="propertyType", min_length=1, max_length=64)
    location: Optional[str] = Field(None, min_length=1, max_length=255)
    price: Optional[Decimal] = Field(None, gt=0, max_digits=12, decimal_places=2)
    photo: Optional[str] = Field(
        None,
        min_length=1,
        description="New photo payload; re-uploaded whenever present"
    )

    @field_validator("title", "description", "location", "property_type")
    @classmethod
    def strip_text(cls, v):
        """Strip supplied text fields and reject blank values; omitted fields pass through."""
        if v is None:
            return v
        if not v.strip():
            raise ValueError("Field cannot be empty")
        return v.strip()


class PropertyResponse(BaseModel):
    """Property document in list responses."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., alias="_id", description="Property's unique identifier")
    title: str
    description: str
    property_type: str = Field(..., alias="propertyType")
    location: str
    price: float
    photo: str
    creator: Optional[str] = Field(None, description="ID of the creating user")
    created_at: Optional[str] = Field(None, alias="createdAt")
    updated_at: Optional[str] = Field(None, alias="updatedAt")


class PropertyDetailResponse(PropertyResponse):
    """Property document with the creating user joined in."""

    creator: Optional[UserResponse] = Field(None, description="Creating user")


class MessageResponse(BaseModel):
    """Plain acknowledgement returned by write endpoints."""

    message: str = Field(..., examples=["Property created successfully"])
