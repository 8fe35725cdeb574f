"""
Property model for real-estate listings.
Each property references the user who created it.
"""

from sqlalchemy import String, Text, Numeric, ForeignKey, Uuid, Index
from sqlalchemy.orm import Mapped, mapped_column, relationship
from estate_admin.database import Base
from decimal import Decimal
import uuid
from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from estate_admin.models.user import User


class Property(Base):
    """
    Property listing document.
    `property_type` is a free-form tag (e.g. "Apartment", "Office") matched exactly by filters.
    """

    __tablename__ = "properties"

    title: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        index=True,
        comment="Property listing title"
    )

    description: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        comment="Detailed property description"
    )

    property_type: Mapped[str] = mapped_column(
        String(64),
        nullable=False,
        index=True,
        comment="Property type tag"
    )

    location: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Property location/address"
    )

    price: Mapped[Decimal] = mapped_column(
        Numeric(precision=12, scale=2),
        nullable=False,
        index=True,
        comment="Property price"
    )

    photo: Mapped[str] = mapped_column(
        String(1024),
        nullable=False,
        comment="URL of the hosted listing photo"
    )

    # No ondelete cascade: users are never removed through the API
    creator: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id"),
        nullable=True,
        index=True,
        comment="ID of the user who created this property"
    )

    creator_user: Mapped[Optional["User"]] = relationship(
        "User",
        lazy="selectin"
    )

    def __repr__(self) -> str:
        """String representation of the property."""
        return f"<Property(id={self.id}, title={self.title[:30]}, price={self.price})>"

    def validate_price(self) -> None:
        """
        Validate property price.

        Raises:
            ValueError: If price is invalid
        """
        if self.price is None or Decimal(str(self.price)) <= 0:
            raise ValueError("Property price must be greater than 0")

        if Decimal(str(self.price)) > Decimal("9999999999.99"):
            raise ValueError("Property price exceeds maximum allowed value")

    def to_dict(self, include_creator: bool = False) -> dict:
        """
        Convert property to its wire representation.

        Args:
            include_creator: Replace the creator id with the joined user document

        Returns:
            Dictionary keyed the way the admin client reads it
        """
        result = {
            "_id": str(self.id),
            "title": self.title,
            "description": self.description,
            "propertyType": self.property_type,
            "location": self.location,
            "price": float(self.price),
            "photo": self.photo,
            "creator": str(self.creator) if self.creator else None,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
        }

        if include_creator:
            result["creator"] = self.creator_user.to_dict() if self.creator_user else None

        return result


# Filter on type and sort by recency in the admin list view
type_created_index = Index(
    "idx_properties_type_created",
    Property.property_type,
    Property.created_at.desc()
)
