"""
User model for dashboard agents.
Users are created on first login and own an embedded list of property identifiers.
"""

from sqlalchemy import String, JSON
from sqlalchemy.orm import Mapped, mapped_column
from email_validator import validate_email, EmailNotValidError
from estate_admin.database import Base
from typing import List, Union
import uuid


class User(Base):
    """
    User document.
    `all_properties` is the reverse side of `Property.creator` and is kept in
    step with it by the property service, not by the database.
    """

    __tablename__ = "users"

    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Display name from the identity provider"
    )

    email: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        nullable=False,
        index=True,
        comment="User email address - must be unique"
    )

    avatar: Mapped[str] = mapped_column(
        String(1024),
        nullable=False,
        default="",
        comment="Avatar image URL"
    )

    all_properties: Mapped[List[str]] = mapped_column(
        JSON,
        nullable=False,
        default=list,
        comment="Identifiers of properties created by this user"
    )

    def __repr__(self) -> str:
        """String representation of the user."""
        return f"<User(id={self.id}, email={self.email})>"

    @classmethod
    def normalize_email(cls, email: str) -> str:
        """
        Validate email format using email-validator and normalize it.

        Args:
            email: Email address to validate

        Returns:
            Normalized, lower-cased email address

        Raises:
            ValueError: If email format is invalid
        """
        try:
            valid_email = validate_email(email.strip(), check_deliverability=False)
            return valid_email.normalized.lower()
        except EmailNotValidError as e:
            raise ValueError(f"Invalid email format: {str(e)}")

    def owns_property(self, property_id: Union[str, uuid.UUID]) -> bool:
        return str(property_id) in (self.all_properties or [])

    def add_property(self, property_id: Union[str, uuid.UUID]) -> None:
        """Append a property id to `all_properties` if it is not there yet."""
        if not self.owns_property(property_id):
            # Reassign so the JSON column is flagged dirty
            self.all_properties = [*(self.all_properties or []), str(property_id)]

    def remove_property(self, property_id: Union[str, uuid.UUID]) -> None:
        """Remove a property id from `all_properties`."""
        self.all_properties = [
            pid for pid in (self.all_properties or []) if pid != str(property_id)
        ]

    def to_dict(self) -> dict:
        """
        Convert user to its wire representation.

        Returns:
            Dictionary keyed the way the admin client reads it
        """
        return {
            "_id": str(self.id),
            "name": self.name,
            "email": self.email,
            "avatar": self.avatar,
            "allProperties": list(self.all_properties or []),
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
        }
