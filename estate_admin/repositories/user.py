"""
User repository for login upserts and agent lookups.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from estate_admin.repositories.base import BaseRepository
from estate_admin.models.user import User
from typing import Optional, Dict, Any
import logging

logger = logging.getLogger(__name__)


class UserRepository(BaseRepository[User]):
    """
    Repository for user documents.
    Emails are stored normalized, so lookups normalize their input the same way.
    """

    def __init__(self, db: AsyncSession):
        super().__init__(User, db)

    async def create_user(self, user_data: Dict[str, Any]) -> User:
        """
        Create a new user with a normalized email and no properties.

        Args:
            user_data: Dictionary with name, email and avatar

        Returns:
            Created user instance

        Raises:
            ValueError: If the email is invalid or already taken
        """
        try:
            email = User.normalize_email(user_data["email"])

            existing_user = await self.get_by_email(email)
            if existing_user:
                raise ValueError(f"User with email {email} already exists")

            create_data = {
                "name": user_data["name"],
                "email": email,
                "avatar": user_data.get("avatar") or "",
                "all_properties": [],
            }

            created_user = await self.create(create_data)
            logger.info(f"Created user: {created_user.email} (ID: {created_user.id})")
            return created_user
        except ValueError as e:
            logger.error(f"User validation failed: {e}")
            raise

    async def get_by_email(self, email: str) -> Optional[User]:
        """
        Get user by email address.

        Args:
            email: Email address to search for

        Returns:
            User instance if found, None otherwise
        """
        try:
            normalized_email = User.normalize_email(email)
        except ValueError:
            # Invalid addresses are never stored
            normalized_email = email.lower().strip()
        return await self.get_by_field("email", normalized_email)
