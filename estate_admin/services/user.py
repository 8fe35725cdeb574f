"""
User service for the login upsert and agent lookups.
"""

from typing import List, Tuple
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from estate_admin.repositories.user import UserRepository
from estate_admin.repositories.property import PropertyRepository
from estate_admin.models.user import User
from estate_admin.models.property import Property
from estate_admin.schemas.user import UserLoginRequest
from estate_admin.utils.exceptions import UserNotFoundError, ValidationError
import uuid
import logging

logger = logging.getLogger(__name__)


class UserService:
    """
    User service.

    The login profile is trusted as sent: the credential it was decoded from is
    never verified server-side.
    """

    def __init__(self, db_session: AsyncSession):
        self.db = db_session
        self.user_repo = UserRepository(db_session)
        self.property_repo = PropertyRepository(db_session)

    async def upsert_user(self, profile: UserLoginRequest) -> Tuple[User, bool]:
        """
        Find the user with the profile's email, creating it on first login.

        Args:
            profile: Decoded identity profile

        Returns:
            Tuple of (user, created flag)
        """
        existing_user = await self.user_repo.get_by_email(profile.email)
        if existing_user:
            logger.debug(f"Login for existing user: {existing_user.email}")
            return existing_user, False

        try:
            user = await self.user_repo.create_user(profile.model_dump())
        except (ValueError, IntegrityError) as e:
            # A concurrent login may have created the same email after our lookup
            user = await self.user_repo.get_by_email(profile.email)
            if not user:
                if isinstance(e, ValueError):
                    raise ValidationError(str(e))
                raise
            logger.info(f"Concurrent first login resolved to existing user: {user.email}")
            return user, False

        logger.info(f"Registered user on first login: {user.email}")
        return user, True

    async def list_users(self, start: int, end: int) -> Tuple[List[User], int]:
        """
        List users between the `_start` and `_end` offsets.

        Returns:
            Tuple of (page of users, total user count)
        """
        total_count = await self.user_repo.count()
        users = await self.user_repo.get_multi(skip=start, limit=max(end - start, 0))
        return users, total_count

    async def get_user_with_properties(self, user_id: uuid.UUID) -> Tuple[User, List[Property]]:
        """
        Get a user and resolve `all_properties` into property documents.

        Identifiers that no longer resolve are skipped.

        Raises:
            UserNotFoundError: If the user doesn't exist
        """
        user = await self.user_repo.get_by_id(user_id)
        if not user:
            raise UserNotFoundError(user_id=str(user_id))

        property_ids = []
        for raw_id in user.all_properties or []:
            try:
                property_ids.append(uuid.UUID(raw_id))
            except ValueError:
                logger.warning(f"User {user_id} references malformed property id: {raw_id}")

        by_id = {p.id: p for p in await self.property_repo.get_by_ids(property_ids)}
        properties = [by_id[pid] for pid in property_ids if pid in by_id]
        return user, properties
