"""
Property service for managing property listings.
Handles list queries, creator-joined lookups, and the create/delete flows that keep
`User.all_properties` consistent with `Property.creator`.
"""

from typing import List, Tuple
from sqlalchemy.ext.asyncio import AsyncSession
from estate_admin.database import transaction
from estate_admin.repositories.property import PropertyRepository, PropertySearchFilters
from estate_admin.repositories.user import UserRepository
from estate_admin.models.property import Property
from estate_admin.schemas.property import PropertyCreate, PropertyUpdate
from estate_admin.services.photo_store import PhotoStore
from estate_admin.utils.exceptions import (
    APIException,
    PropertyNotFoundError,
    UserNotFoundError,
    PhotoUploadError,
    InternalServerError
)
import uuid
import logging

logger = logging.getLogger(__name__)


class PropertyService:
    """
    Property service for listing CRUD.

    Create and delete touch two documents (the property and its creator) and run
    those writes in one transaction. The photo upload in create happens before
    the transaction opens and is never undone, so a create that fails after the
    upload leaves the uploaded photo behind.
    """

    def __init__(self, db_session: AsyncSession, photo_store: PhotoStore):
        self.db = db_session
        self.photo_store = photo_store
        self.property_repo = PropertyRepository(db_session)
        self.user_repo = UserRepository(db_session)

    async def list_properties(self, filters: PropertySearchFilters) -> Tuple[List[Property], int]:
        """
        List properties for the admin table.

        Args:
            filters: Filters, sort and `_start`/`_end` bounds

        Returns:
            Tuple of (page of properties, total count matching the filters)
        """
        try:
            return await self.property_repo.search_properties(filters)
        except Exception as e:
            logger.error(f"Failed to list properties: {e}")
            raise InternalServerError(f"Failed to list properties: {str(e)}")

    async def get_property(self, property_id: uuid.UUID) -> Property:
        """
        Get property by ID with its creator joined.

        Raises:
            PropertyNotFoundError: If property doesn't exist
        """
        property_obj = await self.property_repo.get_property_with_creator(property_id)

        if not property_obj:
            raise PropertyNotFoundError(str(property_id))

        logger.debug(f"Retrieved property: {property_id}")
        return property_obj

    async def create_property(self, property_data: PropertyCreate, email: str) -> Property:
        """
        Create a property for the user with `email`.

        Args:
            property_data: Property fields and photo payload
            email: Email of the creating user

        Returns:
            Created property instance

        Raises:
            UserNotFoundError: If no user has this email
            PhotoUploadError: If the photo store fails or returns no URL
            InternalServerError: If the store write fails
        """
        user = await self.user_repo.get_by_email(email)
        if not user:
            raise UserNotFoundError(email=email)

        photo_url = await self.photo_store.upload(property_data.photo)
        if not photo_url:
            raise PhotoUploadError("Photo store returned no URL")

        create_data = property_data.model_dump(exclude={"photo", "email"})
        create_data["photo"] = photo_url
        create_data["creator"] = user.id

        try:
            async with transaction(self.db):
                property_obj = await self.property_repo.add(create_data)
                user.add_property(property_obj.id)
                await self.db.flush()
        except Exception as e:
            logger.warning(f"Property create failed after upload, photo left orphaned: {photo_url}")
            if isinstance(e, APIException):
                raise
            raise InternalServerError(f"Failed to create property: {str(e)}")

        await self.db.refresh(property_obj)
        logger.info(f"Property created by user {user.email}: {property_obj.title} (ID: {property_obj.id})")
        return property_obj

    async def update_property(self, property_id: uuid.UUID, property_data: PropertyUpdate) -> Property:
        """
        Apply a field-level update to a property.

        A supplied photo is uploaded again even if unchanged; when the store
        returns no URL the stored photo URL is kept.

        Raises:
            PropertyNotFoundError: If property doesn't exist
        """
        existing_property = await self.property_repo.get_by_id(property_id)
        if not existing_property:
            raise PropertyNotFoundError(str(property_id))

        update_data = property_data.model_dump(exclude_unset=True, exclude_none=True)

        if property_data.photo is not None:
            photo_url = await self.photo_store.upload(property_data.photo)
            update_data["photo"] = photo_url or existing_property.photo

        try:
            updated_property = await self.property_repo.update(property_id, update_data)
        except Exception as e:
            logger.error(f"Failed to update property {property_id}: {e}")
            raise InternalServerError(f"Failed to update property: {str(e)}")

        if not updated_property:
            raise PropertyNotFoundError(str(property_id))

        logger.info(f"Property updated: {property_id} (fields: {', '.join(sorted(update_data)) or 'none'})")
        return updated_property

    async def delete_property(self, property_id: uuid.UUID) -> None:
        """
        Delete a property and drop it from its creator's `all_properties`.

        Raises:
            PropertyNotFoundError: If property doesn't exist
            InternalServerError: If the store write fails
        """
        property_obj = await self.property_repo.get_property_with_creator(property_id)
        if not property_obj:
            raise PropertyNotFoundError(str(property_id))

        owner = property_obj.creator_user

        try:
            async with transaction(self.db):
                await self.property_repo.remove(property_obj)
                if owner is not None:
                    owner.remove_property(property_id)
                    await self.db.flush()
                else:
                    logger.warning(f"Deleting property {property_id} with no creator document")
        except Exception as e:
            logger.error(f"Failed to delete property {property_id}: {e}")
            raise InternalServerError(f"Failed to delete property: {str(e)}")

        logger.info(f"Property deleted: {property_id}")
