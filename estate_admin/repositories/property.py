"""
Property repository for listing queries and property persistence.
Builds the filter/sort/paginate queries behind the admin list view.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, and_, func, desc, asc
from sqlalchemy.orm import selectinload
from estate_admin.repositories.base import BaseRepository
from estate_admin.models.property import Property
from typing import Optional, List, Tuple
import uuid
import logging

logger = logging.getLogger(__name__)

# Wire field names accepted by `_sort`, mapped to model attributes
SORTABLE_FIELDS = {
    "_id": Property.id,
    "title": Property.title,
    "description": Property.description,
    "propertyType": Property.property_type,
    "location": Property.location,
    "price": Property.price,
    "creator": Property.creator,
    "createdAt": Property.created_at,
    "updatedAt": Property.updated_at,
}


class PropertySearchFilters:
    """Data class for property list filters and pagination bounds."""

    def __init__(
        self,
        start: int = 0,
        end: Optional[int] = None,
        sort: Optional[str] = None,
        order: Optional[str] = None,
        title_like: Optional[str] = None,
        property_type: Optional[str] = None,
        page_size: int = 10
    ):
        self.start = max(start or 0, 0)
        self.end = end if end is not None else self.start + page_size
        self.sort = sort or None
        self.order = order or None
        self.title_like = title_like or None
        self.property_type = property_type or None

    @property
    def limit(self) -> int:
        """Number of rows between the `_start` and `_end` offsets."""
        return max(self.end - self.start, 0)


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class PropertyRepository(BaseRepository[Property]):
    """
    Repository for property documents.
    Provides the filtered list query and creator-joined lookups.
    """

    def __init__(self, db: AsyncSession):
        super().__init__(Property, db)

    def _build_filter_conditions(self, filters: PropertySearchFilters) -> list:
        """
        Build WHERE conditions from the active filters.

        Args:
            filters: PropertySearchFilters instance

        Returns:
            List of SQLAlchemy conditions; empty when no filter is active
        """
        conditions = []

        if filters.property_type:
            conditions.append(Property.property_type == filters.property_type)

        if filters.title_like:
            conditions.append(
                Property.title.ilike(f"%{_escape_like(filters.title_like)}%", escape="\\")
            )

        return conditions

    async def search_properties(self, filters: PropertySearchFilters) -> Tuple[List[Property], int]:
        """
        List properties matching the filters with offset pagination.

        Args:
            filters: PropertySearchFilters instance with filters and bounds

        Returns:
            Tuple of (properties page, total match count)
        """
        try:
            query = select(Property)
            count_query = select(func.count(Property.id))

            conditions = self._build_filter_conditions(filters)
            if conditions:
                query = query.where(and_(*conditions))
                count_query = count_query.where(and_(*conditions))

            count_result = await self.db.execute(count_query)
            total_count = count_result.scalar()

            # Sorting only applies when both field and direction are given
            if filters.sort and filters.order:
                order_field = SORTABLE_FIELDS.get(filters.sort)
                if order_field is None:
                    logger.warning(f"Ignoring unknown sort field: {filters.sort}")
                elif filters.order.lower() == "desc":
                    query = query.order_by(desc(order_field), desc(Property.id))
                else:
                    query = query.order_by(asc(order_field), asc(Property.id))

            query = query.offset(filters.start).limit(filters.limit)

            result = await self.db.execute(query)
            properties = list(result.scalars().all())

            logger.debug(
                f"Property search returned {len(properties)} of {total_count} "
                f"(start={filters.start}, end={filters.end})"
            )
            return properties, total_count
        except Exception as e:
            logger.error(f"Failed to search properties: {e}")
            raise

    async def get_property_with_creator(self, property_id: uuid.UUID) -> Optional[Property]:
        """
        Get property with the creating user joined in.

        Args:
            property_id: UUID of the property

        Returns:
            Property with loaded creator or None if not found
        """
        try:
            query = (
                select(Property)
                .options(selectinload(Property.creator_user))
                .where(Property.id == property_id)
            )

            result = await self.db.execute(query)
            property_obj = result.scalar_one_or_none()

            if property_obj:
                logger.debug(f"Retrieved property with creator: {property_id}")

            return property_obj
        except Exception as e:
            logger.error(f"Failed to get property with creator {property_id}: {e}")
            raise

