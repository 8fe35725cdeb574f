"""
Tests for repository classes.
Covers the generic CRUD helpers, user lookups, and the property list query.
"""

import pytest
import uuid
from decimal import Decimal

from estate_admin.models.user import User
from estate_admin.repositories.user import UserRepository
from estate_admin.repositories.property import PropertyRepository, PropertySearchFilters
from tests.conftest import UserFactory, PropertyFactory


STAGED_PROPERTY = {
    "title": "Staged listing",
    "description": "Never committed",
    "property_type": "Office",
    "location": "Faro",
    "price": Decimal("10"),
    "photo": "https://example.com/staged.jpg",
}


class TestBaseRepository:
    """Test BaseRepository functionality."""

    @pytest.mark.asyncio
    async def test_create_and_get_by_id(self, user_repository: UserRepository):
        user = await user_repository.create({
            "name": "Base Agent",
            "email": "base@agency.io",
            "avatar": "",
            "all_properties": [],
        })

        assert isinstance(user.id, uuid.UUID)
        fetched = await user_repository.get_by_id(user.id)
        assert fetched is not None
        assert fetched.email == "base@agency.io"

    @pytest.mark.asyncio
    async def test_get_by_id_missing(self, user_repository: UserRepository):
        assert await user_repository.get_by_id(uuid.uuid4()) is None

    @pytest.mark.asyncio
    async def test_get_by_field_unknown_field(self, user_repository: UserRepository):
        with pytest.raises(ValueError, match="does not exist"):
            await user_repository.get_by_field("nickname", "x")

    @pytest.mark.asyncio
    async def test_get_by_ids_skips_missing(self, user_repository: UserRepository):
        first = await UserFactory.create_user(user_repository)
        second = await UserFactory.create_user(user_repository)

        found = await user_repository.get_by_ids([first.id, uuid.uuid4(), second.id])

        assert {u.id for u in found} == {first.id, second.id}
        assert await user_repository.get_by_ids([]) == []

    @pytest.mark.asyncio
    async def test_update_ignores_none_values(self, property_repository: PropertyRepository):
        prop = await PropertyFactory.insert_property(property_repository, title="Old title")

        updated = await property_repository.update(prop.id, {"title": "New title", "location": None})

        assert updated.title == "New title"
        assert updated.location == "Porto, Portugal"

    @pytest.mark.asyncio
    async def test_update_missing_record(self, property_repository: PropertyRepository):
        assert await property_repository.update(uuid.uuid4(), {"title": "Ghost"}) is None

    @pytest.mark.asyncio
    async def test_count_and_exists(self, user_repository: UserRepository):
        assert await user_repository.count() == 0
        user = await UserFactory.create_user(user_repository)

        assert await user_repository.count() == 1
        assert await user_repository.exists(user.id)
        assert not await user_repository.exists(uuid.uuid4())

    @pytest.mark.asyncio
    async def test_add_only_flushes(self, db_session, property_repository: PropertyRepository):
        prop = await property_repository.add(dict(STAGED_PROPERTY))
        assert await property_repository.exists(prop.id)

        await db_session.rollback()
        assert not await property_repository.exists(prop.id)


class TestUserRepository:
    """Test UserRepository functionality."""

    @pytest.mark.asyncio
    async def test_create_user_normalizes_email(self, user_repository: UserRepository):
        user = await UserFactory.create_user(user_repository, email="Mixed.Case@Agency.IO")

        assert user.email == "mixed.case@agency.io"
        assert user.all_properties == []

    @pytest.mark.asyncio
    async def test_create_user_duplicate_email(self, user_repository: UserRepository, test_agent: User):
        with pytest.raises(ValueError, match="already exists"):
            await UserFactory.create_user(user_repository, email=test_agent.email)

    @pytest.mark.asyncio
    async def test_get_by_email_case_insensitive(self, user_repository: UserRepository, test_agent: User):
        found = await user_repository.get_by_email("  AGENT@agency.io ")

        assert found is not None
        assert found.id == test_agent.id

    @pytest.mark.asyncio
    async def test_get_by_email_missing(self, user_repository: UserRepository):
        assert await user_repository.get_by_email("nobody@agency.io") is None

    @pytest.mark.asyncio
    async def test_get_by_email_matches_unicode_normalization(self, user_repository: UserRepository):
        # Stored in composed form, looked up in decomposed form
        user = await UserFactory.create_user(user_repository, email="jos\u00e9@agency.io")

        found = await user_repository.get_by_email("jose\u0301@agency.io")

        assert found is not None
        assert found.id == user.id

    @pytest.mark.asyncio
    async def test_get_by_email_invalid_address(self, user_repository: UserRepository):
        assert await user_repository.get_by_email("not-an-email") is None


class TestPropertySearchFilters:
    """Test list bounds derived from `_start`/`_end`."""

    def test_limit_is_end_minus_start(self):
        assert PropertySearchFilters(start=10, end=20).limit == 10

    def test_end_defaults_to_page_size(self):
        filters = PropertySearchFilters(start=5, page_size=10)
        assert filters.end == 15
        assert filters.limit == 10

    def test_end_before_start_yields_empty_page(self):
        assert PropertySearchFilters(start=10, end=3).limit == 0

    def test_blank_values_are_inactive(self):
        filters = PropertySearchFilters(title_like="", property_type="", sort="", order="")
        assert filters.title_like is None
        assert filters.property_type is None
        assert filters.sort is None
        assert filters.order is None


class TestPropertyRepository:
    """Test the property list query."""

    async def _seed(self, property_repository: PropertyRepository):
        rows = [
            ("Cozy Apartment downtown", "Apartment", Decimal("1200")),
            ("Beach Villa", "Villa", Decimal("900000")),
            ("Loft apartment with view", "Apartment", Decimal("350000")),
            ("Office space", "Office", Decimal("50000")),
            ("Studio", "Apartment", Decimal("80000")),
        ]
        for title, property_type, price in rows:
            await PropertyFactory.insert_property(
                property_repository, title=title, property_type=property_type, price=price
            )

    @pytest.mark.asyncio
    async def test_no_filters_returns_all(self, property_repository: PropertyRepository):
        await self._seed(property_repository)

        properties, total = await property_repository.search_properties(PropertySearchFilters(start=0, end=10))

        assert total == 5
        assert len(properties) == 5

    @pytest.mark.asyncio
    async def test_pagination_window(self, property_repository: PropertyRepository):
        await self._seed(property_repository)

        properties, total = await property_repository.search_properties(
            PropertySearchFilters(start=1, end=3, sort="price", order="asc")
        )

        assert total == 5
        assert [p.price for p in properties] == [Decimal("50000"), Decimal("80000")]

    @pytest.mark.asyncio
    async def test_start_past_end_of_data(self, property_repository: PropertyRepository):
        await self._seed(property_repository)

        properties, total = await property_repository.search_properties(PropertySearchFilters(start=50, end=60))

        assert properties == []
        assert total == 5

    @pytest.mark.asyncio
    async def test_property_type_exact_match(self, property_repository: PropertyRepository):
        await self._seed(property_repository)

        properties, total = await property_repository.search_properties(
            PropertySearchFilters(property_type="Apartment", end=10)
        )

        assert total == 3
        assert all(p.property_type == "Apartment" for p in properties)

        _, partial_total = await property_repository.search_properties(
            PropertySearchFilters(property_type="Apart", end=10)
        )
        assert partial_total == 0

    @pytest.mark.asyncio
    async def test_title_like_case_insensitive(self, property_repository: PropertyRepository):
        await self._seed(property_repository)

        properties, total = await property_repository.search_properties(
            PropertySearchFilters(title_like="APARTMENT", end=10)
        )

        assert total == 2
        assert {p.title for p in properties} == {"Cozy Apartment downtown", "Loft apartment with view"}

    @pytest.mark.asyncio
    async def test_title_like_treats_wildcards_literally(self, property_repository: PropertyRepository):
        await self._seed(property_repository)
        await PropertyFactory.insert_property(property_repository, title="100% renovated")

        properties, total = await property_repository.search_properties(
            PropertySearchFilters(title_like="0%", end=10)
        )

        assert total == 1
        assert properties[0].title == "100% renovated"

    @pytest.mark.asyncio
    async def test_filters_combine(self, property_repository: PropertyRepository):
        await self._seed(property_repository)

        properties, total = await property_repository.search_properties(
            PropertySearchFilters(title_like="loft", property_type="Apartment", end=10)
        )

        assert total == 1
        assert properties[0].title == "Loft apartment with view"

    @pytest.mark.asyncio
    async def test_sort_by_price_desc(self, property_repository: PropertyRepository):
        await self._seed(property_repository)

        properties, _ = await property_repository.search_properties(
            PropertySearchFilters(sort="price", order="desc", end=10)
        )

        prices = [p.price for p in properties]
        assert prices == sorted(prices, reverse=True)

    @pytest.mark.asyncio
    async def test_sort_by_wire_field_name(self, property_repository: PropertyRepository):
        await self._seed(property_repository)

        properties, _ = await property_repository.search_properties(
            PropertySearchFilters(sort="propertyType", order="asc", end=10)
        )

        types = [p.property_type for p in properties]
        assert types == sorted(types)

    @pytest.mark.asyncio
    async def test_sort_needs_order(self, property_repository: PropertyRepository):
        await self._seed(property_repository)

        properties, total = await property_repository.search_properties(
            PropertySearchFilters(sort="price", end=10)
        )

        assert total == 5
        assert len(properties) == 5

    @pytest.mark.asyncio
    async def test_unknown_sort_field_ignored(self, property_repository: PropertyRepository):
        await self._seed(property_repository)

        properties, total = await property_repository.search_properties(
            PropertySearchFilters(sort="bedrooms", order="asc", end=10)
        )

        assert total == 5
        assert len(properties) == 5

    @pytest.mark.asyncio
    async def test_get_property_with_creator(
        self, user_repository: UserRepository, property_repository: PropertyRepository
    ):
        user = await UserFactory.create_user(user_repository)
        prop = await PropertyFactory.insert_property(property_repository, creator_id=user.id)

        loaded = await property_repository.get_property_with_creator(prop.id)

        assert loaded.creator_user is not None
        assert loaded.creator_user.id == user.id
        assert await property_repository.get_property_with_creator(uuid.uuid4()) is None
