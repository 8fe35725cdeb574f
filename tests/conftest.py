"""
Test configuration and fixtures for the Estate Admin API.
Provides per-test database fixtures, a fake photo store, data factories, and an HTTP client.
"""

import os
import tempfile

# Must be set before the application modules read their settings
os.environ["ENVIRONMENT"] = "testing"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["PHOTO_STORE_BACKEND"] = "local"
os.environ["UPLOAD_DIR"] = tempfile.mkdtemp(prefix="estate_admin_uploads_")

import pytest
import uuid
from decimal import Decimal
from typing import AsyncGenerator, List, Optional
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool
from httpx import AsyncClient, ASGITransport
from jose import jwt

from estate_admin.main import app
from estate_admin.config import settings
from estate_admin.database import Base, get_db
from estate_admin.models.user import User
from estate_admin.models.property import Property
from estate_admin.repositories.user import UserRepository
from estate_admin.repositories.property import PropertyRepository
from estate_admin.schemas.property import PropertyCreate
from estate_admin.services.photo_store import PhotoStore
from estate_admin.services.property import PropertyService
from estate_admin.services.user import UserService
from estate_admin.utils.dependencies import get_photo_store
from estate_admin.utils.exceptions import PhotoUploadError


API_PREFIX = settings.api_v1_prefix

# 1x1 transparent PNG
PNG_DATA_URI = (
    "data:image/png;base64,"
    "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mNkYPhfDwAChwGA60e6kgAAAABJRU5ErkJggg=="
)


class FakePhotoStore(PhotoStore):
    """In-memory photo store recording every upload."""

    def __init__(self):
        self.uploads: List[str] = []
        self.fail = False
        self.return_none = False

    async def upload(self, payload: Optional[str]) -> Optional[str]:
        if not payload:
            return None
        if self.fail:
            raise PhotoUploadError("photo host unavailable")
        self.uploads.append(payload)
        if self.return_none:
            return None
        return f"https://res.cloudinary.com/demo/image/upload/photo{len(self.uploads)}.jpg"


@pytest.fixture
async def test_engine():
    """Fresh in-memory database per test."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False}
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(test_engine):
    return async_sessionmaker(bind=test_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session."""
    async with session_factory() as session:
        yield session


@pytest.fixture
def photo_store() -> FakePhotoStore:
    return FakePhotoStore()


@pytest.fixture
async def async_client(session_factory, photo_store: FakePhotoStore) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client with a session per request and the fake photo store."""
    async def override_get_db():
        async with session_factory() as session:
            yield session

    async def override_get_photo_store():
        return photo_store

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_photo_store] = override_get_photo_store

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


# Repository fixtures
@pytest.fixture
def user_repository(db_session: AsyncSession) -> UserRepository:
    return UserRepository(db_session)


@pytest.fixture
def property_repository(db_session: AsyncSession) -> PropertyRepository:
    return PropertyRepository(db_session)


# Service fixtures
@pytest.fixture
def property_service(db_session: AsyncSession, photo_store: FakePhotoStore) -> PropertyService:
    return PropertyService(db_session, photo_store)


@pytest.fixture
def user_service(db_session: AsyncSession) -> UserService:
    return UserService(db_session)


# Test data factories
class UserFactory:
    """Factory for creating test users."""

    @staticmethod
    def create_user_data(
        email: str = None,
        name: str = "Test Agent",
        avatar: str = "https://lh3.googleusercontent.com/a/avatar.jpg"
    ) -> dict:
        return {
            "email": email or f"agent{uuid.uuid4().hex[:8]}@agency.io",
            "name": name,
            "avatar": avatar,
        }

    @staticmethod
    async def create_user(user_repo: UserRepository, **overrides) -> User:
        """Create a test user in the database."""
        return await user_repo.create_user(UserFactory.create_user_data(**overrides))


class PropertyFactory:
    """Factory for creating test properties."""

    @staticmethod
    def create_property_data(
        title: str = "Sunny loft near the river",
        description: str = "Two bedrooms, balcony, close to transport.",
        property_type: str = "Apartment",
        location: str = "Lisbon, Portugal",
        price: Decimal = Decimal("250000"),
        photo: str = PNG_DATA_URI,
        email: Optional[str] = None
    ) -> dict:
        """Property payload using the wire field names."""
        data = {
            "title": title,
            "description": description,
            "propertyType": property_type,
            "location": location,
            "price": float(price),
            "photo": photo,
        }
        if email:
            data["email"] = email
        return data

    @staticmethod
    async def create_property(property_service: PropertyService, email: str, **overrides) -> Property:
        """Create a property through the service so the creator's list is maintained."""
        data = PropertyFactory.create_property_data(**overrides)
        return await property_service.create_property(PropertyCreate.model_validate(data), email)

    @staticmethod
    async def insert_property(property_repo: PropertyRepository, creator_id: uuid.UUID = None, **overrides) -> Property:
        """Insert a bare property row, bypassing the service."""
        data = {
            "title": "Plain listing",
            "description": "Listing inserted directly for query tests.",
            "property_type": "Apartment",
            "location": "Porto, Portugal",
            "price": Decimal("1000"),
            "photo": "https://res.cloudinary.com/demo/image/upload/plain.jpg",
            "creator": creator_id,
        }
        data.update(overrides)
        return await property_repo.create(data)


def make_credential(email: str, name: str = "Jane Agent", picture: str = "https://lh3.googleusercontent.com/a/jane.jpg") -> str:
    """Build a Google-style ID token; its signature is never checked."""
    return jwt.encode(
        {"email": email, "name": name, "picture": picture, "sub": "1234567890"},
        "not-a-google-key",
        algorithm="HS256"
    )


# Common test fixtures
@pytest.fixture
async def test_agent(user_repository: UserRepository) -> User:
    """Create a test agent user."""
    return await UserFactory.create_user(user_repository, email="agent@agency.io", name="Test Agent")


@pytest.fixture
async def test_property(property_service: PropertyService, test_agent: User) -> Property:
    """Create a test property owned by test_agent."""
    return await PropertyFactory.create_property(property_service, test_agent.email)
