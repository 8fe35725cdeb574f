"""
FastAPI dependency injection utilities for services, the photo store, and the request context.
"""

from dataclasses import dataclass
from functools import lru_cache
from typing import Optional
from fastapi import Depends, Header, Request
from sqlalchemy.ext.asyncio import AsyncSession
from estate_admin.database import get_db
from estate_admin.services.photo_store import PhotoStore, create_photo_store
from estate_admin.services.property import PropertyService
from estate_admin.services.user import UserService
from estate_admin.utils.credentials import IdentityProfile, decode_credential, extract_bearer_credential


@dataclass(frozen=True)
class RequestContext:
    """
    Per-request caller information.

    Carries the bearer credential sent with this request. Its claims are decoded
    only when a handler asks for them, so a request that never needs the caller's
    identity is not rejected over a bad credential. Handlers receive the context
    explicitly instead of reading shared state.
    """

    request_id: Optional[str] = None
    credential: Optional[str] = None

    @property
    def profile(self) -> Optional[IdentityProfile]:
        """
        Identity claims decoded from the credential, None when there is none.

        Raises:
            InvalidCredentialError: If the credential cannot be decoded
        """
        return decode_credential(self.credential) if self.credential else None

    @property
    def email(self) -> Optional[str]:
        profile = self.profile
        return profile.email if profile else None


@lru_cache()
def get_shared_photo_store() -> PhotoStore:
    """Photo store shared across requests, built once from settings."""
    return create_photo_store()


async def get_photo_store() -> PhotoStore:
    """
    Get the configured photo store.

    Returns:
        PhotoStore instance
    """
    return get_shared_photo_store()


async def get_property_service(
    db: AsyncSession = Depends(get_db),
    photo_store: PhotoStore = Depends(get_photo_store)
) -> PropertyService:
    """
    Get property service instance.

    Args:
        db: Database session
        photo_store: Photo store for listing images

    Returns:
        PropertyService instance
    """
    return PropertyService(db, photo_store)


async def get_user_service(db: AsyncSession = Depends(get_db)) -> UserService:
    """
    Get user service instance.

    Args:
        db: Database session

    Returns:
        UserService instance
    """
    return UserService(db)


async def get_request_context(
    request: Request,
    authorization: Optional[str] = Header(None)
) -> RequestContext:
    """
    Build the request context from the Authorization header.

    A missing header yields an anonymous context. The credential is decoded
    lazily through `RequestContext.profile`.
    """
    return RequestContext(
        request_id=getattr(request.state, "request_id", None),
        credential=extract_bearer_credential(authorization)
    )
