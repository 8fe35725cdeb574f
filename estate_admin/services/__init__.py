"""
Service layer for business logic implementation.
"""

from .property import PropertyService
from .user import UserService
from .photo_store import PhotoStore, LocalPhotoStore, CloudinaryPhotoStore, create_photo_store
from .error_handler import ErrorHandlerService

__all__ = [
    "PropertyService",
    "UserService",
    "PhotoStore",
    "LocalPhotoStore",
    "CloudinaryPhotoStore",
    "create_photo_store",
    "ErrorHandlerService"
]
