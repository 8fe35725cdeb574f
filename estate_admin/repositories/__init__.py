"""
Repository layer for data access operations.
"""

from estate_admin.repositories.base import BaseRepository
from estate_admin.repositories.property import PropertyRepository, PropertySearchFilters
from estate_admin.repositories.user import UserRepository

__all__ = [
    "BaseRepository",
    "PropertyRepository",
    "PropertySearchFilters",
    "UserRepository"
]
