"""
Database models for the Estate Admin API.
Includes the User and Property documents.
"""

from estate_admin.models.user import User
from estate_admin.models.property import Property

# Export all models for easy importing
__all__ = [
    "User",
    "Property",
]
