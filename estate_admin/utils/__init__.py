"""
Utility modules for the Estate Admin API.
"""

from .credentials import (
    IdentityProfile,
    decode_credential,
    extract_bearer_credential
)

from .exceptions import (
    APIException,
    ValidationError,
    NotFoundError,
    UnauthorizedError,
    InternalServerError,
    InvalidCredentialError,
    PropertyNotFoundError,
    UserNotFoundError,
    PhotoUploadError
)

# Dependencies are imported directly where needed to avoid circular imports

__all__ = [
    # Credential utilities
    "IdentityProfile",
    "decode_credential",
    "extract_bearer_credential",

    # Exceptions
    "APIException",
    "ValidationError",
    "NotFoundError",
    "UnauthorizedError",
    "InternalServerError",
    "InvalidCredentialError",
    "PropertyNotFoundError",
    "UserNotFoundError",
    "PhotoUploadError",
]
