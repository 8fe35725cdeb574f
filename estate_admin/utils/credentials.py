"""
Identity credential decoding.
Turns a Google sign-in credential (an ID token JWT) into the profile fields used on login.

The claims are read WITHOUT signature verification; the server trusts what the
credential says, exactly like the dashboard's own client-side decoding.
"""

from dataclasses import dataclass
from typing import Optional, Dict, Any
from jose import jwt, JWTError
from estate_admin.utils.exceptions import InvalidCredentialError


@dataclass(frozen=True)
class IdentityProfile:
    """Profile claims decoded from a login credential."""

    name: str
    email: str
    avatar: str
    subject: Optional[str] = None

    @classmethod
    def from_claims(cls, claims: Dict[str, Any]) -> "IdentityProfile":
        """Create an IdentityProfile from decoded token claims."""
        email = claims.get("email")
        if not email:
            raise InvalidCredentialError("Credential carries no email claim")

        return cls(
            name=claims.get("name") or email.split("@")[0],
            email=email,
            avatar=claims.get("picture") or "",
            subject=claims.get("sub"),
        )


def extract_bearer_credential(authorization: Optional[str]) -> Optional[str]:
    """
    Extract the credential from an Authorization header value.

    Args:
        authorization: Raw header value, e.g. "Bearer eyJ..."

    Returns:
        The credential string, or None when the header is absent or not a bearer token
    """
    if not authorization:
        return None

    scheme, _, credential = authorization.partition(" ")
    if scheme.lower() != "bearer" or not credential.strip():
        return None
    return credential.strip()


def decode_credential(credential: str) -> IdentityProfile:
    """
    Decode a credential into identity claims.

    Args:
        credential: Encoded JWT credential

    Returns:
        IdentityProfile with name, email and avatar

    Raises:
        InvalidCredentialError: If the credential is not a decodable JWT
    """
    try:
        claims = jwt.get_unverified_claims(credential)
    except JWTError as e:
        raise InvalidCredentialError(f"Invalid credential: {str(e)}")

    return IdentityProfile.from_claims(claims)
