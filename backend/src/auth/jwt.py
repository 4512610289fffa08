"""JWT token generation and validation

The HTTP layer identifies the calling user through a bearer token issued by
the external authentication service. Only the claims needed to resolve the
user are read here.

JWT Token Claims Structure:
- sub (Subject): User ID as string, e.g. "42"
- role: User's role ("Administrator" | "Secretary"), informational only;
  authorization always uses the role stored on the user record
- iat (Issued At): Unix timestamp when token was created
- exp (Expiration): Unix timestamp when token expires

Security Properties:
- Algorithm: JWT_ALGORITHM setting (HS256 by default)
- Secret: JWT_SECRET setting
- Stateless validation (signature and expiry only)
"""

from datetime import datetime, timedelta, timezone
from typing import Dict, Any, Optional

import jwt

from config import get_settings


def create_access_token(user_id: int, role: str, expiry_minutes: Optional[int] = None) -> str:
    """Create a JWT access token for a user.

    Args:
        user_id: User's ID
        role: User's role
        expiry_minutes: Token lifetime (defaults to JWT_EXPIRY_MINUTES)

    Returns:
        str: Signed JWT token
    """
    settings = get_settings()
    if expiry_minutes is None:
        expiry_minutes = settings.JWT_EXPIRY_MINUTES

    now = datetime.now(timezone.utc)
    expiration = now + timedelta(minutes=expiry_minutes)

    payload = {
        'sub': str(user_id),  # Subject: user ID
        'role': role,
        'iat': int(now.timestamp()),  # Issued at
        'exp': int(expiration.timestamp())  # Expiration
    }

    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def decode_token(token: str) -> Dict[str, Any]:
    """Decode and validate a JWT token.

    Args:
        token: JWT token string

    Returns:
        dict: Decoded token payload with claims

    Raises:
        jwt.ExpiredSignatureError: If token has expired
        jwt.InvalidTokenError: If token is invalid or tampered
    """
    settings = get_settings()

    try:
        return jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
    except jwt.ExpiredSignatureError:
        raise jwt.ExpiredSignatureError("Token has expired")
    except jwt.InvalidTokenError as e:
        raise jwt.InvalidTokenError(f"Invalid token: {str(e)}")
