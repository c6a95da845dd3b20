"""Authentication dependencies for FastAPI"""
import logging
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError

from app.auth.jwt import JWTService
from app.config import settings
from app.exceptions import AuthError

logger = logging.getLogger(__name__)

# auto_error=False: missing/garbled headers are reported as our own AuthError
bearer_scheme = HTTPBearer(auto_error=False)

jwt_service = JWTService(
    secret_key=settings.JWT_SECRET,
    algorithm=settings.JWT_ALGORITHM
)


def validate_credential(token: str) -> str:
    """
    Validate a bearer token and return the stable user identifier

    Args:
        token: Raw bearer token

    Returns:
        User ID

    Raises:
        AuthError: If the token is malformed, expired or invalid
    """
    try:
        return jwt_service.get_user_id_from_token(token)
    except JWTError as e:
        logger.warning(f"Token validation failed: {e}")
        raise AuthError("Invalid or expired token")


async def get_current_user_id(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> str:
    """
    Dependency to get the authenticated user id from the Authorization header

    Raises:
        AuthError: If the header is missing, not a Bearer credential, or invalid
    """
    if credentials is None or credentials.scheme.lower() != "bearer" or not credentials.credentials:
        raise AuthError("Missing or invalid Authorization header")
    return validate_credential(credentials.credentials)
