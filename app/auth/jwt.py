"""JWT service for bearer credential creation and validation"""
from datetime import datetime, timedelta, timezone
from typing import Dict, Any, Optional
from jose import JWTError, jwt
from pydantic import BaseModel, ConfigDict, Field, ValidationError


class TokenPayload(BaseModel):
    """Token payload model"""
    model_config = ConfigDict(populate_by_name=True)

    user_id: str = Field(..., alias="userId", min_length=1)
    exp: datetime
    iat: Optional[datetime] = None


class JWTService:
    """Service for JWT token operations"""

    def __init__(self, secret_key: str, algorithm: str = "HS256"):
        """
        Initialize JWT service

        Args:
            secret_key: Secret key for signing tokens
            algorithm: Algorithm to use for token encoding (default: HS256)
        """
        self.secret_key = secret_key
        self.algorithm = algorithm

    def create_access_token(self, user_id: str, expires_delta: Optional[timedelta] = None) -> str:
        """
        Create an access token

        Args:
            user_id: Stable user identifier
            expires_delta: Custom expiration time (default: 1 hour)

        Returns:
            JWT access token string
        """
        now = datetime.now(timezone.utc)
        expire = now + (expires_delta if expires_delta is not None else timedelta(hours=1))

        to_encode = {
            "userId": user_id,
            "exp": expire,
            "iat": now,
        }
        return jwt.encode(to_encode, self.secret_key, algorithm=self.algorithm)

    def decode_token(self, token: str) -> Dict[str, Any]:
        """
        Decode and verify signature and expiry of a token

        Args:
            token: JWT token string

        Returns:
            Dictionary with token payload

        Raises:
            JWTError: If token is malformed, tampered with or expired
        """
        try:
            return jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
        except JWTError as e:
            raise JWTError(f"Could not validate credentials: {str(e)}")

    def verify_token(self, token: str) -> TokenPayload:
        """
        Verify a token and validate its claims

        Args:
            token: JWT token string

        Returns:
            TokenPayload object

        Raises:
            JWTError: If token is invalid, expired or lacks a user id
        """
        payload = self.decode_token(token)
        try:
            return TokenPayload(**payload)
        except ValidationError as e:
            raise JWTError(f"Invalid token claims: {e.error_count()} error(s)")

    def get_user_id_from_token(self, token: str) -> str:
        """
        Extract user ID from token

        Args:
            token: JWT token string

        Returns:
            User ID

        Raises:
            JWTError: If token is invalid or userId is missing
        """
        return self.verify_token(token).user_id
