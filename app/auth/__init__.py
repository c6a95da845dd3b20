"""Authentication module"""
from app.auth.jwt import JWTService, TokenPayload
from app.auth.dependencies import get_current_user_id, validate_credential

__all__ = ["JWTService", "TokenPayload", "get_current_user_id", "validate_credential"]
