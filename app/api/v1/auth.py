"""Development token endpoint"""
from datetime import timedelta

from fastapi import APIRouter
from pydantic import BaseModel

from app.auth.dependencies import jwt_service
from app.config import settings

router = APIRouter()


class TestTokenResponse(BaseModel):
    """Test token response model"""
    success: bool = True
    token: str
    message: str


@router.get("/test-token", response_model=TestTokenResponse)
async def test_token():
    """
    Issue a one-hour token for the mock user

    Only mounted when ENABLE_TEST_TOKEN_ENDPOINT is set; use the token as
    `Authorization: Bearer <token>`.
    """
    token = jwt_service.create_access_token(
        settings.MOCK_USER_ID,
        expires_delta=timedelta(minutes=settings.JWT_ACCESS_TOKEN_EXPIRE_MINUTES),
    )
    return TestTokenResponse(
        token=token,
        message="Mock JWT token generated for testing. Use in Authorization header as: Bearer <token>",
    )
