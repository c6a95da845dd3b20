from pydantic_settings import BaseSettings
from typing import List
from functools import lru_cache


class Settings(BaseSettings):
    """Настройки приложения"""

    # Database
    POSTGRES_DB: str = "ott_mylist"
    POSTGRES_USER: str = "postgres_user"
    POSTGRES_PASSWORD: str = "postgres_password"
    POSTGRES_HOST: str = "localhost"
    DATABASE_URL: str = ""
    DB_CREATE_TABLES: bool = True

    # Redis
    REDIS_URL: str = "redis://localhost:6379/0"

    # JWT
    JWT_SECRET: str = "change-this-secret-key-minimum-32-characters"
    JWT_ALGORITHM: str = "HS256"
    JWT_ACCESS_TOKEN_EXPIRE_MINUTES: int = 60
    MOCK_USER_ID: str = "user_12345"

    # Application
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False
    DEBUG: bool = False
    API_PREFIX: str = "/api/mylist"
    PROJECT_NAME: str = "OTT My List Service"
    VERSION: str = "1.0.0"
    ENABLE_TEST_TOKEN_ENDPOINT: bool = True

    # Pagination
    LIST_DEFAULT_LIMIT: int = 20
    LIST_MAX_LIMIT: int = 50

    # List cache
    CACHE_FIRST_PAGE_TTL: int = 60
    CACHE_PAGE_TTL: int = 30
    CACHE_FAIL_OPEN: bool = True
    CACHE_USE_KEY_INDEX: bool = False

    # Monitoring
    ENABLE_METRICS: bool = True

    # CORS
    CORS_ORIGINS: List[str] = ["*"]

    class Config:
        env_file = ".env"
        case_sensitive = True

    @property
    def database_url(self) -> str:
        """Формирование URL для базы данных"""
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return (
            f"postgresql+asyncpg://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}"
            f"@{self.POSTGRES_HOST}:5432/{self.POSTGRES_DB}"
        )


@lru_cache()
def get_settings() -> Settings:
    """Получить настройки (кэшированные)"""
    return Settings()


settings = get_settings()
