"""
Главное приложение FastAPI
"""
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
from sqlalchemy.exc import SQLAlchemyError
import logging

from app.config import settings
from app.api.v1.router import api_router
from app.api.v1.auth import router as auth_router
from app.api.v1.health import router as health_router
from app.cache.cache_service import CacheService
from app.exceptions import AuthError, BackendError, MyListError
from app.logging_config import setup_logging
from app.middleware.logging_middleware import LoggingMiddleware
from app.monitoring.metrics import setup_metrics
from app.schemas.mylist import ErrorDetail, ErrorResponse
from app.database.connection import init_db, close_db


# Настройка логирования
setup_logging(settings.LOG_LEVEL, use_json=settings.LOG_JSON)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan события приложения"""
    # Запуск
    logger.info("Starting My List Service...")
    await init_db()
    logger.info("Database initialized")
    try:
        await app.state.cache_service.connect()
    except BackendError as e:
        # The client is created lazily on first use.
        logger.warning(f"Redis not available at startup: {e.message}")

    yield

    # Остановка
    logger.info("Shutting down My List Service...")
    await app.state.cache_service.close()
    await close_db()


# Создание приложения
app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.VERSION,
    description="My List service: personal watchlist of movies and TV shows",
    docs_url="/docs" if settings.DEBUG else None,
    redoc_url="/redoc" if settings.DEBUG else None,
    openapi_url="/openapi.json" if settings.DEBUG else None,
    lifespan=lifespan
)
app.state.cache_service = CacheService(settings.REDIS_URL)

# CORS Middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Gzip Middleware
app.add_middleware(GZipMiddleware, minimum_size=1000)

# Custom Middleware
app.add_middleware(LoggingMiddleware)

# Настройка метрик
if settings.ENABLE_METRICS:
    setup_metrics(app)


def _error_response(status_code: int, code: str, message: str, headers=None) -> JSONResponse:
    body = ErrorResponse(error=ErrorDetail(code=code, message=message))
    return JSONResponse(status_code=status_code, content=body.model_dump(), headers=headers)


# Обработка исключений
@app.exception_handler(MyListError)
async def mylist_exception_handler(request: Request, exc: MyListError):
    """Доменные ошибки -> HTTP статус и код ошибки"""
    if isinstance(exc, BackendError):
        logger.error(f"Backend failure on {request.method} {request.url.path}: {exc.message}", exc_info=exc)
        message = exc.message if settings.DEBUG else "Internal server error"
        return _error_response(exc.status_code, exc.code, message)
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, AuthError) else None
    logger.info(f"{request.method} {request.url.path} rejected: {exc.code} {exc.message}")
    return _error_response(exc.status_code, exc.code, exc.message, headers)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Ошибки валидации тела запроса -> 400"""
    errors = "; ".join(
        f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in exc.errors()
    )
    return _error_response(400, "VALIDATION_ERROR", errors or "Invalid request")


@app.exception_handler(SQLAlchemyError)
async def database_exception_handler(request: Request, exc: SQLAlchemyError):
    """Ошибки хранилища -> 500"""
    logger.error(f"Database error on {request.method} {request.url.path}: {exc}", exc_info=exc)
    return _error_response(
        500, BackendError.code, "Internal server error" if not settings.DEBUG else str(exc)
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Глобальный обработчик исключений"""
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    return _error_response(
        500, "INTERNAL_ERROR", "Internal server error" if not settings.DEBUG else str(exc)
    )


# Routes
app.include_router(health_router, tags=["Health"])
if settings.ENABLE_TEST_TOKEN_ENDPOINT:
    app.include_router(auth_router, prefix="/auth", tags=["Authentication"])
app.include_router(api_router, prefix=settings.API_PREFIX)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=3000,
        reload=settings.DEBUG,
    )
