"""
Prometheus metrics
"""
import time

from fastapi import FastAPI
from prometheus_client import Counter, Histogram, generate_latest, CONTENT_TYPE_LATEST
from fastapi.responses import Response

# HTTP запросы
http_requests_total = Counter(
    'mylist_http_requests_total',
    'Total HTTP requests',
    ['method', 'endpoint', 'status_code']
)

# Время обработки запросов
http_request_duration_seconds = Histogram(
    'mylist_http_request_duration_seconds',
    'HTTP request duration in seconds',
    ['method', 'endpoint']
)

# Обращения к кэшу страниц списка
cache_requests_total = Counter(
    'mylist_cache_requests_total',
    'List page cache lookups',
    ['result']  # 'hit', 'miss', 'error'
)

cache_invalidations_total = Counter(
    'mylist_cache_invalidations_total',
    'User-scoped list cache invalidations'
)

# Мутации списка
mutations_total = Counter(
    'mylist_mutations_total',
    'My List add/remove operations',
    ['operation', 'outcome']
)


def _endpoint_label(request) -> str:
    # Route template, not the raw path: one series per route.
    route = request.scope.get("route")
    return getattr(route, "path", None) or "unmatched"


def setup_metrics(app: FastAPI):
    """Настройка метрик для FastAPI приложения"""

    @app.get("/metrics", include_in_schema=False)
    async def metrics():
        """Endpoint для Prometheus метрик"""
        return Response(
            content=generate_latest(),
            media_type=CONTENT_TYPE_LATEST
        )

    @app.middleware("http")
    async def metrics_middleware(request, call_next):
        """Middleware для сбора метрик HTTP запросов"""
        method = request.method
        path = request.url.path

        # Игнорирование health check и metrics
        if path in ["/health", "/metrics", "/favicon.ico"]:
            return await call_next(request)

        start_time = time.time()
        response = await call_next(request)
        duration = time.time() - start_time
        endpoint = _endpoint_label(request)

        http_requests_total.labels(
            method=method,
            endpoint=endpoint,
            status_code=response.status_code
        ).inc()

        http_request_duration_seconds.labels(
            method=method,
            endpoint=endpoint
        ).observe(duration)

        return response


def track_cache_lookup(result: str):
    """Отслеживание обращения к кэшу: hit, miss или error"""
    cache_requests_total.labels(result=result).inc()


def track_invalidation():
    """Отслеживание инвалидации кэша пользователя"""
    cache_invalidations_total.inc()


def track_mutation(operation: str, outcome: str):
    """Отслеживание добавления/удаления элемента списка"""
    mutations_total.labels(operation=operation, outcome=outcome).inc()
