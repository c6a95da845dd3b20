"""
My List domain exceptions

Each exception carries the HTTP status and error code it is reported with;
the translation to a response happens in one place (app.main).
"""


class MyListError(Exception):
    """Базовое исключение сервиса My List."""

    status_code = 500
    code = "INTERNAL_ERROR"

    def __init__(self, message: str = "Internal server error"):
        super().__init__(message)
        self.message = message


class ValidationError(MyListError):
    """Отсутствующие или некорректные поля запроса."""

    status_code = 400
    code = "VALIDATION_ERROR"


class AuthError(MyListError):
    """Отсутствующий, некорректный или просроченный токен."""

    status_code = 401
    code = "UNAUTHORIZED"


class NotFoundError(MyListError):
    status_code = 404
    code = "NOT_FOUND"


class ContentNotFoundError(NotFoundError):
    """Контент (фильм/сериал) не существует."""

    code = "CONTENT_NOT_FOUND"


class ListItemNotFoundError(NotFoundError):
    """Элемента нет в списке пользователя."""

    code = "ITEM_NOT_FOUND"


class ConflictError(MyListError):
    """Элемент уже в списке пользователя."""

    status_code = 409
    code = "ALREADY_IN_LIST"


class BackendError(MyListError):
    """Ошибка хранилища или кэша."""

    status_code = 500
    code = "BACKEND_ERROR"


class CacheBackendError(BackendError):
    """Redis недоступен или вернул ошибку."""

    code = "CACHE_BACKEND_ERROR"
