"""
Схемы My List: запрос добавления, страница списка, ответы мутаций.

Поля на проводе в camelCase (contentId, addedAt, totalPages).
"""
from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Базовая схема с camelCase алиасами."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class AddItemRequest(CamelModel):
    """Тело POST /add. Поля проверяются в сервисе (ответ 400, не 422)."""
    content_id: Optional[str] = None
    content_type: Optional[str] = None


class ListItem(CamelModel):
    """Строка списка (membership row)."""
    id: int
    user_id: str
    content_id: str
    content_type: str
    added_at: datetime


class ListEntry(CamelModel):
    """Строка списка, обогащённая контентом; content=None если контент удалён."""
    id: int
    content_id: str
    content_type: str
    added_at: datetime
    content: Optional[Dict[str, Any]] = None


class Pagination(CamelModel):
    page: int
    limit: int
    total: int
    total_pages: int


class CachedPage(CamelModel):
    """Страница списка в том виде, в котором она хранится в кэше."""
    data: List[ListEntry]
    pagination: Pagination


class ListItemsResponse(CachedPage):
    """Ответ GET /items."""
    success: bool = True
    cached: bool = False


class AddItemResponse(CamelModel):
    """Ответ POST /add."""
    success: bool = True
    message: str = "Item added to My List"
    data: ListItem


class RemoveItemResponse(CamelModel):
    """Ответ DELETE /remove/{contentId}."""
    success: bool = True
    message: str = "Item removed from My List"


class ErrorDetail(BaseModel):
    code: str
    message: str


class ErrorResponse(BaseModel):
    success: bool = False
    error: ErrorDetail
