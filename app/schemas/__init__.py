"""
Pydantic schemas for API and services
"""
from app.schemas.mylist import (
    AddItemRequest,
    AddItemResponse,
    CachedPage,
    ErrorDetail,
    ErrorResponse,
    ListEntry,
    ListItem,
    ListItemsResponse,
    Pagination,
    RemoveItemResponse,
)

__all__ = [
    "AddItemRequest",
    "AddItemResponse",
    "CachedPage",
    "ErrorDetail",
    "ErrorResponse",
    "ListEntry",
    "ListItem",
    "ListItemsResponse",
    "Pagination",
    "RemoveItemResponse",
]
