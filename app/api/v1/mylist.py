"""
My List API: add, remove, paginated items
"""
from typing import Optional

from fastapi import APIRouter, Depends, status

from app.auth.dependencies import get_current_user_id
from app.api.dependencies import get_mylist_service
from app.schemas.mylist import (
    AddItemRequest,
    AddItemResponse,
    ListItem,
    ListItemsResponse,
    RemoveItemResponse,
)
from app.services.mylist_service import MyListService

router = APIRouter()


def _parse_int(value: Optional[str]) -> Optional[int]:
    # Non-numeric query values fall back to the defaults.
    try:
        return int(value) if value is not None else None
    except ValueError:
        return None


@router.post(
    "/add",
    response_model=AddItemResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_item(
    body: AddItemRequest,
    user_id: str = Depends(get_current_user_id),
    service: MyListService = Depends(get_mylist_service),
):
    """Добавление фильма или сериала в список."""
    item = await service.add_item(user_id, body.content_id, body.content_type)
    return AddItemResponse(data=ListItem.model_validate(item, from_attributes=True))


@router.delete("/remove/{content_id}", response_model=RemoveItemResponse)
async def remove_item(
    content_id: str,
    user_id: str = Depends(get_current_user_id),
    service: MyListService = Depends(get_mylist_service),
):
    """Удаление элемента из списка."""
    await service.remove_item(user_id, content_id)
    return RemoveItemResponse()


@router.get("/items", response_model=ListItemsResponse)
async def get_items(
    page: Optional[str] = None,
    limit: Optional[str] = None,
    user_id: str = Depends(get_current_user_id),
    service: MyListService = Depends(get_mylist_service),
):
    """Страница списка (сначала недавно добавленные), с кэшированием."""
    return await service.get_items(user_id, _parse_int(page), _parse_int(limit))
