"""
Database models
"""
from app.database.models.base import BaseModel
from app.database.models.content import ContentType, Movie, TVShow
from app.database.models.list_item import MyListItem

Base = BaseModel

__all__ = [
    "Base",
    "BaseModel",
    "ContentType",
    "Movie",
    "TVShow",
    "MyListItem",
]
