"""
Database repositories
"""
from app.database.repositories.base import BaseRepository
from app.database.repositories.content_repository import (
    ContentRepository,
    MovieRepository,
    TVShowRepository,
    content_repository_for,
)
from app.database.repositories.list_repository import MyListRepository

__all__ = [
    "BaseRepository",
    "ContentRepository",
    "MovieRepository",
    "TVShowRepository",
    "content_repository_for",
    "MyListRepository",
]
