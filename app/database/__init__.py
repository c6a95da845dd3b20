"""
Database package
"""
from app.database.connection import (
    engine,
    async_session_maker,
    get_db,
    get_session_factory,
    init_db,
    close_db,
)
from app.database.models import (
    Base,
    BaseModel,
    ContentType,
    Movie,
    TVShow,
    MyListItem,
)
from app.database.repositories import (
    BaseRepository,
    ContentRepository,
    MyListRepository,
)

__all__ = [
    # Connection
    "engine",
    "async_session_maker",
    "get_db",
    "get_session_factory",
    "init_db",
    "close_db",
    # Models
    "Base",
    "BaseModel",
    "ContentType",
    "Movie",
    "TVShow",
    "MyListItem",
    # Repositories
    "BaseRepository",
    "ContentRepository",
    "MyListRepository",
]
