"""
Content models (movies and TV shows)
"""
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from sqlalchemy import DateTime, JSON, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.database.models.base import BaseModel


class ContentType(str, Enum):
    """Content types that can be put on a list"""
    MOVIE = "movie"
    TVSHOW = "tvshow"


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


class Movie(BaseModel):
    """
    Movie record

    Attributes:
        id: Primary key
        content_id: Public content identifier (e.g. "movie-001")
        title: Title
        description: Synopsis
        genres: List of genre names
        release_date: Release date
        director: Director name
        actors: List of actor names
    """

    __tablename__ = "movies"

    content_id: Mapped[str] = mapped_column(
        String(64),
        unique=True,
        index=True,
        nullable=False
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    genres: Mapped[List[str]] = mapped_column(JSON, nullable=False, default=list)
    release_date: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    director: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    actors: Mapped[List[str]] = mapped_column(JSON, nullable=False, default=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.content_id,
            "type": ContentType.MOVIE.value,
            "title": self.title,
            "description": self.description,
            "genres": list(self.genres or []),
            "releaseDate": _iso(self.release_date),
            "director": self.director,
            "actors": list(self.actors or []),
        }

    def __repr__(self) -> str:
        return f"<Movie(id={self.id}, content_id='{self.content_id}', title='{self.title}')>"


class TVShow(BaseModel):
    """
    TV show record

    Episodes are stored in broadcast order as a JSON list of
    {episodeNumber, seasonNumber, releaseDate, director, actors}.
    """

    __tablename__ = "tv_shows"

    content_id: Mapped[str] = mapped_column(
        String(64),
        unique=True,
        index=True,
        nullable=False
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    genres: Mapped[List[str]] = mapped_column(JSON, nullable=False, default=list)
    episodes: Mapped[List[Dict[str, Any]]] = mapped_column(JSON, nullable=False, default=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.content_id,
            "type": ContentType.TVSHOW.value,
            "title": self.title,
            "description": self.description,
            "genres": list(self.genres or []),
            "episodes": list(self.episodes or []),
        }

    def __repr__(self) -> str:
        return f"<TVShow(id={self.id}, content_id='{self.content_id}', title='{self.title}')>"
