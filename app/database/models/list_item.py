"""
My List membership model
"""
from datetime import datetime

from sqlalchemy import DateTime, Index, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from app.database.models.base import BaseModel, utcnow


class MyListItem(BaseModel):
    """
    A single content item on a user's list

    Attributes:
        id: Primary key
        user_id: Stable user identifier from the bearer credential
        content_id: Content identifier (movie or TV show)
        content_type: "movie" or "tvshow"
        added_at: When the item was added
    """

    __tablename__ = "my_list_items"

    user_id: Mapped[str] = mapped_column(String(128), nullable=False)
    content_id: Mapped[str] = mapped_column(String(64), nullable=False)
    content_type: Mapped[str] = mapped_column(String(16), nullable=False)
    added_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=utcnow,
        nullable=False
    )

    __table_args__ = (
        UniqueConstraint("user_id", "content_id", name="uq_my_list_items_user_content"),
        Index("ix_my_list_items_user_added_at", "user_id", "added_at"),
    )

    def __repr__(self) -> str:
        return (
            f"<MyListItem(id={self.id}, user_id='{self.user_id}', "
            f"content_id='{self.content_id}')>"
        )
