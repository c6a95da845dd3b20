"""
Business logic services
"""
from app.services.mylist_service import MyListService, normalize_pagination

__all__ = ["MyListService", "normalize_pagination"]
