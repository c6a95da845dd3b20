"""
API v1 Router
"""
from fastapi import APIRouter

from app.api.v1.mylist import router as mylist_router

api_router = APIRouter()

# Подключение роутеров
api_router.include_router(mylist_router, tags=["My List"])
