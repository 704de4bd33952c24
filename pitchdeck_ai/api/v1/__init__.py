"""API v1 routers"""

from fastapi import APIRouter

from .chat import router as chat_router
from .generation import router as generation_router
from .providers import router as providers_router

v1_router = APIRouter(prefix="/v1")

v1_router.include_router(providers_router)
v1_router.include_router(generation_router)
v1_router.include_router(chat_router)
