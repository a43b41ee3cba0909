"""API router aggregator."""
from fastapi import APIRouter

from overtime_sync.api.routes import auth, data

api_router = APIRouter(prefix="/api")
api_router.include_router(auth.router)
api_router.include_router(data.router)

__all__ = ["api_router"]
