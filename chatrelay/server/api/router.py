"""
Main API router that aggregates all route modules.
"""

from fastapi import APIRouter

from .routes import chat, health


def get_api_router() -> APIRouter:
    """Get the API router with every route module included."""
    api_router = APIRouter()

    api_router.include_router(health.router)
    api_router.include_router(chat.router)

    return api_router
