"""
Liveness endpoint.
"""

from fastapi import APIRouter

router = APIRouter(prefix="/api", tags=["health"])


@router.get("/health")
async def health_check():
    """Report that the process is serving requests. Touches no upstream."""
    return {"ok": True}
