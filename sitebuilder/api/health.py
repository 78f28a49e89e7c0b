"""
Health check endpoint - no authentication required
"""

from fastapi import APIRouter

from ..config import API_VERSION, APP_NAME

router = APIRouter()


@router.get("/health", tags=["health"])
async def health():
    return {"status": "ok", "service": APP_NAME, "version": API_VERSION}
