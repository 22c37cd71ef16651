"""
Health check and system status endpoints
"""
from fastapi import APIRouter, Depends

from rover_shop.context import AppContext, get_context


router = APIRouter(tags=["health"])


@router.get("/")
async def health_check(ctx: AppContext = Depends(get_context)):
    """Health check endpoint"""
    return {
        "status": "ok",
        "message": "Rover Challenge Shop",
        "version": "1.0.0",
        "remote_store": bool(ctx.settings.remote_store_url),
    }
