"""
Health Check Router
Simple health check endpoint
"""
from datetime import datetime

from fastapi import APIRouter

from app.core.config import settings
from app.routers.advice import advisory_engine

router = APIRouter()


@router.get("/health")
async def health_check():
    """
    Health check endpoint.
    Returns API status and the number of category guidelines loaded.
    """
    return {
        "status": "healthy",
        "service": settings.PROJECT_NAME,
        "guidelines": len(advisory_engine.config.guidelines),
        "timestamp": datetime.utcnow().isoformat()
    }
