"""
Home/Root API endpoints
Service information and welcome endpoints
"""

from fastapi import APIRouter

from blueprint.core.config import config

router = APIRouter()


@router.get("/")
async def root():
    """
    Root endpoint - Service information.
    """
    return {
        "service": config.service_name,
        "version": config.service_version,
        "environment": config.environment,
        "message": "Blueprint API is running",
        "status": "operational",
    }


@router.get("/version")
def get_version():
    """
    Get service version information.
    Used for deployment tracking and version verification.
    """
    return {"version": config.service_version}
