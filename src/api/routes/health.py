"""
Health check API route
"""

from datetime import datetime
from fastapi import APIRouter, Depends
from services.users_service import UsersService, get_users_service

router = APIRouter()

@router.get("/")
async def health_check(
    users_service: UsersService = Depends(get_users_service)
):
    """
    Health check

    Reports which policy the backend applies to PUT and DELETE requests
    naming identifiers that were never created.
    """
    return {
        "status": "healthy",
        "timestamp": datetime.utcnow().isoformat(),
        "backend": {
            "store": "memory",
            "permissive_update": users_service.permissive_update,
            "permissive_delete": users_service.permissive_delete
        }
    }
