"""
User Resource API Server
Core functionality: CRUD over the User resource, documented by the restdocs harness
"""

import logging
from typing import Optional
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from config.settings import ALLOWED_ORIGINS, API_PREFIX
from api.routes import health, users
from services.users_service import UsersService, get_users_service
from utils.error_handling import setup_error_handling

logger = logging.getLogger(__name__)


def create_app(users_service: Optional[UsersService] = None) -> FastAPI:
    """Build the FastAPI application.

    Passing ``users_service`` replaces the process-wide service for this app
    only, which lets tests and the docs generator start from an empty store.
    """
    app = FastAPI(
        title="User Resource API",
        description="CRUD API for users, with generated request/response documentation",
        version="1.0.0"
    )

    # CORS middleware; credentials only for an explicit origin list
    app.add_middleware(
        CORSMiddleware,
        allow_origins=ALLOWED_ORIGINS,
        allow_credentials="*" not in ALLOWED_ORIGINS,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )

    setup_error_handling(app)

    app.include_router(health.router, tags=["Health"])
    app.include_router(users.router, prefix=API_PREFIX, tags=["Users"])

    if users_service is not None:
        app.dependency_overrides[get_users_service] = lambda: users_service
        logger.info(
            f"Using dedicated users service (permissive_update={users_service.permissive_update}, "
            f"permissive_delete={users_service.permissive_delete})"
        )

    return app


# FastAPI app instance is exported for use by uvicorn
# Server startup is handled by main.py at the project root
app = create_app()
