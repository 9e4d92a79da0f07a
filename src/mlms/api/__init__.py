"""API module for MLMS.

Structure:
- routers/: HTTP endpoints (auth, admin, user, health)
- schemas/: Pydantic request/response models
- dependencies.py: dependency injection (session, services, caller identity)
- exception_handlers.py: domain/database exceptions → JSON error bodies
"""

from mlms.api.exception_handlers import register_exception_handlers
from mlms.api.routers import api_router

__all__ = ["api_router", "register_exception_handlers"]
