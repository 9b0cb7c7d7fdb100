"""API route modules."""

from fastapi import APIRouter

from smartcare.entrypoints.api.routes.options import router as options_router
from smartcare.entrypoints.api.routes.tickets import router as tickets_router
from smartcare.entrypoints.api.routes.users import router as users_router

# Create main API router
api_router = APIRouter()

# Include all route modules
api_router.include_router(users_router)
api_router.include_router(tickets_router)
api_router.include_router(options_router)

__all__ = ["api_router"]
