"""API route aggregation.

All routers registered here get mounted in main.py. Login and health are
open; alias and domain routes require a bearer token, enforced per route
through the get_current_user dependency that also hands them the caller.
"""

from fastapi import APIRouter

from opendydns.api.aliases import router as aliases_router
from opendydns.api.domains import router as domains_router
from opendydns.api.health import router as health_router
from opendydns.api.sessions import router as sessions_router

api_router = APIRouter()

# Open routes
api_router.include_router(health_router, tags=["health"])
api_router.include_router(sessions_router, tags=["sessions"])

# Protected routes
api_router.include_router(aliases_router, tags=["aliases"])
api_router.include_router(domains_router, tags=["domains"])
