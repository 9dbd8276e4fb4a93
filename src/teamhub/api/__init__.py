"""API route aggregation.

All routers registered here get mounted in main.py under /api.

Health and auth are open at the router level; auth routes that need a
session (check, verify, approve) declare it themselves. Every other
router requires a valid session for all of its routes; the per-route
dependencies then narrow that to admin or ownership rules.
"""

from fastapi import APIRouter, Depends

from teamhub.api.auth import router as auth_router
from teamhub.api.health import router as health_router
from teamhub.api.meetings import router as meetings_router
from teamhub.api.progress import router as progress_router
from teamhub.api.projects import router as projects_router
from teamhub.api.resources import router as resources_router
from teamhub.api.tasks import router as tasks_router
from teamhub.api.users import router as users_router
from teamhub.auth.dependencies import get_current_user

# All protected routers require authentication
_auth = [Depends(get_current_user)]

api_router = APIRouter(prefix="/api")

# Open routes: no session required
api_router.include_router(health_router, tags=["health"])
api_router.include_router(auth_router, tags=["auth"])

# Protected routes: require a valid session token
api_router.include_router(users_router, tags=["users"], dependencies=_auth)
api_router.include_router(progress_router, tags=["progress"], dependencies=_auth)
api_router.include_router(tasks_router, tags=["tasks"], dependencies=_auth)
api_router.include_router(meetings_router, tags=["meetings"], dependencies=_auth)
api_router.include_router(projects_router, tags=["projects"], dependencies=_auth)
api_router.include_router(resources_router, tags=["resources"], dependencies=_auth)
