"""API route aggregation.

Learn: All routers registered here get mounted in main.py.

Auth is applied at the include_router level using FastAPI's
dependencies parameter. This protects every route in the resource
routers without relying on individual handlers. Health and auth routers
are open; /auth/me declares the dependency itself.
"""

from fastapi import APIRouter, Depends

from nerv.api.assignments import router as assignments_router
from nerv.api.auth import router as auth_router
from nerv.api.courses import router as courses_router
from nerv.api.health import router as health_router
from nerv.api.notes import router as notes_router
from nerv.auth.dependencies import get_current_user

# All protected routers require authentication
_auth = [Depends(get_current_user)]

api_router = APIRouter()

# Open routes — no auth required
api_router.include_router(health_router, tags=["health"])
api_router.include_router(auth_router, tags=["auth"])

# Protected routes — require a valid bearer token
api_router.include_router(courses_router, tags=["courses"], dependencies=_auth)
api_router.include_router(assignments_router, tags=["assignments"], dependencies=_auth)
api_router.include_router(notes_router, tags=["notes"], dependencies=_auth)
