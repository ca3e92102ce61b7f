"""Central API router composition.

This module mounts the individual route modules on a single router so the
application only needs one `FastAPI.include_router(...)` call.
"""

from fastapi import APIRouter

from .games import router as games_router

router = APIRouter()

router.include_router(games_router)
