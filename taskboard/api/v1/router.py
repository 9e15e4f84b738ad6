"""API v1 router aggregation.

Includes all endpoint modules with consistent prefix and tags. All routes
use dependencies from taskboard.api.v1.dependencies (no manual repo construction).
"""

from fastapi import APIRouter

from taskboard.api.v1.endpoints import auth, capabilities, health, tags, tasks, todos

api_router = APIRouter()

api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(tasks.router, prefix="/tasks", tags=["tasks"])
api_router.include_router(todos.router, prefix="/todos", tags=["todos"])
api_router.include_router(tags.router, prefix="/tags", tags=["tags"])
api_router.include_router(
    capabilities.router, prefix="/capabilities", tags=["capabilities"]
)
