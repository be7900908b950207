"""FastAPI API endpoints under /api.

Endpoint groups: health, auth (register/login/verify/logout), projects
(CRUD over the user's world documents), and git (init/status/commit/log
nested under /api/projects/{project_id}/git). Everything except health,
register and login requires an `Authorization: Bearer <token>` header.
"""

from datetime import datetime, timezone

from fastapi import APIRouter

from .auth import router as auth_router
from .git import router as git_router
from .projects import router as projects_router

router = APIRouter()


@router.get("/health")
async def health():
    """Health check."""
    return {"status": "ok", "timestamp": datetime.now(timezone.utc).isoformat()}


router.include_router(auth_router)
router.include_router(projects_router)
router.include_router(git_router)
