"""Per-project version control endpoints under /projects/{project_id}/git."""

from fastapi import APIRouter, Depends, HTTPException

from econarrative import storage
from econarrative.auth import current_user
from econarrative.git import GitRepo

from .models import CommitBody

router = APIRouter()


def _repo(project_id: str, username: str) -> GitRepo:
    try:
        path = storage.existing_project_dir(username, project_id)
    except storage.ProjectNotFoundError as e:
        raise HTTPException(404, str(e))
    return GitRepo(path, author=username)


@router.post("/projects/{project_id}/git/init")
async def init_repo(project_id: str, username: str = Depends(current_user)):
    """Initialize a git repository in the project directory."""
    _repo(project_id, username).init()
    return {"success": True, "message": "Git repository initialized"}


@router.get("/projects/{project_id}/git/status")
async def get_status(project_id: str, username: str = Depends(current_user)):
    """Changed files; empty when the project is not under version control."""
    return {"changes": _repo(project_id, username).status()}


@router.post("/projects/{project_id}/git/commit")
async def commit(
    project_id: str, body: CommitBody | None = None, username: str = Depends(current_user)
):
    """Stage everything and commit."""
    message = body.message if body else ""
    _repo(project_id, username).commit(message)
    return {"success": True, "message": "Changes committed"}


@router.get("/projects/{project_id}/git/log")
async def get_log(project_id: str, username: str = Depends(current_user)):
    """The 10 most recent commits."""
    return {"logs": _repo(project_id, username).log()}
