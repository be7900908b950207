"""Project CRUD endpoints."""

from fastapi import APIRouter, Depends, HTTPException

from econarrative import storage
from econarrative.auth import current_user

from .models import WorldDocument

router = APIRouter()


@router.get("/projects")
async def list_projects(username: str = Depends(current_user)):
    """List the user's project manifests, newest first."""
    return storage.list_projects(username)


@router.post("/projects", status_code=201)
async def create_project(body: WorldDocument, username: str = Depends(current_user)):
    """Create a project from a world document."""
    if not body.name:
        raise HTTPException(400, "Project name is required")
    try:
        project = storage.create_project(username, body.model_dump(exclude_none=True))
    except FileExistsError as e:
        raise HTTPException(409, str(e))
    except storage.InvalidIdError as e:
        raise HTTPException(400, str(e))
    return {"success": True, "project": project}


@router.get("/projects/{project_id}")
async def get_project(project_id: str, username: str = Depends(current_user)):
    """Get the full world document."""
    try:
        return storage.get_project(username, project_id)
    except storage.ProjectNotFoundError as e:
        raise HTTPException(404, str(e))


@router.put("/projects/{project_id}")
async def update_project(
    project_id: str, body: WorldDocument, username: str = Depends(current_user)
):
    """Overwrite a project with a full world document."""
    try:
        storage.update_project(username, project_id, body.model_dump(exclude_none=True))
    except storage.ProjectNotFoundError as e:
        raise HTTPException(404, str(e))
    except storage.InvalidIdError as e:
        raise HTTPException(400, str(e))
    return {"success": True}


@router.delete("/projects/{project_id}")
async def delete_project(project_id: str, username: str = Depends(current_user)):
    """Delete a project and its history."""
    try:
        storage.delete_project(username, project_id)
    except storage.ProjectNotFoundError as e:
        raise HTTPException(404, str(e))
    return {"success": True}
