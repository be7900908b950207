"""Project CRUD over a user's project collection."""

import logging
import shutil
from typing import Any

from ..git import GitError, GitRepo
from .codec import read_project, update_project_files, write_project
from .core import existing_project_dir, project_dir, read_json, slugify, user_projects_dir

logger = logging.getLogger(__name__)


def list_projects(username: str) -> list[dict[str, Any]]:
    """Manifests of all projects, most recently modified first."""
    projects_dir = user_projects_dir(username)
    if not projects_dir.is_dir():
        return []
    results = []
    for path in projects_dir.iterdir():
        manifest = path / "project.json"
        if path.is_dir() and manifest.is_file():
            results.append(read_json(manifest))
    return sorted(results, key=lambda p: p.get("lastModified") or 0, reverse=True)


def create_project(username: str, data: dict[str, Any]) -> dict[str, Any]:
    """Create a project from a world document. Returns its manifest.

    Raises FileExistsError if a project with the same slug exists.
    """
    slug = slugify(data.get("name") or "")
    path = project_dir(username, slug)
    if path.exists():
        raise FileExistsError("Project already exists")

    meta = write_project(path, data, slug)
    logger.info(f"Created project {username}/{slug}")

    try:
        GitRepo(path, author=username).init()
    except GitError as e:
        logger.warning(f"Failed to init git for {username}/{slug}: {e}")
    return meta


def get_project(username: str, project_id: str) -> dict[str, Any]:
    return read_project(existing_project_dir(username, project_id))


def update_project(username: str, project_id: str, data: dict[str, Any]) -> dict[str, Any]:
    """Full overwrite of an existing project. Returns the updated manifest."""
    return update_project_files(existing_project_dir(username, project_id), data)


def delete_project(username: str, project_id: str) -> None:
    shutil.rmtree(existing_project_dir(username, project_id))
    logger.info(f"Deleted project {username}/{project_id}")
