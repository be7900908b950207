"""Reader for the pre-2.0 flat world format, used only for migration.

The old format kept each world as one JSON file named after the world,
holding the whole document:

  data/worlds/
    <Name>.json     {"id", "name", "frameworkId", "context", "model", ...}

Nothing here writes to the legacy directory. migrate_legacy_worlds() copies
each world into the current per-user project layout via create_project().
"""

import json
import logging
from pathlib import Path
from typing import Any

from .core import legacy_worlds_dir, project_dir, read_json, slugify
from .projects import create_project

logger = logging.getLogger(__name__)

_DOCUMENT_KEYS = (
    "name",
    "frameworkId",
    "currentTimeSetting",
    "createdAt",
    "context",
    "chronicleText",
    "model",
    "storySegments",
    "artifacts",
    "agents",
    "workflow",
)


def read_legacy_world(path: Path) -> dict[str, Any]:
    """Parse one legacy file into a world document."""
    data = read_json(path)
    doc = {key: data[key] for key in _DOCUMENT_KEYS if key in data}
    doc["name"] = doc.get("name") or path.stem
    if "lastModified" in data:
        doc["lastModified"] = data["lastModified"]
    return doc


def list_legacy_worlds(worlds_dir: Path | None = None) -> list[dict[str, Any]]:
    """All parsable legacy worlds, most recently modified first."""
    worlds_dir = worlds_dir or legacy_worlds_dir()
    if not worlds_dir.is_dir():
        return []
    worlds = []
    for path in sorted(worlds_dir.glob("*.json")):
        try:
            worlds.append(read_legacy_world(path))
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            logger.warning(f"Skipping unreadable legacy world {path.name}: {e}")
    return sorted(worlds, key=lambda w: w.get("lastModified") or 0, reverse=True)


def migrate_legacy_worlds(
    username: str, worlds_dir: Path | None = None
) -> list[dict[str, Any]]:
    """Create a project for every legacy world. Returns the new manifests.

    Worlds whose slug already exists in the user's collection are skipped.
    """
    created = []
    for world in list_legacy_worlds(worlds_dir):
        slug = slugify(world["name"])
        if project_dir(username, slug).exists():
            logger.info(f"Legacy world '{world['name']}' already migrated as {slug}")
            continue
        created.append(create_project(username, world))
    logger.info(f"Migrated {len(created)} legacy world(s) for {username}")
    return created
