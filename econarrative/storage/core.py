"""Storage initialization, path helpers, slug utilities, and scaffolding."""

import base64
import json
import re
import time
from pathlib import Path
from typing import Any

_data_dir: Path | None = None

PROJECT_SUBDIRS = (
    Path("world"),
    Path("stories") / "segments",
    Path("artifacts") / "items",
    Path("agents"),
)

_CJK = re.compile(r"[\u3400-\u4dbf\u4e00-\u9fff\uf900-\ufaff]")


class ProjectNotFoundError(LookupError):
    """Raised when a project directory does not exist for the user."""

    def __init__(self, project_id: str = "") -> None:
        super().__init__("Project not found")
        self.project_id = project_id


class InvalidIdError(ValueError):
    """Raised when an id cannot be used as a single path component."""

    def __init__(self, kind: str, value: str) -> None:
        super().__init__(f"Invalid {kind} id: {value!r}")
        self.value = value


def slugify(name: str) -> str:
    """Convert a project name to a filesystem-safe slug.

    "My World!" → "my-world"
    "世界"      → "5LiW55WM" (URL-safe base64 of the name, max 20 chars)
    """
    text = name.lower()
    text = re.sub(r'[<>:"/\\|?*]', "", text)
    text = re.sub(r"[^\w\s-]", "", text)  # remaining punctuation
    text = text.strip()
    text = re.sub(r"\s+", "-", text)
    text = re.sub(r"-+", "-", text)
    text = text[:50].strip("-")

    if _CJK.search(text):
        encoded = base64.urlsafe_b64encode(name.encode("utf-8")).decode("ascii")
        text = encoded.rstrip("=")[:20]

    return text or "untitled-project"


def now_ms() -> int:
    """Current time as integer epoch milliseconds."""
    return int(time.time() * 1000)


def init_storage(data_dir: Path) -> None:
    global _data_dir
    _data_dir = data_dir
    _data_dir.mkdir(parents=True, exist_ok=True)
    (_data_dir / "users").mkdir(exist_ok=True)
    if not users_file().is_file():
        write_json(users_file(), [])


def data_dir() -> Path:
    assert _data_dir is not None, "Call init_storage() before using storage"
    return _data_dir


def users_file() -> Path:
    return data_dir() / "users.json"


def legacy_worlds_dir() -> Path:
    return data_dir() / "worlds"


def user_dir(username: str) -> Path:
    return data_dir() / "users" / username


def user_projects_dir(username: str) -> Path:
    return user_dir(username) / "projects"


def project_dir(username: str, project_id: str) -> Path:
    return user_projects_dir(username) / project_id


def is_safe_id(value: str) -> bool:
    """True if value names a single file or directory inside its parent."""
    if value in ("", ".", ".."):
        return False
    return not any(c in value for c in ("/", "\\", "\0"))


def existing_project_dir(username: str, project_id: str) -> Path:
    """Resolve a project directory, raising ProjectNotFoundError if absent."""
    if not is_safe_id(project_id):
        raise ProjectNotFoundError(project_id)
    path = project_dir(username, project_id)
    if not path.is_dir():
        raise ProjectNotFoundError(project_id)
    return path


def scaffold(path: Path) -> None:
    """Create the fixed project skeleton. Safe to call on an existing tree."""
    path.mkdir(parents=True, exist_ok=True)
    for sub in PROJECT_SUBDIRS:
        (path / sub).mkdir(parents=True, exist_ok=True)


def read_json(path: Path) -> Any:
    return json.loads(path.read_text(encoding="utf-8"))


def write_json(path: Path, data: Any) -> None:
    path.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")
