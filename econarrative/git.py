"""Version control for project directories.

Routes and the project store talk to a repository through the
VersionControl protocol:

    init()            → None
    status()          → [{"status": "??", "path": "world/entities.json"}, ...]
    commit(message)   → None
    log()             → [{"hash", "author", "message", "date"}, ...]

GitRepo shells out to the `git` binary. status() and log() return [] for a
directory that is not a repository yet, has no commits, or when git itself
fails, so they are safe to call at any point in a project's life.
init() and commit() raise GitError.
"""

from __future__ import annotations

import logging
import os
import subprocess
from pathlib import Path
from typing import Protocol

logger = logging.getLogger(__name__)

DEFAULT_GITIGNORE = """\
# Temporary files
*.tmp
*.bak
.DS_Store
Thumbs.db
*.lock
*.log
"""

LOG_LIMIT = 10

_FIELD_SEP = "\x1f"
_RECORD_SEP = "\x1e"


# ---------------------------------------------------------------------------
# Protocol
# ---------------------------------------------------------------------------

class VersionControl(Protocol):
    def init(self) -> None: ...

    def status(self) -> list[dict[str, str]]: ...

    def commit(self, message: str = "") -> None: ...

    def log(self) -> list[dict[str, str]]: ...


# ---------------------------------------------------------------------------
# GitRepo: subprocess implementation
# ---------------------------------------------------------------------------

class GitRepo:
    """A git working tree rooted at a project directory.

    Args:
        path:    Project directory.
        author:  Name used for commits. When set, it is exported as both
                 author and committer so commits work without a global
                 git identity.
    """

    def __init__(self, path: Path, author: str | None = None) -> None:
        self._path = path
        self._author = author

    @property
    def is_repo(self) -> bool:
        return (self._path / ".git").exists()

    def _env(self) -> dict[str, str] | None:
        if not self._author:
            return None
        email = f"{self._author}@econarrative.local"
        env = os.environ.copy()
        env.update({
            "GIT_AUTHOR_NAME": self._author,
            "GIT_AUTHOR_EMAIL": email,
            "GIT_COMMITTER_NAME": self._author,
            "GIT_COMMITTER_EMAIL": email,
        })
        return env

    def _run(self, *args: str) -> str:
        logger.debug("git %s cwd=%s", " ".join(args), self._path)
        try:
            proc = subprocess.run(
                ["git", *args],
                cwd=self._path,
                env=self._env(),
                capture_output=True,
                text=True,
                check=True,
            )
        except FileNotFoundError as e:
            raise GitError("git executable not found") from e
        except subprocess.CalledProcessError as e:
            detail = (e.stderr or e.stdout or "").strip()
            raise GitError(detail or f"git {args[0]} failed with exit code {e.returncode}") from e
        return proc.stdout

    def init(self) -> None:
        self._run("init")
        gitignore = self._path / ".gitignore"
        if not gitignore.exists():
            gitignore.write_text(DEFAULT_GITIGNORE)
        logger.info("Initialized git repository in %s", self._path)

    def status(self) -> list[dict[str, str]]:
        if not self.is_repo:
            return []
        try:
            out = self._run("status", "--porcelain=v1", "-z", "--untracked-files=all")
        except GitError as e:
            logger.warning("git status failed in %s: %s", self._path, e)
            return []
        changes = []
        tokens = iter(out.split("\0"))
        for token in tokens:
            if len(token) < 4:
                continue
            code, path = token[:2], token[3:]
            if "R" in code or "C" in code:
                next(tokens, None)  # rename/copy source path
            changes.append({"status": code, "path": path})
        return changes

    def commit(self, message: str = "") -> None:
        self._run("add", "-A")
        self._run("commit", "-m", message or "Update")
        logger.info("Committed %s: %s", self._path.name, message or "Update")

    def log(self) -> list[dict[str, str]]:
        if not self.is_repo:
            return []
        fmt = _FIELD_SEP.join(["%H", "%an", "%s", "%aI"]) + _RECORD_SEP
        try:
            out = self._run("log", f"--max-count={LOG_LIMIT}", f"--format={fmt}")
        except GitError:
            # No commits yet
            return []
        entries = []
        for record in out.split(_RECORD_SEP):
            record = record.strip("\n")
            if not record:
                continue
            full_hash, author, message, date = record.split(_FIELD_SEP)
            entries.append({
                "hash": full_hash[:7],
                "author": author,
                "message": message,
                "date": date,
            })
        return entries


# ---------------------------------------------------------------------------
# GitError: raised for every git failure
# ---------------------------------------------------------------------------

class GitError(RuntimeError):
    """Raised when git is missing or a git command exits non-zero."""
