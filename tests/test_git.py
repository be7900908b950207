"""Tests for econarrative.git: GitRepo over a real git binary."""

import shutil
import subprocess

import pytest

from econarrative.git import GitError, GitRepo

requires_git = pytest.mark.skipif(shutil.which("git") is None, reason="git not installed")


@pytest.fixture
def repo(tmp_path) -> GitRepo:
    (tmp_path / "context.md").write_text("# World\n")
    return GitRepo(tmp_path, author="alice")


# ---------------------------------------------------------------------------
# Uninitialized
# ---------------------------------------------------------------------------

class TestUninitialized:
    def test_status_is_empty(self, repo: GitRepo) -> None:
        assert repo.status() == []

    def test_log_is_empty(self, repo: GitRepo) -> None:
        assert repo.log() == []

    def test_not_a_repo(self, repo: GitRepo) -> None:
        assert repo.is_repo is False


# ---------------------------------------------------------------------------
# Initialized, no commits
# ---------------------------------------------------------------------------

@requires_git
class TestInitialized:
    def test_init_writes_gitignore(self, repo: GitRepo, tmp_path) -> None:
        repo.init()
        assert repo.is_repo
        text = (tmp_path / ".gitignore").read_text()
        for pattern in ("*.tmp", "*.bak", ".DS_Store", "*.lock", "*.log"):
            assert pattern in text

    def test_init_keeps_existing_gitignore(self, repo: GitRepo, tmp_path) -> None:
        (tmp_path / ".gitignore").write_text("custom\n")
        repo.init()
        assert (tmp_path / ".gitignore").read_text() == "custom\n"

    def test_status_lists_untracked(self, repo: GitRepo) -> None:
        repo.init()
        changes = repo.status()
        assert {"status": "??", "path": "context.md"} in changes
        assert {"status": "??", "path": ".gitignore"} in changes

    def test_status_lists_nested_files(self, repo: GitRepo, tmp_path) -> None:
        repo.init()
        (tmp_path / "world").mkdir()
        (tmp_path / "world" / "entities.json").write_text("{}")
        paths = [c["path"] for c in repo.status()]
        assert "world/entities.json" in paths

    def test_log_without_commits_is_empty(self, repo: GitRepo) -> None:
        repo.init()
        assert repo.log() == []


# ---------------------------------------------------------------------------
# Committed
# ---------------------------------------------------------------------------

@requires_git
class TestCommitted:
    @pytest.fixture
    def committed(self, repo: GitRepo) -> GitRepo:
        repo.init()
        repo.commit("Initial world")
        return repo

    def test_clean_after_commit(self, committed: GitRepo) -> None:
        assert committed.status() == []

    def test_log_entry(self, committed: GitRepo) -> None:
        [entry] = committed.log()
        assert len(entry["hash"]) == 7
        assert entry["author"] == "alice"
        assert entry["message"] == "Initial world"
        assert entry["date"]

    def test_modified_status(self, committed: GitRepo, tmp_path) -> None:
        (tmp_path / "context.md").write_text("# World\n\nMore.\n")
        assert committed.status() == [{"status": " M", "path": "context.md"}]

    def test_default_message(self, committed: GitRepo, tmp_path) -> None:
        (tmp_path / "context.md").write_text("changed\n")
        committed.commit("")
        assert committed.log()[0]["message"] == "Update"

    def test_log_newest_first_and_limited(self, committed: GitRepo, tmp_path) -> None:
        for i in range(12):
            (tmp_path / "context.md").write_text(f"rev {i}\n")
            committed.commit(f"Rev {i}")
        log = committed.log()
        assert len(log) == 10
        assert log[0]["message"] == "Rev 11"

    def test_nothing_to_commit_raises(self, committed: GitRepo) -> None:
        with pytest.raises(GitError):
            committed.commit("Empty")


# ---------------------------------------------------------------------------
# Failures
# ---------------------------------------------------------------------------

class TestFailures:
    def test_missing_binary(self, repo: GitRepo, monkeypatch) -> None:
        def no_git(*args, **kwargs):
            raise FileNotFoundError("git")

        monkeypatch.setattr(subprocess, "run", no_git)
        with pytest.raises(GitError, match="not found"):
            repo.init()

    @requires_git
    def test_commit_outside_repo(self, repo: GitRepo, tmp_path, monkeypatch) -> None:
        # tmp_path may sit inside another work tree; stop git searching upward
        monkeypatch.setenv("GIT_CEILING_DIRECTORIES", str(tmp_path.parent))
        with pytest.raises(GitError):
            repo.commit("nope")

    def test_status_without_binary_is_empty(self, repo: GitRepo, tmp_path, monkeypatch) -> None:
        (tmp_path / ".git").mkdir()

        def no_git(*args, **kwargs):
            raise FileNotFoundError("git")

        monkeypatch.setattr(subprocess, "run", no_git)
        assert repo.status() == []
        assert repo.log() == []
