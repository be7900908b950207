"""Tests for the legacy flat-file world reader and migration."""

import json

from econarrative import storage


def _write_legacy(name, data):
    worlds = storage.legacy_worlds_dir()
    worlds.mkdir(exist_ok=True)
    path = worlds / f"{name}.json"
    path.write_text(json.dumps(data))
    return path


def test_list_legacy_worlds_empty():
    assert storage.list_legacy_worlds() == []


def test_read_legacy_world():
    path = _write_legacy("The Dark Forest", {
        "id": "w-1",
        "name": "The Dark Forest",
        "context": "Trees.",
        "model": {"entities": [{"id": "e1"}]},
        "lastModified": 5,
        "uiOnly": True,
    })
    doc = storage.read_legacy_world(path)
    assert doc["name"] == "The Dark Forest"
    assert doc["context"] == "Trees."
    assert doc["model"] == {"entities": [{"id": "e1"}]}
    assert "uiOnly" not in doc


def test_read_legacy_world_name_from_filename():
    path = _write_legacy("Nameless", {"id": "w-2"})
    assert storage.read_legacy_world(path)["name"] == "Nameless"


def test_list_legacy_worlds_sorted_and_skips_broken():
    _write_legacy("Old", {"name": "Old", "lastModified": 1})
    _write_legacy("New", {"name": "New", "lastModified": 9})
    (storage.legacy_worlds_dir() / "broken.json").write_text("{oops")
    assert [w["name"] for w in storage.list_legacy_worlds()] == ["New", "Old"]


def test_migrate_creates_projects():
    _write_legacy("Iron Coast", {
        "name": "Iron Coast",
        "context": "Rain.",
        "storySegments": [{"id": "s1", "timestamp": 1, "influencedBy": [], "content": "Once."}],
    })
    created = storage.migrate_legacy_worlds("alice")
    assert [m["slug"] for m in created] == ["iron-coast"]

    doc = storage.get_project("alice", "iron-coast")
    assert doc["context"] == "Rain."
    assert doc["storySegments"][0]["content"] == "Once."
    assert (storage.legacy_worlds_dir() / "Iron Coast.json").is_file()


def test_migrate_skips_existing():
    _write_legacy("Iron Coast", {"name": "Iron Coast"})
    storage.migrate_legacy_worlds("alice")
    assert storage.migrate_legacy_worlds("alice") == []
    assert len(storage.list_projects("alice")) == 1
