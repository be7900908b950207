"""World document <-> project directory codec.

A world document is decomposed into a manifest, two markdown files, five
world-model collections, an indexed set of story segment files, an indexed
set of artifact files, and the agent/workflow collections. See
storage/__init__.py for the full layout.

Writes are not atomic across files. Every save is a full overwrite: the
segment and artifact directories are emptied and re-rendered, so entries
missing from the new document disappear from disk.
"""

import json
import re
import shutil
from pathlib import Path
from typing import Any

from .core import InvalidIdError, is_safe_id, now_ms, read_json, scaffold, write_json

MANIFEST_VERSION = "2.0"
COLLECTION_VERSION = "1.0"

DEFAULT_CONTEXT = "# World Background\n\n"
DEFAULT_CHRONICLE = "# Chronicle\n\n"

# (document key, file under world/, key inside the file)
WORLD_COLLECTIONS = (
    ("entities", "entities.json", "entities"),
    ("relationships", "relationships.json", "relationships"),
    ("entityStates", "entity-states.json", "entityStates"),
    ("technologies", "technologies.json", "technologies"),
    ("techDependencies", "tech-dependencies.json", "dependencies"),
)

_FRONTMATTER = re.compile(r"\A---\n.*?\n---\n\n?", re.DOTALL)


def artifact_extension(artifact_type: str | None) -> str:
    return ".json" if artifact_type == "json" else ".md"


def render_segment(segment: dict[str, Any]) -> str:
    """Prefix a segment's content with its frontmatter block."""
    influenced_by = json.dumps(
        segment.get("influencedBy") or [], ensure_ascii=False, separators=(",", ":")
    )
    frontmatter = (
        "---\n"
        f"id: {segment['id']}\n"
        f"timestamp: {segment.get('timestamp')}\n"
        f"influencedBy: {influenced_by}\n"
        "---\n\n"
    )
    return frontmatter + (segment.get("content") or "")


def strip_frontmatter(text: str) -> str:
    """Remove the first leading frontmatter block, if any."""
    return _FRONTMATTER.sub("", text, count=1)


# ── Write ────────────────────────────────────────────────


def _write_collection(path: Path, key: str, items: list[Any]) -> None:
    write_json(path, {
        "version": COLLECTION_VERSION,
        "lastModified": now_ms(),
        key: items,
    })


def _write_markdown(project_dir: Path, doc: dict[str, Any]) -> None:
    (project_dir / "context.md").write_text(
        doc.get("context") or DEFAULT_CONTEXT, encoding="utf-8"
    )
    (project_dir / "chronicle.md").write_text(
        doc.get("chronicleText") or DEFAULT_CHRONICLE, encoding="utf-8"
    )


def _write_world_model(project_dir: Path, doc: dict[str, Any]) -> None:
    model = doc.get("model") or {}
    for doc_key, filename, file_key in WORLD_COLLECTIONS:
        _write_collection(
            project_dir / "world" / filename, file_key, model.get(doc_key) or []
        )


def _write_segments(project_dir: Path, segments: list[dict[str, Any]]) -> None:
    index = [
        {
            "id": seg["id"],
            "timestamp": seg.get("timestamp"),
            "influencedBy": seg.get("influencedBy") or [],
            "file": f"segments/{seg['id']}.md",
        }
        for seg in segments
    ]
    _write_collection(project_dir / "stories" / "_index.json", "segments", index)
    segments_dir = project_dir / "stories" / "segments"
    for seg in segments:
        (segments_dir / f"{seg['id']}.md").write_text(
            render_segment(seg), encoding="utf-8"
        )


def _write_artifacts(project_dir: Path, artifacts: list[dict[str, Any]]) -> None:
    index = [
        {
            "id": art["id"],
            "title": art.get("title"),
            "type": art.get("type"),
            "sourceStepId": art.get("sourceStepId"),
            "createdAt": art.get("createdAt"),
            "file": f"items/{art['id']}{artifact_extension(art.get('type'))}",
        }
        for art in artifacts
    ]
    _write_collection(project_dir / "artifacts" / "_index.json", "artifacts", index)
    items_dir = project_dir / "artifacts" / "items"
    for art in artifacts:
        (items_dir / f"{art['id']}{artifact_extension(art.get('type'))}").write_text(
            art.get("content") or "", encoding="utf-8"
        )


def _write_agents(project_dir: Path, doc: dict[str, Any]) -> None:
    _write_collection(
        project_dir / "agents" / "agents.json", "agents", doc.get("agents") or []
    )
    _write_collection(
        project_dir / "agents" / "workflow.json", "steps", doc.get("workflow") or []
    )


def _empty_dir(path: Path) -> None:
    if path.is_dir():
        shutil.rmtree(path)
    path.mkdir(parents=True)


def check_ids(doc: dict[str, Any]) -> None:
    """Raise InvalidIdError unless every segment and artifact id is a plain file name."""
    for kind, key in (("segment", "storySegments"), ("artifact", "artifacts")):
        for item in doc.get(key) or []:
            item_id = str(item.get("id", ""))
            if not is_safe_id(item_id):
                raise InvalidIdError(kind, item_id)


def write_project(project_dir: Path, doc: dict[str, Any], slug: str) -> dict[str, Any]:
    """Scaffold a new project directory and write every file. Returns the manifest."""
    check_ids(doc)
    scaffold(project_dir)

    meta = {
        "version": MANIFEST_VERSION,
        "id": slug,
        "name": doc.get("name"),
        "slug": slug,
        "frameworkId": doc.get("frameworkId"),
        "currentTimeSetting": doc.get("currentTimeSetting") or "",
        "createdAt": doc.get("createdAt") or now_ms(),
        "lastModified": now_ms(),
    }
    write_json(project_dir / "project.json", meta)

    _write_markdown(project_dir, doc)
    _write_world_model(project_dir, doc)
    _write_segments(project_dir, doc.get("storySegments") or [])
    _write_artifacts(project_dir, doc.get("artifacts") or [])
    _write_agents(project_dir, doc)
    return meta


def update_project_files(project_dir: Path, doc: dict[str, Any]) -> dict[str, Any]:
    """Overwrite an existing project with a full document. Returns the manifest.

    id, slug and createdAt in the manifest are never changed.
    """
    check_ids(doc)
    manifest_path = project_dir / "project.json"
    meta = read_json(manifest_path)
    meta["name"] = doc.get("name")
    meta["frameworkId"] = doc.get("frameworkId")
    meta["currentTimeSetting"] = doc.get("currentTimeSetting") or ""
    meta["lastModified"] = now_ms()
    write_json(manifest_path, meta)

    _write_markdown(project_dir, doc)
    _write_world_model(project_dir, doc)

    _empty_dir(project_dir / "stories" / "segments")
    _write_segments(project_dir, doc.get("storySegments") or [])

    _empty_dir(project_dir / "artifacts" / "items")
    _write_artifacts(project_dir, doc.get("artifacts") or [])

    _write_agents(project_dir, doc)
    return meta


# ── Read ─────────────────────────────────────────────────


def _read_segments(project_dir: Path) -> list[dict[str, Any]]:
    stories_dir = project_dir / "stories"
    segments = []
    for entry in read_json(stories_dir / "_index.json")["segments"]:
        text = (stories_dir / entry["file"]).read_text(encoding="utf-8")
        segments.append({
            "id": entry["id"],
            "timestamp": entry.get("timestamp"),
            "influencedBy": entry.get("influencedBy") or [],
            "content": strip_frontmatter(text),
        })
    return segments


def _read_artifacts(project_dir: Path) -> list[dict[str, Any]]:
    artifacts_dir = project_dir / "artifacts"
    artifacts = []
    for entry in read_json(artifacts_dir / "_index.json")["artifacts"]:
        filename = f"{entry['id']}{artifact_extension(entry.get('type'))}"
        artifacts.append({
            "id": entry["id"],
            "title": entry.get("title"),
            "type": entry.get("type"),
            "sourceStepId": entry.get("sourceStepId"),
            "createdAt": entry.get("createdAt"),
            "content": (artifacts_dir / "items" / filename).read_text(encoding="utf-8"),
        })
    return artifacts


def read_project(project_dir: Path) -> dict[str, Any]:
    """Reassemble the full world document from a project directory."""
    meta = read_json(project_dir / "project.json")
    model = {
        doc_key: read_json(project_dir / "world" / filename)[file_key]
        for doc_key, filename, file_key in WORLD_COLLECTIONS
    }
    return {
        **meta,
        "context": (project_dir / "context.md").read_text(encoding="utf-8"),
        "chronicleText": (project_dir / "chronicle.md").read_text(encoding="utf-8"),
        "model": model,
        "storySegments": _read_segments(project_dir),
        "artifacts": _read_artifacts(project_dir),
        "agents": read_json(project_dir / "agents" / "agents.json")["agents"],
        "workflow": read_json(project_dir / "agents" / "workflow.json")["steps"],
    }
