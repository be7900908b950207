"""File-based storage of world projects, one directory tree per project.

Data layout:
  data/
    users.json                 Registered users (username, scrypt hash)
    users/<username>/projects/
      <slug>/                  One project; slug is also the project id
        project.json           Manifest (id, name, slug, frameworkId, timestamps)
        context.md             World background
        chronicle.md           Generated chronicle
        world/
          entities.json        {version, lastModified, entities}
          relationships.json   {version, lastModified, relationships}
          entity-states.json   {version, lastModified, entityStates}
          technologies.json    {version, lastModified, technologies}
          tech-dependencies.json {version, lastModified, dependencies}
        stories/
          _index.json          Segment index (id, timestamp, influencedBy, file)
          segments/<id>.md     Frontmatter + segment content
        artifacts/
          _index.json          Artifact index (id, title, type, sourceStepId, createdAt, file)
          items/<id>.md|.json  Artifact content; .json when type is "json"
        agents/
          agents.json          {version, lastModified, agents}
          workflow.json        {version, lastModified, steps}
        .gitignore, .git/      When version control is initialized
    worlds/                    Legacy flat format, read only for migration

Slug rules: lowercase → drop path-unsafe characters and punctuation →
whitespace runs to hyphens → collapse hyphens → 50 chars. Names containing
CJK ideographs use URL-safe base64 of the name instead (20 chars). Empty
slugs become "untitled-project".

Updates overwrite the whole project. Segment and artifact directories are
cleared and rewritten, so the in-memory lists are the only source of truth.
"""

# Re-export all public symbols so `from econarrative import storage` keeps working.

from .core import (  # noqa: F401
    InvalidIdError,
    ProjectNotFoundError,
    data_dir,
    existing_project_dir,
    init_storage,
    is_safe_id,
    legacy_worlds_dir,
    now_ms,
    project_dir,
    scaffold,
    slugify,
    user_projects_dir,
    users_file,
)

from .codec import (  # noqa: F401
    check_ids,
    read_project,
    strip_frontmatter,
    update_project_files,
    write_project,
)

from .projects import (  # noqa: F401
    create_project,
    delete_project,
    get_project,
    list_projects,
    update_project,
)

from .legacy import (  # noqa: F401
    list_legacy_worlds,
    migrate_legacy_worlds,
    read_legacy_world,
)

from .users import (  # noqa: F401
    authenticate_user,
    get_user,
    register_user,
)
