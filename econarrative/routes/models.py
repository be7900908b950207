"""Pydantic request models for API endpoints."""

from pydantic import BaseModel, ConfigDict, Field


class Credentials(BaseModel):
    username: str = ""
    password: str = ""


class StorySegment(BaseModel):
    id: str
    timestamp: str | int | None = None
    influencedBy: list[str] = Field(default_factory=list)
    content: str = ""


class Artifact(BaseModel):
    id: str
    title: str | None = None
    type: str = "markdown"
    sourceStepId: str | None = None
    createdAt: int | None = None
    content: str = ""


class WorldModel(BaseModel):
    entities: list[dict] = Field(default_factory=list)
    relationships: list[dict] = Field(default_factory=list)
    entityStates: list[dict] = Field(default_factory=list)
    technologies: list[dict] = Field(default_factory=list)
    techDependencies: list[dict] = Field(default_factory=list)


class WorldDocument(BaseModel):
    """A full world as sent by the client. Unknown keys are passed through."""

    model_config = ConfigDict(extra="allow")

    name: str | None = None
    frameworkId: str | None = None
    currentTimeSetting: str | None = None
    createdAt: int | None = None
    context: str | None = None
    chronicleText: str | None = None
    model: WorldModel = Field(default_factory=WorldModel)
    storySegments: list[StorySegment] = Field(default_factory=list)
    artifacts: list[Artifact] = Field(default_factory=list)
    agents: list[dict] = Field(default_factory=list)
    workflow: list[dict] = Field(default_factory=list)


class CommitBody(BaseModel):
    message: str = ""
