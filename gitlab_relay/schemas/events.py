"""Pydantic models for GitLab webhook payloads.

Only the fields the notification messages read are modelled; everything else
GitLab sends is ignored. Reference:
https://docs.gitlab.com/ee/user/project/integrations/webhook_events.html
"""

from typing import Annotated, Literal

from pydantic import BaseModel, Field


class Project(BaseModel):
    """Project the event belongs to."""

    name: str
    web_url: str
    path_with_namespace: str


class CommitAuthor(BaseModel):
    """Author information from a Git commit."""

    name: str


class Commit(BaseModel):
    """A single commit within a push, tag push, or merge request event."""

    message: str
    url: str
    author: CommitAuthor
    added: list[str] = Field(default_factory=list)
    modified: list[str] = Field(default_factory=list)
    removed: list[str] = Field(default_factory=list)


class User(BaseModel):
    """GitLab user attached to merge request, pipeline, and build events."""

    name: str | None = None
    username: str | None = None


class PushEvent(BaseModel):
    """Branch push event (``object_kind == "push"``)."""

    object_kind: Literal["push"]
    user_name: str
    ref: str
    before: str
    after: str
    project: Project
    commits: list[Commit] = Field(default_factory=list)
    total_commits_count: int = 0


class TagPushEvent(BaseModel):
    """Tag push event (``object_kind == "tag_push"``)."""

    object_kind: Literal["tag_push"]
    user_name: str
    ref: str
    before: str
    after: str
    project: Project
    message: str | None = None
    commits: list[Commit] = Field(default_factory=list)
    total_commits_count: int = 0


class MergeRequestAttributes(BaseModel):
    """``object_attributes`` of a merge request event."""

    iid: int
    url: str
    target_branch: str
    source_branch: str
    state: str
    title: str
    description: str | None = None
    last_commit: Commit | None = None
    updated_at: str | None = None


class MergeRequestEvent(BaseModel):
    """Merge request event (``object_kind == "merge_request"``)."""

    object_kind: Literal["merge_request"]
    user: User | None = None
    project: Project
    object_attributes: MergeRequestAttributes


class PipelineAttributes(BaseModel):
    """``object_attributes`` of a pipeline event."""

    id: int
    ref: str
    status: str
    duration: int | None = None
    source: str | None = None
    stages: list[str] = Field(default_factory=list)


class PipelineMergeRequest(BaseModel):
    """Merge request summary attached to merge-request pipelines."""

    title: str
    url: str
    source_branch: str
    target_branch: str


class Build(BaseModel):
    """A single job in a pipeline event."""

    id: int
    name: str
    stage: str
    status: str
    user: User | None = None


class PipelineEvent(BaseModel):
    """Pipeline event (``object_kind == "pipeline"``)."""

    object_kind: Literal["pipeline"]
    object_attributes: PipelineAttributes
    merge_request: PipelineMergeRequest | None = None
    user: User | None = None
    project: Project
    commit: Commit | None = None
    builds: list[Build] = Field(default_factory=list)


Event = Annotated[
    PushEvent | TagPushEvent | MergeRequestEvent | PipelineEvent,
    Field(discriminator="object_kind"),
]
