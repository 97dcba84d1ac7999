from __future__ import annotations
"""server/gitlab_notifier/api/schemas/gitlab.py
~~~~~~~~~~~~~~~~~~~~~~~~
Schémas des webhooks GitLab (Merge Request Hook / Pipeline Hook).

Volontairement permissifs : seuls les champs consommés sont déclarés, tout le
reste est toléré (`extra="allow"`) et les champs manquants valent None.
"""
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class _GitlabModel(BaseModel):
    model_config = ConfigDict(extra="allow")


class GitlabUser(_GitlabModel):
    name: Optional[str] = None
    username: Optional[str] = None

    @property
    def lookup_name(self) -> Optional[str]:
        """Nom réellement fourni par GitLab (None si ni name ni username)."""
        return self.name or self.username or None

    @property
    def display_name(self) -> str:
        return self.lookup_name or "unknown"


class GitlabProject(_GitlabModel):
    name: Optional[str] = None
    web_url: Optional[str] = None


class GitlabCommit(_GitlabModel):
    message: Optional[str] = None


class MergeRequestAttributes(_GitlabModel):
    iid: Optional[int] = None
    title: Optional[str] = None
    description: Optional[str] = None
    action: Optional[str] = None
    source_branch: Optional[str] = None
    target_branch: Optional[str] = None
    work_in_progress: bool = False
    draft: bool = False
    url: Optional[str] = None
    last_commit: Optional[GitlabCommit] = None

    @property
    def is_draft(self) -> bool:
        return bool(self.work_in_progress or self.draft)


class MergeRequestEvent(_GitlabModel):
    object_kind: Optional[str] = None
    user: GitlabUser = Field(default_factory=GitlabUser)
    project: GitlabProject = Field(default_factory=GitlabProject)
    object_attributes: MergeRequestAttributes = Field(default_factory=MergeRequestAttributes)
    assignees: Optional[list[GitlabUser]] = None


# created_at / finished_at : "2016-08-12 15:23:28 UTC", ISO-8601 ou epoch (ms)
Timestamp = Union[int, float, str]


class PipelineAttributes(_GitlabModel):
    id: Optional[int] = None
    ref: Optional[str] = None
    status: Optional[str] = None
    created_at: Optional[Timestamp] = None
    finished_at: Optional[Timestamp] = None
    duration: Optional[float] = None


class PipelineEvent(_GitlabModel):
    object_kind: Optional[str] = None
    user: GitlabUser = Field(default_factory=GitlabUser)
    project: GitlabProject = Field(default_factory=GitlabProject)
    object_attributes: PipelineAttributes = Field(default_factory=PipelineAttributes)
