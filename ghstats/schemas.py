"""Boundary types for the GitHub REST endpoints ghstats consumes.

Raw JSON is validated into these models right after each request, so the
rest of the package never touches untyped response dicts.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T")


class Page(BaseModel, Generic[T]):
    """One page of a paginated listing."""

    items: list[T]
    has_more: bool = False


class OwnerMeta(BaseModel):
    login: str


class RepositoryMeta(BaseModel):
    """Item of ``GET /users/{username}/repos``."""

    model_config = ConfigDict(extra="ignore")

    name: str
    full_name: str
    owner: OwnerMeta
    fork: bool = False


class RepositoryDetail(RepositoryMeta):
    """``GET /repos/{owner}/{repo}`` — ``parent`` is present only for forks."""

    parent: RepositoryMeta | None = None


class CommitSignature(BaseModel):
    date: datetime
    name: str | None = None
    email: str | None = None


class CommitBody(BaseModel):
    message: str = ""
    committer: CommitSignature


class UserMeta(BaseModel):
    login: str | None = None


class CommitMeta(BaseModel):
    """Item of ``GET /repos/{owner}/{repo}/commits``.

    ``committer`` is the GitHub account matched to the commit and is null
    when the committer email maps to no account.
    """

    model_config = ConfigDict(extra="ignore")

    sha: str = ""
    commit: CommitBody
    committer: UserMeta | None = None

    @property
    def date(self) -> datetime:
        return self.commit.committer.date

    @property
    def login(self) -> str | None:
        return self.committer.login if self.committer is not None else None

    @property
    def message(self) -> str:
        return self.commit.message


class EventRepo(BaseModel):
    name: str


class EventPayloadMeta(BaseModel):
    model_config = ConfigDict(extra="ignore")

    action: str | None = None
    commits: list[dict[str, Any]] | None = None
    issue: dict[str, Any] | None = None


class EventMeta(BaseModel):
    """Item of ``GET /users/{username}/events/public``."""

    model_config = ConfigDict(extra="ignore")

    type: str
    created_at: datetime
    repo: EventRepo
    payload: EventPayloadMeta = Field(default_factory=EventPayloadMeta)
