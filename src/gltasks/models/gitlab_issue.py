"""Pydantic models for GitLab REST API responses."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class GitLabUser(BaseModel):
    """Author of an issue or note."""

    username: str
    name: str | None = None


class GitLabComment(BaseModel):
    """A user note on an issue."""

    id: int
    body: str = ""
    author: GitLabUser
    created_at: datetime


class GitLabIssue(BaseModel):
    """A GitLab issue with its comments attached."""

    model_config = ConfigDict(populate_by_name=True)

    id: int
    number: int = Field(alias="iid")  # Project-scoped number shown as #N
    title: str
    state: str = "opened"
    web_url: str | None = None
    created_at: datetime | None = None
    updated_at: datetime
    weight: int | None = None
    comments: list[GitLabComment] = Field(default_factory=list)

    @property
    def display_title(self) -> str:
        """Title as used for linked tasks, e.g. '#5 Fix bug'."""
        return f"#{self.number} {self.title}"


class SearchResultItem(BaseModel):
    """A remote search hit offered to the user for linking."""

    title: str
    issue_type: Literal["GITLAB"] = "GITLAB"
    issue_data: GitLabIssue
