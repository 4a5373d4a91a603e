"""Collaborator contracts for the issue sync adapter."""

from collections.abc import AsyncGenerator
from typing import Protocol

from ..models import GitLabConfig, GitLabIssue, SearchResultItem


class ConfigProvider(Protocol):
    """Source of per-project GitLab settings.

    Implementations return a live stream: the current settings first, then
    a new value whenever they change. Callers that need a single value take
    the first one and close the stream.
    """

    def get_config_for_project(self, project_id: str) -> AsyncGenerator[GitLabConfig, None]:
        """Stream the GitLab config of a local project."""
        ...


class IssueApiClient(Protocol):
    """Network access to the remote issue tracker."""

    async def get_by_id(self, issue_id: int | str, cfg: GitLabConfig) -> GitLabIssue:
        """Fetch one issue including its comments."""
        ...

    async def get_by_ids(self, ids: list[str], cfg: GitLabConfig) -> list[GitLabIssue]:
        """Fetch several issues including comments, in descending iid order."""
        ...

    async def search_in_project(self, term: str, cfg: GitLabConfig) -> list[SearchResultItem]:
        """Search issues of the configured project."""
        ...

    async def get_project_issues(self, page: int, cfg: GitLabConfig) -> list[GitLabIssue]:
        """Fetch one page of the project's issues."""
        ...
