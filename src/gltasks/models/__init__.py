"""Data models."""

from .gitlab_config import GitLabConfig, GltasksConfig
from .gitlab_issue import GitLabComment, GitLabIssue, GitLabUser, SearchResultItem
from .sync import IssueRefresh, TaskRefresh
from .task import Task, TaskChanges

__all__ = [
    "GitLabComment",
    "GitLabConfig",
    "GitLabIssue",
    "GitLabUser",
    "GltasksConfig",
    "IssueRefresh",
    "SearchResultItem",
    "Task",
    "TaskChanges",
    "TaskRefresh",
]
