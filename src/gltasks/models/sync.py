"""Result models for issue refreshes."""

from dataclasses import dataclass

from .gitlab_issue import GitLabIssue
from .task import Task, TaskChanges


@dataclass
class IssueRefresh:
    """Fresh data for a single task whose issue changed remotely."""

    task_changes: TaskChanges
    issue: GitLabIssue
    issue_title: str  # Truncated, for notifications


@dataclass
class TaskRefresh:
    """Fresh data for one task of a batched refresh."""

    task: Task
    task_changes: TaskChanges
    issue: GitLabIssue
