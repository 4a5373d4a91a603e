"""GitLab issue sync package."""

from .change_detection import (
    comments_by_others,
    get_add_task_data,
    get_update_task_data,
    last_remote_update,
    was_updated,
)
from .gitlab_adapter import (
    GitLabIssueSyncAdapter,
    InvalidIssueIdError,
    IssueSyncError,
    MissingIssueError,
    MissingProjectError,
)
from .protocol import ConfigProvider, IssueApiClient

__all__ = [
    "ConfigProvider",
    "GitLabIssueSyncAdapter",
    "IssueApiClient",
    "InvalidIssueIdError",
    "IssueSyncError",
    "MissingIssueError",
    "MissingProjectError",
    "comments_by_others",
    "get_add_task_data",
    "get_update_task_data",
    "last_remote_update",
    "was_updated",
]
