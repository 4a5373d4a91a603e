"""GitLab REST API access."""

from .client import (
    GitLabAuthError,
    GitLabClient,
    GitLabClientError,
    GitLabForbiddenError,
    GitLabNotFoundError,
    GitLabRateLimitError,
)

__all__ = [
    "GitLabAuthError",
    "GitLabClient",
    "GitLabClientError",
    "GitLabForbiddenError",
    "GitLabNotFoundError",
    "GitLabRateLimitError",
]
