"""GitLab REST API client."""

from __future__ import annotations

import logging
import time
from typing import Any

import httpx

from ..models import GitLabComment, GitLabConfig, GitLabIssue, SearchResultItem
from .constants import GITLAB_API_BASE_URL, GITLAB_PAGE_SIZE

logger = logging.getLogger(__name__)


class GitLabClientError(Exception):
    """Base exception for GitLab client errors."""

    pass


class GitLabAuthError(GitLabClientError):
    """Authentication failed."""

    pass


class GitLabNotFoundError(GitLabClientError):
    """Resource not found."""

    pass


class GitLabForbiddenError(GitLabClientError):
    """Permission denied."""

    pass


class GitLabRateLimitError(GitLabClientError):
    """Rate limit exceeded."""

    pass


class GitLabClient:
    """Async GitLab REST API client.

    Every call takes the project's GitLabConfig, which selects the instance,
    the project and (optionally) the access token. One client can therefore
    serve several local projects.
    """

    def __init__(self, token: str | None = None, timeout: float = 30.0):
        """Initialize the GitLab client.

        Args:
            token: Fallback personal access token for configs without one
            timeout: Request timeout in seconds
        """
        self.token = token
        self._client = httpx.AsyncClient(
            headers={"Accept": "application/json"},
            timeout=timeout,
        )

    async def aclose(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()

    async def __aenter__(self) -> GitLabClient:
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.aclose()

    # --- Issue API ---

    async def get_by_id(self, issue_id: int | str, cfg: GitLabConfig) -> GitLabIssue:
        """Fetch a single issue with its comments.

        Args:
            issue_id: Project-scoped issue number (iid)
            cfg: Project GitLab configuration

        Returns:
            The issue

        Raises:
            GitLabClientError: On any request failure
        """
        data = await self._get(f"{self.api_url(cfg)}/issues/{issue_id}", cfg)
        return await self._with_comments(data, cfg)

    async def get_by_ids(self, ids: list[str], cfg: GitLabConfig) -> list[GitLabIssue]:
        """Fetch several issues with their comments in one listing request.

        Issues come back in descending iid order. Comments are fetched one
        issue after another so the order is kept.
        """
        params: list[tuple[str, str | int]] = [("iids[]", str(iid)) for iid in ids]
        params += [
            ("order_by", "created_at"),
            ("sort", "desc"),
            ("per_page", GITLAB_PAGE_SIZE),
        ]
        data = await self._get(f"{self.api_url(cfg)}/issues", cfg, params)
        return [await self._with_comments(item, cfg) for item in data]

    async def search_in_project(self, term: str, cfg: GitLabConfig) -> list[SearchResultItem]:
        """Search issues of the configured project by title and description."""
        params = {"search": term, "order_by": "updated_at", "per_page": GITLAB_PAGE_SIZE}
        data = await self._get(f"{self.api_url(cfg)}/issues", cfg, params)
        results = []
        for item in data:
            issue = GitLabIssue.model_validate(item)
            results.append(
                SearchResultItem(
                    title=issue.display_title,
                    issue_data=issue,
                )
            )
        return results

    async def get_project_issues(self, page: int, cfg: GitLabConfig) -> list[GitLabIssue]:
        """Fetch one page of open project issues (without comments)."""
        params = {
            "state": "opened",
            "order_by": "updated_at",
            "page": page,
            "per_page": GITLAB_PAGE_SIZE,
        }
        data = await self._get(f"{self.api_url(cfg)}/issues", cfg, params)
        return [GitLabIssue.model_validate(item) for item in data]

    # --- Internals ---

    def api_url(self, cfg: GitLabConfig) -> str:
        """Build the project API root for a config."""
        if not cfg.project:
            raise GitLabClientError("GitLab project is not configured")
        project = cfg.project.replace("/", "%2F")
        if cfg.gitlab_base_url:
            return f"{cfg.gitlab_base_url.rstrip('/')}/api/v4/projects/{project}"
        return f"{GITLAB_API_BASE_URL}/{project}"

    async def _with_comments(self, data: dict[str, Any], cfg: GitLabConfig) -> GitLabIssue:
        """Attach user comments to raw issue data."""
        issue = GitLabIssue.model_validate(data)
        issue.comments = await self._get_comments(issue.number, cfg)
        return issue

    async def _get_comments(self, issue_id: int, cfg: GitLabConfig) -> list[GitLabComment]:
        """Fetch user notes of an issue, oldest first."""
        params = {"sort": "asc", "order_by": "created_at", "per_page": GITLAB_PAGE_SIZE}
        data = await self._get(f"{self.api_url(cfg)}/issues/{issue_id}/notes", cfg, params)
        return [GitLabComment.model_validate(note) for note in data if not note.get("system")]

    def _headers(self, cfg: GitLabConfig) -> dict[str, str]:
        token = cfg.token or self.token
        return {"PRIVATE-TOKEN": token} if token else {}

    async def _get(self, url: str, cfg: GitLabConfig, params: Any = None) -> Any:
        """Execute a GET request and return the decoded JSON body.

        Raises:
            GitLabAuthError: Authentication failed
            GitLabForbiddenError: Permission denied
            GitLabNotFoundError: Resource not found
            GitLabRateLimitError: Rate limit exceeded
            GitLabClientError: Other errors
        """
        logger.debug("GET %s: params=%s", url, params)

        start_time = time.monotonic()
        try:
            response = await self._client.get(url, params=params, headers=self._headers(cfg))
        except httpx.RequestError as e:
            elapsed_ms = (time.monotonic() - start_time) * 1000
            logger.error("GET %s failed after %.0fms: %s", url, elapsed_ms, e)
            raise GitLabClientError(f"Request failed: {e}") from e

        elapsed_ms = (time.monotonic() - start_time) * 1000

        if response.status_code == 401:
            logger.error("GET %s: 401 Unauthorized (%.0fms)", url, elapsed_ms)
            raise GitLabAuthError(
                "Authentication failed. Check the GitLab token.\nRequired scope: read_api"
            )
        if response.status_code == 403:
            logger.error("GET %s: 403 Forbidden (%.0fms)", url, elapsed_ms)
            raise GitLabForbiddenError("Permission denied for this project")
        if response.status_code == 404:
            logger.error("GET %s: 404 Not Found (%.0fms)", url, elapsed_ms)
            raise GitLabNotFoundError("Resource not found")
        if response.status_code == 429:
            logger.error("GET %s: 429 Rate Limited (%.0fms)", url, elapsed_ms)
            raise GitLabRateLimitError("GitLab API rate limit exceeded. Try again later.")

        if response.status_code >= 400:
            logger.error("GET %s: HTTP %d (%.0fms)", url, response.status_code, elapsed_ms)
            raise GitLabClientError(f"HTTP {response.status_code}: {response.text}")

        try:
            result = response.json()
        except ValueError as e:
            logger.error("GET %s: Invalid JSON response (%.0fms)", url, elapsed_ms)
            raise GitLabClientError(f"Invalid JSON response: {e}") from e

        logger.info("GET %s: %d OK (%.0fms)", url, response.status_code, elapsed_ms)
        return result
