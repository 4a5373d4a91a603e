"""GitLab issue sync adapter.

Decides for one or many issue-linked tasks whether their GitLab issue
changed since the last sync and proposes task updates for those that did.
Nothing is persisted here: callers apply the returned changes to their
task store.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator
from contextlib import aclosing

from ..gitlab.constants import (
    GITLAB_BASE_URL,
    GITLAB_INITIAL_POLL_DELAY,
    GITLAB_MAX_IIDS_PER_REQUEST,
    GITLAB_POLL_INTERVAL,
)
from ..models import (
    GitLabConfig,
    GitLabIssue,
    IssueRefresh,
    SearchResultItem,
    Task,
    TaskChanges,
    TaskRefresh,
)
from ..utils import truncate
from .change_detection import get_add_task_data, get_update_task_data, was_updated
from .protocol import ConfigProvider, IssueApiClient

logger = logging.getLogger(__name__)


class IssueSyncError(Exception):
    """Base exception for issue sync errors."""

    pass


class MissingProjectError(IssueSyncError):
    """No project context could be established."""

    pass


class MissingIssueError(IssueSyncError):
    """A task has no issue identifier."""

    pass


class InvalidIssueIdError(IssueSyncError):
    """A task's issue identifier is not an issue number."""

    pass


class GitLabIssueSyncAdapter:
    """Issue sync adapter for GitLab-linked tasks.

    Handles:
    1. Feature checks (auto poll, auto add to backlog) per project
    2. Browsable issue links
    3. Refreshing one task or a batch of tasks from their issues
    4. Remote issue search and backlog imports
    """

    def __init__(self, config_provider: ConfigProvider, api_client: IssueApiClient) -> None:
        """Initialize the adapter.

        Args:
            config_provider: Source of per-project GitLab settings
            api_client: Client that talks to the GitLab API
        """
        self._config_provider = config_provider
        self._client = api_client

    # --- Feature checks ---

    def is_enabled(self, cfg: GitLabConfig | None) -> bool:
        """Whether the integration is switched on for a config."""
        return cfg is not None and cfg.is_usable

    async def is_backlog_polling_enabled(self, project_id: str) -> bool:
        """Whether new issues should be added to the project backlog."""
        cfg = await self._get_cfg_once(project_id)
        return self.is_enabled(cfg) and cfg.is_auto_add_to_backlog

    async def is_issue_refresh_enabled(self, project_id: str) -> bool:
        """Whether linked tasks of the project should be refreshed periodically."""
        cfg = await self._get_cfg_once(project_id)
        return self.is_enabled(cfg) and cfg.is_auto_poll

    async def poll_timer(
        self,
        initial_delay: float = GITLAB_INITIAL_POLL_DELAY,
        interval: float = GITLAB_POLL_INTERVAL,
    ) -> AsyncIterator[int]:
        """Yield increasing tick numbers, first after ``initial_delay`` then every ``interval``."""
        await asyncio.sleep(initial_delay)
        tick = 0
        while True:
            yield tick
            tick += 1
            await asyncio.sleep(interval)

    # --- Links and lookups ---

    async def issue_link(self, issue_id: int | str, project_id: str) -> str:
        """Build the browsable URL of an issue."""
        cfg = await self._get_cfg_once(project_id)
        if cfg.gitlab_base_url:
            base_url = cfg.gitlab_base_url
            if not base_url.endswith("/"):
                base_url = f"{base_url}/"
            return f"{base_url}{cfg.project}/issues/{issue_id}"
        project = (cfg.project or "").replace("%2F", "/")
        return f"{GITLAB_BASE_URL}{project}/issues/{issue_id}"

    async def get_by_id(self, issue_id: int | str, project_id: str) -> GitLabIssue:
        """Fetch a single issue of a project."""
        cfg = await self._get_cfg_once(project_id)
        return await self._client.get_by_id(issue_id, cfg)

    async def search_issues(self, search_term: str, project_id: str) -> list[SearchResultItem]:
        """Search remote issues; failures count as "no results"."""
        cfg = await self._get_cfg_once(project_id)
        if not cfg.is_search_issues_from_gitlab:
            return []
        try:
            return await self._client.search_in_project(search_term, cfg)
        except Exception:
            logger.warning("GitLab search for %r failed", search_term, exc_info=True)
            return []

    async def get_new_issues_for_backlog(
        self,
        project_id: str,
        existing_issue_ids: list[int] | list[str],
    ) -> list[GitLabIssue]:
        """Fetch the first page of project issues as backlog candidates.

        ``existing_issue_ids`` is accepted for interface compatibility only;
        callers filter out issues they already track.
        """
        cfg = await self._get_cfg_once(project_id)
        issues = await self._client.get_project_issues(1, cfg)
        logger.debug(
            "Fetched %d backlog candidates for project %s (%d already tracked)",
            len(issues),
            project_id,
            len(existing_issue_ids),
        )
        return issues

    def get_add_task_data(self, issue: GitLabIssue) -> TaskChanges:
        """Task fields for a task newly created from an issue."""
        return get_add_task_data(issue)

    # --- Refresh ---

    async def fetch_one(self, task: Task) -> IssueRefresh | None:
        """Refresh one task from its issue.

        Returns:
            The proposed changes, or None if the issue did not change

        Raises:
            MissingProjectError: Task has no project_id
            MissingIssueError: Task has no issue_id
            InvalidIssueIdError: Task's issue_id is not a number
        """
        if not task.project_id:
            raise MissingProjectError("No projectId")
        issue_number = _issue_number(task)

        cfg = await self._get_cfg_once(task.project_id)
        issue = await self._client.get_by_id(issue_number, cfg)

        if not was_updated(task, issue, cfg.filter_username):
            logger.debug("Issue #%s unchanged for task %s", task.issue_id, task.id)
            return None

        logger.info("Issue #%s changed remotely (task %s)", task.issue_id, task.id)
        return IssueRefresh(
            task_changes=get_update_task_data(issue),
            issue=issue,
            issue_title=truncate(issue.display_title),
        )

    async def fetch_many(self, tasks: list[Task]) -> list[TaskRefresh]:
        """Refresh a batch of tasks sharing one project.

        Tasks are sorted by issue number, descending, to line up with the
        order GitLab returns issues in. Issues are requested in chunks,
        strictly one after another, and matched to tasks in a single pass.
        Tasks whose issue is missing from the response are skipped.

        Raises:
            MissingProjectError: No tasks, or the first task has no project_id
            MissingIssueError: A task has no issue_id
            InvalidIssueIdError: A task's issue_id is not a number
        """
        if not tasks:
            raise MissingProjectError("No projectId")
        numbered = sorted(
            ((_issue_number(task), task) for task in tasks),
            key=lambda pair: pair[0],
            reverse=True,
        )
        project_id = numbered[0][1].project_id
        if not project_id:
            raise MissingProjectError("No projectId")

        cfg = await self._get_cfg_once(project_id)

        issues: list[GitLabIssue] = []
        for start in range(0, len(numbered), GITLAB_MAX_IIDS_PER_REQUEST):
            chunk = numbered[start : start + GITLAB_MAX_IIDS_PER_REQUEST]
            ids = [task.issue_id for _, task in chunk if task.issue_id]
            logger.debug("Fetching %d issues for project %s", len(ids), project_id)
            issues.extend(await self._client.get_by_ids(ids, cfg))

        updated: list[TaskRefresh] = []
        for task, issue in _match_issues(numbered, issues, project_id):
            if was_updated(task, issue, cfg.filter_username):
                updated.append(
                    TaskRefresh(
                        task=task,
                        task_changes=get_update_task_data(issue),
                        issue=issue,
                    )
                )

        logger.info(
            "%d of %d issues changed remotely in project %s",
            len(updated),
            len(numbered),
            project_id,
        )
        return updated

    # --- Internals ---

    async def _get_cfg_once(self, project_id: str) -> GitLabConfig:
        """Take the current value of the project's config stream."""
        async with aclosing(self._config_provider.get_config_for_project(project_id)) as stream:
            return await anext(stream)


def _issue_number(task: Task) -> int:
    """Parse a task's issue_id as an issue number."""
    if not task.issue_id:
        raise MissingIssueError("No issueId")
    try:
        return int(task.issue_id)
    except ValueError as e:
        raise InvalidIssueIdError(f"Invalid issueId: {task.issue_id!r}") from e


def _match_issues(
    numbered: list[tuple[int, Task]],
    issues: list[GitLabIssue],
    project_id: str,
) -> list[tuple[Task, GitLabIssue]]:
    """Pair tasks with issues; both are ordered by descending issue number."""
    pairs: list[tuple[Task, GitLabIssue]] = []
    i = j = 0
    while i < len(numbered) and j < len(issues):
        number, task = numbered[i]
        issue = issues[j]
        if number == issue.number:
            pairs.append((task, issue))
            i += 1
            j += 1
        elif number > issue.number:
            logger.warning("Issue #%d missing from response for project %s", number, project_id)
            i += 1
        else:
            logger.warning(
                "Unrequested issue #%d in response for project %s", issue.number, project_id
            )
            j += 1
    for number, _ in numbered[i:]:
        logger.warning("Issue #%d missing from response for project %s", number, project_id)
    return pairs
