"""Backlog command for listing GitLab issues not tracked locally yet."""

import asyncio

from ..config import Settings
from ..gitlab import GitLabClientError
from .common import open_adapter
from .output import error, header, info, item


def run_backlog(settings: Settings, project_id: str, existing_ids: list[str]) -> int:
    """List open issues that could be added to the project backlog.

    Args:
        settings: Application settings
        project_id: Local project
        existing_ids: Issue numbers already linked to tasks

    Returns:
        Exit code (0 for success, non-zero for error)
    """
    return asyncio.run(_backlog(settings, project_id, existing_ids))


async def _backlog(settings: Settings, project_id: str, existing_ids: list[str]) -> int:
    async with open_adapter(settings) as adapter:
        if not await adapter.is_backlog_polling_enabled(project_id):
            error(f"Backlog import is not enabled for project {project_id}")
            info("Set 'is_enabled' and 'is_auto_add_to_backlog' for the project in gltasks.yml")
            return 1

        header("Fetching open issues from GitLab...")
        try:
            issues = await adapter.get_new_issues_for_backlog(project_id, existing_ids)
        except GitLabClientError as e:
            error(f"Could not fetch issues: {e}")
            return 1

        known = set(existing_ids)
        new_issues = [issue for issue in issues if str(issue.number) not in known]
        if not new_issues:
            info("No new issues")
            return 0

        for issue in new_issues:
            item(adapter.get_add_task_data(issue).title or issue.display_title)
        info(f"{len(new_issues)} new issue(s)")
        return 0
