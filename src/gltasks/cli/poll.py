"""Poll command for checking linked tasks against their GitLab issues."""

import asyncio
import logging
from pathlib import Path

import yaml
from pydantic import ValidationError

from ..config import Settings
from ..gitlab import GitLabClientError
from ..issues import GitLabIssueSyncAdapter, IssueSyncError
from ..models import Task
from .common import open_adapter
from .output import error, header, info, item, success

logger = logging.getLogger(__name__)


def load_tasks(tasks_file: Path) -> list[Task]:
    """Load tasks from a YAML list of task mappings.

    Raises:
        ValueError: If the file is not a list of valid tasks
    """
    with open(tasks_file) as f:
        data = yaml.safe_load(f)

    if data is None:
        return []
    if not isinstance(data, list):
        raise ValueError(f"{tasks_file} must contain a list of tasks")

    try:
        return [Task(**entry) for entry in data]
    except (ValidationError, TypeError) as e:
        raise ValueError(f"Invalid task in {tasks_file}: {e}") from e


def run_poll(settings: Settings, project_id: str, tasks_file: Path) -> int:
    """Check the project's linked tasks for remote issue changes.

    Args:
        settings: Application settings
        project_id: Local project whose tasks are checked
        tasks_file: YAML file listing the tasks

    Returns:
        Exit code (0 for success, non-zero for error)
    """
    try:
        tasks = load_tasks(tasks_file)
    except (OSError, yaml.YAMLError, ValueError) as e:
        logger.warning("Could not read tasks from %s: %s", tasks_file, e)
        error(f"Could not read tasks: {e}")
        return 1

    linked = [t for t in tasks if t.has_issue and t.project_id == project_id]
    if not linked:
        info(f"No issue-linked tasks for project {project_id}")
        return 0

    return asyncio.run(_poll(settings, project_id, linked))


async def _poll(settings: Settings, project_id: str, tasks: list[Task]) -> int:
    async with open_adapter(settings) as adapter:
        if not await adapter.is_issue_refresh_enabled(project_id):
            error(f"Issue refresh is not enabled for project {project_id}")
            info("Set 'is_enabled' and 'is_auto_poll' for the project in gltasks.yml")
            return 1

        header(f"Checking {len(tasks)} issue(s) on GitLab...")
        try:
            refreshes = await adapter.fetch_many(tasks)
        except (IssueSyncError, GitLabClientError) as e:
            error(f"Refresh failed: {e}")
            return 1

        if not refreshes:
            info("Everything is up to date")
            return 0

        success(f"{len(refreshes)} issue(s) changed")
        for refresh in refreshes:
            link = await _link(adapter, refresh.task)
            item(f"{refresh.task.id}: {refresh.task_changes.title}  {link}")
        return 0


async def _link(adapter: GitLabIssueSyncAdapter, task: Task) -> str:
    return await adapter.issue_link(task.issue_id or "", task.project_id or "")
