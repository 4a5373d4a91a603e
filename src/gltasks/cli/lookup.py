"""Search and link commands."""

import asyncio

from ..config import Settings
from .common import open_adapter
from .output import info, item


def run_search(settings: Settings, project_id: str, term: str) -> int:
    """Print GitLab issues matching a search term."""
    return asyncio.run(_search(settings, project_id, term))


def run_link(settings: Settings, project_id: str, issue_id: str) -> int:
    """Print the browsable URL of an issue."""
    return asyncio.run(_link(settings, project_id, issue_id))


async def _search(settings: Settings, project_id: str, term: str) -> int:
    async with open_adapter(settings) as adapter:
        results = await adapter.search_issues(term, project_id)
    if not results:
        info("No matching issues")
        return 0
    for result in results:
        item(result.title)
    return 0


async def _link(settings: Settings, project_id: str, issue_id: str) -> int:
    async with open_adapter(settings) as adapter:
        print(await adapter.issue_link(issue_id, project_id))
    return 0
