"""Shared wiring for CLI commands."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from ..config import Settings
from ..gitlab import GitLabClient
from ..issues import GitLabIssueSyncAdapter
from ..services import ConfigService
from .output import error


@asynccontextmanager
async def open_adapter(settings: Settings) -> AsyncIterator[GitLabIssueSyncAdapter]:
    """Build an adapter backed by gltasks.yml and a live GitLab client."""
    config_service = ConfigService(settings.project_root, settings.gitlab_token)
    config_service.get_config()
    if config_service.has_config_error:
        error(config_service.config_error)
    async with GitLabClient(settings.gitlab_token) as client:
        yield GitLabIssueSyncAdapter(config_service, client)
