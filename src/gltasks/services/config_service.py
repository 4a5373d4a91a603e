"""Configuration service for loading gltasks.yml."""

import asyncio
import logging
from collections.abc import AsyncGenerator
from pathlib import Path

import yaml
from pydantic import ValidationError

from ..models import GitLabConfig, GltasksConfig

logger = logging.getLogger(__name__)


class ConfigService:
    """Service for loading and caching per-project GitLab configuration."""

    CONFIG_FILE = "gltasks.yml"

    def __init__(self, project_root: Path, default_token: str | None = None) -> None:
        """Initialize the config service.

        Args:
            project_root: Directory containing gltasks.yml
            default_token: Token used for projects that configure none
        """
        self.project_root = project_root
        self._default_token = default_token
        self._config: GltasksConfig | None = None
        self._config_error: str | None = None
        self._changed = asyncio.Event()

    @property
    def config_path(self) -> Path:
        """Path of the configuration file."""
        return self.project_root / self.CONFIG_FILE

    @property
    def has_config_error(self) -> bool:
        """Check if there was an error loading config."""
        return self._config_error is not None

    @property
    def config_error(self) -> str | None:
        """Get the config error message if any."""
        return self._config_error

    def get_config(self) -> GltasksConfig:
        """Get configuration, loading from file if not cached."""
        if self._config is None:
            self._config = self._load_config()
        return self._config

    def get_gitlab_config(self, project_id: str) -> GitLabConfig:
        """Get the current GitLab config of a project."""
        cfg = self.get_config().get_gitlab_config(project_id)
        if not cfg.token and self._default_token:
            cfg = cfg.model_copy(update={"token": self._default_token})
        return cfg

    async def get_config_for_project(self, project_id: str) -> AsyncGenerator[GitLabConfig, None]:
        """Stream a project's GitLab config: current value, then one per reload."""
        while True:
            changed = self._changed
            yield self.get_gitlab_config(project_id)
            await changed.wait()

    def reload(self) -> None:
        """Clear cached configuration and notify config streams."""
        self._config = None
        self._config_error = None
        changed, self._changed = self._changed, asyncio.Event()
        changed.set()

    def _load_config(self) -> GltasksConfig:
        """Load configuration from file or return default."""
        config_path = self.config_path
        self._config_error = None

        if not config_path.exists():
            logger.debug("No %s found, using defaults", self.CONFIG_FILE)
            return GltasksConfig.default()

        try:
            with open(config_path) as f:
                data = yaml.safe_load(f)

            if data is None:
                self._config_error = f"{self.CONFIG_FILE} is empty"
                logger.warning(self._config_error)
                return GltasksConfig.default()

            config = GltasksConfig(**data)
            logger.info("Loaded %s with %d projects", self.CONFIG_FILE, len(config.projects))
            return config

        except yaml.YAMLError as e:
            self._config_error = f"Invalid YAML in {self.CONFIG_FILE}: {e}"
            logger.warning(self._config_error)
            return GltasksConfig.default()

        except (ValidationError, TypeError) as e:
            self._config_error = f"Error loading {self.CONFIG_FILE}: {e}"
            logger.warning(self._config_error)
            return GltasksConfig.default()
