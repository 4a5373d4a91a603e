"""Configuration models for gltasks.yml."""

from pydantic import BaseModel, Field, field_validator


class GitLabConfig(BaseModel):
    """GitLab integration settings for a single local project."""

    is_enabled: bool = False
    gitlab_base_url: str | None = Field(
        default=None,
        description="Self-hosted instance URL; defaults to gitlab.com",
    )
    project: str | None = Field(
        default=None,
        description="Project path or id, e.g. 'group/repo' or 'group%2Frepo'",
    )
    token: str | None = None

    is_auto_poll: bool = False
    is_auto_add_to_backlog: bool = False
    is_search_issues_from_gitlab: bool = False

    # Comments by this user do not count as remote changes
    filter_username: str | None = None

    @field_validator("gitlab_base_url")
    @classmethod
    def validate_base_url(cls, v: str | None) -> str | None:
        """Validate the base URL is an absolute http(s) URL."""
        if not v:
            return None
        if not v.startswith(("http://", "https://")):
            raise ValueError("gitlab_base_url must start with http:// or https://")
        return v

    @property
    def is_usable(self) -> bool:
        """Whether the integration is switched on and points at a project."""
        return self.is_enabled and bool(self.project)


class GltasksConfig(BaseModel):
    """Root configuration from gltasks.yml."""

    version: int = 1
    projects: dict[str, GitLabConfig] = Field(default_factory=dict)

    def get_gitlab_config(self, project_id: str) -> GitLabConfig:
        """Get the GitLab config for a project, disabled if not configured."""
        return self.projects.get(project_id) or GitLabConfig()

    @classmethod
    def default(cls) -> "GltasksConfig":
        """Return default configuration (no projects)."""
        return cls()
