"""gltasks - keep task records in sync with GitLab issues."""

__version__ = "0.1.0"
