"""Service layer."""

from .config_service import ConfigService

__all__ = [
    "ConfigService",
]
