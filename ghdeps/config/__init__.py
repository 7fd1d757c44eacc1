"""Configuration: process settings and per-project ghdeps.yaml."""

from .project import ProjectConfig, ResourcesConfig, load_project_config
from .settings import Settings

__all__ = [
    "ProjectConfig",
    "ResourcesConfig",
    "Settings",
    "load_project_config",
]
