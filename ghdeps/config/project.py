"""
Project Config — Load `ghdeps.yaml` from a project directory.

## Example

```yaml
github:
  access_token: ~/.config/ghdeps/token   # literal value or file path
  debug: false

resources:
  repo_url: https://github.com/acme/assets
  branch: main
  path: /
  build_only: false

dependencies:
  - acme:tools:1.2.0
```

A missing file yields the defaults.
"""

from __future__ import annotations

import dataclasses
import logging
from pathlib import Path
from typing import List, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError

from ..errors import ConfigurationError
from ..models.dependency import DependencyDescriptor
from .settings import Settings

logger = logging.getLogger(__name__)

PROJECT_CONFIG_FILE = "ghdeps.yaml"


class GithubConfig(BaseModel):
    """The `github:` section."""

    access_token: Optional[str] = None
    debug: bool = False


class ResourcesConfig(BaseModel):
    """The `resources:` section."""

    repo_url: Optional[str] = None
    branch: Optional[str] = "main"
    path: str = "/"
    build_only: bool = False
    resource_dirs: List[str] = Field(default_factory=lambda: ["src/main/resources"])

    @property
    def configured(self) -> bool:
        return bool(self.repo_url and self.repo_url.strip())


class ProjectConfig(BaseModel):
    """Contents of a project's ghdeps.yaml."""

    github: GithubConfig = Field(default_factory=GithubConfig)
    resources: ResourcesConfig = Field(default_factory=ResourcesConfig)
    dependencies: List[str] = Field(default_factory=list)

    def descriptors(self) -> List[DependencyDescriptor]:
        return [DependencyDescriptor.parse(c) for c in self.dependencies]

    def apply_to(self, settings: Settings) -> Settings:
        """Return settings with this project's github section applied."""
        changes = {}
        if self.github.access_token:
            changes["access_token"] = self.github.access_token
        if self.github.debug:
            changes["debug"] = True
        if not changes:
            return settings
        return dataclasses.replace(settings, **changes)


def load_project_config(project_dir: Path) -> ProjectConfig:
    """
    Load `<project_dir>/ghdeps.yaml`.

    Raises:
        ConfigurationError: If the file is not valid YAML or fails validation
    """
    path = Path(project_dir) / PROJECT_CONFIG_FILE
    if not path.exists():
        logger.debug(f"No {PROJECT_CONFIG_FILE} in {project_dir}, using defaults")
        return ProjectConfig()

    try:
        with path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML: {e}", path=str(path)) from e

    if not isinstance(data, dict):
        raise ConfigurationError("Project config must be a mapping", path=str(path))

    try:
        return ProjectConfig(**data)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid project config: {e}", path=str(path)) from e
