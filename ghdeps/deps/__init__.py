"""Dependency scanning, version updates and resolution state."""

from .resolution import ResolutionState
from .scanner import ProjectTree
from .updater import DependencyUpdater

__all__ = ["DependencyUpdater", "ProjectTree", "ResolutionState"]
