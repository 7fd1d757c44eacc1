"""
Project Scanner — Find sub-projects, build files and declared dependencies.

A sub-project is the root directory or any directory below it that holds
one of the build files below. Declarations are read from:

- Gradle scripts: `githubImplementation "owner:name:version"` (Groovy or
  Kotlin DSL, with or without parentheses)
- `ghdeps.yaml`: entries of the `dependencies:` list

## Usage

    tree = ProjectTree(Path("."))
    for dep in tree.declarations():
        print(dep.coordinate)
"""

from __future__ import annotations

import logging
import os
import re
from pathlib import Path
from typing import Dict, Iterator, List, Optional

from ..config.project import PROJECT_CONFIG_FILE, load_project_config
from ..models.dependency import DependencyDescriptor

logger = logging.getLogger(__name__)

DEFAULT_CONFIGURATION = "githubImplementation"
GRADLE_BUILD_FILES = ("build.gradle", "build.gradle.kts")
BUILD_FILES = GRADLE_BUILD_FILES + (PROJECT_CONFIG_FILE,)
SKIP_DIRS = {"build", "node_modules", "__pycache__"}


def declaration_pattern(configuration: str) -> re.Pattern:
    """Regex matching `<configuration> "group:name[:version]"`."""
    return re.compile(
        rf"\b{re.escape(configuration)}\b\s*\(?\s*"
        r"(['\"])([^'\":\s]+):([^'\":\s]+)(?::([^'\"\s]+))?\1"
    )


def parse_gradle_declarations(text: str, configuration: str = DEFAULT_CONFIGURATION) -> List[DependencyDescriptor]:
    found = []
    for match in declaration_pattern(configuration).finditer(text):
        _, group, name, version = match.groups()
        found.append(DependencyDescriptor(group=group, name=name, version=version))
    return found


class ProjectTree:
    """A project root and the sub-projects below it."""

    def __init__(self, root: Path, configuration: str = DEFAULT_CONFIGURATION):
        self.root = Path(root)
        self.configuration = configuration

    def subprojects(self) -> List[Path]:
        """The root first, then every nested directory holding a build file."""
        found = [self.root]
        for dirpath, dirnames, filenames in os.walk(self.root):
            dirnames[:] = sorted(
                d for d in dirnames if not d.startswith(".") and d not in SKIP_DIRS
            )
            path = Path(dirpath)
            if path != self.root and any(name in filenames for name in BUILD_FILES):
                found.append(path)
        return found

    def build_files(self, project: Optional[Path] = None) -> List[Path]:
        """Build files of one sub-project, or of the whole tree when omitted."""
        projects = [Path(project)] if project is not None else self.subprojects()
        files = []
        for proj in projects:
            files.extend(proj / name for name in BUILD_FILES if (proj / name).is_file())
        return files

    def _declarations_in(self, path: Path) -> Iterator[DependencyDescriptor]:
        if path.name == PROJECT_CONFIG_FILE:
            yield from load_project_config(path.parent).descriptors()
            return
        text = path.read_text(encoding="utf-8")
        yield from parse_gradle_declarations(text, self.configuration)

    def declarations(self) -> List[DependencyDescriptor]:
        """Declared dependencies across the tree, deduplicated, in discovery order."""
        seen: Dict[DependencyDescriptor, None] = {}
        for path in self.build_files():
            for dep in self._declarations_in(path):
                seen.setdefault(dep, None)
        logger.debug(f"Found {len(seen)} declared dependencies under {self.root}")
        return list(seen)
