"""
Resolution State — The project's record of resolved dependency artifacts.

Stored as JSON at `<project>/.ghdeps/resolved.json`:

    {
      "classpaths": {
        "compileClasspath": {
          "resolved": true,
          "artifacts": {"acme:tools:1.2.0": "/home/me/.cache/ghdeps/github/acme/tools-1.2.0.jar"}
        },
        ...
      }
    }

After build files are rewritten, `soft_refresh()` marks every classpath
unresolved and re-resolves the standard ones in place. Nothing is
restarted.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List

from ..errors import ConfigurationError, GhDepsError
from ..fileutil import atomic_write_text
from ..models.dependency import DependencyDescriptor

logger = logging.getLogger(__name__)

RESOLUTION_FILE = Path(".ghdeps") / "resolved.json"
STANDARD_CLASSPATHS = ("compileClasspath", "runtimeClasspath", "testRuntimeClasspath")

ArtifactResolver = Callable[[DependencyDescriptor], Path]


class ResolutionState:
    """Load, update and invalidate `resolved.json`."""

    def __init__(self, project_dir: Path):
        self.path = Path(project_dir) / RESOLUTION_FILE

    def load(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {"classpaths": {}}
        try:
            with self.path.open("r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"Corrupt resolution state: {e}", path=str(self.path)) from e
        data.setdefault("classpaths", {})
        return data

    def save(self, data: Dict[str, Any]) -> None:
        atomic_write_text(self.path, json.dumps(data, indent=2, sort_keys=True) + "\n")
        logger.debug(f"Resolution state saved → {self.path}")

    def is_resolved(self, classpath: str) -> bool:
        entry = self.load()["classpaths"].get(classpath)
        return bool(entry and entry.get("resolved"))

    def artifacts(self, classpath: str) -> Dict[str, str]:
        entry = self.load()["classpaths"].get(classpath) or {}
        return dict(entry.get("artifacts") or {})

    def record(self, classpath: str, artifacts: Dict[str, Path]) -> None:
        data = self.load()
        data["classpaths"][classpath] = {
            "resolved": True,
            "artifacts": {coord: str(path) for coord, path in artifacts.items()},
        }
        self.save(data)

    def invalidate(self) -> None:
        """Mark every known classpath unresolved and drop its artifacts."""
        data = self.load()
        for name in set(data["classpaths"]) | set(STANDARD_CLASSPATHS):
            data["classpaths"][name] = {"resolved": False, "artifacts": {}}
        self.save(data)

    def resolve_all(
        self,
        declared: Iterable[DependencyDescriptor],
        resolver: ArtifactResolver,
        classpath: str,
    ) -> Dict[str, Path]:
        """Resolve every versioned declaration into `classpath` and record it."""
        artifacts: Dict[str, Path] = {}
        for dep in declared:
            if dep.version is None:
                logger.debug(f"Skipping {dep.coordinate}: no version declared")
                continue
            artifacts[dep.coordinate] = resolver(dep)
        self.record(classpath, artifacts)
        return artifacts

    def soft_refresh(
        self,
        declared: Iterable[DependencyDescriptor],
        resolver: ArtifactResolver,
    ) -> List[str]:
        """
        Invalidate, then re-resolve the standard classpaths.

        A classpath that fails to resolve is left unresolved and does not
        stop the others.

        Returns:
            Names of the classpaths that resolved
        """
        logger.info("Attempting safe configuration refresh...")
        deps = list(declared)
        self.invalidate()

        refreshed: List[str] = []
        for classpath in STANDARD_CLASSPATHS:
            try:
                self.resolve_all(deps, resolver, classpath)
                refreshed.append(classpath)
            except GhDepsError as e:
                logger.debug(f"Couldn't resolve {classpath}: {e}")

        logger.info(
            f"Refreshed {len(refreshed)}/{len(STANDARD_CLASSPATHS)} classpaths. "
            "For a full refresh run `ghdeps classpath`."
        )
        return refreshed
