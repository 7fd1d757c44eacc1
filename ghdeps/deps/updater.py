"""
Dependency Updater — Bump declared GitHub dependencies to their latest release.

Workflow: scan → compare → rewrite → invalidate resolved state.

- `plan()` asks for the latest release of every distinct declaration and
  schedules an update wherever `declared != latest`.
- `apply()` replaces the literal text `group:name:old` with
  `group:name:new` in every given file. This is plain substring
  replacement, so a matching string in a comment is rewritten too.
- When anything changed and a `ResolutionState` is attached, it is
  soft-refreshed with the new coordinates.

## Usage

    updater = DependencyUpdater(cache.latest_version)
    plan = updater.plan(tree.declarations())
    updater.apply(plan, tree.build_files())
"""

from __future__ import annotations

import logging
from dataclasses import replace
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Optional

from ..fileutil import atomic_write_text
from ..models.dependency import DependencyDescriptor, PlannedUpdate
from .resolution import ArtifactResolver, ResolutionState

logger = logging.getLogger(__name__)

LatestLookup = Callable[[str, str], Optional[str]]


def updated_declarations(
    declared: Iterable[DependencyDescriptor], plan: List[PlannedUpdate],
) -> List[DependencyDescriptor]:
    """New descriptors with the planned versions substituted."""
    bumps: Dict[DependencyDescriptor, str] = {u.descriptor: u.new_version for u in plan}
    return [replace(d, version=bumps[d]) if d in bumps else d for d in declared]


class DependencyUpdater:
    """Plans and applies version bumps for declared dependencies."""

    def __init__(
        self,
        latest_lookup: LatestLookup,
        resolution: Optional[ResolutionState] = None,
        resolver: Optional[ArtifactResolver] = None,
    ):
        self.latest_lookup = latest_lookup
        self.resolution = resolution
        self.resolver = resolver

    def plan(self, declared: Iterable[DependencyDescriptor]) -> List[PlannedUpdate]:
        updates: List[PlannedUpdate] = []
        seen = set()
        for dep in declared:
            if dep in seen:
                continue
            seen.add(dep)

            if dep.version is None:
                logger.debug(f"Skipping {dep.coordinate}: no version declared")
                continue

            latest = self.latest_lookup(dep.owner, dep.name)
            if latest is None:
                logger.info(f"No releases found for {dep.group}:{dep.name}, skipping")
                continue

            if dep.version != latest:
                logger.info(f"Dependency {dep.coordinate} will be updated to {latest}")
                updates.append(PlannedUpdate(dep, dep.version, latest))
            else:
                logger.debug(f"{dep.coordinate} is already the latest release")
        return updates

    def apply(
        self,
        plan: List[PlannedUpdate],
        target_files: Iterable[Path],
        declared: Optional[Iterable[DependencyDescriptor]] = None,
    ) -> List[Path]:
        """
        Rewrite `target_files` and return the ones that changed.

        Args:
            plan: Updates from `plan()`
            target_files: Build files of every sub-project
            declared: Full declaration list, used for the soft refresh
                (defaults to the planned descriptors)
        """
        if not plan:
            return []

        changed: List[Path] = []
        for path in target_files:
            path = Path(path)
            if not path.is_file():
                logger.warning(f"Build file {path} does not exist, skipping")
                continue

            # No newline translation; CRLF files stay CRLF
            original = path.read_bytes().decode("utf-8")
            text = original
            for update in plan:
                text = text.replace(update.search, update.replacement)

            if text != original:
                atomic_write_text(path, text)
                changed.append(path)
                logger.info(f"Updated {path}")

        if changed and self.resolution is not None and self.resolver is not None:
            base = list(declared) if declared is not None else [u.descriptor for u in plan]
            self.resolution.soft_refresh(updated_declarations(base, plan), self.resolver)
        return changed

    def update(
        self, declared: Iterable[DependencyDescriptor], target_files: Iterable[Path],
    ) -> List[PlannedUpdate]:
        """Plan then apply. Returns the plan."""
        deps = list(declared)
        plan = self.plan(deps)
        if not plan:
            logger.info("All dependencies are up to date")
            return plan
        self.apply(plan, target_files, declared=deps)
        return plan
