"""
Dependency Model — Declared GitHub dependencies and planned updates.

A dependency is declared as a coordinate string `group:name:version`
where `group` is the repository owner and `name` the repository name.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..errors import ConfigurationError


@dataclass(frozen=True)
class DependencyDescriptor:
    """A declared dependency. Read-only; updates produce new values."""

    group: str
    name: str
    version: Optional[str] = None

    @classmethod
    def parse(cls, coordinate: str) -> "DependencyDescriptor":
        """Parse `group:name[:version]`."""
        parts = coordinate.strip().split(":")
        if len(parts) not in (2, 3) or not all(parts):
            raise ConfigurationError(
                "Invalid dependency coordinate, expected group:name:version",
                coordinate=coordinate,
            )
        version = parts[2] if len(parts) == 3 else None
        return cls(group=parts[0], name=parts[1], version=version)

    @property
    def owner(self) -> str:
        """Repository owner on the hosting provider."""
        return self.group

    @property
    def coordinate(self) -> str:
        if self.version is None:
            return f"{self.group}:{self.name}"
        return f"{self.group}:{self.name}:{self.version}"

    def __str__(self) -> str:
        return self.coordinate


@dataclass(frozen=True)
class PlannedUpdate:
    """One scheduled version bump: replace `search` with `replacement`."""

    descriptor: DependencyDescriptor
    old_version: str
    new_version: str

    @property
    def search(self) -> str:
        return f"{self.descriptor.group}:{self.descriptor.name}:{self.old_version}"

    @property
    def replacement(self) -> str:
        return f"{self.descriptor.group}:{self.descriptor.name}:{self.new_version}"
