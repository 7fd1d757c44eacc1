"""Data model for credentials, repositories and dependencies."""

from .credential import Credential, CredentialKind
from .dependency import DependencyDescriptor, PlannedUpdate
from .repository import MirrorState, RepositoryRef, parse_owner_and_name

__all__ = [
    "Credential",
    "CredentialKind",
    "DependencyDescriptor",
    "PlannedUpdate",
    "MirrorState",
    "RepositoryRef",
    "parse_owner_and_name",
]
