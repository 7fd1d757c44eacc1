"""Credential resolution and transport selection."""

from .credentials import CredentialResolver, resolve_credential
from .transport import AuthConfig, TransportSelector

__all__ = [
    "AuthConfig",
    "CredentialResolver",
    "TransportSelector",
    "resolve_credential",
]
