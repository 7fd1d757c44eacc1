"""
Credential Model — Tagged union over none / token / private key.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class CredentialKind(str, Enum):
    """What kind of secret a credential holds."""
    NONE = "none"
    TOKEN = "token"
    PRIVATE_KEY = "private_key"


@dataclass(frozen=True)
class Credential:
    """
    A classified credential.

    Exactly one of `token` / `private_key` is set, matching `kind`.
    Compared structurally, so resolving the same raw value twice yields
    equal credentials.
    """

    kind: CredentialKind
    token: Optional[str] = field(default=None, repr=False)
    private_key: Optional[bytes] = field(default=None, repr=False)

    @classmethod
    def none(cls) -> "Credential":
        return cls(kind=CredentialKind.NONE)

    @classmethod
    def from_token(cls, token: str) -> "Credential":
        return cls(kind=CredentialKind.TOKEN, token=token)

    @classmethod
    def from_private_key(cls, key: bytes) -> "Credential":
        return cls(kind=CredentialKind.PRIVATE_KEY, private_key=key)

    @property
    def is_none(self) -> bool:
        return self.kind == CredentialKind.NONE

    @property
    def is_token(self) -> bool:
        return self.kind == CredentialKind.TOKEN

    @property
    def is_private_key(self) -> bool:
        return self.kind == CredentialKind.PRIVATE_KEY
