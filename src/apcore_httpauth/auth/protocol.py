"""Protocols for authenticators and the collaborators they call."""

from __future__ import annotations

from collections.abc import Awaitable
from dataclasses import dataclass
from typing import Protocol, Union, runtime_checkable

from apcore import Identity

from apcore_httpauth.auth.outcome import AuthOutcome
from apcore_httpauth.auth.request import AuthRequest


@dataclass(frozen=True)
class StoredCredential:
    """A stored secret together with the identity it authenticates."""

    identity: Identity
    secret: str

    @classmethod
    def from_lookup(cls, username: str, result: object, provider: str) -> StoredCredential | None:
        """Normalize a lookup result. A bare secret gets a default user identity."""
        if result is None:
            return None
        if isinstance(result, StoredCredential):
            return result
        if isinstance(result, str):
            identity = Identity(id=username, type="user", roles=(), attrs={"provider": provider})
            return cls(identity=identity, secret=result)
        raise TypeError(f"Credential lookup returned unsupported type: {type(result).__name__}")


LookupResult = Union[str, StoredCredential, None]


@runtime_checkable
class Authenticator(Protocol):
    """Protocol for HTTP authentication schemes.

    Implementations inspect one request and report exactly one
    ``AuthOutcome``. They must not keep per-request state on ``self``.
    """

    async def authenticate(self, request: AuthRequest) -> AuthOutcome:
        """Authenticate a request.

        Args:
            request: The inbound request primitives.

        Returns:
            ``Authenticated``, ``Unauthorized``, ``Malformed`` or ``Pass``.
        """
        ...


class CredentialLookup(Protocol):
    """Resolves a user identifier to its stored secret.

    Returns ``None`` for unknown users instead of raising. May be a plain
    function or a coroutine function.
    """

    def __call__(self, username: str) -> LookupResult | Awaitable[LookupResult]: ...


class CredentialVerifier(Protocol):
    """Decides whether ``username``/``password`` is valid and builds the identity."""

    def __call__(self, username: str, password: str) -> Identity | None | Awaitable[Identity | None]: ...


@runtime_checkable
class CredentialCache(Protocol):
    """Key-value store for already-verified Basic credentials.

    Concurrency and eviction are the implementation's concern.
    """

    def get(self, key: str) -> Identity | None: ...

    def set(self, key: str, identity: Identity) -> None: ...
