"""Authentication outcomes reported by authenticators to the host middleware."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from apcore import Identity

WWW_AUTHENTICATE = "WWW-Authenticate"


@dataclass(frozen=True)
class Authenticated:
    """Credentials verified; ``identity`` is the authenticated principal."""

    identity: Identity


@dataclass(frozen=True)
class Unauthorized:
    """Credentials were understood but rejected. Carries a fresh challenge."""

    status_code: int = 401
    headers: dict[str, str] | None = None


@dataclass(frozen=True)
class Malformed:
    """Credentials were presented in this scheme but are structurally invalid."""

    status_code: int = 400


@dataclass(frozen=True)
class Pass:
    """The request carries no credentials for this scheme.

    The host may try another authenticator; if none applies, ``headers``
    holds the challenge to send back.
    """

    status_code: int = 401
    headers: dict[str, str] | None = None


AuthOutcome = Union[Authenticated, Unauthorized, Malformed, Pass]
