"""HTTP Basic authentication (RFC 7617)."""

from __future__ import annotations

import base64
import binascii
import logging
from dataclasses import dataclass
from typing import Union

from apcore_httpauth._utils import call_collaborator
from apcore_httpauth.auth.cache import credential_cache_key
from apcore_httpauth.auth.outcome import (
    WWW_AUTHENTICATE,
    Authenticated,
    AuthOutcome,
    Malformed,
    Pass,
    Unauthorized,
)
from apcore_httpauth.auth.protocol import (
    Authenticator,
    CredentialCache,
    CredentialLookup,
    CredentialVerifier,
    StoredCredential,
)
from apcore_httpauth.auth.request import AuthRequest

logger = logging.getLogger(__name__)

SCHEME = "Basic"
PROVIDER = "HTTPBasic"
DEFAULT_REALM = "Users"


@dataclass(frozen=True)
class LookupStrategy:
    """Compare the submitted password with the one returned by ``lookup``.

    Attributes:
        lookup: Returns the stored password (or a ``StoredCredential``) for
            a username, or ``None`` if the user is unknown.
        cache: Optional cache of already-verified credentials. A hit skips
            the lookup entirely.
    """

    lookup: CredentialLookup
    cache: CredentialCache | None = None


@dataclass(frozen=True)
class VerifyStrategy:
    """Delegate the whole decision to ``verify(username, password)``.

    ``verify`` returns the authenticated ``Identity`` or ``None``. Results
    are never cached.
    """

    verify: CredentialVerifier


BasicStrategy = Union[LookupStrategy, VerifyStrategy]


def basic_challenge(realm: str) -> str:
    """Build a ``WWW-Authenticate`` value for a Basic challenge."""
    return f'{SCHEME} realm="{realm}"'


def encode_basic_credentials(username: str, password: str) -> str:
    """Build an ``Authorization`` header value for Basic credentials."""
    token = base64.b64encode(f"{username}:{password}".encode()).decode("ascii")
    return f"{SCHEME} {token}"


class BasicAuthenticator:
    """Verifies ``Authorization: Basic`` credentials or URL user-info.

    Args:
        strategy: Either a ``LookupStrategy`` or a ``VerifyStrategy``.
        realm: Protection space advertised in challenges.
    """

    def __init__(self, strategy: BasicStrategy, *, realm: str = DEFAULT_REALM) -> None:
        if not isinstance(strategy, (LookupStrategy, VerifyStrategy)):
            raise ValueError(
                f"strategy must be a LookupStrategy or VerifyStrategy, got {type(strategy).__name__}"
            )
        if not realm:
            raise ValueError("realm must not be empty")
        if '"' in realm:
            raise ValueError("realm must not contain double quotes")
        self._strategy = strategy
        self._realm = realm

    @property
    def realm(self) -> str:
        return self._realm

    def challenge_headers(self) -> dict[str, str]:
        return {WWW_AUTHENTICATE: basic_challenge(self._realm)}

    async def authenticate(self, request: AuthRequest) -> AuthOutcome:
        """Run one Basic verification for ``request``."""
        try:
            return await self._authenticate(request)
        except Exception:
            logger.exception("Unexpected error during Basic authentication")
            return Malformed()

    async def _authenticate(self, request: AuthRequest) -> AuthOutcome:
        if request.user_info is not None:
            authorization = request.user_info
        else:
            authorization = self._decode_header(request.header("authorization"))
            if authorization is None:
                return Pass(headers=self.challenge_headers())

        username, sep, password = authorization.partition(":")
        if not sep:
            logger.debug("Basic credentials have no ':' separator")
            return Malformed()

        if isinstance(self._strategy, LookupStrategy):
            return await self._check_lookup(self._strategy, username, password)
        return await self._check_verify(self._strategy, username, password)

    @staticmethod
    def _decode_header(header: str | None) -> str | None:
        """Return the decoded ``user:password`` text, or None if not Basic."""
        if not header:
            return None
        parts = header.split(" ")
        if parts[0] != SCHEME or len(parts) < 2:
            return None
        try:
            return base64.b64decode(parts[1], validate=True).decode("utf-8")
        except (binascii.Error, UnicodeDecodeError):
            logger.debug("Basic credentials are not valid base64 UTF-8 text")
            return None

    async def _check_lookup(self, strategy: LookupStrategy, username: str, password: str) -> AuthOutcome:
        key = credential_cache_key(username, password)
        if strategy.cache is not None:
            cached = strategy.cache.get(key)
            if cached is not None:
                logger.debug("Basic credentials for %r served from cache", username)
                return Authenticated(identity=cached)

        result = await call_collaborator(strategy.lookup, username)
        stored = StoredCredential.from_lookup(username, result, PROVIDER)
        if stored is None or stored.secret != password:
            logger.debug("Basic credentials rejected for %r", username)
            return Unauthorized(headers=self.challenge_headers())

        if strategy.cache is not None:
            strategy.cache.set(key, stored.identity)
        return Authenticated(identity=stored.identity)

    async def _check_verify(self, strategy: VerifyStrategy, username: str, password: str) -> AuthOutcome:
        identity = await call_collaborator(strategy.verify, username, password)
        if identity is None:
            logger.debug("Basic credentials rejected for %r", username)
            return Unauthorized(headers=self.challenge_headers())
        return Authenticated(identity=identity)


# Verify protocol compliance at import time
assert isinstance(BasicAuthenticator.__new__(BasicAuthenticator), Authenticator)
