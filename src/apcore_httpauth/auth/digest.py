"""HTTP Digest authentication (RFC 7616), ``qop=auth`` with MD5."""

from __future__ import annotations

import hashlib
import logging

from apcore_httpauth._utils import call_collaborator
from apcore_httpauth.auth.grammar import parse_digest_params
from apcore_httpauth.auth.nonce import generate_nonce
from apcore_httpauth.auth.outcome import (
    WWW_AUTHENTICATE,
    Authenticated,
    AuthOutcome,
    Malformed,
    Pass,
    Unauthorized,
)
from apcore_httpauth.auth.protocol import Authenticator, CredentialLookup, StoredCredential
from apcore_httpauth.auth.request import AuthRequest

logger = logging.getLogger(__name__)

SCHEME = "Digest"
PROVIDER = "HTTPDigest"
ALGORITHM = "MD5"
QOP = "auth"
DEFAULT_REALM = "Users"

REQUIRED_FIELDS = ("username", "realm", "uri", "nonce", "cnonce", "nc", "qop", "response")


def md5_hex(value: str) -> str:
    """Lowercase hex MD5 of the UTF-8 encoding of ``value``."""
    return hashlib.md5(value.encode("utf-8")).hexdigest()


def digest_response(
    *,
    username: str,
    realm: str,
    password: str,
    method: str,
    uri: str,
    nonce: str,
    nc: str,
    cnonce: str,
    qop: str = QOP,
) -> str:
    """Compute the RFC 7616 ``response`` value for ``qop=auth``.

    ``HA1 = MD5(username:realm:password)``, ``HA2 = MD5(method:uri)`` and
    the result is ``MD5(HA1:nonce:nc:cnonce:qop:HA2)``.
    """
    ha1 = md5_hex(f"{username}:{realm}:{password}")
    ha2 = md5_hex(f"{method}:{uri}")
    return md5_hex(f"{ha1}:{nonce}:{nc}:{cnonce}:{qop}:{ha2}")


def build_digest_challenge(realm: str, nonce: str, opaque: str | None = None) -> str:
    """Build a ``WWW-Authenticate`` value for a Digest challenge."""
    challenge = f'{SCHEME} realm="{realm}", nonce="{nonce}"'
    if opaque is not None:
        challenge += f', opaque="{opaque}"'
    challenge += f', algorithm="{ALGORITHM}", qop="{QOP}"'
    return challenge


class DigestAuthenticator:
    """Verifies ``Authorization: Digest`` credentials.

    The realm and opaque value are fixed at construction and shared by
    every request. A fresh nonce is issued with each challenge; nonces are
    not remembered, so a captured response can be replayed for as long as
    the user's password stays the same.

    Args:
        lookup: Returns the stored password (or a ``StoredCredential``) for
            a username, or ``None`` if the user is unknown.
        realm: Protection space sent in challenges and required in requests.
        opaque: Optional value clients must echo back unchanged.
    """

    def __init__(
        self,
        lookup: CredentialLookup,
        *,
        realm: str = DEFAULT_REALM,
        opaque: str | None = None,
    ) -> None:
        if not realm:
            raise ValueError("realm must not be empty")
        if '"' in realm:
            raise ValueError("realm must not contain double quotes")
        if opaque is not None and '"' in opaque:
            raise ValueError("opaque must not contain double quotes")
        self._lookup = lookup
        self._realm = realm
        self._opaque = opaque

    @property
    def realm(self) -> str:
        return self._realm

    @property
    def opaque(self) -> str | None:
        return self._opaque

    def challenge_headers(self) -> dict[str, str]:
        """Challenge headers with a newly generated nonce."""
        return {WWW_AUTHENTICATE: build_digest_challenge(self._realm, generate_nonce(), self._opaque)}

    async def authenticate(self, request: AuthRequest) -> AuthOutcome:
        """Run one Digest verification for ``request``."""
        try:
            return await self._authenticate(request)
        except Exception:
            logger.exception("Unexpected error during Digest authentication")
            return Malformed()

    async def _authenticate(self, request: AuthRequest) -> AuthOutcome:
        header = request.header("authorization")
        if not header:
            return Pass(headers=self.challenge_headers())
        scheme, _, raw_params = header.partition(" ")
        if scheme != SCHEME:
            return Pass(headers=self.challenge_headers())

        params = parse_digest_params(raw_params)
        if not params:
            logger.debug("Digest header carried no parameters")
            return Malformed()

        missing = [name for name in REQUIRED_FIELDS if name not in params]
        if missing:
            logger.debug("Digest header missing parameters: %s", ", ".join(missing))
            return Malformed()

        mismatch = self._validate(params, request)
        if mismatch is not None:
            logger.debug("Digest parameter mismatch: %s", mismatch)
            return Malformed()

        username = params["username"]
        result = await call_collaborator(self._lookup, username)
        stored = StoredCredential.from_lookup(username, result, PROVIDER)
        if stored is None:
            logger.debug("Digest lookup found no credentials for %r", username)
            return Unauthorized(headers=self.challenge_headers())

        expected = digest_response(
            username=username,
            realm=params["realm"],
            password=stored.secret,
            method=request.method,
            uri=params["uri"],
            nonce=params["nonce"],
            nc=params["nc"],
            cnonce=params["cnonce"],
            qop=params["qop"],
        )
        if expected != params["response"]:
            logger.debug("Digest response mismatch for %r", username)
            return Unauthorized(headers=self.challenge_headers())

        return Authenticated(identity=stored.identity)

    def _validate(self, params: dict[str, str], request: AuthRequest) -> str | None:
        """Return the name of the first parameter that does not match, if any."""
        if params["realm"] != self._realm:
            return "realm"
        if params["uri"] != request.target:
            return "uri"
        if params["qop"] != QOP:
            return "qop"
        if self._opaque is not None and params.get("opaque") != self._opaque:
            return "opaque"
        if "algorithm" in params and params["algorithm"] != ALGORITHM:
            return "algorithm"
        return None


# Verify protocol compliance at import time
assert isinstance(DigestAuthenticator.__new__(DigestAuthenticator), Authenticator)
