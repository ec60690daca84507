"""ASGI middleware that runs HTTP authenticators and exposes the identity via ContextVar."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from contextvars import ContextVar
from typing import Any

from apcore import Identity
from starlette.responses import Response

from apcore_httpauth.auth.outcome import WWW_AUTHENTICATE, Authenticated, AuthOutcome, Malformed, Pass
from apcore_httpauth.auth.protocol import Authenticator
from apcore_httpauth.auth.request import AuthRequest

logger = logging.getLogger(__name__)

# Bridge between ASGI middleware and the wrapped application
auth_identity_var: ContextVar[Identity | None] = ContextVar("auth_identity", default=None)


class AuthMiddleware:
    """ASGI middleware that authenticates requests and sets ``auth_identity_var``.

    Authenticators are tried in order. The first ``Authenticated`` outcome
    wins; ``Unauthorized`` and ``Malformed`` end the request immediately;
    ``Pass`` moves on to the next authenticator. When every authenticator
    passes, the collected challenges are returned with a 401.

    Args:
        app: The ASGI application to wrap.
        authenticators: ``Authenticator`` implementations, in priority order.
        exempt_paths: Exact paths that bypass authentication.
        exempt_prefixes: Path prefixes that bypass authentication.
        require_auth: If True, requests no authenticator accepted receive 401.
            If False, they proceed without identity (permissive mode).
    """

    def __init__(
        self,
        app: Any,
        authenticators: Sequence[Authenticator],
        *,
        exempt_paths: set[str] | None = None,
        exempt_prefixes: set[str] | None = None,
        require_auth: bool = True,
    ) -> None:
        if not authenticators:
            raise ValueError("At least one authenticator is required")
        self._app = app
        self._authenticators = tuple(authenticators)
        self._exempt_paths = exempt_paths if exempt_paths is not None else {"/health"}
        self._exempt_prefixes = exempt_prefixes or set()
        self._require_auth = require_auth

    def _is_exempt(self, path: str) -> bool:
        """Check if a path is exempt from authentication."""
        if path in self._exempt_paths:
            return True
        return any(path.startswith(prefix) for prefix in self._exempt_prefixes)

    async def __call__(self, scope: dict[str, Any], receive: Any, send: Any) -> None:
        if scope["type"] != "http":
            await self._app(scope, receive, send)
            return

        path = scope.get("path", "")
        if self._is_exempt(path):
            await self._app(scope, receive, send)
            return

        request = AuthRequest.from_scope(scope)
        identity: Identity | None = None
        challenges: list[str] = []
        for authenticator in self._authenticators:
            outcome = await authenticator.authenticate(request)
            if isinstance(outcome, Authenticated):
                identity = outcome.identity
                break
            if isinstance(outcome, Pass):
                if outcome.headers and WWW_AUTHENTICATE in outcome.headers:
                    challenges.append(outcome.headers[WWW_AUTHENTICATE])
                continue
            logger.warning("Authentication failed for %s (status %d)", path, outcome.status_code)
            await self._reject(outcome, scope, receive, send)
            return

        if identity is None and self._require_auth:
            logger.warning("Authentication failed for %s (no credentials accepted)", path)
            await self._challenge(challenges, scope, receive, send)
            return

        token = auth_identity_var.set(identity)
        try:
            await self._app(scope, receive, send)
        finally:
            auth_identity_var.reset(token)

    @staticmethod
    async def _reject(outcome: AuthOutcome, scope: dict[str, Any], receive: Any, send: Any) -> None:
        """Send the status and challenge of a terminal failure."""
        headers = None if isinstance(outcome, Malformed) else outcome.headers
        response = Response(status_code=outcome.status_code, headers=headers)
        await response(scope, receive, send)

    @staticmethod
    async def _challenge(challenges: list[str], scope: dict[str, Any], receive: Any, send: Any) -> None:
        """Send a 401 carrying one ``WWW-Authenticate`` line per scheme."""
        response = Response(status_code=401)
        for challenge in challenges:
            response.headers.append(WWW_AUTHENTICATE, challenge)
        await response(scope, receive, send)
