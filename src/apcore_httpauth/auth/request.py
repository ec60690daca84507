"""AuthRequest: the request primitives an authenticator needs."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from starlette.datastructures import URL


def extract_headers(scope: dict[str, Any]) -> dict[str, str]:
    """Extract headers from ASGI scope as a lowercase-key dict."""
    result: dict[str, str] = {}
    for key_bytes, value_bytes in scope.get("headers", []):
        result[key_bytes.decode("latin-1").lower()] = value_bytes.decode("latin-1")
    return result


@dataclass(frozen=True)
class AuthRequest:
    """Read-only view of an inbound request.

    Attributes:
        method: HTTP method, e.g. ``"GET"``.
        path: Request path exactly as received (not percent-decoded).
        query: Raw query string without the leading ``?``, or ``None``.
        headers: Lowercase header names mapped to their values.
        user_info: ``user:password`` taken from the request URL, if any.
    """

    method: str
    path: str
    query: str | None = None
    headers: dict[str, str] = field(default_factory=dict)
    user_info: str | None = None

    def header(self, name: str) -> str | None:
        """Return a header value by case-insensitive name."""
        return self.headers.get(name.lower())

    @property
    def target(self) -> str:
        """Path plus ``?query`` when a query is present."""
        if self.query:
            return f"{self.path}?{self.query}"
        return self.path

    @classmethod
    def from_scope(cls, scope: dict[str, Any]) -> AuthRequest:
        """Build from an ASGI HTTP scope.

        ``raw_path`` is preferred over ``path`` so that the Digest ``uri``
        comparison sees the target the client actually sent.
        """
        raw_path = scope.get("raw_path")
        if raw_path:
            # Some servers leave the query string attached to raw_path.
            path = raw_path.split(b"?", 1)[0].decode("latin-1")
        else:
            path = scope.get("path", "")
        query_bytes = scope.get("query_string", b"")
        return cls(
            method=scope.get("method", "GET"),
            path=path,
            query=query_bytes.decode("latin-1") or None,
            headers=extract_headers(scope),
        )

    @classmethod
    def from_url(
        cls,
        method: str,
        url: str,
        headers: dict[str, str] | None = None,
    ) -> AuthRequest:
        """Build from an absolute URL, keeping any embedded user-info."""
        parsed = URL(url)
        user_info = None
        if parsed.username:
            user_info = parsed.username
            if parsed.password is not None:
                user_info = f"{user_info}:{parsed.password}"
        return cls(
            method=method,
            path=parsed.path,
            query=parsed.query or None,
            headers={k.lower(): v for k, v in (headers or {}).items()},
            user_info=user_info,
        )
