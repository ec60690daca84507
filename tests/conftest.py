"""Shared test fixtures for apcore-httpauth tests."""

from __future__ import annotations

import pytest

from apcore_httpauth.auth.digest import digest_response
from apcore_httpauth.auth.request import AuthRequest

# ---------------------------------------------------------------------------
# Credential store used across tests
# ---------------------------------------------------------------------------

USERS = {"John": "12345", "Mary": "qwerasdf"}

REALM = "test"
OPAQUE = "0a0b0c0d"
DATA_PATH = "/private/api/data"


class CountingLookup:
    """Async credential lookup that records every username it is asked for."""

    def __init__(self, users: dict[str, str] | None = None) -> None:
        self.users = users if users is not None else dict(USERS)
        self.calls: list[str] = []

    async def __call__(self, username: str) -> str | None:
        self.calls.append(username)
        return self.users.get(username)


def digest_header(
    *,
    username: str = "Mary",
    password: str = "qwerasdf",
    realm: str = REALM,
    method: str = "GET",
    uri: str = DATA_PATH,
    nonce: str = "dcd98b7102dd2f0e8b11d0f600bfb0c093",
    nc: str = "00000001",
    cnonce: str = "0a4f113b",
    qop: str = "auth",
    opaque: str | None = OPAQUE,
    algorithm: str | None = None,
    response: str | None = None,
) -> str:
    """Build an ``Authorization: Digest`` value the way a client would."""
    if response is None:
        response = digest_response(
            username=username,
            realm=realm,
            password=password,
            method=method,
            uri=uri,
            nonce=nonce,
            nc=nc,
            cnonce=cnonce,
            qop=qop,
        )
    parts = [
        f'username="{username}"',
        f'realm="{realm}"',
        f'nonce="{nonce}"',
        f'uri="{uri}"',
        f"qop={qop}",
        f"nc={nc}",
        f'cnonce="{cnonce}"',
        f'response="{response}"',
    ]
    if opaque is not None:
        parts.append(f'opaque="{opaque}"')
    if algorithm is not None:
        parts.append(f'algorithm="{algorithm}"')
    return "Digest " + ", ".join(parts)


def make_request(
    authorization: str | None = None,
    *,
    method: str = "GET",
    path: str = DATA_PATH,
    query: str | None = None,
    user_info: str | None = None,
) -> AuthRequest:
    headers = {"authorization": authorization} if authorization is not None else {}
    return AuthRequest(method=method, path=path, query=query, headers=headers, user_info=user_info)


@pytest.fixture
def counting_lookup() -> CountingLookup:
    return CountingLookup()
