"""Serve a demo Starlette app protected by HTTP Digest and Basic authentication.

Usage (from the project root):
    python examples/run.py

Then test with curl:
    curl -i http://127.0.0.1:8000/health                                   # 200 (exempt)
    curl -i http://127.0.0.1:8000/private/api/data                         # 401, two challenges
    curl -i -u Mary:qwerasdf http://127.0.0.1:8000/private/api/data        # 200 via Basic
    curl -i --digest -u Mary:qwerasdf http://127.0.0.1:8000/private/api/data  # 200 via Digest
"""

import logging

import uvicorn
from starlette.applications import Starlette
from starlette.middleware import Middleware
from starlette.responses import JSONResponse
from starlette.routing import Route

from apcore_httpauth import (
    AuthMiddleware,
    BasicAuthenticator,
    DigestAuthenticator,
    LookupStrategy,
    LRUCredentialCache,
    auth_identity_var,
    configure_logging,
)

USERS = {"John": "12345", "Mary": "qwerasdf"}


async def lookup(username: str) -> str | None:
    return USERS.get(username)


async def data(request):
    identity = auth_identity_var.get()
    return JSONResponse({"user": identity.id, "provider": identity.attrs.get("provider")})


async def health(request):
    return JSONResponse({"status": "ok"})


logging.basicConfig(format="%(asctime)s %(levelname)s %(name)s: %(message)s")
configure_logging("DEBUG")

app = Starlette(
    routes=[
        Route("/private/api/data", endpoint=data),
        Route("/health", endpoint=health),
    ],
    middleware=[
        Middleware(
            AuthMiddleware,
            authenticators=[
                DigestAuthenticator(lookup, realm="test", opaque="0a0b0c0d"),
                BasicAuthenticator(LookupStrategy(lookup, cache=LRUCredentialCache(ttl=300)), realm="test"),
            ],
        )
    ],
)

if __name__ == "__main__":
    uvicorn.run(app, host="127.0.0.1", port=8000, log_level="info")
