"""apcore-httpauth: HTTP Basic and Digest authentication for ASGI applications."""

from __future__ import annotations

import logging

from apcore_httpauth.auth import (
    AuthMiddleware,
    Authenticated,
    Authenticator,
    AuthOutcome,
    AuthRequest,
    BasicAuthenticator,
    DigestAuthenticator,
    LookupStrategy,
    LRUCredentialCache,
    Malformed,
    Pass,
    StoredCredential,
    Unauthorized,
    VerifyStrategy,
    auth_identity_var,
)

__all__ = [
    # Authenticators
    "Authenticator",
    "BasicAuthenticator",
    "DigestAuthenticator",
    "LookupStrategy",
    "VerifyStrategy",
    # Outcomes
    "AuthOutcome",
    "Authenticated",
    "Unauthorized",
    "Malformed",
    "Pass",
    # Collaborators
    "StoredCredential",
    "LRUCredentialCache",
    # ASGI integration
    "AuthMiddleware",
    "AuthRequest",
    "auth_identity_var",
    "configure_logging",
]

__version__ = "0.1.0"

logger = logging.getLogger(__name__)

_VALID_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


def configure_logging(log_level: str) -> None:
    """Set the log level for the apcore_httpauth logger (e.g. "DEBUG", "INFO").

    Raises:
        ValueError: If ``log_level`` is not a known level name.
    """
    if log_level.upper() not in _VALID_LEVELS:
        raise ValueError(f"Unknown log level: {log_level!r}. Valid: {sorted(_VALID_LEVELS)}")
    logging.getLogger("apcore_httpauth").setLevel(getattr(logging, log_level.upper()))
