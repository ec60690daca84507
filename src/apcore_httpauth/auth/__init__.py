"""HTTP Basic and Digest authenticators."""

from apcore_httpauth.auth.basic import BasicAuthenticator, LookupStrategy, VerifyStrategy
from apcore_httpauth.auth.cache import LRUCredentialCache, credential_cache_key
from apcore_httpauth.auth.digest import DigestAuthenticator, build_digest_challenge, digest_response
from apcore_httpauth.auth.grammar import parse_digest_params
from apcore_httpauth.auth.middleware import AuthMiddleware, auth_identity_var
from apcore_httpauth.auth.nonce import generate_nonce
from apcore_httpauth.auth.outcome import Authenticated, AuthOutcome, Malformed, Pass, Unauthorized
from apcore_httpauth.auth.protocol import (
    Authenticator,
    CredentialCache,
    CredentialLookup,
    CredentialVerifier,
    StoredCredential,
)
from apcore_httpauth.auth.request import AuthRequest, extract_headers

__all__ = [
    "Authenticator",
    "BasicAuthenticator",
    "LookupStrategy",
    "VerifyStrategy",
    "DigestAuthenticator",
    "AuthMiddleware",
    "auth_identity_var",
    "AuthRequest",
    "extract_headers",
    "AuthOutcome",
    "Authenticated",
    "Unauthorized",
    "Malformed",
    "Pass",
    "CredentialLookup",
    "CredentialVerifier",
    "CredentialCache",
    "StoredCredential",
    "LRUCredentialCache",
    "credential_cache_key",
    "parse_digest_params",
    "generate_nonce",
    "digest_response",
    "build_digest_challenge",
]
