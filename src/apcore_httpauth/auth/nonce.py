"""Server nonce generation for Digest challenges."""

from __future__ import annotations

import logging
import secrets

logger = logging.getLogger(__name__)

NONCE_BYTES = 16

# Returned only when the system entropy source fails. Every challenge issued
# in that state carries the same nonce, which keeps requests flowing at the
# cost of a predictable value.
FALLBACK_NONCE = "0a0b0c0d0e0f1a1b1c1d1e1f01234567"


def generate_nonce() -> str:
    """Return 16 random bytes as 32 lowercase hex characters."""
    try:
        return secrets.token_bytes(NONCE_BYTES).hex()
    except (OSError, NotImplementedError):
        logger.warning("Entropy source unavailable, using fallback Digest nonce", exc_info=True)
        return FALLBACK_NONCE
