"""Tests for Digest nonce generation."""

from __future__ import annotations

import logging
import re
from unittest.mock import patch

import pytest

from apcore_httpauth.auth.nonce import FALLBACK_NONCE, generate_nonce


class TestGenerateNonce:
    def test_is_32_lowercase_hex_chars(self):
        assert re.fullmatch(r"[0-9a-f]{32}", generate_nonce())

    def test_values_differ(self):
        assert len({generate_nonce() for _ in range(20)}) == 20


class TestEntropyFailure:
    def test_falls_back_to_constant(self):
        with patch("apcore_httpauth.auth.nonce.secrets.token_bytes", side_effect=OSError("no entropy")):
            assert generate_nonce() == FALLBACK_NONCE

    def test_fallback_is_logged(self, caplog: pytest.LogCaptureFixture):
        with (
            caplog.at_level(logging.WARNING, logger="apcore_httpauth.auth.nonce"),
            patch("apcore_httpauth.auth.nonce.secrets.token_bytes", side_effect=NotImplementedError),
        ):
            generate_nonce()
        assert any("fallback Digest nonce" in r.message for r in caplog.records)

    def test_fallback_is_well_formed(self):
        assert re.fullmatch(r"[0-9a-f]{32}", FALLBACK_NONCE)
