"""Unit tests for bearer token checks."""

import pytest

from src.bookshelf.core.errors import AuthorizationError
from src.bookshelf.core.security import (
    extract_bearer_token,
    generate_secure_token,
    verify_bearer_token,
)


class TestExtractBearerToken:
    def test_missing_header(self):
        assert extract_bearer_token(None) is None
        assert extract_bearer_token("   ") is None

    def test_bearer_credential(self):
        assert extract_bearer_token("Bearer abc123") == "abc123"

    def test_scheme_is_case_insensitive(self):
        assert extract_bearer_token("bearer abc123") == "abc123"

    def test_wrong_scheme_yields_empty_string(self):
        assert extract_bearer_token("Basic dXNlcjpwYXNz") == ""
        assert extract_bearer_token("Bearer") == ""


class TestVerifyBearerToken:
    """Shared-secret comparison used by protected operations."""

    def test_matching_token_passes(self):
        verify_bearer_token("Bearer secret", "secret")

    def test_missing_header_is_rejected(self):
        with pytest.raises(AuthorizationError, match="missing"):
            verify_bearer_token(None, "secret")

    def test_mismatch_is_rejected(self):
        with pytest.raises(AuthorizationError, match="Authentication failed"):
            verify_bearer_token("Bearer wrong", "secret")

    def test_wrong_scheme_is_rejected(self):
        with pytest.raises(AuthorizationError):
            verify_bearer_token("Basic secret", "secret")

    def test_unconfigured_token_fails_closed(self):
        with pytest.raises(AuthorizationError):
            verify_bearer_token("Bearer anything", None)
        with pytest.raises(AuthorizationError):
            verify_bearer_token("Bearer ", "")


class TestGenerateSecureToken:
    def test_tokens_are_unique_and_url_safe(self):
        first = generate_secure_token()
        second = generate_secure_token()

        assert first != second
        assert "=" not in first
        assert all(c.isalnum() or c in "-_" for c in first)
        assert len(first) >= 32
