"""Shared bearer token checks for the GraphQL gateway."""

import base64
import hmac
import secrets

from src.bookshelf.core.errors import AuthorizationError


def generate_secure_token(length: int = 32) -> str:
    """Generate a cryptographically secure random token.

    Args:
        length: Number of random bytes to generate (default 32)

    Returns:
        URL-safe base64 encoded token, suitable as ``AUTH_TOKEN``
    """
    return (
        base64.urlsafe_b64encode(secrets.token_bytes(length))
        .decode("utf-8")
        .rstrip("=")
    )


def extract_bearer_token(authorization: str | None, scheme: str = "Bearer") -> str | None:
    """Return the credential part of an ``Authorization`` header.

    Returns None when the header is absent or blank. A header with another
    scheme, or with the scheme only, yields an empty string so the caller can
    tell "missing" from "wrong".
    """
    if authorization is None or not authorization.strip():
        return None
    parts = authorization.strip().split(None, 1)
    if len(parts) != 2 or parts[0].lower() != scheme.lower():
        return ""
    return parts[1].strip()


def verify_bearer_token(
    authorization: str | None,
    expected_token: str | None,
    scheme: str = "Bearer",
) -> None:
    """Compare the caller's bearer credential with the pre-shared token.

    Raises:
        AuthorizationError: the header is missing, the credential does not
            match, or no token is configured at all.
    """
    supplied = extract_bearer_token(authorization, scheme)
    if supplied is None:
        raise AuthorizationError("Authentication header is missing")

    if not expected_token:
        # Fail closed: a protected operation without a configured secret
        raise AuthorizationError("Authentication failed")

    if not hmac.compare_digest(supplied.encode("utf-8"), expected_token.encode("utf-8")):
        raise AuthorizationError("Authentication failed")
