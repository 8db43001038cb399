"""Bearer token permission for GraphQL operations."""

from typing import Any

from strawberry.permission import BasePermission
from strawberry.types import Info

from src.bookshelf.core.security import verify_bearer_token


class BearerTokenPermission(BasePermission):
    """Require the shared bearer token on the operations configured as protected.

    Attached to every root field; fields not listed in
    ``auth.protected_operations`` pass through unchecked.
    """

    message = "Authentication failed"

    def has_permission(self, source: Any, info: Info, **kwargs: Any) -> bool:
        auth = info.context.auth
        if info.field_name not in auth.protected_operations:
            return True

        # Raises AuthorizationError with the specific reason
        verify_bearer_token(info.context.authorization, auth.token, auth.scheme)
        return True
