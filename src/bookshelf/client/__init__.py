"""Client side of the catalog: gateway client, reducer store and sync controller."""

from .graphql_client import BookGatewayClient
from .notifier import ConsoleNotifier, Notification, Notifier
from .store import BookState, filter_books, reduce
from .sync import BookSyncController

__all__ = [
    "BookGatewayClient",
    "BookState",
    "BookSyncController",
    "ConsoleNotifier",
    "Notification",
    "Notifier",
    "filter_books",
    "reduce",
]
