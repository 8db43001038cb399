"""User-facing notifications, injected wherever messages are emitted."""

from dataclasses import dataclass
from typing import Literal, Protocol

from rich.console import Console
from rich.markup import escape

Severity = Literal["success", "error", "info", "warn"]

DEFAULT_LIFE_SECONDS = 3.0


@dataclass(frozen=True)
class Notification:
    severity: Severity
    summary: str
    detail: str | None = None
    life_seconds: float = DEFAULT_LIFE_SECONDS


class Notifier(Protocol):
    """Anything that can show a notification to the user."""

    def notify(self, notification: Notification) -> None: ...


_STYLES: dict[str, str] = {
    "success": "green",
    "error": "red",
    "info": "cyan",
    "warn": "yellow",
}

_ICONS: dict[str, str] = {
    "success": "✅",
    "error": "❌",
    "info": "ℹ️ ",
    "warn": "⚠️ ",
}


class ConsoleNotifier:
    """Prints notifications with rich; a terminal line needs no dismissal."""

    def __init__(self, console: Console | None = None) -> None:
        self._console = console or Console()

    def notify(self, notification: Notification) -> None:
        style = _STYLES[notification.severity]
        line = f"{_ICONS[notification.severity]} [bold]{escape(notification.summary)}[/bold]"
        if notification.detail:
            line += f": {escape(notification.detail)}"
        self._console.print(f"[{style}]{line}[/{style}]")
