"""Shared helpers for CLI commands."""

from pathlib import Path

from rich.console import Console

console = Console()


def get_project_root() -> Path:
    """Directory holding config.yaml and pyproject.toml."""
    return Path(__file__).resolve().parents[2]
