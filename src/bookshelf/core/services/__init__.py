"""Core services exports."""

from .database.db_client import DbClientService
from .database.db_manage import DbManageService

__all__ = [
    "DbClientService",
    "DbManageService",
]
