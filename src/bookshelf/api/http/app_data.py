from dataclasses import dataclass

from src.bookshelf.core.services import DbClientService
from src.bookshelf.entities.service.book import BookRepository
from src.bookshelf.runtime.config.config_data import AuthConfig


@dataclass
class ApplicationDependencies:
    database_service: DbClientService
    book_repository: BookRepository
    auth: AuthConfig
