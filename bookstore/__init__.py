# Bookstore catalog and account services
from .domain import Book, User
from .errors import BookstoreError, InvalidArgumentError, SeedDataError
from .events import Event, EventBus, ActivityTracker
from .services import CatalogService, AccountService
from .seed import load_seed_books, seed_catalog

__all__ = [
    'Book', 'User',
    'BookstoreError', 'InvalidArgumentError', 'SeedDataError',
    'Event', 'EventBus', 'ActivityTracker',
    'CatalogService', 'AccountService',
    'load_seed_books', 'seed_catalog',
]
