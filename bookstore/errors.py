class BookstoreError(Exception):
    """Base class for errors raised by the bookstore services."""


class InvalidArgumentError(BookstoreError, ValueError):
    """Raised when a caller passes a missing or malformed required argument."""


class SeedDataError(BookstoreError):
    """Raised when a seed file cannot be turned into books."""
