import json
import logging
from pathlib import Path
from typing import Iterable, List, Union

from .domain import Book
from .errors import BookstoreError, SeedDataError

logger = logging.getLogger(__name__)


def load_seed_books(path: Union[str, Path]) -> List[Book]:
    """Load books from a JSON seed file.

    The file holds a list of objects with ``title``, ``author``, ``genre``
    and ``price``. A missing file means there is nothing to seed.
    """
    path = Path(path)
    try:
        with path.open('r', encoding='utf-8') as f:
            data = json.load(f)
    except FileNotFoundError:
        logger.warning("Seed file not found: %s", path)
        return []
    except json.JSONDecodeError as e:
        raise SeedDataError(f"Seed file {path} is not valid JSON: {e}") from e

    if not isinstance(data, list):
        raise SeedDataError(f"Seed file {path} must contain a list of books")

    books = []
    for index, entry in enumerate(data):
        try:
            books.append(Book(
                title=str(entry['title']),
                author=str(entry['author']),
                genre=str(entry['genre']),
                price=entry['price'],
            ))
        except (KeyError, TypeError, BookstoreError) as e:
            raise SeedDataError(f"Bad seed entry #{index} in {path}: {e}") from e
    return books


def seed_catalog(catalog, books: Iterable[Book]) -> int:
    """Add books to the catalog, returning how many were new"""
    added = sum(1 for book in books if catalog.add_book(book))
    logger.info("Seeded catalog with %d new book(s)", added)
    return added
