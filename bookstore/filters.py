# bookstore/filters.py
from typing import Callable, Iterable, Iterator

from .domain import Book


def create_title_filter(keyword: str) -> Callable[[Book], bool]:
    """Create a closure matching titles that contain the keyword (case-sensitive)"""

    def title_filter(book: Book) -> bool:
        return keyword in book.title

    return title_filter


def create_author_filter(author_name: str) -> Callable[[Book], bool]:
    def author_filter(book: Book) -> bool:
        return author_name in book.author

    return author_filter


def create_genre_filter(genre: str) -> Callable[[Book], bool]:
    def genre_filter(book: Book) -> bool:
        return book.genre == genre

    return genre_filter


def combine_filters(*filters: Callable[[Book], bool]) -> Callable[[Book], bool]:
    """Closure that matches only when every filter matches"""

    def combined_filter(book: Book) -> bool:
        return all(filter_func(book) for filter_func in filters)

    return combined_filter


def iter_matching(books: Iterable[Book], predicate: Callable[[Book], bool]) -> Iterator[Book]:
    """Lazily yield books accepted by the predicate, keeping input order"""
    for book in books:
        if predicate(book):
            yield book
