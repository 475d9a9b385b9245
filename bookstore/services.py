import logging
import threading
from typing import Dict, List, Optional, Tuple

from .domain import Book, User
from .events import (
    EventBus, BOOK_ADDED, BOOK_REMOVED, USER_REGISTERED,
    PROFILE_UPDATED, BOOK_PURCHASED, REVIEW_ADDED,
)
from .filters import (
    create_title_filter, create_author_filter, create_genre_filter,
    combine_filters, iter_matching,
)
from .validators import (
    require, validate_registration, validate_profile_update,
    validate_purchase, validate_review,
)

logger = logging.getLogger(__name__)


def _book_payload(book: Book) -> Dict[str, str]:
    return {
        'title': book.title,
        'author': book.author,
        'genre': book.genre,
        'price': str(book.price),
    }


class CatalogService:
    """
    Owns the set of books the store knows about.
    Books are indexed by their value identity, in insertion order.
    """

    def __init__(self, event_bus: Optional[EventBus] = None):
        self.event_bus = event_bus or EventBus()
        self._books: Dict[Tuple, Book] = {}
        self._lock = threading.RLock()

    def add_book(self, book: Book) -> bool:
        """Add a book; False if an equal book is already present"""
        require(book, "Book")
        with self._lock:
            if book.key in self._books:
                logger.debug("Book already in catalog: %s", book.title)
                return False
            self._books[book.key] = book

        logger.info("Added book %r by %s", book.title, book.author)
        self.event_bus.publish(BOOK_ADDED, _book_payload(book))
        return True

    def remove_book(self, book: Book) -> bool:
        """Remove an equal book; False if there is none"""
        require(book, "Book")
        with self._lock:
            if self._books.pop(book.key, None) is None:
                logger.debug("Book not in catalog: %s", book.title)
                return False

        logger.info("Removed book %r by %s", book.title, book.author)
        self.event_bus.publish(BOOK_REMOVED, _book_payload(book))
        return True

    def search_book(self, keyword: str) -> List[Book]:
        """Books whose title contains the keyword.

        Matching is a case-sensitive substring test, so an empty keyword
        matches every title and returns the whole catalog.
        """
        require(keyword, "Keyword")
        with self._lock:
            return list(iter_matching(self._books.values(), create_title_filter(keyword)))

    def find_books(self, author: Optional[str] = None, genre: Optional[str] = None) -> List[Book]:
        """Books by author (substring) and/or exact genre; no criteria returns all"""
        filters = []
        if author is not None:
            filters.append(create_author_filter(author))
        if genre is not None:
            filters.append(create_genre_filter(genre))

        with self._lock:
            return list(iter_matching(self._books.values(), combine_filters(*filters)))

    def list_books(self) -> List[Book]:
        with self._lock:
            return list(self._books.values())

    def __contains__(self, book) -> bool:
        if not isinstance(book, Book):
            return False
        with self._lock:
            return book.key in self._books

    def __len__(self) -> int:
        return len(self._books)


class AccountService:
    """
    Owns the registered users, keyed by username.
    Purchases are checked against the catalog the service was built with.
    """

    def __init__(self, catalog: CatalogService, event_bus: Optional[EventBus] = None):
        self.catalog = catalog
        self.event_bus = event_bus or catalog.event_bus
        self._users: Dict[str, User] = {}
        self._lock = threading.RLock()

    def register_user(self, user: User) -> bool:
        require(user, "User")
        with self._lock:
            result = validate_registration(user, self._users)
            if result.is_left():
                logger.debug("Registration rejected: %s", result.error)
                return False
            self._users[user.username] = user

        logger.info("Registered user %s", user.username)
        self.event_bus.publish(USER_REGISTERED, {'username': user.username, 'email': user.email})
        return True

    def login_user(self, username: str, password: str) -> Optional[User]:
        """The registered user if username and password both match, else None"""
        require(username, "Username")
        with self._lock:
            user = self._users.get(username)
        if user is None or user.password != password:
            logger.debug("Login failed for %s", username)
            return None
        return user

    def update_user_profile(self, user: User, new_username: str,
                            new_password: str, new_email: str) -> bool:
        """Change a user's username, password and email together.

        Fails without changing anything when the new username is empty or held
        by another registered user, or the email is malformed. A registered
        user is re-indexed under the new username.
        """
        require(user, "User")
        require(new_username, "Username")
        require(new_password, "Password")
        require(new_email, "Email")

        with self._lock:
            result = validate_profile_update(user, new_username, new_email, self._users)
            if result.is_left():
                logger.debug("Profile update rejected: %s", result.error)
                return False

            old_username = user.username
            registered = self._users.get(old_username) is user
            if registered:
                del self._users[old_username]
                self._users[new_username] = user

            user.username = new_username
            user.password = new_password
            user.email = new_email

        logger.info("Updated profile %s -> %s", old_username, new_username)
        self.event_bus.publish(PROFILE_UPDATED, {
            'old_username': old_username,
            'username': new_username,
            'email': new_email,
        })
        return True

    def purchase_book(self, user: User, book: Book) -> bool:
        require(user, "User")
        require(book, "Book")
        with self._lock:
            result = validate_purchase(book, self.catalog)
            if result.is_left():
                logger.debug("Purchase rejected: %s", result.error)
                return False
            user.purchased_books.add(book)

        logger.info("User %s purchased %r", user.username, book.title)
        self.event_bus.publish(BOOK_PURCHASED, {'username': user.username, **_book_payload(book)})
        return True

    def add_book_review(self, user: User, book: Book, review_text: str) -> bool:
        """Record a review; only books the user has purchased can be reviewed"""
        require(user, "User")
        require(book, "Book")
        require(review_text, "Review")
        with self._lock:
            result = validate_review(user, book, review_text)
            if result.is_left():
                logger.debug("Review rejected: %s", result.error)
                return False
            user.reviews.setdefault(book, []).append(review_text)

        logger.info("User %s reviewed %r", user.username, book.title)
        self.event_bus.publish(REVIEW_ADDED, {
            'username': user.username,
            'title': book.title,
            'review_text': review_text,
        })
        return True

    def get_user(self, username: str) -> Optional[User]:
        with self._lock:
            return self._users.get(username)

    def __contains__(self, username) -> bool:
        with self._lock:
            return username in self._users

    def __len__(self) -> int:
        return len(self._users)
