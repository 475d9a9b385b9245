import logging
import sys
import os

sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from bookstore import (
    AccountService, ActivityTracker, CatalogService, EventBus, User,
    load_seed_books, seed_catalog,
)
from bookstore import config

logger = logging.getLogger("app")


def build_store(seed_file=None):
    """Create a catalog and account service sharing one event bus"""
    bus = EventBus()
    tracker = ActivityTracker(bus)
    catalog = CatalogService(bus)
    accounts = AccountService(catalog, bus)
    seed_catalog(catalog, load_seed_books(seed_file or config.SEED_FILE))
    return catalog, accounts, tracker


def run_demo():
    catalog, accounts, tracker = build_store()

    user = User("JohnDoe", "password", "johndoe@example.com")
    accounts.register_user(user)

    session = accounts.login_user("JohnDoe", "password")
    if session is None:
        logger.error("Login failed for JohnDoe")
        return 1

    for book in catalog.search_book("1984"):
        accounts.purchase_book(session, book)
        accounts.add_book_review(session, book, "Great book!")

    logger.info("Catalog holds %d book(s); %d registered user(s)", len(catalog), len(accounts))
    logger.info("Most purchased: %s", tracker.top_books())
    logger.info("Activity: %s", tracker.state['user_activity'])
    return 0


if __name__ == "__main__":
    config.configure_logging()
    sys.exit(run_demo())
