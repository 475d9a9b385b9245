import sys
import os
import time

import pytest

sys.path.append(os.path.join(os.path.dirname(__file__), '..'))

from bookstore.domain import Book, User
from bookstore.events import (
    Event, EventBus, ActivityTracker,
    BOOK_ADDED, BOOK_PURCHASED, REVIEW_ADDED,
)
from bookstore.services import CatalogService, AccountService


@pytest.fixture
def event_bus():
    return EventBus()


@pytest.fixture
def store(event_bus):
    """Catalog, accounts and tracker wired to one bus"""
    tracker = ActivityTracker(event_bus)
    catalog = CatalogService(event_bus)
    accounts = AccountService(catalog)
    return catalog, accounts, tracker


def test_event_bus_subscription_workflow(event_bus):
    received_events = []
    event_bus.subscribe("TEST_EVENT", received_events.append)

    event_bus.publish("TEST_EVENT", {"message": "test_data", "value": 42})

    assert len(received_events) == 1
    assert received_events[0].name == "TEST_EVENT"
    assert received_events[0].payload["value"] == 42


def test_unsubscribe_stops_delivery(event_bus):
    calls = []
    event_bus.subscribe("E", calls.append)
    event_bus.unsubscribe("E", calls.append)
    event_bus.publish("E", {})
    assert calls == []


def test_failing_handler_does_not_block_others(event_bus, caplog):
    """A broken subscriber is logged and the rest still run"""
    calls = []

    def broken(event):
        raise RuntimeError("boom")

    event_bus.subscribe("E", broken)
    event_bus.subscribe("E", calls.append)
    event_bus.publish("E", {"x": 1})

    assert len(calls) == 1
    assert "failed on E" in caplog.text


def test_zero_history_limit_keeps_nothing():
    bus = EventBus(history_limit=0)
    bus.publish("E", {})
    assert bus.get_event_history() == []


def test_history_is_bounded():
    bus = EventBus(history_limit=3)
    for i in range(5):
        bus.publish("E", {"i": i})

    assert [e.payload["i"] for e in bus.get_event_history()] == [2, 3, 4]
    bus.clear_history()
    assert bus.get_event_history() == []


def test_tracker_counts_purchases_and_reviews(store):
    catalog, accounts, tracker = store
    book = Book("1984", "George Orwell", "Dystopian", 9.99)
    user = User("JohnDoe", "password", "johndoe@example.com")
    catalog.add_book(book)
    accounts.register_user(user)

    accounts.purchase_book(user, book)
    accounts.add_book_review(user, book, "Great book!")
    accounts.add_book_review(user, Book("Other", "A", "G", 1), "Not bought")

    activity = tracker.state['user_activity']["JohnDoe"]
    assert activity['purchase_count'] == 1
    assert activity['review_count'] == 1
    assert tracker.top_books() == {"1984": 1}


def test_tracker_follows_renames(store):
    catalog, accounts, tracker = store
    book = Book("1984", "George Orwell", "Dystopian", 9.99)
    user = User("JohnDoe", "password", "johndoe@example.com")
    catalog.add_book(book)
    accounts.register_user(user)
    accounts.purchase_book(user, book)

    accounts.update_user_profile(user, "NewUsername", "pw", "new@example.com")
    accounts.purchase_book(user, book)

    assert "JohnDoe" not in tracker.state['user_activity']
    assert tracker.state['user_activity']["NewUsername"]['purchase_count'] == 2


def test_new_arrivals_newest_first_and_bounded(event_bus):
    tracker = ActivityTracker(event_bus, arrivals_limit=2)
    catalog = CatalogService(event_bus)
    books = [Book(f"Book {i}", "Author", "Genre", i) for i in range(3)]
    for book in books:
        catalog.add_book(book)

    assert tracker.state['new_arrivals'] == ["Book 2", "Book 1"]

    catalog.remove_book(books[2])
    # the older arrival moves back up once the newest is gone
    assert tracker.state['new_arrivals'] == ["Book 1", "Book 0"]


def test_popular_books_sorted_by_count(event_bus):
    tracker = ActivityTracker(event_bus)
    for title in ["A", "B", "B", "C", "B", "C"]:
        tracker.update_popular_books(Event(BOOK_PURCHASED, {"title": title}, time.time()))

    assert list(tracker.top_books(2).items()) == [("B", 3), ("C", 2)]


def test_handlers_ignore_unrelated_payloads(event_bus):
    tracker = ActivityTracker(event_bus)
    event_bus.publish(REVIEW_ADDED, {})
    event_bus.publish(BOOK_ADDED, {"title": "Solo"})
    assert tracker.state['user_activity'] == {}
    assert tracker.state['new_arrivals'] == ["Solo"]


def test_rename_merges_with_existing_activity(store):
    """Renaming onto a name that already has activity adds the counts together"""
    catalog, accounts, tracker = store
    book = Book("1984", "George Orwell", "Dystopian", 9.99)
    catalog.add_book(book)

    bob = User("Bob", "pw", "bob@example.com")
    accounts.purchase_book(bob, book)
    accounts.purchase_book(bob, book)

    al = User("Al", "pw", "al@example.com")
    accounts.register_user(al)
    accounts.purchase_book(al, book)
    accounts.add_book_review(al, book, "Great book!")

    assert accounts.update_user_profile(al, "Bob", "pw", "al@example.com")

    activity = tracker.state['user_activity']
    assert "Al" not in activity
    assert activity["Bob"]['purchase_count'] == 3
    assert activity["Bob"]['review_count'] == 1


def test_removed_duplicate_title_only_drops_that_book(event_bus):
    tracker = ActivityTracker(event_bus)
    catalog = CatalogService(event_bus)
    cheap = Book("1984", "George Orwell", "Dystopian", 5)
    dear = Book("1984", "George Orwell", "Dystopian", 20)
    catalog.add_book(cheap)
    catalog.add_book(dear)

    catalog.remove_book(cheap)
    assert tracker.state['new_arrivals'] == ["1984"]
    catalog.remove_book(dear)
    assert tracker.state['new_arrivals'] == []
