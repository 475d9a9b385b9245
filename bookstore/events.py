import logging
import time
from collections import deque
from typing import NamedTuple, Callable, Dict, List, Any, Optional

from . import config

logger = logging.getLogger(__name__)

BOOK_ADDED = "BOOK_ADDED"
BOOK_REMOVED = "BOOK_REMOVED"
USER_REGISTERED = "USER_REGISTERED"
PROFILE_UPDATED = "PROFILE_UPDATED"
BOOK_PURCHASED = "BOOK_PURCHASED"
REVIEW_ADDED = "REVIEW_ADDED"


class Event(NamedTuple):
    name: str
    payload: Dict[str, Any]
    timestamp: float


class EventBus:
    def __init__(self, history_limit: Optional[int] = None):
        self._subscribers: Dict[str, List[Callable[[Event], None]]] = {}
        self._event_history = deque(
            maxlen=config.EVENT_HISTORY_LIMIT if history_limit is None else history_limit)

    def subscribe(self, event_type: str, handler: Callable[[Event], None]) -> None:
        """Subscribe handler to event type"""
        self._subscribers.setdefault(event_type, []).append(handler)

    def unsubscribe(self, event_type: str, handler: Callable[[Event], None]) -> None:
        """Unsubscribe handler from event type"""
        if event_type in self._subscribers:
            self._subscribers[event_type] = [
                h for h in self._subscribers[event_type] if h != handler
            ]

    def publish(self, event_type: str, payload: Dict[str, Any]) -> Event:
        """Publish event to all subscribers"""
        event = Event(event_type, payload, time.time())
        self._event_history.append(event)

        for handler in list(self._subscribers.get(event_type, ())):
            try:
                handler(event)
            except Exception:
                logger.exception("Event handler %r failed on %s", handler, event_type)
        return event

    def get_event_history(self) -> List[Event]:
        return list(self._event_history)

    def clear_history(self) -> None:
        self._event_history.clear()


class ActivityTracker:
    """Derived store statistics kept up to date from published events.

    Tracks per-user purchase/review counts, purchase counts per book title,
    and the most recently added titles.
    """

    def __init__(self, bus: EventBus, arrivals_limit: int = 10):
        self.arrivals_limit = arrivals_limit
        # every book still in the catalog, newest first; new_arrivals is its head
        self._arrivals: List[tuple] = []
        self.state = {
            'user_activity': {},
            'popular_books': {},
            'new_arrivals': [],
        }
        bus.subscribe(BOOK_ADDED, self.update_new_arrivals)
        bus.subscribe(BOOK_REMOVED, self.update_new_arrivals)
        bus.subscribe(BOOK_PURCHASED, self.update_user_activity)
        bus.subscribe(BOOK_PURCHASED, self.update_popular_books)
        bus.subscribe(REVIEW_ADDED, self.update_user_activity)
        bus.subscribe(PROFILE_UPDATED, self.rename_user)

    def update_new_arrivals(self, event: Event) -> List[str]:
        p = event.payload
        entry = (p.get('title'), p.get('author'), p.get('genre'), p.get('price'))

        if event.name == BOOK_ADDED:
            self._arrivals.insert(0, entry)
        elif event.name == BOOK_REMOVED and entry in self._arrivals:
            self._arrivals.remove(entry)

        self.state['new_arrivals'] = [e[0] for e in self._arrivals[:self.arrivals_limit]]
        return self.state['new_arrivals']

    def update_user_activity(self, event: Event) -> Dict[str, Any]:
        username = event.payload.get('username')
        if username:
            activity = self.state['user_activity'].setdefault(username, {
                'purchase_count': 0,
                'review_count': 0,
                'last_activity': 0,
            })

            if event.name == BOOK_PURCHASED:
                activity['purchase_count'] += 1
            elif event.name == REVIEW_ADDED:
                activity['review_count'] += 1

            activity['last_activity'] = event.timestamp

        return self.state['user_activity']

    def update_popular_books(self, event: Event) -> Dict[str, int]:
        title = event.payload.get('title')
        if title:
            popular = self.state['popular_books']
            popular[title] = popular.get(title, 0) + 1

        return self.top_books()

    def rename_user(self, event: Event) -> None:
        old, new = event.payload.get('old_username'), event.payload.get('username')
        activity = self.state['user_activity']
        if old == new or old not in activity:
            return

        moved = activity.pop(old)
        existing = activity.get(new)
        if existing is not None:
            # an unregistered user may already have activity under the new name
            moved = {
                'purchase_count': existing['purchase_count'] + moved['purchase_count'],
                'review_count': existing['review_count'] + moved['review_count'],
                'last_activity': max(existing['last_activity'], moved['last_activity']),
            }
        activity[new] = moved

    def top_books(self, k: int = 10) -> Dict[str, int]:
        """Most purchased titles, highest count first"""
        return dict(sorted(
            self.state['popular_books'].items(),
            key=lambda x: x[1],
            reverse=True
        )[:k])
