from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Dict, List, Set, Tuple

from .errors import InvalidArgumentError


@dataclass(frozen=True)
class Book:
    title: str
    author: str
    genre: str
    price: Decimal

    def __post_init__(self):
        # 9.99 and Decimal("9.99") must describe the same book
        try:
            price = self.price if isinstance(self.price, Decimal) else Decimal(str(self.price))
        except InvalidOperation:
            raise InvalidArgumentError(f"Price is not a number: {self.price!r}") from None
        if not price.is_finite() or price < 0:
            raise InvalidArgumentError(f"Price must be non-negative, got {self.price!r}")
        object.__setattr__(self, 'price', price)

    @property
    def key(self) -> Tuple[str, str, str, Decimal]:
        """Fields that define a book's identity in the catalog"""
        return (self.title, self.author, self.genre, self.price)


@dataclass(eq=False)
class User:
    username: str
    password: str
    email: str
    purchased_books: Set[Book] = field(default_factory=set)
    reviews: Dict[Book, List[str]] = field(default_factory=dict)

    def has_purchased(self, book: Book) -> bool:
        return book in self.purchased_books

    def reviews_for(self, book: Book) -> List[str]:
        """Review texts this user left for a book, oldest first"""
        return list(self.reviews.get(book, []))
