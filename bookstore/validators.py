from typing import Mapping, Optional, Tuple

from .domain import Book, User
from .errors import InvalidArgumentError
from .ftypes import Either, Right, Left, ensure


def require(value, name: str):
    """Raise InvalidArgumentError when a required argument is missing"""
    if value is None:
        raise InvalidArgumentError(f"{name} cannot be None")
    return value


def is_valid_email(email: str) -> bool:
    """Basic shape check: non-empty local part, then "@", then a domain containing a "." """
    local, at, domain = email.partition("@")
    return bool(local and at and "." in domain)


def is_valid_username(username: str) -> bool:
    return bool(username and username.strip())


def validate_registration(user: User, users: Mapping[str, User]) -> Either[str, User]:
    """检查新用户：用户名非空且未被占用"""
    return (
        ensure(is_valid_username(user.username), user, "Username cannot be empty")
        .bind(lambda u: ensure(u.username not in users, u,
                               f"Username already registered: {u.username}"))
    )


def validate_profile_update(user: User,
                            new_username: str,
                            new_email: str,
                            users: Mapping[str, User]) -> Either[str, Tuple[str, str]]:
    """Check a requested username/email change against the registered users.

    The new username may be the user's own current one; it is only rejected
    when a *different* registered user already holds it.
    """
    if not is_valid_username(new_username):
        return Left("Username cannot be empty")

    holder: Optional[User] = users.get(new_username)
    if holder is not None and holder is not user:
        return Left(f"Username already taken: {new_username}")

    if not is_valid_email(new_email):
        return Left(f"Invalid email address: {new_email}")

    return Right((new_username, new_email))


def validate_purchase(book: Book, catalog) -> Either[str, Book]:
    return ensure(book in catalog, book, f"Book not in catalog: {book.title}")


def validate_review(user: User, book: Book, review_text: str) -> Either[str, str]:
    """检查评论：用户已购买该书，评论文本不为空"""
    if not user.has_purchased(book):
        return Left(f"User {user.username} has not purchased {book.title}")

    if not review_text.strip():
        return Left("Review text cannot be empty")

    return Right(review_text)
