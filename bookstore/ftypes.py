from dataclasses import dataclass
from typing import Callable, Generic, TypeVar

T = TypeVar('T')
U = TypeVar('U')
E = TypeVar('E')


# Either: the outcome of a business-rule check
class Either(Generic[E, T]):
    """Either a Right holding the checked value or a Left holding the reason it failed"""

    def bind(self, func: Callable[[T], 'Either[E, U]']) -> 'Either[E, U]':
        raise NotImplementedError

    def is_right(self) -> bool:
        raise NotImplementedError

    def is_left(self) -> bool:
        return not self.is_right()


@dataclass(frozen=True)
class Right(Either[E, T]):
    value: T

    def bind(self, func: Callable[[T], Either[E, U]]) -> Either[E, U]:
        return func(self.value)

    def is_right(self) -> bool:
        return True

    def __str__(self):
        return f"Right({self.value})"


@dataclass(frozen=True)
class Left(Either[E, T]):
    error: E

    def bind(self, func: Callable[[T], Either[E, U]]) -> Either[E, U]:
        return self

    def is_right(self) -> bool:
        return False

    def __str__(self):
        return f"Left({self.error})"


def ensure(condition: bool, value: T, error: E) -> Either[E, T]:
    """Right(value) when the condition holds, Left(error) otherwise"""
    return Right(value) if condition else Left(error)
