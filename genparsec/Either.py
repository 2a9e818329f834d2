from dataclasses import dataclass
from typing import Any, Callable, Generic, TypeVar, Union

L = TypeVar('L')  # Failure payload
R = TypeVar('R')  # Success payload
B = TypeVar('B')


@dataclass(frozen=True)
class Left(Generic[L]):
    """The failure variant."""
    left: L

    def __repr__(self) -> str:
        return f"Left({self.left!r})"


@dataclass(frozen=True)
class Right(Generic[R]):
    """The success variant."""
    right: R

    def __repr__(self) -> str:
        return f"Right({self.right!r})"


Either = Union[Left[L], Right[R]]


def left(value: L) -> Left[L]:
    return Left(value)


def right(value: R) -> Right[R]:
    return Right(value)


def is_left(either: Any) -> bool:
    return isinstance(either, Left)


def is_right(either: Any) -> bool:
    return isinstance(either, Right)


def match(either: Any, on_left: Callable[[L], B], on_right: Callable[[R], B]) -> B:
    """
    Case analysis on an Either. Calls exactly one of the two branches with
    the payload of the populated variant and returns what it returns.
    """
    if isinstance(either, Left):
        return on_left(either.left)
    if isinstance(either, Right):
        return on_right(either.right)
    raise TypeError(f"Expected Left or Right, got {type(either).__name__}")
