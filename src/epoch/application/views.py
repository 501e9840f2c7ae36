"""Live filtered views over the AddressBook's canonical collections."""

from collections.abc import Callable, Iterator, Sequence
from typing import Generic, TypeVar

T = TypeVar("T")

Predicate = Callable[[T], bool]


def show_all(_item: object) -> bool:
    return True


class FilteredView(Sequence, Generic[T]):
    """
    Read-only projection of a backing sequence through a predicate.
    Nothing is cached: every read re-filters the backing sequence, so adds,
    removals and replacements are visible without a refresh call.
    """

    def __init__(self, source: Sequence[T], predicate: Predicate = show_all) -> None:
        self._source = source
        self._predicate = predicate

    @property
    def predicate(self) -> Predicate:
        return self._predicate

    def update(self, predicate: Predicate) -> None:
        """Replace the active predicate."""
        if predicate is None:
            raise TypeError("predicate must not be None")
        self._predicate = predicate

    def reset(self) -> None:
        self._predicate = show_all

    def __iter__(self) -> Iterator[T]:
        predicate = self._predicate
        return (item for item in self._source if predicate(item))

    def __len__(self) -> int:
        return sum(1 for _ in self)

    def __getitem__(self, index):
        return list(self)[index]

    def __repr__(self) -> str:
        return f"FilteredView({list(self)!r})"
