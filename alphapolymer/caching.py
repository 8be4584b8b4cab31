"""Lazily consistent cache tier.

A polymer keeps two tiers of derived state: its mass is updated on every
mutation, while its annotated string is only marked stale and rebuilt on the
next read. ``RenderCache`` is that second tier.

The rebuild is a pure function of the owner's state, so concurrent readers
that race on a stale cache simply compute the same value twice; no lock is
taken.
"""

from typing import Callable, Generic, Optional, TypeVar

T = TypeVar("T")


class RenderCache(Generic[T]):
    """Value rebuilt on the first read after ``invalidate()``.

    The builder is passed on each read rather than stored, so the cache holds
    no reference back to its owner.

    Attributes
    ----------
    rebuilds : int
        Number of times a builder has run
    """

    __slots__ = ("_value", "_dirty", "rebuilds")

    def __init__(self):
        self._value: Optional[T] = None
        self._dirty = True
        self.rebuilds = 0

    @property
    def dirty(self) -> bool:
        return self._dirty

    def invalidate(self) -> None:
        self._dirty = True

    def get(self, builder: Callable[[], T]) -> T:
        if self._dirty:
            value = builder()
            self.rebuilds += 1
            self._value = value
            self._dirty = False
        return self._value
