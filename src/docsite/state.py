"""Observable state container."""

from __future__ import annotations

from typing import Callable, Generic, TypeVar

T = TypeVar("T")

Unsubscribe = Callable[[], None]


class Observable(Generic[T]):
    """Hold a value and notify subscribers whenever it is set.

    Subscribers are called synchronously, in subscription order, with the new
    value. ``subscribe`` returns a callable that removes the subscription.
    """

    def __init__(self, value: T) -> None:
        self._value = value
        self._subscribers: list[Callable[[T], None]] = []

    def get(self) -> T:
        return self._value

    def set(self, value: T) -> None:
        self._value = value
        self.notify()

    def notify(self) -> None:
        for callback in list(self._subscribers):
            callback(self._value)

    def subscribe(self, callback: Callable[[T], None]) -> Unsubscribe:
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)
