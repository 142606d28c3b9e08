"""Minimal push-based observable used as the default interception target.

Follows the usual reactive contract: ``Observable.subscribe`` returns a
``Subscription`` handle that can be released with ``unsubscribe()`` and that
runs its registered teardowns exactly once, whether the stream completes,
errors, or is released by the consumer.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Generic, TypeVar

if TYPE_CHECKING:
    from collections.abc import Callable

T = TypeVar("T")


class Subscription:
    """Disposable handle with teardown registration."""

    __slots__ = ("_closed", "_teardowns")

    def __init__(self) -> None:
        self._closed = False
        self._teardowns: list[Callable[[], None]] = []

    @property
    def closed(self) -> bool:
        """Check if the subscription has been released."""
        return self._closed

    def add(self, teardown: Callable[[], None]) -> None:
        """Register a teardown.

        Runs immediately when the subscription is already closed.
        """
        if self._closed:
            teardown()
            return
        self._teardowns.append(teardown)

    def unsubscribe(self) -> None:
        """Release the subscription. Calling it again is a no-op."""
        if self._closed:
            return
        self._closed = True
        teardowns, self._teardowns = self._teardowns, []
        for teardown in teardowns:
            teardown()

    def __enter__(self) -> Subscription:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.unsubscribe()


class Subscriber(Subscription, Generic[T]):
    """Subscription that forwards notifications to observer callbacks."""

    __slots__ = ("_on_next", "_on_error", "_on_completed")

    def __init__(
        self,
        on_next: Callable[[T], None] | None = None,
        on_error: Callable[[BaseException], None] | None = None,
        on_completed: Callable[[], None] | None = None,
    ) -> None:
        super().__init__()
        self._on_next = on_next
        self._on_error = on_error
        self._on_completed = on_completed

    def next(self, value: T) -> None:
        if self._closed:
            return
        if self._on_next is not None:
            self._on_next(value)

    def error(self, exc: BaseException) -> None:
        """Deliver an error and close.

        With no error callback the error is re-raised after closing.
        """
        if self._closed:
            return
        handler = self._on_error
        self.unsubscribe()
        if handler is None:
            raise exc
        handler(exc)

    def complete(self) -> None:
        if self._closed:
            return
        handler = self._on_completed
        self.unsubscribe()
        if handler is not None:
            handler()


def _as_callbacks(observer: Any, on_error: Any, on_completed: Any) -> tuple[Any, Any, Any]:
    """Normalize an observer object or a bare callback into three callables."""
    if observer is None or callable(observer):
        return observer, on_error, on_completed
    return (
        getattr(observer, "on_next", None),
        on_error or getattr(observer, "on_error", None),
        on_completed or getattr(observer, "on_completed", None),
    )


class Observable(Generic[T]):
    """Cold observable built from a subscribe function.

    The subscribe function receives a ``Subscriber`` and may return a
    teardown callable, which is attached to the subscriber.
    """

    __slots__ = ("_subscribe_fn",)

    def __init__(
        self,
        subscribe_fn: Callable[[Subscriber[T]], Callable[[], None] | None] | None = None,
    ) -> None:
        self._subscribe_fn = subscribe_fn

    def subscribe(
        self,
        observer: Any = None,
        on_error: Callable[[BaseException], None] | None = None,
        on_completed: Callable[[], None] | None = None,
    ) -> Subscription:
        """Subscribe with an observer object or callbacks.

        Args:
            observer: Object with ``on_next``/``on_error``/``on_completed``
                methods, or a callable used as ``on_next``
            on_error: Error callback
            on_completed: Completion callback

        Returns:
            The subscription handle
        """
        subscriber: Subscriber[T] = Subscriber(*_as_callbacks(observer, on_error, on_completed))
        self._attach(subscriber)
        return subscriber

    def _attach(self, subscriber: Subscriber[T]) -> None:
        if self._subscribe_fn is None:
            return
        try:
            teardown = self._subscribe_fn(subscriber)
        except Exception as exc:
            if subscriber.closed:
                raise
            subscriber.error(exc)
            return
        if teardown is not None:
            subscriber.add(teardown)


class Subject(Observable[T]):
    """Hot observable that multicasts values pushed by the owner."""

    __slots__ = ("_subscribers", "_stopped")

    def __init__(self) -> None:
        super().__init__()
        self._subscribers: list[Subscriber[T]] = []
        self._stopped = False

    @property
    def observer_count(self) -> int:
        return len(self._subscribers)

    def _attach(self, subscriber: Subscriber[T]) -> None:
        if self._stopped:
            subscriber.complete()
            return
        self._subscribers.append(subscriber)
        subscriber.add(lambda: self._remove(subscriber))

    def _remove(self, subscriber: Subscriber[T]) -> None:
        if subscriber in self._subscribers:
            self._subscribers.remove(subscriber)

    def next(self, value: T) -> None:
        for subscriber in list(self._subscribers):
            subscriber.next(value)

    def error(self, exc: BaseException) -> None:
        self._stopped = True
        for subscriber in list(self._subscribers):
            subscriber.error(exc)

    def complete(self) -> None:
        self._stopped = True
        for subscriber in list(self._subscribers):
            subscriber.complete()


def of(*values: T) -> Observable[T]:
    """Emit ``values`` and complete synchronously on subscribe."""

    def subscribe(subscriber: Subscriber[T]) -> None:
        for value in values:
            subscriber.next(value)
        subscriber.complete()

    return Observable(subscribe)


def never() -> Observable[Any]:
    """Observable that never emits, errors, or completes."""
    return Observable(lambda subscriber: None)


def throw_error(exc: BaseException) -> Observable[Any]:
    """Observable that errors synchronously on subscribe."""

    def subscribe(subscriber: Subscriber[Any]) -> None:
        subscriber.error(exc)

    return Observable(subscribe)
