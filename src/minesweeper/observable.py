"""
Observable values for the game state.

Every mutable field a renderer reads is held in an ``Observable``; derived
fields (flags remaining, formatted time) are ``Computed`` values that are
recomputed on read and cached until one of their dependencies changes.
Subscribers are called synchronously, in subscription order, with the new
value.
"""
from typing import Any, Callable, Generic, List, Optional, TypeVar

T = TypeVar("T")

Callback = Callable[[Any], None]
Unsubscribe = Callable[[], None]


class Subscribable:
    """Listener list shared by Observable and Computed."""

    def __init__(self) -> None:
        self._callbacks: List[Callback] = []

    def subscribe(self, callback: Callback) -> Unsubscribe:
        """
        Register a callback.

        Returns:
            A function that removes the callback again.
        """
        if not callable(callback):
            raise TypeError(f"Subscriber must be callable, got {callback!r}")
        self._callbacks.append(callback)

        def unsubscribe() -> None:
            if callback in self._callbacks:
                self._callbacks.remove(callback)

        return unsubscribe

    @property
    def subscriber_count(self) -> int:
        return len(self._callbacks)

    def _notify(self, value: Any) -> None:
        # Copy so callbacks may unsubscribe while being notified
        for callback in list(self._callbacks):
            callback(value)


class Observable(Subscribable, Generic[T]):
    """A mutable value that notifies subscribers when it changes."""

    def __init__(self, value: T) -> None:
        super().__init__()
        self._value = value

    @property
    def value(self) -> T:
        return self._value

    @value.setter
    def value(self, new_value: T) -> None:
        if new_value == self._value:
            return
        self._value = new_value
        self._notify(new_value)

    def __repr__(self) -> str:
        return f"Observable({self._value!r})"


class Computed(Subscribable, Generic[T]):
    """
    A value derived from other observables.

    The evaluator runs lazily on read and its result is cached until a
    dependency changes. Subscribers are notified only when the derived
    value actually differs from the last one they saw.
    """

    def __init__(
        self,
        evaluator: Callable[[], T],
        *dependencies: "Subscribable",
    ) -> None:
        super().__init__()
        self._evaluator = evaluator
        self._cached: Optional[T] = None
        self._dirty = True
        self._last_notified: Optional[T] = None
        for dependency in dependencies:
            dependency.subscribe(self._invalidate)

    @property
    def value(self) -> T:
        if self._dirty:
            self._cached = self._evaluator()
            self._dirty = False
        return self._cached

    def subscribe(self, callback: Callback) -> Unsubscribe:
        # Remember what the new subscriber starts from
        self._last_notified = self.value
        return super().subscribe(callback)

    def _invalidate(self, _changed: Any) -> None:
        self._dirty = True
        if not self.subscriber_count:
            return
        new_value = self.value
        if new_value != self._last_notified:
            self._last_notified = new_value
            self._notify(new_value)

    def __repr__(self) -> str:
        state = "dirty" if self._dirty else repr(self._cached)
        return f"Computed({state})"
