"""Synchronous observable values.

LiveValue holds the latest value of something and pushes every new value to
its observers synchronously. New observers immediately receive the current
value if one has ever been set (replay of the latest value).

MediatorLiveValue listens to other live values, but only while it has
observers of its own: a mediator nobody observes is dormant and does not
subscribe to its sources. This is what makes validators built on top of it
activate on first subscription.

Example:
    ```python
    name = MutableLiveValue("")
    seen = []
    subscription = name.subscribe(seen.append)   # seen == [""]
    name.value = "Ann"                           # seen == ["", "Ann"]
    subscription.cancel()
    ```
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any, Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")
V = TypeVar("V")

Observer = Callable[[Any], Any]

_UNSET: Any = object()


class SourceConflictError(ValueError):
    """Raised when a source is added to a mediator twice with different callbacks."""

    def __init__(self, source: LiveValue[Any]) -> None:
        self.source = source
        super().__init__(f"Source {source!r} was already added with a different callback")


class Subscription:
    """Handle returned by ``LiveValue.subscribe``.

    Attributes:
        source: The live value that was subscribed to.
        observer: The subscribed callable.
    """

    def __init__(self, source: LiveValue[Any], observer: Observer) -> None:
        self.source = source
        self.observer = observer
        self.active = True

    def cancel(self) -> None:
        """Stop receiving values. Cancelling twice is harmless."""
        if self.active:
            self.source.unsubscribe(self.observer)

    def __repr__(self) -> str:
        return f"Subscription(observer={self.observer!r}, active={self.active})"


class _ObserverEntry:
    __slots__ = ("observer", "subscription", "last_version")

    def __init__(self, observer: Observer, subscription: Subscription) -> None:
        self.observer = observer
        self.subscription = subscription
        self.last_version = -1


class LiveValue(Generic[T]):
    """Read-only observable holding the latest value.

    Attributes:
        value: Current value, or None if nothing was ever set.
        version: Number of values set so far minus one (-1 when unset).
    """

    def __init__(self, value: Any = _UNSET) -> None:
        self._value: T | None = None
        self._version = -1
        self._observers: dict[Observer, _ObserverEntry] = {}
        if value is not _UNSET:
            self._value = value
            self._version = 0

    @property
    def value(self) -> T | None:
        return self._value

    @property
    def has_value(self) -> bool:
        return self._version >= 0

    @property
    def version(self) -> int:
        return self._version

    @property
    def observer_count(self) -> int:
        return len(self._observers)

    @property
    def has_observers(self) -> bool:
        return bool(self._observers)

    def subscribe(self, observer: Callable[[T | None], Any]) -> Subscription:
        """Register an observer and replay the current value to it.

        Args:
            observer: Called with every new value.

        Returns:
            Subscription handle. Subscribing an already registered observer
            returns its existing subscription.
        """
        existing = self._observers.get(observer)
        if existing is not None:
            return existing.subscription

        entry = _ObserverEntry(observer, Subscription(self, observer))
        self._observers[observer] = entry
        if len(self._observers) == 1:
            self._on_active()
        self._notify(entry)
        return entry.subscription

    def unsubscribe(self, observer: Callable[[T | None], Any]) -> None:
        """Remove an observer. Unknown observers are ignored."""
        entry = self._observers.pop(observer, None)
        if entry is None:
            return
        entry.subscription.active = False
        if not self._observers:
            self._on_inactive()

    def _set_value(self, value: T | None) -> None:
        self._value = value
        self._version += 1
        for entry in list(self._observers.values()):
            self._notify(entry)

    def _notify(self, entry: _ObserverEntry) -> None:
        # An observer may have been removed, or already served a newer value
        # by a re-entrant set, while this dispatch was running.
        if not entry.subscription.active or entry.last_version >= self._version:
            return
        entry.last_version = self._version
        entry.observer(self._value)

    def _on_active(self) -> None:
        """Called when the observer count goes from zero to one."""

    def _on_inactive(self) -> None:
        """Called when the observer count drops to zero."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}(value={self._value!r}, version={self._version})"


class MutableLiveValue(LiveValue[T]):
    """LiveValue whose value can be set by anyone holding it."""

    @LiveValue.value.setter  # type: ignore[attr-defined]
    def value(self, value: T | None) -> None:
        self._set_value(value)

    def set_value(self, value: T | None) -> None:
        """Set a new value and push it to all observers."""
        self._set_value(value)


class _Source(Generic[V]):
    """Subscription of a mediator to one of its sources."""

    def __init__(self, live: LiveValue[V], on_change: Callable[[V | None], Any]) -> None:
        self.live = live
        self.on_change = on_change
        self._version = -1

    def plug(self) -> None:
        self.live.subscribe(self)

    def unplug(self) -> None:
        self.live.unsubscribe(self)

    def __call__(self, value: V | None) -> None:
        # Skip values this mediator has already seen before an unplug.
        if self._version == self.live.version:
            return
        self._version = self.live.version
        self.on_change(value)


class MediatorLiveValue(MutableLiveValue[T]):
    """LiveValue that reacts to other live values while it is observed.

    Args:
        on_active: Optional hook called after the sources were plugged on
            activation. It receives True if the mediator's value changed while
            plugging (that is, a source callback produced a new value).
    """

    def __init__(
        self,
        value: Any = _UNSET,
        on_active: Callable[[bool], Any] | None = None,
    ) -> None:
        super().__init__(value)
        self._sources: dict[LiveValue[Any], _Source[Any]] = {}
        self._activation_hook = on_active

    @property
    def sources(self) -> tuple[LiveValue[Any], ...]:
        return tuple(self._sources)

    def add_source(self, source: LiveValue[V], on_change: Callable[[V | None], Any]) -> None:
        """Start listening to ``source``.

        The source is subscribed immediately when the mediator is active,
        otherwise on activation.

        Args:
            source: Live value to follow.
            on_change: Called with each new value of the source.

        Raises:
            SourceConflictError: If the source is already registered with a
                different callback.
        """
        existing = self._sources.get(source)
        if existing is not None:
            if existing.on_change != on_change:
                raise SourceConflictError(source)
            return

        wrapper = _Source(source, on_change)
        self._sources[source] = wrapper
        if self.has_observers:
            wrapper.plug()

    def remove_source(self, source: LiveValue[Any]) -> None:
        """Stop listening to ``source``. Unknown sources are ignored."""
        wrapper = self._sources.pop(source, None)
        if wrapper is not None:
            wrapper.unplug()

    def _on_active(self) -> None:
        version = self._version
        logger.debug("%s activated, plugging %d sources", type(self).__name__, len(self._sources))
        for wrapper in list(self._sources.values()):
            wrapper.plug()
        if self._activation_hook is not None:
            self._activation_hook(self._version != version)

    def _on_inactive(self) -> None:
        logger.debug("%s deactivated", type(self).__name__)
        for wrapper in list(self._sources.values()):
            wrapper.unplug()
