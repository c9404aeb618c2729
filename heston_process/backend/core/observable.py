"""
Observable Quotes and Handles

═══════════════════════════════════════════════════════════════════════════════
CHANGE NOTIFICATION FOR LIVE MODEL PARAMETERS
═══════════════════════════════════════════════════════════════════════════════

Model inputs (spot, rates, Heston parameters) are mutable shared values. A
consumer registers itself once and is told about every later change instead
of re-querying or being re-wired.

Notification graph:

    SimpleQuote ──notify──▶ Handle ──notify──▶ HestonProcess ──notify──▶ ...

1. OBSERVABLE:
   Keeps a subscription list of observers. notify_observers() calls
   update() on each of them synchronously, on the calling thread.

2. OBSERVER:
   Registers with observables and reacts in update(). An observer that is
   also observable (Handle, process) re-broadcasts to its own observers.

3. QUOTE / SIMPLEQUOTE:
   A scalar market or model value. set_value() always notifies, even when
   the value does not change.

4. HANDLE / RELINKABLEHANDLE:
   Explicit indirection to an object that may not be linked yet. Every
   access goes through current_link(), which fails with
   UninitializedHandleError while the handle is empty.

Observables hold observers weakly; observers hold the observables they
registered with strongly. Lifetime of a shared quote is therefore the
lifetime of its longest-living owner.

═══════════════════════════════════════════════════════════════════════════════
"""

import weakref
from typing import Optional


class UninitializedHandleError(RuntimeError):
    """Raised when an empty Handle is dereferenced."""


class Observable:
    """Object that notifies registered observers of changes."""

    def __init__(self):
        super().__init__()
        self._observers = weakref.WeakSet()

    def register_observer(self, observer: 'Observer') -> None:
        self._observers.add(observer)

    def unregister_observer(self, observer: 'Observer') -> None:
        self._observers.discard(observer)

    def observer_count(self) -> int:
        return len(self._observers)

    def notify_observers(self) -> None:
        """
        Call update() on every registered observer.

        The subscription list is copied first so that observers may
        register or unregister while being notified.
        """
        for observer in list(self._observers):
            observer.update()


class Observer:
    """Object that reacts to notifications from observables."""

    def __init__(self):
        super().__init__()
        self._observables = []

    def register_with(self, observable: Optional[Observable]) -> None:
        if observable is None:
            return
        if not any(o is observable for o in self._observables):
            self._observables.append(observable)
        observable.register_observer(self)

    def unregister_with(self, observable: Observable) -> None:
        self._observables = [o for o in self._observables if o is not observable]
        observable.unregister_observer(self)

    def unregister_with_all(self) -> None:
        for observable in self._observables:
            observable.unregister_observer(self)
        self._observables = []

    def update(self) -> None:
        raise NotImplementedError


# ═══════════════════════════════════════════════════════════════════════════════
# QUOTES
# ═══════════════════════════════════════════════════════════════════════════════

class Quote(Observable):
    """Abstract scalar value."""

    def value(self) -> float:
        raise NotImplementedError

    def is_valid(self) -> bool:
        raise NotImplementedError


class SimpleQuote(Quote):
    """
    Market or model value that can be set at any time.

    Args:
        value: Initial value (None leaves the quote unset)
    """

    def __init__(self, value: Optional[float] = None):
        super().__init__()
        self._value = None if value is None else float(value)

    def value(self) -> float:
        if self._value is None:
            raise ValueError("invalid SimpleQuote: no value set")
        return self._value

    def is_valid(self) -> bool:
        return self._value is not None

    def set_value(self, value: float) -> float:
        """
        Store a new value and notify observers.

        Observers are notified even if the value is unchanged.

        Returns:
            Difference between the new and the previous value
            (0.0 if the quote was unset)
        """
        value = float(value)
        diff = 0.0 if self._value is None else value - self._value
        self._value = value
        self.notify_observers()
        return diff

    def reset(self) -> None:
        self._value = None
        self.notify_observers()

    def __repr__(self) -> str:
        return f"SimpleQuote({self._value!r})"


# ═══════════════════════════════════════════════════════════════════════════════
# HANDLES
# ═══════════════════════════════════════════════════════════════════════════════

class Handle(Observable, Observer):
    """
    Shared reference to an object that may not be linked yet.

    The handle forwards notifications from the linked object to its own
    observers, so consumers register with the handle once and keep
    receiving updates across relinks.

    Args:
        link: Object to point to (None for an empty handle)
        register_as_observer: Forward notifications from the linked object
    """

    def __init__(self, link=None, register_as_observer: bool = True):
        super().__init__()
        self._link = None
        self._is_observer = False
        self._link_to(link, register_as_observer)

    def _link_to(self, link, register_as_observer: bool = True) -> None:
        if link is not self._link or register_as_observer != self._is_observer:
            if self._link is not None and self._is_observer:
                self.unregister_with(self._link)
            self._link = link
            self._is_observer = register_as_observer
            if self._link is not None and self._is_observer:
                self.register_with(self._link)
        self.notify_observers()

    def current_link(self):
        if self._link is None:
            raise UninitializedHandleError(
                f"empty {type(self).__name__} cannot be dereferenced"
            )
        return self._link

    def empty(self) -> bool:
        return self._link is None

    def update(self) -> None:
        self.notify_observers()

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._link!r})"


class RelinkableHandle(Handle):
    """Handle whose link can be changed after construction."""

    def link_to(self, link, register_as_observer: bool = True) -> None:
        self._link_to(link, register_as_observer)
