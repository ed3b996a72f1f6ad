"""
shared/listeners.py

Explicit listener registry used for identity-change subscriptions and for
fire-and-forget notifications to the presentation layer.

Each registry is owned by the object that broadcasts through it (an identity
provider, an orchestrator) rather than living at module level, so every owner
can be exercised in isolation by tests. Registration and unregistration are
allowed at any time, including from inside a callback that is currently being
notified: a broadcast iterates over a snapshot of the registered callbacks,
skipping any that were removed while it was running.
A failing callback is logged and does not prevent the remaining callbacks from
being notified.
"""

import logging
from typing import Callable, Generic, List, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class _Registration:
    __slots__ = ("callback",)

    def __init__(self, callback):
        self.callback = callback


class ListenerRegistry(Generic[T]):
    """
    Ordered collection of callbacks that receive a single payload argument.

    Every `add` creates its own registration, even for a callback that is
    already registered; each returned unsubscribe function revokes only the
    registration it was created for.

    Args:
        name (str): Label used in log records to identify the registry owner.
    """

    def __init__(self, name: str) -> None:
        self.name = name
        self._registrations: List[_Registration] = []

    def add(self, callback: Callable[[T], None]) -> Callable[[], None]:
        """
        Register a callback and return a function that unregisters it.

        The returned unsubscribe function is idempotent.
        """
        registration = _Registration(callback)
        self._registrations.append(registration)

        def unsubscribe() -> None:
            if registration in self._registrations:
                self._registrations.remove(registration)

        return unsubscribe

    def remove(self, callback: Callable[[T], None]) -> None:
        """Drop every registration of `callback`."""
        self._registrations = [r for r in self._registrations if r.callback != callback]

    def broadcast(self, payload: T) -> int:
        """
        Deliver `payload` to every registration present when the broadcast started.

        Returns:
            int: Number of callbacks that completed without raising.
        """
        delivered = 0
        for registration in list(self._registrations):
            # Unsubscribed by an earlier callback in this same broadcast
            if registration not in self._registrations:
                continue
            try:
                registration.callback(payload)
                delivered += 1
            except Exception:
                logger.error("[%s] Listener %r failed", self.name, registration.callback, exc_info=True)
        return delivered

    def clear(self) -> None:
        self._registrations.clear()

    def __len__(self) -> int:
        return len(self._registrations)
