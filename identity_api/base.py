"""
Provider-agnostic identity interface for the session service.

This module defines the abstract contract that any identity provider must
fulfill so the session gate and the HTTP layer can authenticate users without
knowing whether a real authentication backend or the built-in simulation is
behind it. The contract is intentionally small: log in, log out, and subscribe
to identity changes.

Subscription semantics shared by every implementation:
- A new subscriber immediately receives the current Identity (or None).
- Every subsequent change is broadcast to all subscribers.
- `subscribe` returns an unsubscribe function; subscribing and unsubscribing
  are allowed at any time, including from inside a notification.

The subscriber set is a `ListenerRegistry` owned by each provider instance;
there is no process-wide listener state.
"""

import logging
from abc import ABC, abstractmethod
from typing import Callable, Optional

from shared.listeners import ListenerRegistry
from shared.models import Identity

logger = logging.getLogger(__name__)

IdentityListener = Callable[[Optional[Identity]], None]


class IdentityProvider(ABC):
    """
    Abstract identity provider with an owned subscriber registry.

    Subclasses implement `login` and `logout` and call `_set_identity` whenever
    the active identity changes; `_set_identity` takes care of broadcasting.

    Note:
        `login` must never partially mutate the current identity: either it
        returns a new Identity (and subscribers are notified), or it raises
        `AuthError` and the previous identity stays in place.
    """

    #: Short label used in logs and metrics ("simulated" or "delegating").
    mode: str = "abstract"

    def __init__(self) -> None:
        self._identity: Optional[Identity] = None
        self._listeners: ListenerRegistry[Optional[Identity]] = ListenerRegistry(
            f"identity:{self.mode}"
        )

    @property
    def current_identity(self) -> Optional[Identity]:
        return self._identity

    @abstractmethod
    async def login(self, email: str, credential: str) -> Identity:
        """
        Authenticate a user.

        Args:
            email (str): Account e-mail address.
            credential (str): Password or equivalent secret.

        Returns:
            Identity: The newly active identity.

        Raises:
            AuthError: When the credentials are invalid, malformed or rate-limited.
        """
        raise NotImplementedError

    @abstractmethod
    async def logout(self) -> None:
        """
        End the active session. Idempotent.

        Raises:
            AuthError: When the backend reports a failure. The local identity
                is cleared regardless.
        """
        raise NotImplementedError

    def subscribe(self, on_change: IdentityListener) -> Callable[[], None]:
        """
        Register an identity-change callback.

        The callback is invoked synchronously with the current identity before
        this method returns, then again on every change.
        Each call creates its own registration, so subscribing the same
        callback twice yields two independent unsubscribe functions.

        Returns:
            Callable[[], None]: Function that removes the registration.
        """
        unsubscribe = self._listeners.add(on_change)
        try:
            on_change(self._identity)
        except Exception:
            logger.error("[%s] Subscriber failed on initial identity delivery", self.mode, exc_info=True)
        return unsubscribe

    def _set_identity(self, identity: Optional[Identity]) -> None:
        if identity == self._identity:
            return
        self._identity = identity
        self._listeners.broadcast(identity)
