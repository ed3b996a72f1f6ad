"""
Identity provider that delegates to a real authentication backend.

The delegating provider forwards login, logout and identity-change
subscription to an `IdentityBackend` and translates the backend's error codes
into the identity error taxonomy (see `identity_api.errors`). Network transport
and vendor SDK details live entirely in the backend object; this module only
adapts its contract to `IdentityProvider`.

Backends are expected to deliver their state-change callbacks on the event
loop thread that drives the session, like every other event in the service.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Callable, Mapping, Optional

from shared.models import Identity
from .base import IdentityProvider
from .errors import translate_backend_error

logger = logging.getLogger(__name__)

BackendUser = Mapping[str, Any]


class IdentityBackend(ABC):
    """
    Minimal contract of an external authentication backend.

    User records are mappings with at least "uid" and "email" and optionally
    "displayName". Failures are raised as exceptions carrying a `code`
    attribute (e.g. `IdentityBackendError("auth/wrong-password")`).
    """

    @abstractmethod
    async def sign_in(self, email: str, password: str) -> BackendUser:
        raise NotImplementedError

    @abstractmethod
    async def sign_out(self) -> None:
        raise NotImplementedError

    @abstractmethod
    def on_auth_state_changed(
        self, callback: Callable[[Optional[BackendUser]], None]
    ) -> Callable[[], None]:
        """Register a state-change callback; returns an unsubscribe function."""
        raise NotImplementedError


def to_identity(user: Optional[BackendUser]) -> Optional[Identity]:
    """Cast a backend user record to an `Identity`."""
    if user is None:
        return None
    return Identity(
        id=str(user.get("uid") or user.get("id")),
        email=user.get("email"),
        display_name=user.get("displayName", user.get("display_name")),
    )


class DelegatingIdentityProvider(IdentityProvider):
    """
    `IdentityProvider` backed by a real authentication backend.

    Args:
        backend (IdentityBackend): Connected backend client. The provider
            subscribes to its state changes immediately.
    """

    mode = "delegating"

    def __init__(self, backend: IdentityBackend) -> None:
        super().__init__()
        self._backend = backend
        self._backend_unsubscribe = backend.on_auth_state_changed(self._on_backend_change)

    def _on_backend_change(self, user: Optional[BackendUser]) -> None:
        self._set_identity(to_identity(user))

    async def login(self, email: str, credential: str) -> Identity:
        try:
            user = await self._backend.sign_in(email, credential)
        except Exception as exc:
            auth_error = translate_backend_error(exc)
            logger.warning("[DelegatingIdentityProvider] Login failed: %s", auth_error.kind.value)
            raise auth_error from exc

        identity = to_identity(user)
        self._set_identity(identity)
        return identity

    async def logout(self) -> None:
        """
        Sign out through the backend.

        A backend failure is reported to the caller, but the local identity is
        cleared first so the session surface is never left reachable.
        """
        try:
            await self._backend.sign_out()
        except Exception as exc:
            logger.error("[DelegatingIdentityProvider] Backend sign-out failed; clearing identity anyway", exc_info=True)
            self._set_identity(None)
            raise translate_backend_error(exc) from exc
        self._set_identity(None)

    def close(self) -> None:
        """Stop listening to the backend."""
        self._backend_unsubscribe()
