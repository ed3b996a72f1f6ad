"""
core/session_gate.py

Binds the session to the authenticated identity.

No session exists without an identity: the gate subscribes to the identity
provider and creates a fresh `SessionOrchestrator` whenever a user signs in,
and discards it (state, transcript and data context included) when the user
signs out. Everything that needs the session goes through `require()`.
"""

import logging
from typing import Callable, Optional

from identity_api.base import IdentityProvider
from shared.models import Identity
from .orchestrator import SessionOrchestrator

logger = logging.getLogger(__name__)

OrchestratorFactory = Callable[[Identity], SessionOrchestrator]


class SessionUnavailableError(Exception):
    """Raised when the session is used while no identity is signed in."""

    def __init__(self, message: str = "No authenticated identity; sign in first."):
        super().__init__(message)


class SessionGate:
    """
    Holds at most one session, tied to the provider's current identity.

    Args:
        identity_provider (IdentityProvider): Provider to observe.
        orchestrator_factory (OrchestratorFactory): Builds a new session for an identity.
    """

    def __init__(self, identity_provider: IdentityProvider, orchestrator_factory: OrchestratorFactory):
        self._provider = identity_provider
        self._factory = orchestrator_factory
        self._identity: Optional[Identity] = None
        self._session: Optional[SessionOrchestrator] = None
        # The provider delivers the current identity synchronously here
        self._unsubscribe = identity_provider.subscribe(self._on_identity_change)

    @property
    def identity(self) -> Optional[Identity]:
        return self._identity

    @property
    def current(self) -> Optional[SessionOrchestrator]:
        return self._session

    def require(self) -> SessionOrchestrator:
        """
        Return the active session.

        Raises:
            SessionUnavailableError: If no identity is signed in.
        """
        if self._session is None:
            raise SessionUnavailableError()
        return self._session

    def _on_identity_change(self, identity: Optional[Identity]) -> None:
        if identity is not None and identity == self._identity and self._session is not None:
            return

        if self._session is not None:
            logger.info("Identity changed; discarding session %s", self._session.session_id)
        # Nothing of the previous session survives, even if the next one fails to build
        self._identity = None
        self._session = None
        if identity is None:
            return

        session = self._factory(identity)
        self._identity = identity
        self._session = session
        logger.info("Session %s opened for %s", session.session_id, identity.id)

    def close(self) -> None:
        """Stop observing the identity provider and drop the session."""
        self._unsubscribe()
        self._identity = None
        self._session = None
