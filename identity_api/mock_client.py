"""
Simulated identity provider for local runs, demos, and tests.

This module provides a reference implementation of the identity interface so
the service can be executed end-to-end without any authentication backend,
credentials, or network access. Any syntactically valid e-mail address (it
must contain an "@") and any non-empty credential are accepted; a pseudo-random
identity is synthesized for the user. A fixed delay before each login and
logout mimics network latency so the presentation layer exercises its loading
states realistically.

The simulated provider is the default whenever the real backend is not
configured with non-placeholder credentials, and the fallback whenever the
real backend fails to initialize (see `identity_api.factory`).
"""

import asyncio
import logging
import secrets
import string

from shared.models import Identity
from .base import IdentityProvider
from .errors import AuthError, AuthErrorKind

logger = logging.getLogger(__name__)

_ID_ALPHABET = string.ascii_lowercase + string.digits


def _random_suffix(length: int = 9) -> str:
    return "".join(secrets.choice(_ID_ALPHABET) for _ in range(length))


class MockIdentityProvider(IdentityProvider):
    """
    In-memory identity provider with simulated latency.

    Args:
        login_delay_s (float): Seconds to wait before completing a login.
        logout_delay_s (float): Seconds to wait before completing a logout.
    """

    mode = "simulated"

    def __init__(self, login_delay_s: float = 1.0, logout_delay_s: float = 0.5) -> None:
        super().__init__()
        self.login_delay_s = login_delay_s
        self.logout_delay_s = logout_delay_s

    async def login(self, email: str, credential: str) -> Identity:
        """
        Accept any e-mail containing "@" and any non-empty credential.

        Raises:
            AuthError: INVALID_EMAIL_FORMAT when the e-mail lacks "@";
                INVALID_CREDENTIAL when the credential is empty.
        """
        await asyncio.sleep(self.login_delay_s)

        if not email or "@" not in email:
            raise AuthError(AuthErrorKind.INVALID_EMAIL_FORMAT, "Invalid Email Format")
        if not credential:
            raise AuthError(AuthErrorKind.INVALID_CREDENTIAL, "Empty credential")

        identity = Identity(
            id=f"mock-user-{_random_suffix()}",
            email=email,
            display_name=email.split("@")[0],
        )
        logger.info("[MockIdentityProvider] Signed in %s as %s", email, identity.id)
        self._set_identity(identity)
        return identity

    async def logout(self) -> None:
        await asyncio.sleep(self.logout_delay_s)
        if self._identity is not None:
            logger.info("[MockIdentityProvider] Signed out %s", self._identity.id)
        self._set_identity(None)
