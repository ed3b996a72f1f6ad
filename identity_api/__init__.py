"""
identity_api package: interchangeable identity providers.

This package contains the abstractions and concrete implementations that gate
access to a session. The rest of the codebase speaks to the small
`IdentityProvider` contract (login, logout, subscribe) while the details of a
real authentication backend are encapsulated behind that boundary.

Included modules:
- base: The abstract `IdentityProvider` with its owned subscriber registry.
- mock_client: Simulated provider used when no real backend is configured.
- delegating_client: Provider that forwards to a real `IdentityBackend`.
- factory: One-time, configuration-driven selection with logged fallback.
- errors: `AuthError` taxonomy and backend code translation.
"""

from .base import IdentityProvider
from .delegating_client import DelegatingIdentityProvider, IdentityBackend
from .errors import AuthError, AuthErrorKind, IdentityBackendError
from .factory import get_identity_provider, is_backend_configured
from .mock_client import MockIdentityProvider

__all__ = [
    "IdentityProvider",
    "IdentityBackend",
    "DelegatingIdentityProvider",
    "MockIdentityProvider",
    "AuthError",
    "AuthErrorKind",
    "IdentityBackendError",
    "get_identity_provider",
    "is_backend_configured",
]
