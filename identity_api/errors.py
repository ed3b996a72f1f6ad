"""
Error taxonomy for the identity layer.

Login failures are reported to the caller as `AuthError` carrying one of four
kinds. Backend-specific failures are raised by backends as
`IdentityBackendError` with the backend's own error code and translated to an
`AuthError` by the delegating provider, so nothing above the identity layer
ever depends on a vendor's code strings.
"""

from enum import Enum
from typing import Optional


class AuthErrorKind(str, Enum):
    INVALID_CREDENTIAL = "InvalidCredential"
    TOO_MANY_ATTEMPTS = "TooManyAttempts"
    INVALID_EMAIL_FORMAT = "InvalidEmailFormat"
    UNKNOWN = "AuthUnknown"


USER_MESSAGES = {
    AuthErrorKind.INVALID_CREDENTIAL: "Invalid email or password.",
    AuthErrorKind.TOO_MANY_ATTEMPTS: "Too many failed attempts. Please try again later.",
    AuthErrorKind.INVALID_EMAIL_FORMAT: "Please enter a valid email address.",
    AuthErrorKind.UNKNOWN: "Failed to sign in. Please check your credentials.",
}

BACKEND_CODE_MAP = {
    "auth/invalid-credential": AuthErrorKind.INVALID_CREDENTIAL,
    "auth/user-not-found": AuthErrorKind.INVALID_CREDENTIAL,
    "auth/wrong-password": AuthErrorKind.INVALID_CREDENTIAL,
    "auth/too-many-requests": AuthErrorKind.TOO_MANY_ATTEMPTS,
    "auth/invalid-email": AuthErrorKind.INVALID_EMAIL_FORMAT,
}


class AuthError(Exception):
    """
    Authentication failure reported synchronously to the login or logout caller.

    Args:
        kind (AuthErrorKind): Category of the failure.
        message (Optional[str]): Diagnostic detail for logs. Defaults to the
            user-facing message for `kind`.
    """

    def __init__(self, kind: AuthErrorKind, message: Optional[str] = None):
        self.kind = kind
        super().__init__(message or USER_MESSAGES[kind])

    @property
    def user_message(self) -> str:
        """Text shown on the sign-in surface."""
        return USER_MESSAGES[self.kind]

    def to_dict(self):
        return {"error": self.kind.value, "message": self.user_message}


class IdentityBackendError(Exception):
    """
    Failure raised by a real authentication backend.

    Args:
        code (str): Backend error code, e.g. "auth/wrong-password".
        message (str): Optional backend message.
    """

    def __init__(self, code: str, message: str = ""):
        self.code = code
        super().__init__(message or code)


def translate_backend_error(exc: Exception) -> AuthError:
    """
    Map any backend failure onto the identity error taxonomy.

    Unknown codes, and exceptions that carry no code at all, become
    `AuthErrorKind.UNKNOWN`.
    """
    code = getattr(exc, "code", "") or ""
    kind = BACKEND_CODE_MAP.get(str(code), AuthErrorKind.UNKNOWN)
    return AuthError(kind, f"{code or type(exc).__name__}: {exc}")
