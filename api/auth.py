"""
api/auth.py (LOGIN, LOGOUT and ME endpoints)

Handles the sign-in surface of the service. The identity provider behind these
endpoints is either the real authentication backend or the simulated provider,
chosen once at startup; the endpoints behave the same in both modes.

Endpoints:
  - POST /auth/login: Authenticates a user and opens the session.
  - POST /auth/logout: Signs the user out and discards the session.
  - GET /auth/me: Returns the current identity, or null.
"""

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from core.session_gate import SessionGate
from identity_api.base import IdentityProvider
from identity_api.errors import AuthError
from monitoring.metrics import AUTH_ATTEMPTS
from .dependencies import get_identity_provider, get_session_gate
from .schemas import LoginRequest

# Get a logger instance for this module
logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/auth/login")
async def login(
    body: LoginRequest,
    provider: IdentityProvider = Depends(get_identity_provider),
    gate: SessionGate = Depends(get_session_gate),
):
    """
    Authenticate a user and return the resulting identity.

    The session gate is resolved as a dependency so that it is already
    subscribed to the provider when the identity changes; the new session is
    therefore open by the time this endpoint returns.

    Returns:
        JSONResponse: Identity payload with 'id', 'email' and 'displayName' on
            success; HTTP 401 with 'error' (failure kind) and 'message'
            (sign-in surface text) on failure.
    """
    logger.info(f"[login] Sign-in attempt for {body.email} ({provider.mode} mode)")
    try:
        identity = await provider.login(body.email, body.password)
    except AuthError as e:
        AUTH_ATTEMPTS.labels(mode=provider.mode, outcome='failure').inc()
        logger.warning(f"[login] Sign-in failed for {body.email}: {e.kind.value}")
        return JSONResponse(e.to_dict(), status_code=401)

    AUTH_ATTEMPTS.labels(mode=provider.mode, outcome='success').inc()
    return JSONResponse(identity.to_dict())


@router.post("/auth/logout")
async def logout(provider: IdentityProvider = Depends(get_identity_provider)):
    """
    Sign the current user out. Idempotent.

    A backend failure is reported with HTTP 502, but the identity is cleared
    and the session discarded regardless.
    """
    try:
        await provider.logout()
    except AuthError as e:
        logger.error(f"[logout] Sign-out reported a failure: {e}")
        return JSONResponse({"response": "error", **e.to_dict()}, status_code=502)
    return JSONResponse({"response": "ok"})


@router.get("/auth/me")
async def current_identity(gate: SessionGate = Depends(get_session_gate)):
    identity = gate.identity
    return JSONResponse({"identity": identity.to_dict() if identity else None})
