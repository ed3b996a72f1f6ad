"""
Identity provider selection (real backend vs. simulation).

This module centralizes the one-time decision, taken at process start, of
which `IdentityProvider` implementation serves the session. The decision is
driven by configuration: when `CONFIG["identity"]["backend"]` holds real,
non-placeholder credentials the delegating provider is built around a backend
produced by the supplied `backend_factory`; otherwise the simulated provider is
used.

Fallback contract:
- If building the backend or the delegating provider raises for any reason
  (missing factory, configuration error, connectivity error), the failure is
  logged at WARNING level and the simulated provider is returned instead.
- The fallback is never raised to the caller.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Optional

from .base import IdentityProvider
from .delegating_client import DelegatingIdentityProvider, IdentityBackend
from .mock_client import MockIdentityProvider

logger = logging.getLogger(__name__)

PLACEHOLDER_MARKERS = ("ReplaceMe", "your-project-id")

BackendFactory = Callable[[Dict[str, Any]], IdentityBackend]


def is_backend_configured(config: Dict[str, Any]) -> bool:
    """
    Return True when the identity backend has real, non-placeholder credentials.

    Args:
        config (Dict[str, Any]): The global CONFIG mapping (not just the identity section).
    """
    backend_cfg = ((config.get("identity", {}) or {}).get("backend", {}) or {})
    api_key = str(backend_cfg.get("api_key", "") or "").strip()
    if not api_key:
        return False
    return not any(marker in api_key for marker in PLACEHOLDER_MARKERS)


def build_simulated_provider(config: Dict[str, Any]) -> MockIdentityProvider:
    sim_cfg = ((config.get("identity", {}) or {}).get("simulated", {}) or {})
    return MockIdentityProvider(
        login_delay_s=float(sim_cfg.get("login_delay_s", 1.0)),
        logout_delay_s=float(sim_cfg.get("logout_delay_s", 0.5)),
    )


def get_identity_provider(
    config: Dict[str, Any],
    backend_factory: Optional[BackendFactory] = None,
) -> IdentityProvider:
    """
    Build the identity provider for this process.

    Args:
        config (Dict[str, Any]): The global CONFIG mapping.
        backend_factory (Optional[BackendFactory]): Callable that receives the
            identity backend config section and returns a connected
            `IdentityBackend`. Required for the delegating mode.

    Returns:
        IdentityProvider: Delegating provider when the backend is configured and
        builds successfully, otherwise the simulated provider.
    """
    if not is_backend_configured(config):
        logger.info("Identity provider selected: simulated (backend credentials are placeholders or missing)")
        return build_simulated_provider(config)

    backend_cfg = config["identity"]["backend"]
    try:
        if backend_factory is None:
            raise RuntimeError("No identity backend factory registered")
        provider = DelegatingIdentityProvider(backend_factory(backend_cfg))
    except Exception as exc:
        logger.warning(
            "Identity backend initialization failed (%s: %s). Falling back to simulated provider.",
            type(exc).__name__,
            exc,
        )
        return build_simulated_provider(config)

    logger.info("Identity provider selected: delegating")
    return provider
