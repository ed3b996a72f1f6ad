"""
Runtime singletons injected into the routers.

The identity provider, analysis engine and session gate are built lazily on
first use and shared by every request of the process. `reset_dependencies()`
drops them so tests can rebuild the runtime from a modified CONFIG.
"""

import logging
from typing import Optional

from analysis_api.base import AnalysisEngine
from analysis_api.factory import get_analysis_engine as build_analysis_engine
from config import CONFIG
from core.orchestrator import SessionOrchestrator
from core.session_gate import SessionGate
from identity_api.base import IdentityProvider
from identity_api.factory import get_identity_provider as build_identity_provider
from shared.models import Identity

logger = logging.getLogger(__name__)

_identity_provider: Optional[IdentityProvider] = None
_analysis_engine: Optional[AnalysisEngine] = None
_session_gate: Optional[SessionGate] = None


def get_identity_provider() -> IdentityProvider:
    global _identity_provider
    if _identity_provider is None:
        _identity_provider = build_identity_provider(CONFIG)
    return _identity_provider


def get_analysis_engine() -> AnalysisEngine:
    global _analysis_engine
    if _analysis_engine is None:
        _analysis_engine = build_analysis_engine(CONFIG)
    return _analysis_engine


def _new_session(identity: Identity) -> SessionOrchestrator:
    return SessionOrchestrator(engine=get_analysis_engine(), config=CONFIG, identity=identity)


def get_session_gate() -> SessionGate:
    global _session_gate
    if _session_gate is None:
        _session_gate = SessionGate(get_identity_provider(), _new_session)
    return _session_gate


def reset_dependencies() -> None:
    global _identity_provider, _analysis_engine, _session_gate
    if _session_gate is not None:
        _session_gate.close()
    _identity_provider = None
    _analysis_engine = None
    _session_gate = None
