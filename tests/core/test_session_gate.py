"""
Unit tests for `core/session_gate.py` – identity-bound session lifecycle.
"""

import asyncio
from unittest.mock import MagicMock

import pytest

from core.orchestrator import SessionOrchestrator
from core.session_gate import SessionGate, SessionUnavailableError
from identity_api.mock_client import MockIdentityProvider
from analysis_api.mock_engine import MockAnalysisEngine


@pytest.fixture
def provider():
    return MockIdentityProvider(login_delay_s=0, logout_delay_s=0)


@pytest.fixture
def gate(provider, session_config):
    return SessionGate(provider, lambda identity: SessionOrchestrator(MockAnalysisEngine(), session_config, identity))


def test_no_session_without_identity(gate):
    assert gate.current is None
    with pytest.raises(SessionUnavailableError):
        gate.require()


def test_login_opens_session_and_logout_discards_it(gate, provider):
    identity = asyncio.run(provider.login("a@b.com", "x"))

    session = gate.require()
    assert session.identity == identity
    assert gate.identity == identity

    session.ingest("sales.csv", "a\n1", 1)
    asyncio.run(provider.logout())

    assert gate.current is None
    with pytest.raises(SessionUnavailableError):
        gate.require()


def test_new_login_starts_fresh_session(gate, provider):
    asyncio.run(provider.login("a@b.com", "x"))
    gate.require().ingest("sales.csv", "a\n1", 1)
    asyncio.run(provider.logout())

    asyncio.run(provider.login("a@b.com", "x"))

    assert gate.require().list_sources() == []
    assert gate.require().state.records_loaded == 0


def test_gate_picks_up_identity_present_at_construction(provider, session_config):
    asyncio.run(provider.login("a@b.com", "x"))
    factory = MagicMock(side_effect=lambda identity: SessionOrchestrator(MockAnalysisEngine(), session_config, identity))

    gate = SessionGate(provider, factory)

    factory.assert_called_once_with(provider.current_identity)
    assert gate.current is not None


def test_close_stops_following_identity(gate, provider):
    gate.close()

    asyncio.run(provider.login("a@b.com", "x"))

    assert gate.current is None


def test_failed_session_build_never_hands_over_previous_session(provider, session_config):
    built = []

    def factory(identity):
        if built:
            raise RuntimeError("engine unavailable")
        session = SessionOrchestrator(MockAnalysisEngine(), session_config, identity)
        built.append(session)
        return session

    gate = SessionGate(provider, factory)
    asyncio.run(provider.login("a@x.com", "x"))
    gate.require().ingest("private.csv", "a\n1", 1)

    asyncio.run(provider.login("b@x.com", "x"))

    assert provider.current_identity.email == "b@x.com"
    assert gate.current is None
    assert gate.identity is None
    with pytest.raises(SessionUnavailableError):
        gate.require()


def test_switching_identity_opens_separate_session(gate, provider):
    asyncio.run(provider.login("a@x.com", "x"))
    first = gate.require()
    first.ingest("private.csv", "a\n1", 1)

    asyncio.run(provider.login("b@x.com", "x"))

    assert gate.require() is not first
    assert gate.require().identity.email == "b@x.com"
    assert gate.require().list_sources() == []
