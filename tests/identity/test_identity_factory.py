"""
Unit tests for `identity_api/factory.py` – provider selection and fallback.
"""

import logging
from unittest.mock import MagicMock

from identity_api.delegating_client import DelegatingIdentityProvider
from identity_api.factory import get_identity_provider, is_backend_configured
from identity_api.mock_client import MockIdentityProvider


def make_config(api_key):
    return {
        "identity": {
            "backend": {"api_key": api_key, "project_id": "vernacular-ops"},
            "simulated": {"login_delay_s": 0, "logout_delay_s": 0},
        }
    }


def test_placeholder_credentials_select_simulated_provider():
    config = make_config("AIzaSyDummyKeyForDemonstration_ReplaceMe")
    backend_factory = MagicMock()

    provider = get_identity_provider(config, backend_factory)

    assert isinstance(provider, MockIdentityProvider)
    assert provider.login_delay_s == 0
    backend_factory.assert_not_called()


def test_missing_credentials_are_not_configured():
    assert is_backend_configured({}) is False
    assert is_backend_configured(make_config("")) is False
    assert is_backend_configured(make_config("real-key")) is True


def test_real_credentials_build_delegating_provider():
    config = make_config("real-key")
    backend = MagicMock()
    backend_factory = MagicMock(return_value=backend)

    provider = get_identity_provider(config, backend_factory)

    assert isinstance(provider, DelegatingIdentityProvider)
    backend_factory.assert_called_once_with(config["identity"]["backend"])
    backend.on_auth_state_changed.assert_called_once()


def test_backend_failure_falls_back_to_simulated_with_warning(caplog):
    config = make_config("real-key")
    backend_factory = MagicMock(side_effect=ConnectionError("cannot reach backend"))

    with caplog.at_level(logging.WARNING, logger="identity_api.factory"):
        provider = get_identity_provider(config, backend_factory)

    assert isinstance(provider, MockIdentityProvider)
    assert any(
        record.levelno == logging.WARNING and "Falling back" in record.getMessage()
        for record in caplog.records
    )


def test_real_credentials_without_factory_fall_back(caplog):
    with caplog.at_level(logging.WARNING, logger="identity_api.factory"):
        provider = get_identity_provider(make_config("real-key"))

    assert isinstance(provider, MockIdentityProvider)
    assert "No identity backend factory" in caplog.text
