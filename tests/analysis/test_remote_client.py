"""
Unit tests for `analysis_api/remote_client.py`.

The HTTP layer is patched at `urlopen` so no network access happens.
"""

import asyncio
import io
import json
import socket
from unittest.mock import MagicMock, patch
from urllib import error as urlerror

import pytest

from analysis_api.errors import AnalysisEngineError, AnalysisEngineTimeoutError
from analysis_api.remote_client import RemoteAnalysisEngine, post_analyze
from shared.models import InsightType, SessionState


def fake_response(body, status=200):
    response = MagicMock()
    response.status = status
    response.read.return_value = body.encode("utf-8")
    response.__enter__.return_value = response
    response.__exit__.return_value = False
    return response


@patch("analysis_api.remote_client.urlrequest.urlopen")
def test_post_analyze_sends_json_and_parses_reply(mock_urlopen):
    mock_urlopen.return_value = fake_response('{"status": "IDLE"}')

    result = post_analyze("http://engine:8000/", {"command": "hi"}, timeout_s=3)

    request = mock_urlopen.call_args[0][0]
    assert request.full_url == "http://engine:8000/api/analyze"
    assert json.loads(request.data.decode("utf-8")) == {"command": "hi"}
    assert mock_urlopen.call_args[1]["timeout"] == 3
    assert result == {"status": "IDLE"}


@patch("analysis_api.remote_client.urlrequest.urlopen", side_effect=socket.timeout("timed out"))
def test_post_analyze_timeout(mock_urlopen):
    with pytest.raises(AnalysisEngineTimeoutError):
        post_analyze("http://engine:8000", {}, timeout_s=1)


@patch("analysis_api.remote_client.urlrequest.urlopen")
def test_post_analyze_http_error(mock_urlopen):
    mock_urlopen.side_effect = urlerror.HTTPError(
        "http://engine:8000/api/analyze", 500, "Internal Server Error", {}, io.BytesIO(b"")
    )

    with pytest.raises(AnalysisEngineError) as excinfo:
        post_analyze("http://engine:8000", {})

    assert not isinstance(excinfo.value, AnalysisEngineTimeoutError)
    assert "500" in str(excinfo.value)


@pytest.mark.parametrize("body", ["not json", "[1, 2, 3]"])
@patch("analysis_api.remote_client.urlrequest.urlopen")
def test_post_analyze_rejects_non_object_bodies(mock_urlopen, body):
    mock_urlopen.return_value = fake_response(body)

    with pytest.raises(AnalysisEngineError):
        post_analyze("http://engine:8000", {})


def test_remote_engine_requires_base_url():
    with pytest.raises(ValueError):
        RemoteAnalysisEngine("")


@patch("analysis_api.remote_client.post_analyze")
def test_remote_engine_builds_payload_and_validates_reply(mock_post):
    mock_post.return_value = {
        "status": "IDLE",
        "message": "Sales up 12%.",
        "recordsLoaded": 3,
        "insightType": "FINANCIAL",
        "confidenceScore": 91,
        "tableData": [{"day": "Mon", "amount": 100}],
    }
    engine = RemoteAnalysisEngine("http://engine:8000", timeout_s=2)

    result = asyncio.run(engine.analyze("sales?", SessionState(records_loaded=3), {"sales.csv": "a,b"}))

    base_url, payload, timeout_s = mock_post.call_args[0]
    assert base_url == "http://engine:8000"
    assert timeout_s == 2
    assert payload["command"] == "sales?"
    assert payload["state"]["recordsLoaded"] == 3
    assert payload["dataContext"] == {"sales.csv": "a,b"}
    assert result.insight_type is InsightType.FINANCIAL
    assert result.confidence_score == 91


@patch("analysis_api.remote_client.post_analyze", return_value={"confidenceScore": 250})
def test_remote_engine_invalid_state_is_engine_error(mock_post):
    engine = RemoteAnalysisEngine("http://engine:8000")

    with pytest.raises(AnalysisEngineError):
        asyncio.run(engine.analyze("x", SessionState(), {}))
