"""
HTTP client for a remote analysis engine (minimal, dependency-free).

This module calls the remote engine with Python's standard library HTTP
client. The request body carries the user's command, the current session state
and the loaded data sources; the reply must be a JSON object describing a
complete session state (camelCase keys). Network I/O runs in a worker thread
so the session's event loop is never blocked while the engine thinks.

Error taxonomy: timeouts raise `AnalysisEngineTimeoutError`; non-200
responses, invalid JSON and replies that fail validation raise
`AnalysisEngineError`.
"""

from __future__ import annotations

import asyncio
import json
import logging
import socket
from typing import Any, Dict, Mapping
from urllib import error as urlerror
from urllib import request as urlrequest

from pydantic import ValidationError

from shared.models import SessionState
from .base import AnalysisEngine
from .errors import AnalysisEngineError, AnalysisEngineTimeoutError

logger = logging.getLogger(__name__)

ANALYZE_PATH = "/api/analyze"


def post_analyze(base_url: str, payload: Dict[str, Any], timeout_s: float = 30.0) -> Dict[str, Any]:
    """
    POST an analysis request and return the parsed JSON response.

    Args:
        base_url (str): Engine base URL (e.g., "http://localhost:8000").
        payload (Dict[str, Any]): JSON-serializable request body.
        timeout_s (float): Socket timeout in seconds.

    Returns:
        Dict[str, Any]: Parsed JSON payload returned on HTTP 200.

    Raises:
        AnalysisEngineTimeoutError: When the request exceeds the given timeout.
        AnalysisEngineError: For non-200 HTTP responses, network errors or invalid JSON bodies.
    """
    url = f"{base_url.rstrip('/')}{ANALYZE_PATH}"
    data = json.dumps(payload).encode("utf-8")

    req = urlrequest.Request(url, data=data, method="POST")
    req.add_header("Content-Type", "application/json")

    try:
        with urlrequest.urlopen(req, timeout=timeout_s) as resp:
            status = getattr(resp, "status", 200)
            body = resp.read().decode("utf-8", errors="replace")
    except socket.timeout as exc:
        raise AnalysisEngineTimeoutError(f"Request timed out after {timeout_s}s") from exc
    except urlerror.HTTPError as exc:
        raise AnalysisEngineError(f"Analysis engine HTTP {exc.code}: {exc.reason}") from exc
    except urlerror.URLError as exc:
        # URLError may wrap socket.timeout or other transient network errors
        if isinstance(exc.reason, socket.timeout):
            raise AnalysisEngineTimeoutError(f"Request timed out after {timeout_s}s") from exc
        raise AnalysisEngineError(f"Network error calling analysis engine: {exc}") from exc

    if status != 200:
        raise AnalysisEngineError(f"Analysis engine HTTP {status}: {body[:200]}")
    try:
        parsed = json.loads(body)
    except json.JSONDecodeError as exc:
        raise AnalysisEngineError(f"Invalid JSON from analysis engine: {exc}: body={body[:200]}") from exc
    if not isinstance(parsed, dict):
        raise AnalysisEngineError(f"Analysis engine returned {type(parsed).__name__}, expected an object")
    return parsed


class RemoteAnalysisEngine(AnalysisEngine):
    """
    `AnalysisEngine` that delegates to a remote HTTP service.

    Args:
        base_url (str): Engine base URL.
        timeout_s (float): Socket timeout per request.
    """

    name = "remote"

    def __init__(self, base_url: str, timeout_s: float = 30.0) -> None:
        if not isinstance(base_url, str) or not base_url.strip():
            raise ValueError("Remote analysis engine requires a base_url")
        self.base_url = base_url
        self.timeout_s = timeout_s

    async def analyze(
        self,
        command_text: str,
        current_state: SessionState,
        data_context: Mapping[str, str],
    ) -> SessionState:
        payload = {
            "command": command_text,
            "state": current_state.model_dump(mode="json", by_alias=True),
            "dataContext": dict(data_context),
        }
        body = await asyncio.to_thread(post_analyze, self.base_url, payload, self.timeout_s)
        try:
            return SessionState.model_validate(body)
        except ValidationError as exc:
            raise AnalysisEngineError(f"Analysis engine returned an invalid state: {exc}") from exc
