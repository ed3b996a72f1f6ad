"""
conftest.py – central pytest configuration and test bootstrap.

Pytest imports this module before it collects any test files, so we use it to
prepare the environment that the configuration layer reads at import time:
1) Extend `sys.path` with the project root so absolute imports like
   `from core ...` and `from shared ...` resolve without an editable install.
2) Force deterministic settings: no file logging, zero simulated sign-in
   latency, the mock analysis engine, and placeholder identity credentials so
   the simulated identity provider is selected even if a developer `.env`
   holds real ones.
"""

import os
import sys
from pathlib import Path

import pytest

# Ensure project root is on sys.path for direct imports like `core`, `shared`, etc.
PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

os.environ["LOG_FILE_PATH"] = ""
os.environ["IDENTITY_API_KEY"] = ""
os.environ["ANALYSIS_PROVIDER"] = "mock"
os.environ["SIMULATED_LOGIN_DELAY_S"] = "0"
os.environ["SIMULATED_LOGOUT_DELAY_S"] = "0"


@pytest.fixture
def session_config():
    """A self-contained configuration dictionary for orchestrator tests."""
    return {
        "session": {
            "welcome_message": "Hello. I am Vernacular Ops.",
            "initial_status_message": "System ready. Awaiting data.",
            "completion_message": "Analysis complete.",
            "error_message": "ERROR: Business logic core unreachable.",
        },
        "celebration": {
            "insight_type": "FINANCIAL",
            "min_confidence": 80,
            "particle_count": 100,
            "spread": 70,
            "origin_y": 0.6,
            "colors": ["#34d399", "#10b981", "#fbbf24"],
        },
        "analysis": {"timeout_s": 5.0},
    }
