"""
analysis_api package: clients of the external analysis engine.

- base: The abstract `AnalysisEngine` contract
- mock_engine: Deterministic in-memory engine, the default for local runs
- remote_client: HTTP client for a remote engine
- factory: Configuration-driven selection
- errors: Engine failure types
"""

from .base import AnalysisEngine
from .errors import AnalysisEngineError, AnalysisEngineTimeoutError
from .factory import get_analysis_engine
from .mock_engine import MockAnalysisEngine

__all__ = [
    "AnalysisEngine",
    "AnalysisEngineError",
    "AnalysisEngineTimeoutError",
    "MockAnalysisEngine",
    "get_analysis_engine",
]
