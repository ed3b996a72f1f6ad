"""
Analysis engine factory (mock/remote switch).

`get_analysis_engine(config)` reads `config["analysis"]["provider"]` in
{"mock", "remote"} (case-insensitive) and builds the matching client. Unknown
values raise `ValueError` with a clear message to aid configuration hygiene.
"""

from __future__ import annotations

import logging
from typing import Any, Dict

from .base import AnalysisEngine

logger = logging.getLogger(__name__)


def get_analysis_engine(config: Dict[str, Any]) -> AnalysisEngine:
    """
    Build an analysis engine client according to the configured provider.

    Args:
        config (Dict[str, Any]): The global CONFIG mapping (not just the analysis section).

    Returns:
        AnalysisEngine: The selected engine client.

    Raises:
        ValueError: If the provider value is unsupported or the remote engine has no base URL.
    """
    analysis_cfg = (config.get("analysis", {}) or {})
    provider = str(analysis_cfg.get("provider", "mock")).strip().lower()
    logger.info("Provider selection (analysis engine): %s", provider)

    if provider == "mock":
        from .mock_engine import MockAnalysisEngine

        return MockAnalysisEngine()
    if provider == "remote":
        from .remote_client import RemoteAnalysisEngine

        return RemoteAnalysisEngine(
            base_url=analysis_cfg.get("base_url", ""),
            timeout_s=float(analysis_cfg.get("timeout_s", 30.0)),
        )

    raise ValueError(f"Unsupported analysis provider: {provider}")
