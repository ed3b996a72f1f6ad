"""
Deterministic mock analysis engine for local runs, demos, and tests.

This module provides a reference implementation of the analysis interface so
the service can be executed end-to-end without a remote engine. The mock does
not analyze anything: it reports which data sources are loaded, tags the
result by keywords found in the command, and returns a small table listing the
sources. Because the output is stable, tests and demos are reproducible.
"""

import re
from typing import Mapping

from shared.models import InsightType, SessionState, SessionStatus
from .base import AnalysisEngine

FINANCIAL_KEYWORDS = ("sales", "revenue", "profit", "margin", "cost", "invoice", "paisa", "kamai")
OPERATIONAL_KEYWORDS = ("stock", "inventory", "delivery", "order", "shipment", "staff")

FINANCIAL_CONFIDENCE = 85
OPERATIONAL_CONFIDENCE = 70
GENERIC_CONFIDENCE = 50


def _mentions(command_text: str, keywords) -> bool:
    words = set(re.findall(r"[a-z]+", command_text.lower()))
    return any(keyword in words for keyword in keywords)


def _line_count(raw_content: str) -> int:
    lines = [line for line in raw_content.splitlines() if line.strip()]
    # First non-empty line is the header row
    return max(len(lines) - 1, 0)


class MockAnalysisEngine(AnalysisEngine):
    """
    In-memory engine with canned, keyword-tagged replies.
    """

    name = "mock"

    async def analyze(
        self,
        command_text: str,
        current_state: SessionState,
        data_context: Mapping[str, str],
    ) -> SessionState:
        if not data_context:
            return current_state.model_copy(update={
                "status": SessionStatus.IDLE,
                "message": "No data sources loaded yet. Upload a CSV file to get started.",
                "insight_type": InsightType.GENERIC,
                "confidence_score": 0,
                "chart_data": None,
                "table_data": None,
            })

        if _mentions(command_text, FINANCIAL_KEYWORDS):
            insight_type, confidence = InsightType.FINANCIAL, FINANCIAL_CONFIDENCE
        elif _mentions(command_text, OPERATIONAL_KEYWORDS):
            insight_type, confidence = InsightType.OPERATIONAL, OPERATIONAL_CONFIDENCE
        else:
            insight_type, confidence = InsightType.GENERIC, GENERIC_CONFIDENCE

        names = ", ".join(data_context)
        table = [
            {"source": name, "rows": _line_count(content)}
            for name, content in data_context.items()
        ]
        return current_state.model_copy(update={
            "status": SessionStatus.IDLE,
            "message": f"Reviewed {len(data_context)} data source(s): {names}.",
            "insight_type": insight_type,
            "confidence_score": confidence,
            "chart_data": None,
            "table_data": table,
        })
