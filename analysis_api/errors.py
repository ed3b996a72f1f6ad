"""
Errors raised by analysis engine clients.

The orchestrator does not decompose these: any failure of the engine becomes
the single "core unreachable" transcript entry. The classes exist so clients
can report what went wrong in logs and metrics.
"""


class AnalysisEngineError(Exception):
    """
    Base exception for analysis engine failures.

    Raised for non-timeout failures such as non-200 HTTP responses, invalid
    JSON payloads, or replies that do not describe a complete session state.
    """


class AnalysisEngineTimeoutError(AnalysisEngineError):
    """
    Timeout-specific engine error.

    Raised when the engine does not answer within the configured timeout,
    either at the socket level or at the orchestrator's own deadline.
    """
