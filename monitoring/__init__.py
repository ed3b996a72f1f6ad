"""
Monitoring package initializer.

This package exposes Prometheus metrics and helper decorators for tracking
session activity.
"""

from .metrics import (
    COMMAND_COUNT,
    ANALYSIS_LATENCY,
    ERROR_COUNT,
    AUTH_ATTEMPTS,
    DATA_SOURCE_EVENTS,
    track_latency,
    track_errors,
)

__all__ = [
    'COMMAND_COUNT',
    'ANALYSIS_LATENCY',
    'ERROR_COUNT',
    'AUTH_ATTEMPTS',
    'DATA_SOURCE_EVENTS',
    'track_latency',
    'track_errors',
]
