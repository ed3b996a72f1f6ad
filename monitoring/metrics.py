"""
Core metrics and monitoring decorators for the session service.

This module defines Prometheus metrics and decorators for tracking:
- Command cycle outcomes and analysis engine latency
- Error rates
- Authentication attempts per identity mode
- Data source ingestion and eviction events
"""

import time
import functools
import inspect
import logging
from typing import Optional, Callable
from prometheus_client import Counter, Histogram

# Configure logger
logger = logging.getLogger(__name__)

# Command cycle metrics
COMMAND_COUNT = Counter(
    'session_commands_total',
    'Total number of submitted commands by outcome',
    ['outcome']  # completed, failed, rejected
)

ANALYSIS_LATENCY = Histogram(
    'analysis_request_duration_seconds',
    'Time spent waiting for the analysis engine',
    ['engine'],
    buckets=[0.1, 0.5, 1.0, 2.0, 5.0, 10.0, 30.0, float("inf")]
)

# Error metrics
ERROR_COUNT = Counter(
    'error_total',
    'Total number of errors',
    ['type', 'location']  # type: e.g., 'analysis', 'auth', 'notification'; location: specific component
)

# Identity metrics
AUTH_ATTEMPTS = Counter(
    'auth_attempts_total',
    'Login attempts by identity mode and outcome',
    ['mode', 'outcome']
)

# Data context metrics
DATA_SOURCE_EVENTS = Counter(
    'data_source_events_total',
    'Data source ingestion and eviction events',
    ['action']  # ingest, replace, evict
)


def _observe(metric: Histogram, labels: Optional[Callable], args, func_name: str, start_time: float) -> None:
    duration = time.time() - start_time
    if labels and args:
        # For instance methods, first arg is 'self'
        label_dict = labels(args[0])
        metric.labels(**label_dict).observe(duration)
    else:
        metric.observe(duration)

    logger.debug(
        f"Function {func_name} execution time: {duration:.2f} seconds",
        extra={'duration': duration, 'function': func_name}
    )


def track_latency(metric: Histogram, labels: Optional[Callable] = None) -> Callable:
    """
    A decorator factory that tracks the execution time of a function using a Prometheus Histogram.

    Works for plain functions and coroutine functions alike.

    Args:
        metric (Histogram): The Prometheus Histogram to record the timing in
        labels (Callable, optional): Function that receives `self` and returns a metric labels dictionary

    Returns:
        Callable: The decorated function
    """
    def decorator(func: Callable) -> Callable:
        if inspect.iscoroutinefunction(func):
            @functools.wraps(func)
            async def async_wrapper(*args, **kwargs):
                start_time = time.time()
                try:
                    return await func(*args, **kwargs)
                finally:
                    _observe(metric, labels, args, func.__name__, start_time)
            return async_wrapper

        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            start_time = time.time()
            try:
                return func(*args, **kwargs)
            finally:
                _observe(metric, labels, args, func.__name__, start_time)
        return wrapper
    return decorator


def _record_error(error_type: str, location: str, exc: Exception) -> None:
    ERROR_COUNT.labels(
        type=error_type,
        location=location
    ).inc()

    logger.error(
        f"Error in {location} ({error_type}): {str(exc)}",
        extra={
            'error_type': error_type,
            'location': location,
            'error': str(exc)
        },
        exc_info=True
    )


def track_errors(error_type: str, location: str) -> Callable:
    """
    A decorator factory that tracks errors occurring in a function.

    The exception is counted, logged and re-raised.

    Args:
        error_type (str): Type of error (e.g., 'analysis', 'auth')
        location (str): Where the error occurred

    Returns:
        Callable: The decorated function

    Example:
        @track_errors('analysis', 'orchestrator')
        async def _run_analysis(self, command_text: str):
            ...
    """
    def decorator(func: Callable) -> Callable:
        if inspect.iscoroutinefunction(func):
            @functools.wraps(func)
            async def async_wrapper(*args, **kwargs):
                try:
                    return await func(*args, **kwargs)
                except Exception as e:
                    _record_error(error_type, location, e)
                    raise  # Re-raise the exception after tracking
            return async_wrapper

        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except Exception as e:
                _record_error(error_type, location, e)
                raise  # Re-raise the exception after tracking
        return wrapper
    return decorator
