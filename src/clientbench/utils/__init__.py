"""
Utilities Module

Logging setup and async helpers used throughout the harness.
"""

from .logging import get_logger, get_action_logger, setup_logging, PerformanceTimer
from .async_helpers import timeout_after, close_event_loop

__all__ = [
    "get_logger",
    "get_action_logger",
    "setup_logging",
    "PerformanceTimer",
    "timeout_after",
    "close_event_loop",
]
