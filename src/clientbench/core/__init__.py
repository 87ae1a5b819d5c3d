"""
Core Module

Foundational components used across the harness: configuration model,
environment validation and custom exceptions.
"""

from .exceptions import (
    ClientBenchException,
    ConfigurationError,
    ErrorKind,
    ResponseError,
    RunError,
    StatusCodeError,
    TransportError,
)

__all__ = [
    "ClientBenchException",
    "ConfigurationError",
    "ErrorKind",
    "ResponseError",
    "RunError",
    "StatusCodeError",
    "TransportError",
]
