"""
Custom Exception Classes

Application-specific exception classes for the benchmark harness. Every
harness error carries an explicit ``kind`` so callers can tell configuration
failures, response failures and aggregated run failures apart.
"""

from enum import Enum
from typing import Optional, Any, Dict, List


class ErrorKind(str, Enum):
    """Closed set of harness error kinds."""
    CONFIG = "config"
    RESPONSE = "response"
    RUN = "run"


class ClientBenchException(Exception):
    """Base exception class for all clientbench errors."""

    kind: Optional[ErrorKind] = None

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} - Details: {self.details}"
        return self.message


class ConfigurationError(ClientBenchException):
    """Raised when required configuration is missing or invalid."""

    kind = ErrorKind.CONFIG

    def __init__(self, message: str, violations: Optional[List[str]] = None, **kwargs):
        super().__init__(message, kwargs)
        self.violations = list(violations) if violations else [message]


class TransportError(ClientBenchException):
    """Raised when an HTTP exchange could not be completed."""

    def __init__(self, message: str, method: Optional[str] = None,
                 url: Optional[str] = None, **kwargs):
        super().__init__(message, kwargs)
        self.method = method
        self.url = url


class StatusCodeError(ClientBenchException):
    """Raised when a completed exchange carries a non-success status code."""

    def __init__(self, message: str, status_code: int,
                 response_body: Optional[str] = None, **kwargs):
        super().__init__(message, kwargs)
        self.status_code = status_code
        self.response_body = response_body


class ResponseError(ClientBenchException):
    """Wraps a transport or response failure, keeping it as the cause."""

    kind = ErrorKind.RESPONSE

    def __init__(self, cause: BaseException, message: Optional[str] = None, **kwargs):
        super().__init__(message or str(cause), kwargs)
        self.cause = cause
        self.__cause__ = cause


class RunError(ClientBenchException):
    """Raised when one or more repetitions of an action failed."""

    kind = ErrorKind.RUN

    def __init__(self, errors: List[str], action: Optional[str] = None):
        super().__init__("\n".join(errors))
        self.errors = list(errors)
        self.action = action
