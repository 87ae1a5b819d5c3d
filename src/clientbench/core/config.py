"""
Configuration Model

Immutable configuration objects describing one benchmark run: the run
identity, the service under test, the runner itself and the HTTP clients
used to reach the target and the report destination.
"""

import platform
from dataclasses import dataclass, field
from typing import Optional

from clientbench.http.client import HttpClient

RUNTIME_NAME = "python"
DEFAULT_CALL_TIMEOUT = 60.0


@dataclass(frozen=True)
class Git:
    """Source control identity of the client being benchmarked."""
    branch: str
    commit: str


@dataclass(frozen=True)
class Os:
    """Operating system of the target service."""
    family: str


@dataclass(frozen=True)
class Service:
    """Identity of the service being benchmarked."""
    type: str
    name: str
    version: str
    git: Git


@dataclass(frozen=True)
class Runtime:
    """Language runtime executing the benchmarks."""
    name: str = RUNTIME_NAME
    version: str = field(default_factory=platform.python_version)


@dataclass(frozen=True)
class Target:
    """Service under test."""
    service: Service
    os: Os


@dataclass(frozen=True)
class RunnerInfo:
    """Process running the benchmarks."""
    service: Service
    runtime: Runtime
    os: Os


@dataclass(frozen=True)
class LoggingConfig:
    """Logging configuration."""
    level: str = "INFO"
    console_level: str = "WARNING"  # Separate level for console output
    file: Optional[str] = None
    max_size: str = "10MB"
    backup_count: int = 5
    json: bool = False


@dataclass(frozen=True)
class Config:
    """Validated, process-wide benchmark configuration."""
    build_id: str
    environment: str
    data_source: str
    target: Target
    runner: RunnerInfo
    runner_client: HttpClient
    report_client: HttpClient
    category: str = ""
    action_filter: str = ""
    call_timeout: float = DEFAULT_CALL_TIMEOUT
    logging: LoggingConfig = field(default_factory=LoggingConfig)
