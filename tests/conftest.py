"""
Pytest Configuration

Global test configuration, fixtures, and fakes for the clientbench test
suite.
"""

import asyncio
import sys
from pathlib import Path
from typing import Dict, List, Optional, Union

import pytest

# Add src to Python path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from clientbench.benchmark.action import Action, Measurable
from clientbench.core.config import (
    Config, Git, Os, Runtime, RunnerInfo, Service, Target,
)
from clientbench.core.exceptions import TransportError
from clientbench.http.client import HttpClient, Response

TARGET_URL = "http://localhost:9200"
REPORT_URL = "http://localhost:9201"


def make_response(status_code: int = 200, body: str = "", method: str = "GET",
                  path: str = "/") -> Response:
    """Create a completed response for the target service."""
    return Response(
        method=method,
        url=f"{TARGET_URL}{path}",
        status_code=status_code,
        body=body,
    )


def make_config(**overrides) -> Config:
    """Create a valid configuration without touching the environment."""
    service = Service(
        type="elasticsearch",
        name="es-bench",
        version="8.11.0",
        git=Git(branch="main", commit="abc123"),
    )
    os_info = Os(family="linux")
    values = dict(
        build_id="build-42",
        environment="test",
        data_source="bench-data",
        target=Target(service=service, os=os_info),
        runner=RunnerInfo(service=service, runtime=Runtime(version="3.11.0"), os=os_info),
        runner_client=HttpClient(TARGET_URL),
        report_client=HttpClient(REPORT_URL),
        category="core",
        action_filter="",
        call_timeout=5.0,
    )
    values.update(overrides)
    return Config(**values)


Step = Union[int, Exception]


class ScriptedMeasurable(Measurable):
    """Measurable that replays scripted outcomes.

    Each entry is either a status code (a response is returned) or an
    exception instance (raised). The last entry repeats once the script runs
    out.
    """

    def __init__(self, script: Optional[List[Step]] = None):
        self.script = list(script or [200])
        self.calls: List[int] = []

    async def measure(self, i: int, client: HttpClient) -> Response:
        position = len(self.calls)
        self.calls.append(i)
        step = self.script[min(position, len(self.script) - 1)]
        if isinstance(step, Exception):
            raise step
        return make_response(step)


class ScriptedSetupMeasurable(ScriptedMeasurable):
    """ScriptedMeasurable with a setup hook that may fail."""

    def __init__(self, script: Optional[List[Step]] = None,
                 setup_error: Optional[Exception] = None):
        super().__init__(script)
        self.setup_error = setup_error
        self.setup_calls = 0

    async def setup(self, client: HttpClient) -> None:
        self.setup_calls += 1
        if self.setup_error is not None:
            raise self.setup_error


class SlowMeasurable(Measurable):
    """Measurable that never finishes before the deadline."""

    def __init__(self, delay: float = 10.0):
        self.delay = delay
        self.cancelled = 0

    async def measure(self, i: int, client: HttpClient) -> Response:
        try:
            await asyncio.sleep(self.delay)
        except asyncio.CancelledError:
            self.cancelled += 1
            raise
        return make_response(200)


@pytest.fixture
def config() -> Config:
    """Provide a valid test configuration."""
    return make_config()


@pytest.fixture
def valid_environ() -> Dict[str, str]:
    """Provide a complete set of benchmark environment variables."""
    return {
        "BUILD_ID": "build-42",
        "DATA_SOURCE": "bench-data",
        "CLIENT_BRANCH": "main",
        "CLIENT_COMMIT": "abc123",
        "CLIENT_BENCHMARK_ENVIRONMENT": "ci",
        "ELASTICSEARCH_TARGET_URL": TARGET_URL,
        "ELASTICSEARCH_REPORT_URL": REPORT_URL,
        "TARGET_SERVICE_TYPE": "elasticsearch",
        "TARGET_SERVICE_NAME": "es-bench",
        "TARGET_SERVICE_VERSION": "8.11.0",
        "TARGET_SERVICE_OS_FAMILY": "linux",
    }


@pytest.fixture
def transport_error() -> TransportError:
    return TransportError("error sending request for POST http://localhost:9200/_doc: connection refused")


def make_action(name: str = "ping", script: Optional[List[Step]] = None,
                warmups: int = 0, repetitions: int = 1,
                measurable: Optional[Measurable] = None, **kwargs) -> Action:
    """Create an action, backed by a ScriptedMeasurable unless one is given."""
    return Action(
        action=name,
        measurable=measurable or ScriptedMeasurable(script),
        warmups=warmups,
        repetitions=repetitions,
        **kwargs
    )


def pytest_configure(config):
    """Configure custom pytest markers."""
    config.addinivalue_line(
        "markers", "unit: Unit tests that don't require external dependencies"
    )
    config.addinivalue_line(
        "markers", "integration: Integration tests exercising several components together"
    )
