"""
Benchmark Runner

Drives one action through its lifecycle: optional setup, warmups, then
measured repetitions. Every measured repetition produces a StatsRecord;
failures are collected and raised together once the action has finished.
"""

import asyncio
import time
from datetime import datetime, timezone
from typing import List, Optional

from clientbench.core.config import Config
from clientbench.core.exceptions import (
    ResponseError, RunError, StatusCodeError, TransportError,
)
from clientbench.http.client import Response
from clientbench.utils.async_helpers import close_event_loop, timeout_after
from clientbench.utils.logging import PerformanceTimer, get_action_logger

from .action import Action
from .stats import Outcome, StatsRecord


class Runner:
    """Executes a single action against the configured target."""

    def __init__(self, config: Config, action: Action):
        """
        Initialize the runner.

        Args:
            config: Validated benchmark configuration
            action: Action to execute
        """
        self.config = config
        self.action = action
        self.stats: List[StatsRecord] = []
        self.errors: List[str] = []
        self.logger = get_action_logger(action.action, config.build_id)
        self._loop: Optional[asyncio.AbstractEventLoop] = None

    @property
    def category(self) -> str:
        if self.action.category is not None:
            return self.action.category
        return self.config.category

    @property
    def environment(self) -> str:
        if self.action.environment is not None:
            return self.action.environment
        return self.config.environment

    @property
    def operations(self) -> int:
        return self.action.operations if self.action.operations is not None else 1

    def run(self) -> None:
        """
        Run setup, warmups and measured repetitions.

        Raises:
            ResponseError: If setup failed; nothing else is run
            RunError: If any warmup or measured repetition failed. Stats for
                every repetition remain available on ``self.stats``.
        """
        self.stats = []
        self.errors = []
        self._loop = asyncio.new_event_loop()
        try:
            self._setup()
            self._warmup()
            self._measure()
        finally:
            self._shutdown()

        if self.errors:
            self.logger.warning(f"{len(self.errors)} error(s) recorded")
            raise RunError(self.errors, action=self.action.action)

        self.logger.info(f"Completed {len(self.stats)} repetition(s)")

    def _setup(self) -> None:
        if not self.action.has_setup:
            return

        client = self.config.runner_client
        with PerformanceTimer(f"setup of {self.action.action}", self.logger):
            try:
                self._call(self.action.measurable.setup(client), "setup")
            except (TransportError, StatusCodeError) as e:
                raise ResponseError(e) from e

    def _warmup(self) -> None:
        client = self.config.runner_client
        for i in range(self.action.warmups):
            try:
                response = self._call(self.action.measurable.measure(i, client), f"warmup {i}")
            except TransportError as e:
                self._record_error("warmup", i, e)
                continue

            if not response.is_success:
                self._record_status_error("warmup", i, response)

    def _measure(self) -> None:
        client = self.config.runner_client
        for i in range(self.action.repetitions):
            start = datetime.now(timezone.utc)
            started = time.perf_counter_ns()
            try:
                response = self._call(self.action.measurable.measure(i, client), f"run {i}")
                error = None
            except TransportError as e:
                response = None
                error = e
            duration_ns = time.perf_counter_ns() - started

            status_code = None
            if response is None:
                outcome = Outcome.FAILURE
                self._record_error("run", i, error)
            else:
                status_code = response.status_code
                if response.is_success:
                    outcome = Outcome.SUCCESS
                else:
                    outcome = Outcome.FAILURE
                    self._record_status_error("run", i, response)

            self.stats.append(StatsRecord(
                start=start,
                duration_ns=duration_ns,
                outcome=outcome,
                status_code=status_code,
            ))

    def _call(self, coro, label: str) -> Response:
        """Run a hook coroutine to completion under the per-call deadline."""
        timeout = self.config.call_timeout
        try:
            return self._loop.run_until_complete(
                timeout_after(coro, timeout, f"{self.action.action} {label}")
            )
        except asyncio.TimeoutError as e:
            raise TransportError(f"operation timed out after {timeout}s") from e

    def _record_error(self, phase: str, i: int, error: Exception) -> None:
        message = f"{phase} {i}: {error}"
        self.logger.debug(message)
        self.errors.append(message)

    def _record_status_error(self, phase: str, i: int, response: Response) -> None:
        try:
            response.error_for_status_code()
        except StatusCodeError as e:
            self._record_error(phase, i, e)

    def _shutdown(self) -> None:
        try:
            self._loop.run_until_complete(self.config.runner_client.close())
        finally:
            close_event_loop(self._loop)
            self._loop = None
