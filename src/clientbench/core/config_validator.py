"""
Configuration Validator

Validates the environment variables a benchmark run depends on. Every
variable is checked, and all violations are reported together in a single
ConfigurationError.
"""

import math
import os
from typing import Dict, List, Mapping, Optional, Tuple

from clientbench.core.config import (
    Config, DEFAULT_CALL_TIMEOUT, Git, LoggingConfig, Os, Runtime, RunnerInfo,
    Service, Target,
)
from clientbench.core.exceptions import ConfigurationError
from clientbench.http.client import HttpClient
from clientbench.utils.logging import get_logger

logger = get_logger(__name__)

REQUIRED_ENV_KEYS: Tuple[str, ...] = (
    "BUILD_ID",
    "DATA_SOURCE",
    "CLIENT_BRANCH",
    "CLIENT_COMMIT",
    "CLIENT_BENCHMARK_ENVIRONMENT",
    "ELASTICSEARCH_TARGET_URL",
    "ELASTICSEARCH_REPORT_URL",
    "TARGET_SERVICE_TYPE",
    "TARGET_SERVICE_NAME",
    "TARGET_SERVICE_VERSION",
    "TARGET_SERVICE_OS_FAMILY",
)

CATEGORY_ENV_KEY = "CLIENT_BENCHMARK_CATEGORY"
FILTER_ENV_KEY = "FILTER"
CALL_TIMEOUT_ENV_KEY = "CALL_TIMEOUT"

_TRUE_VALUES = ("1", "true", "yes", "on")


class ConfigValidator:
    """Validates benchmark environment variables and builds a Config."""

    def __init__(self, required_keys: Tuple[str, ...] = REQUIRED_ENV_KEYS):
        self.required_keys = required_keys

    def validate_environment(self, environ: Optional[Mapping[str, str]] = None) -> Config:
        """
        Validate the environment and build the benchmark configuration.

        Args:
            environ: Mapping to read variables from (defaults to os.environ)

        Returns:
            Fully populated Config

        Raises:
            ConfigurationError: If any required variable is missing or empty,
                listing every violation in enumeration order
        """
        if environ is None:
            environ = os.environ

        values, errors = self._check_required_keys(environ)

        call_timeout = DEFAULT_CALL_TIMEOUT
        try:
            call_timeout = self._parse_call_timeout(environ.get(CALL_TIMEOUT_ENV_KEY))
        except ValueError as e:
            errors.append(f"{CALL_TIMEOUT_ENV_KEY} {e}")

        if errors:
            raise ConfigurationError("\n".join(errors), violations=errors)

        config = self._build_config(values, environ, call_timeout)
        logger.debug(f"Configuration validated for build {config.build_id} "
                     f"in environment {config.environment}")
        return config

    def _check_required_keys(self, environ: Mapping[str, str]) -> Tuple[Dict[str, str], List[str]]:
        """Collect values and violations for every required key."""
        values: Dict[str, str] = {}
        errors: List[str] = []

        for key in self.required_keys:
            value = environ.get(key)
            if value is None:
                errors.append(f"{key} environment variable not found")
            elif not value:
                errors.append(f"{key} environment variable is empty")
            else:
                values[key] = value

        return values, errors

    def _parse_call_timeout(self, value: Optional[str]) -> float:
        """Parse the per-call deadline in seconds."""
        if value is None or value == "":
            return DEFAULT_CALL_TIMEOUT
        try:
            timeout = float(value)
        except ValueError:
            raise ValueError(f"must be a number of seconds, got '{value}'") from None
        if not math.isfinite(timeout):
            raise ValueError(f"must be a finite number of seconds, got '{value}'")
        if timeout <= 0:
            raise ValueError(f"must be positive, got '{value}'")
        return timeout

    def _build_logging_config(self, environ: Mapping[str, str]) -> LoggingConfig:
        """Build logging settings from optional variables."""
        return LoggingConfig(
            level=environ.get("LOG_LEVEL") or "INFO",
            file=environ.get("LOG_FILE") or None,
            json=(environ.get("LOG_JSON") or "").lower() in _TRUE_VALUES,
        )

    def _build_config(self, values: Dict[str, str], environ: Mapping[str, str],
                      call_timeout: float) -> Config:
        """Assemble descriptors and clients from validated values."""
        service = Service(
            type=values["TARGET_SERVICE_TYPE"],
            name=values["TARGET_SERVICE_NAME"],
            version=values["TARGET_SERVICE_VERSION"],
            git=Git(
                branch=values["CLIENT_BRANCH"],
                commit=values["CLIENT_COMMIT"],
            ),
        )
        os_info = Os(family=values["TARGET_SERVICE_OS_FAMILY"])

        return Config(
            build_id=values["BUILD_ID"],
            environment=values["CLIENT_BENCHMARK_ENVIRONMENT"],
            data_source=values["DATA_SOURCE"],
            target=Target(service=service, os=os_info),
            runner=RunnerInfo(service=service, runtime=Runtime(), os=os_info),
            runner_client=HttpClient(values["ELASTICSEARCH_TARGET_URL"]),
            report_client=HttpClient(values["ELASTICSEARCH_REPORT_URL"]),
            category=environ.get(CATEGORY_ENV_KEY, ""),
            action_filter=environ.get(FILTER_ENV_KEY, ""),
            call_timeout=call_timeout,
            logging=self._build_logging_config(environ),
        )


def load_config(environ: Optional[Mapping[str, str]] = None) -> Config:
    """
    Convenience function to validate the environment and build a Config.

    Args:
        environ: Mapping to read variables from (defaults to os.environ)

    Returns:
        Validated Config
    """
    return ConfigValidator().validate_environment(environ)
