#!/usr/bin/env python3
"""
Custom Action Example

Shows how to benchmark an extra operation programmatically: implement a
Measurable, wrap it in an Action and run it with the same configuration the
CLI uses. Requires the benchmark environment variables to be set.
"""

import sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from clientbench.benchmark import Action, ActionCatalog, Measurable
from clientbench.core.config_validator import load_config
from clientbench.core.exceptions import ConfigurationError
from clientbench.http.client import HttpClient, Response
from clientbench.main import run_benchmarks
from clientbench.utils.logging import setup_logging


class ClusterHealth(Measurable):
    """GET /_cluster/health"""

    async def measure(self, i: int, client: HttpClient) -> Response:
        return await client.send("GET", "_cluster/health")


def main() -> int:
    try:
        config = load_config()
    except ConfigurationError as e:
        print(e.message, file=sys.stderr)
        return 1

    setup_logging(config.logging)

    catalog = ActionCatalog([
        Action(action="cluster-health", measurable=ClusterHealth(),
               warmups=5, repetitions=50, category="admin"),
    ])

    for summary in run_benchmarks(config, catalog):
        print(f"{summary.action}: {summary.successes}/{summary.repetitions} succeeded")
    return 0


if __name__ == "__main__":
    sys.exit(main())
