"""
Benchmark Actions

Concrete operations benchmarked against the target service.
"""

from clientbench.benchmark.catalog import ActionCatalog

from . import index, ping


def default_catalog() -> ActionCatalog:
    """Build the catalog executed by a benchmark pass."""
    return ActionCatalog([
        ping.action(),
        index.action(),
    ])


__all__ = ["default_catalog"]
