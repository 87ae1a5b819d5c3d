"""
Benchmark Module

Action descriptors, the action catalog, the per-action runner and the
reporting sink.
"""

from .action import Action, Measurable
from .catalog import ActionCatalog, is_filtered
from .stats import ActionSummary, Outcome, StatsRecord
from .runner import Runner
from .reporting import ElasticsearchReportSink, ReportBatch, ReportSink

__all__ = [
    "Action",
    "Measurable",
    "ActionCatalog",
    "is_filtered",
    "ActionSummary",
    "Outcome",
    "StatsRecord",
    "Runner",
    "ElasticsearchReportSink",
    "ReportBatch",
    "ReportSink",
]
