"""
Benchmark Stats

One record per measured repetition, plus a small per-action summary used for
terminal output.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional, Sequence


class Outcome(str, Enum):
    """Outcome of a single measured repetition."""
    SUCCESS = "success"
    FAILURE = "failure"


@dataclass(frozen=True)
class StatsRecord:
    """Timing and outcome of one measured repetition."""
    start: datetime
    duration_ns: int
    outcome: Outcome
    status_code: Optional[int] = None

    @property
    def is_success(self) -> bool:
        return self.outcome is Outcome.SUCCESS


@dataclass
class ActionSummary:
    """Outcome counts for one executed action."""
    action: str
    category: str
    environment: str
    repetitions: int
    successes: int
    failures: int
    errors: int
    aborted: bool = False

    @property
    def success_rate(self) -> float:
        if self.repetitions == 0:
            return 0.0
        return (self.successes / self.repetitions) * 100.0

    @classmethod
    def from_stats(cls, action: str, category: str, environment: str,
                   stats: Sequence[StatsRecord], errors: int = 0,
                   aborted: bool = False) -> "ActionSummary":
        successes = sum(1 for s in stats if s.is_success)
        return cls(
            action=action,
            category=category,
            environment=environment,
            repetitions=len(stats),
            successes=successes,
            failures=len(stats) - successes,
            errors=errors,
            aborted=aborted,
        )
