"""
Benchmark Actions

An Action describes one benchmarked operation: its name, labels, how many
warmups and measured repetitions to run, and the Measurable that performs
the work.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from clientbench.http.client import HttpClient, Response


class Measurable(ABC):
    """Capability implemented by every benchmarked operation."""

    async def setup(self, client: HttpClient) -> None:
        """
        Prepare the target before warmups run. Called at most once.

        Raises:
            TransportError: If the target could not be prepared
        """

    @property
    def has_setup(self) -> bool:
        return type(self).setup is not Measurable.setup

    @abstractmethod
    async def measure(self, i: int, client: HttpClient) -> Response:
        """
        Perform one invocation of the operation.

        Args:
            i: 0-based index within the current warmup or measured loop
            client: Client pointed at the service under test

        Returns:
            Response of the exchange, whatever its status code

        Raises:
            TransportError: If the exchange could not be completed
        """


@dataclass(frozen=True)
class Action:
    """Static descriptor of one benchmarked operation."""
    action: str
    measurable: Measurable
    warmups: int = 0
    repetitions: int = 1
    category: Optional[str] = None
    environment: Optional[str] = None
    operations: Optional[int] = None

    def __post_init__(self):
        if not self.action:
            raise ValueError("Action name must not be empty")
        if self.warmups < 0:
            raise ValueError(f"warmups must be non-negative, got {self.warmups}")
        if self.repetitions < 0:
            raise ValueError(f"repetitions must be non-negative, got {self.repetitions}")
        if self.operations is not None and self.operations < 1:
            raise ValueError(f"operations must be positive, got {self.operations}")

    @property
    def has_setup(self) -> bool:
        return self.measurable.has_setup
