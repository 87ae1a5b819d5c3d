"""
Benchmark Reporting

Sends the stats of an executed action to a reporting sink. The bundled sink
writes one document per repetition to an Elasticsearch-compatible bulk
endpoint through the configured report client.
"""

import asyncio
import json
from abc import ABC, abstractmethod
from dataclasses import asdict, dataclass
from typing import Any, Dict, List, Optional, Sequence

from clientbench.core.config import Config, RunnerInfo, Target
from clientbench.core.exceptions import ResponseError, StatusCodeError, TransportError
from clientbench.http.client import HttpClient
from clientbench.utils.logging import get_logger

from .stats import StatsRecord

logger = get_logger(__name__)


@dataclass(frozen=True)
class ReportBatch:
    """Labeled stats of one executed action."""
    action: str
    category: str
    environment: str
    operations: int
    repetitions: int
    build_id: str
    data_source: str
    target: Target
    runner: RunnerInfo
    stats: Sequence[StatsRecord]

    @classmethod
    def from_runner(cls, runner) -> "ReportBatch":
        config: Config = runner.config
        return cls(
            action=runner.action.action,
            category=runner.category,
            environment=runner.environment,
            operations=runner.operations,
            repetitions=runner.action.repetitions,
            build_id=config.build_id,
            data_source=config.data_source,
            target=config.target,
            runner=config.runner,
            stats=tuple(runner.stats),
        )


class ReportSink(ABC):
    """Destination for benchmark results."""

    @abstractmethod
    def report(self, batch: ReportBatch) -> None:
        """
        Persist one batch of results.

        Raises:
            ResponseError: If the destination rejected the batch
        """


def build_documents(batch: ReportBatch) -> List[Dict[str, Any]]:
    """Build one report document per StatsRecord."""
    target = asdict(batch.target)
    runner = asdict(batch.runner)

    documents = []
    for stat in batch.stats:
        document: Dict[str, Any] = {
            "@timestamp": stat.start.isoformat(),
            "event": {
                "action": batch.action,
                "duration": stat.duration_ns,
                "outcome": stat.outcome.value,
            },
            "benchmark": {
                "build_id": batch.build_id,
                "category": batch.category,
                "environment": batch.environment,
                "repetitions": batch.repetitions,
                "operations": batch.operations,
                "target": target,
                "runner": runner,
            },
        }
        if stat.status_code is not None:
            document["http"] = {"response": {"status_code": stat.status_code}}
        documents.append(document)

    return documents


def to_ndjson(index: str, documents: Sequence[Dict[str, Any]]) -> str:
    lines = []
    for document in documents:
        lines.append(json.dumps({"create": {"_index": index}}))
        lines.append(json.dumps(document))
    return "\n".join(lines) + "\n"


class ElasticsearchReportSink(ReportSink):
    """Writes results to an Elasticsearch bulk endpoint."""

    def __init__(self, client: HttpClient, index: str, timeout: Optional[float] = None):
        self.client = client
        self.index = index
        self.timeout = timeout

    @classmethod
    def from_config(cls, config: Config) -> "ElasticsearchReportSink":
        return cls(config.report_client, config.data_source, timeout=config.call_timeout)

    def report(self, batch: ReportBatch) -> None:
        if not batch.stats:
            logger.debug(f"No stats to report for {batch.action}")
            return
        asyncio.run(self._report(batch))

    async def _report(self, batch: ReportBatch) -> None:
        body = to_ndjson(self.index, build_documents(batch))
        try:
            response = await asyncio.wait_for(
                self.client.send(
                    "POST", f"{self.index}/_bulk",
                    headers={"Content-Type": "application/x-ndjson"},
                    body=body,
                ),
                timeout=self.timeout,
            )
            response.error_for_status_code()
        except asyncio.TimeoutError as e:
            raise ResponseError(TransportError(f"reporting timed out after {self.timeout}s"),
                                f"Failed to report {batch.action}: timed out") from e
        except (TransportError, StatusCodeError) as e:
            raise ResponseError(e, f"Failed to report {batch.action}: {e}") from e
        finally:
            await self.client.close()

        try:
            result = response.json() or {}
        except ValueError:
            result = None
        if not isinstance(result, dict):
            self._reject(batch, response, "bulk response is not a JSON object")
        if result.get("errors"):
            self._reject(batch, response, "bulk request reported item errors")

        logger.info(f"Reported {len(batch.stats)} result(s) for {batch.action} to {self.index}")

    def _reject(self, batch: ReportBatch, response, reason: str) -> None:
        raise ResponseError(
            StatusCodeError(reason, status_code=response.status_code,
                            response_body=response.body),
            f"Failed to report {batch.action}: {reason}",
        )
