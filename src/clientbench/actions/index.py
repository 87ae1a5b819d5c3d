"""Index single documents into a freshly created index."""

from datetime import datetime, timezone
from typing import Any, Dict

from clientbench.benchmark.action import Action, Measurable
from clientbench.http.client import HttpClient, Response

INDEX_NAME = "test-bench-index"


def build_document(i: int) -> Dict[str, Any]:
    return {
        "@timestamp": datetime.now(timezone.utc).isoformat(),
        "title": f"Document {i}",
        "counter": i,
        "tags": ["bench", "index"],
    }


class IndexDocument(Measurable):
    """Recreates the index once, then indexes one document per call."""

    def __init__(self, index: str = INDEX_NAME):
        self.index = index

    async def setup(self, client: HttpClient) -> None:
        # A missing index answers 404, which is fine here
        response = await client.send("DELETE", self.index, params={"ignore_unavailable": "true"})
        if response.status_code != 404:
            response.error_for_status_code()

        response = await client.send("PUT", self.index, body={
            "settings": {"number_of_shards": 1, "number_of_replicas": 0},
        })
        response.error_for_status_code()

    async def measure(self, i: int, client: HttpClient) -> Response:
        return await client.send("POST", f"{self.index}/_doc", body=build_document(i))


def action() -> Action:
    return Action(
        action="index",
        measurable=IndexDocument(),
        warmups=10,
        repetitions=1000,
        operations=1,
    )
