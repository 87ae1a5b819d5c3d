"""Ping the cluster root endpoint."""

from clientbench.benchmark.action import Action, Measurable
from clientbench.http.client import HttpClient, Response


class Ping(Measurable):
    """HEAD request against the service root."""

    async def measure(self, i: int, client: HttpClient) -> Response:
        return await client.send("HEAD", "/")


def action() -> Action:
    return Action(
        action="ping",
        measurable=Ping(),
        warmups=10,
        repetitions=1000,
    )
