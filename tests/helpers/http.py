"""Shared doubles for request layer tests."""

from collections.abc import Iterable

import httpx


class ScriptedHandler:
    """MockTransport handler replaying a script of outcomes.

    Each outcome is either an httpx.Response to return or an exception
    to raise. The last outcome repeats once the script is exhausted.
    """

    def __init__(self, outcomes: Iterable[httpx.Response | Exception]) -> None:
        self._outcomes = list(outcomes)
        self.requests: list[httpx.Request] = []

    @property
    def call_count(self) -> int:
        return len(self.requests)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        index = min(len(self.requests), len(self._outcomes)) - 1
        outcome = self._outcomes[index]
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


class RecordingSleep:
    """Async sleep replacement that records requested delays."""

    def __init__(self) -> None:
        self.calls: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)


def make_client(handler: ScriptedHandler) -> httpx.AsyncClient:
    """Create an AsyncClient routed to a scripted handler."""
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


def json_response(data: object, status_code: int = 200) -> httpx.Response:
    return httpx.Response(status_code, json=data)


def connect_error(message: str = "Network error") -> httpx.ConnectError:
    return httpx.ConnectError(message)
