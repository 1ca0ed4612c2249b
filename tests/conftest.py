"""Shared fixtures for the test suite."""

import json
from typing import Callable, Dict, List, Tuple

import httpx
import pytest

from utils.api_client import MentorConnectClient

Handler = Callable[[httpx.Request], httpx.Response]


@pytest.fixture
def anyio_backend():
    return "asyncio"


class FakeRemoteApi:
    """In-memory stand-in for the remote API, routed by (method, path).

    Every received request is recorded in ``requests``.
    """

    def __init__(self):
        self.routes: Dict[Tuple[str, str], Handler] = {}
        self.requests: List[httpx.Request] = []

    def on(self, method: str, path: str, handler) -> None:
        """Register a handler, or a static (status, body) tuple, for a route."""
        if not callable(handler):
            status_code, body = handler
            handler = lambda request: httpx.Response(status_code, json=body)  # noqa: E731
        self.routes[(method, path)] = handler

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path.replace("/api", "", 1)
        handler = self.routes.get((request.method, path))
        if handler is None:
            return httpx.Response(404, json={"error": f"No route {request.method} {path}"})
        return handler(request)

    def sent(self, method: str, path: str) -> List[httpx.Request]:
        return [
            r for r in self.requests
            if r.method == method and r.url.path.replace("/api", "", 1) == path
        ]

    @staticmethod
    def body(request: httpx.Request):
        return json.loads(request.content)


@pytest.fixture
def remote_api():
    return FakeRemoteApi()


@pytest.fixture
def client(remote_api):
    return MentorConnectClient(
        token="test-token",
        base_url="https://remote.test/api",
        transport=httpx.MockTransport(remote_api),
    )


def slot_payload(slot_id: str, date: str, time: str, status: str = "Open", mentor: str = "m1"):
    return {"_id": slot_id, "date": date, "time": time, "status": status, "mentor": mentor}


def booking_payload(
    booking_id: str,
    date: str,
    time: str,
    mentor: str = "m1",
    student: str = "s1",
    status: str = "Booked",
    slot_id: str = "slot-1",
):
    return {
        "_id": booking_id,
        "student": {"_id": student, "name": "Student"},
        "mentor": {"_id": mentor, "name": "Mentor"},
        "sessionType": "Mentor Connect",
        "mode": "Private",
        "slot": {"slotId": slot_id, "date": date, "time": time},
        "agenda": "Project review",
        "status": status,
        "zoomJoinUrl": "https://zoom.test/j/1",
    }
