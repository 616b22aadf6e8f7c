"""
Shared pytest fixtures for the scanner test suite.

Provides an in-process replacement for ``aiohttp.ClientSession`` that
records every request and answers from a test-supplied handler, plus
small helpers for building provider payloads.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional
from unittest.mock import patch

import pytest

from secure_inbox.email_processing.models import EmailMessage


class FakeResponse:
    """Minimal stand-in for an aiohttp response used as a context manager."""

    def __init__(self, status: int = 200, payload: Any = None, body: str = ""):
        self.status = status
        self.payload = {} if payload is None else payload
        self.body = body

    async def json(self, content_type: Optional[str] = "application/json"):
        if isinstance(self.payload, Exception):
            raise self.payload
        return self.payload

    async def text(self) -> str:
        return self.body

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        return False


@dataclass
class RecordedRequest:
    method: str
    url: str
    kwargs: Dict[str, Any] = field(default_factory=dict)

    @property
    def api_key(self) -> Optional[str]:
        params = self.kwargs.get("params") or {}
        headers = self.kwargs.get("headers") or {}
        return params.get("key") or headers.get("x-apikey")


class FakeSession:
    """
    Replacement for ``aiohttp.ClientSession``.

    Calling the instance mimics constructing a session. ``handler`` maps
    ``(method, url, kwargs)`` to a FakeResponse, or to an exception that
    is raised in place of the request.
    """

    def __init__(self):
        self.requests: List[RecordedRequest] = []
        self.handler: Callable[[str, str, Dict[str, Any]], Any] = (
            lambda method, url, kwargs: FakeResponse(200, {})
        )
        self.session_kwargs: List[Dict[str, Any]] = []

    def __call__(self, *args, **kwargs):
        self.session_kwargs.append(kwargs)
        return self

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        return False

    def request(self, method: str, url: str, **kwargs):
        self.requests.append(RecordedRequest(method, url, kwargs))
        result = self.handler(method, url, kwargs)
        if isinstance(result, BaseException):
            raise result
        return result

    def respond_with(self, *responses):
        """Answer successive requests with ``responses`` in order."""
        queue = list(responses)

        def handler(method, url, kwargs):
            if not queue:
                raise AssertionError(f"Unexpected request: {method} {url}")
            return queue.pop(0)

        self.handler = handler


@pytest.fixture
def fake_http():
    """Patch aiohttp.ClientSession with a recording fake."""
    session = FakeSession()
    with patch("aiohttp.ClientSession", new=session):
        yield session


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


def safe_browsing_match(url: str, threat_type: str = "SOCIAL_ENGINEERING") -> Dict[str, Any]:
    return {
        "threatType": threat_type,
        "platformType": "ANY_PLATFORM",
        "threatEntryType": "URL",
        "threat": {"url": url},
        "cacheDuration": "300s",
    }


def virustotal_submission(analysis_id: str = "u-abc123-1700000000") -> Dict[str, Any]:
    return {"data": {"type": "analysis", "id": analysis_id}}


def virustotal_report(malicious: int = 0, harmless: int = 60, flagged_engines=()) -> Dict[str, Any]:
    results = {
        engine: {
            "category": "malicious",
            "engine_name": engine,
            "result": "phishing",
        }
        for engine in flagged_engines
    }
    results["CleanEngine"] = {"category": "harmless", "engine_name": "CleanEngine", "result": "clean"}
    return {
        "data": {
            "type": "analysis",
            "attributes": {
                "date": 1700000000,
                "status": "completed",
                "stats": {
                    "harmless": harmless,
                    "malicious": malicious,
                    "suspicious": 0,
                    "undetected": 10,
                    "timeout": 0,
                },
                "results": results,
            },
        }
    }


@pytest.fixture
def benign_email():
    return EmailMessage(
        sender="Alice Smith <alice@example.com>",
        subject="Lunch tomorrow?",
        snippet="Are we still on for noon at the usual place",
        date="Mon, 12 Feb 2024 10:15:00",
    )


@pytest.fixture
def phishing_email():
    return EmailMessage(
        sender="security@paypai.com",
        subject="Urgent: verify your account immediately",
        snippet="Please login to confirm",
        date="Mon, 12 Feb 2024 10:20:00",
    )
