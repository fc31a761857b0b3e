from __future__ import annotations

import asyncio
import gzip
import json
from datetime import datetime
from urllib.parse import unquote

import httpx
import pytest

from minitokyo.core.config import LoaderConfig

DATA_URL = "https://data.test/data"


class FixedCalendar:
    def __init__(self, calendar: str) -> None:
        self.calendar = calendar

    def get_calendar(self) -> str:
        return self.calendar


class StubUpstream:
    """
    Routes requests by host + unquoted path.
    A route value may be a JSON-able payload, raw bytes, an int status, or a callable(request).
    """

    def __init__(self) -> None:
        self.routes: dict = {}
        self.requests: list[httpx.Request] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        key = request.url.host + unquote(request.url.path)
        if key not in self.routes:
            return httpx.Response(404, text=f"no route for {key}")
        value = self.routes[key]
        if callable(value):
            return value(request)
        if isinstance(value, int):
            return httpx.Response(value, text="upstream error")
        if isinstance(value, bytes):
            return httpx.Response(200, content=value)
        return httpx.Response(200, json=value)

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self.handler))

    def run(self, fn):
        async def main():
            async with self.client() as client:
                return await fn(client)

        return asyncio.run(main())


def gz(payload) -> bytes:
    return gzip.compress(json.dumps(payload).encode("utf-8"))


@pytest.fixture
def cfg() -> LoaderConfig:
    return LoaderConfig(
        data_url=DATA_URL,
        api_urls={"odpt": "https://api.test/api/v4/"},
        tid_url="https://tid.test/trainid",
        atis_url="https://tid.test/atisinfo",
        flight_url="https://tid.test/flight",
        lang="en",
        connect_timeout=1.0,
        read_timeout=1.0,
        write_timeout=1.0,
        pool_timeout=1.0,
    )


@pytest.fixture
def upstream() -> StubUpstream:
    return StubUpstream()


@pytest.fixture
def tokyo():
    def _at(text: str) -> datetime:
        return datetime.fromisoformat(text)

    return _at
