from __future__ import annotations

from collections.abc import AsyncGenerator, Callable
from typing import Any

import httpx
import pytest
import pytest_asyncio
from fastapi import FastAPI

from gateway.app.config import Settings
from gateway.app.main import create_app

FIXED_NOW_MS = 1_700_000_000_000

BINGX_BASE = "https://bingx.example"
MEXC_BASE = "https://mexc.example"
BITGET_BASE = "https://bitget.example"


class UpstreamStub:
    """Mock exchange recording every request the gateway sends."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.responder: Callable[[httpx.Request], httpx.Response] = lambda request: httpx.Response(
            200, json={"code": 0, "msg": "", "data": {"ok": True}}
        )

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.responder(request)

    def reply(self, *args: Any, **kwargs: Any) -> None:
        self.responder = lambda request: httpx.Response(*args, **kwargs)

    def fail_with(self, exc_type: type[httpx.RequestError]) -> None:
        def _raise(request: httpx.Request) -> httpx.Response:
            raise exc_type("upstream unreachable", request=request)

        self.responder = _raise

    @property
    def last(self) -> httpx.Request:
        assert self.requests, "no upstream request was made"
        return self.requests[-1]


@pytest.fixture
def settings() -> Settings:
    return Settings(
        bingx_base_url=BINGX_BASE,
        mexc_base_url=MEXC_BASE,
        bitget_base_url=BITGET_BASE,
        upstream_timeout_seconds=5,
    )


@pytest.fixture
def upstream() -> UpstreamStub:
    return UpstreamStub()


@pytest.fixture
def app(settings: Settings, upstream: UpstreamStub) -> FastAPI:
    return create_app(
        settings,
        transport=httpx.MockTransport(upstream),
        clock=lambda: FIXED_NOW_MS,
    )


@pytest_asyncio.fixture
async def client(app: FastAPI) -> AsyncGenerator[httpx.AsyncClient, None]:
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://gateway.test") as client:
        yield client
    await app.state.http_client.aclose()
