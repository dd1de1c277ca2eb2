"""Dispatch signed requests to exchange REST hosts."""
from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Mapping

import httpx

from .config import Settings
from .errors import UpstreamConnectionError
from .exchanges import SignedRequest
from .redaction import redact_signature

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class UpstreamResponse:
    status_code: int
    body: bytes
    headers: Mapping[str, str] = field(default_factory=dict)
    elapsed: float = 0.0

    @property
    def content_type(self) -> str:
        return self.headers.get("content-type") or "application/json"


def build_http_client(
    settings: Settings, *, transport: httpx.AsyncBaseTransport | None = None
) -> httpx.AsyncClient:
    """Return the pooled client shared by all forwarded requests."""

    timeout = httpx.Timeout(
        settings.upstream_timeout_seconds,
        connect=settings.upstream_connect_timeout_seconds,
    )
    return httpx.AsyncClient(timeout=timeout, transport=transport, follow_redirects=False)


class HTTPForwarder:
    """Send exactly one request per call.

    Nothing is retried: exchange trading endpoints are not idempotent and a
    repeated order placement would open a second live position.
    """

    def __init__(self, client: httpx.AsyncClient) -> None:
        self._client = client

    async def send(self, request: SignedRequest) -> UpstreamResponse | UpstreamConnectionError:
        safe_url = redact_signature(request.url)
        LOGGER.info("→ %s %s", request.method, safe_url)
        started = time.perf_counter()
        try:
            response = await self._client.request(
                request.method,
                request.url,
                headers=dict(request.headers),
                content=request.body or None,
            )
        except httpx.RequestError as exc:
            elapsed = time.perf_counter() - started
            LOGGER.warning(
                "No response from upstream",
                extra={
                    "method": request.method,
                    "url": safe_url,
                    "error": type(exc).__name__,
                    "elapsed": round(elapsed, 3),
                },
            )
            return UpstreamConnectionError(reason=type(exc).__name__)

        elapsed = time.perf_counter() - started
        LOGGER.info(
            "← %s %s status=%s elapsed=%.3fs",
            request.method,
            safe_url,
            response.status_code,
            elapsed,
        )
        return UpstreamResponse(
            status_code=response.status_code,
            body=response.content,
            headers={key.lower(): value for key, value in response.headers.items()},
            elapsed=elapsed,
        )


__all__ = ["HTTPForwarder", "UpstreamResponse", "build_http_client"]
