"""Health and MEXC connectivity checks."""
from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import Any

from fastapi import status

from .errors import UpstreamConnectionError
from .exchanges import SignedRequest
from .exchanges.mexc import PATH_CONTRACT_PING
from .forwarder import HTTPForwarder, UpstreamResponse
from .schemas import HealthStatus, MexcPingResult, MexcServerTime

HEALTH_MESSAGE = "BingX, MEXC & Bitget gateway running"


def health_status() -> HealthStatus:
    return HealthStatus(
        status="OK",
        timestamp=datetime.now(timezone.utc),
        message=HEALTH_MESSAGE,
    )


def _decode_body(upstream: UpstreamResponse) -> Any:
    try:
        return json.loads(upstream.body)
    except ValueError:
        return upstream.body.decode("utf-8", "replace")


def _is_success(status_code: int) -> bool:
    return 200 <= status_code < 300


async def _ping(forwarder: HTTPForwarder, mexc_base_url: str) -> UpstreamResponse | UpstreamConnectionError:
    request = SignedRequest(
        method="GET",
        url=f"{mexc_base_url}{PATH_CONTRACT_PING}",
        headers={"User-Agent": "MEXC-Proxy/1.0"},
    )
    return await forwarder.send(request)


async def ping_mexc(forwarder: HTTPForwarder, mexc_base_url: str) -> tuple[int, MexcPingResult]:
    """Call the public MEXC ping endpoint and report whether it answered."""

    result = await _ping(forwarder, mexc_base_url)
    if isinstance(result, UpstreamConnectionError):
        return status.HTTP_500_INTERNAL_SERVER_ERROR, MexcPingResult(
            success=False, error=result.message
        )
    if not _is_success(result.status_code):
        return status.HTTP_500_INTERNAL_SERVER_ERROR, MexcPingResult(
            success=False, error=f"MEXC responded with status {result.status_code}"
        )
    return status.HTTP_200_OK, MexcPingResult(success=True, data=_decode_body(result))


async def mexc_server_time(forwarder: HTTPForwarder, mexc_base_url: str) -> tuple[int, MexcServerTime]:
    """Return MEXC's ``Date`` header so callers can measure clock skew.

    The header is reported even when MEXC answers with an error status.
    """

    result = await _ping(forwarder, mexc_base_url)
    if isinstance(result, UpstreamConnectionError):
        return status.HTTP_500_INTERNAL_SERVER_ERROR, MexcServerTime(
            success=False, error=result.message
        )

    succeeded = _is_success(result.status_code)
    payload = MexcServerTime(
        success=succeeded,
        status=result.status_code,
        server_date=result.headers.get("date"),
        data=_decode_body(result),
    )
    return (status.HTTP_200_OK if succeeded else result.status_code), payload


__all__ = ["HEALTH_MESSAGE", "health_status", "mexc_server_time", "ping_mexc"]
