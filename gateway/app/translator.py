"""Shape the gateway's outbound HTTP responses."""
from __future__ import annotations

from fastapi import Response
from fastapi.responses import JSONResponse

from .errors import GatewayError
from .forwarder import UpstreamResponse


def relay_upstream(upstream: UpstreamResponse) -> Response:
    """Return the exchange's status and body untouched.

    Exchange error codes are not reinterpreted; callers own each exchange's
    error vocabulary.
    """

    return Response(
        content=upstream.body,
        status_code=upstream.status_code,
        media_type=upstream.content_type,
    )


def error_response(error: GatewayError) -> JSONResponse:
    return JSONResponse(
        status_code=error.status_code,
        content=error.to_envelope().model_dump(),
    )


def translate(result: UpstreamResponse | GatewayError) -> Response:
    if isinstance(result, GatewayError):
        return error_response(result)
    return relay_upstream(result)


__all__ = ["error_response", "relay_upstream", "translate"]
