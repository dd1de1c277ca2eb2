"""FastAPI application entrypoint for the exchange signing gateway."""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Callable

import httpx
from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.httpsredirect import HTTPSRedirectMiddleware
from fastapi.middleware.trustedhost import TrustedHostMiddleware
from fastapi.responses import JSONResponse, RedirectResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import Settings, get_settings
from .diagnostics import health_status, mexc_server_time, ping_mexc
from .errors import MethodNotAllowed, RouteNotFound
from .exchanges import CREDENTIAL_HEADERS, CanonicalRequest, build_strategies, now_ms
from .forwarder import HTTPForwarder, build_http_client
from .metrics import render_latest
from .proxy import ProxyService, cancel_on_disconnect
from .routing import match_route
from .schemas import ErrorEnvelope, HealthStatus, MexcPingResult, MexcServerTime
from .telemetry import configure_telemetry
from .translator import error_response, translate

LOGGER = logging.getLogger(__name__)

# CORS preflights are answered by CORSMiddleware before routing; any other
# OPTIONS request is forwarded like the rest.
PROXY_METHODS = ["GET", "HEAD", "POST", "PUT", "DELETE", "PATCH", "OPTIONS"]


def _inbound_path(request: Request) -> str:
    """Return the request path as sent on the wire, without the query string."""

    raw_path = request.scope.get("raw_path")
    if raw_path:
        return raw_path.decode("latin-1").split("?", 1)[0]
    return request.url.path


def _inbound_query(request: Request) -> str:
    return request.scope.get("query_string", b"").decode("latin-1")


def create_app(
    settings: Settings | None = None,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
    clock: Callable[[], int] = now_ms,
) -> FastAPI:
    """Create the gateway application.

    ``transport`` and ``clock`` exist so tests can stub the exchanges and pin
    the signing instant.
    """

    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        LOGGER.info(
            "Exchange gateway ready",
            extra={"port": settings.port, "environment": settings.environment},
        )
        for prefix in ("/health", "/bingx/*", "/mexc/*", "/bitget/*", "/api/mexc/test"):
            LOGGER.info("Route available: %s", prefix)
        try:
            yield
        finally:
            await app.state.http_client.aclose()
            LOGGER.info("Exchange gateway stopped")

    app = FastAPI(title="Exchange Signing Gateway", version="1.0.0", lifespan=lifespan)

    if settings.force_https:
        app.add_middleware(HTTPSRedirectMiddleware)

    if settings.allowed_hosts and settings.allowed_hosts != ["*"]:
        app.add_middleware(TrustedHostMiddleware, allowed_hosts=settings.allowed_hosts)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization", *CREDENTIAL_HEADERS, "ACCESS-SIGN"],
    )

    configure_telemetry(app, settings)

    client = build_http_client(settings, transport=transport)
    forwarder = HTTPForwarder(client)
    strategies = build_strategies(
        bingx_base_url=settings.bingx_base_url,
        mexc_base_url=settings.mexc_base_url,
        bitget_base_url=settings.bitget_base_url,
        bingx_recv_window=settings.bingx_recv_window,
        clock=clock,
    )
    app.state.settings = settings
    app.state.http_client = client
    app.state.proxy_service = ProxyService(strategies, forwarder)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        envelope = ErrorEnvelope(code=exc.status_code, msg=str(exc.detail))
        return JSONResponse(
            status_code=exc.status_code,
            content=envelope.model_dump(),
            headers=getattr(exc, "headers", None),
        )

    @app.get("/health", response_model=HealthStatus)
    async def healthcheck() -> HealthStatus:
        return health_status()

    @app.get("/metrics")
    async def prometheus_metrics() -> Response:
        payload, content_type = render_latest()
        return Response(content=payload, media_type=content_type)

    @app.get("/api/mexc/test", response_model=MexcPingResult)
    async def mexc_test() -> JSONResponse:
        status_code, result = await ping_mexc(forwarder, settings.mexc_base_url)
        return JSONResponse(status_code=status_code, content=result.as_payload())

    @app.get("/mexc/_server_time", response_model=MexcServerTime)
    async def mexc_time() -> JSONResponse:
        status_code, result = await mexc_server_time(forwarder, settings.mexc_base_url)
        return JSONResponse(status_code=status_code, content=result.as_payload())

    @app.api_route("/{full_path:path}", methods=PROXY_METHODS, include_in_schema=False)
    async def proxy(request: Request) -> Response:
        path = _inbound_path(request)
        match = match_route(path)
        if match is None:
            return error_response(RouteNotFound(path=path))
        if not match.route.is_proxy or match.exchange is None:
            if request.method not in match.route.methods:
                return error_response(MethodNotAllowed(method=request.method, path=path))
            # Only the trailing-slash form of a diagnostic path gets here.
            target = match.route.prefix
            query = _inbound_query(request)
            if query:
                target = f"{target}?{query}"
            return RedirectResponse(target, status_code=307)

        canonical = CanonicalRequest.build(
            request.method,
            match.upstream_path,
            _inbound_query(request),
            await request.body(),
        )
        service: ProxyService = request.app.state.proxy_service
        result = await cancel_on_disconnect(
            service.handle(match.exchange, canonical, request.headers),
            request.is_disconnected,
        )
        return translate(result)

    return app


app = create_app()


__all__ = ["app", "create_app"]
