"""Per-request pipeline: extract credentials, sign, forward."""
from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, Mapping, TypeVar

from .errors import GatewayError, InternalSigningError, MissingCredentials, UpstreamConnectionError
from .exchanges import CanonicalRequest, ExchangeId, SigningStrategy, extract_credentials
from .forwarder import HTTPForwarder, UpstreamResponse
from .metrics import observe_upstream_latency, record_proxy_outcome
from .redaction import mask_api_key

LOGGER = logging.getLogger(__name__)

T = TypeVar("T")


class ProxyService:
    """Authenticate and forward a single request to one exchange."""

    def __init__(
        self,
        strategies: Mapping[ExchangeId, SigningStrategy],
        forwarder: HTTPForwarder,
    ) -> None:
        self._strategies = dict(strategies)
        self._forwarder = forwarder

    async def handle(
        self,
        exchange: ExchangeId,
        request: CanonicalRequest,
        headers: Mapping[str, str],
    ) -> UpstreamResponse | GatewayError:
        credentials = extract_credentials(exchange, headers)
        if isinstance(credentials, MissingCredentials):
            LOGGER.warning(
                "Rejected %s request with missing credentials",
                exchange.value,
                extra={"path": request.path, "missing": credentials.fields},
            )
            record_proxy_outcome(exchange.value, "missing_credentials")
            return credentials

        LOGGER.info(
            "%s request %s %s",
            exchange.value,
            request.method,
            request.path,
            extra={"api_key": mask_api_key(credentials.api_key)},
        )

        strategy = self._strategies[exchange]
        try:
            signed = strategy.sign(request, credentials)
        except Exception as exc:
            # Only the exception type is logged; messages may echo request data.
            LOGGER.error(
                "Failed to sign %s request",
                exchange.value,
                extra={"path": request.path, "error": type(exc).__name__},
            )
            record_proxy_outcome(exchange.value, "signing_error")
            return InternalSigningError(exchange=exchange.value, reason=type(exc).__name__)

        result = await self._forwarder.send(signed)
        if isinstance(result, UpstreamConnectionError):
            record_proxy_outcome(exchange.value, "connection_error")
            return result

        observe_upstream_latency(exchange.value, result.elapsed)
        record_proxy_outcome(exchange.value, str(result.status_code))
        return result


async def cancel_on_disconnect(
    work: Awaitable[T],
    is_disconnected: Callable[[], Awaitable[bool]],
    *,
    poll_interval: float = 0.1,
) -> T | UpstreamConnectionError:
    """Await *work* but cancel it as soon as the inbound client goes away."""

    async def _watch() -> None:
        while not await is_disconnected():
            await asyncio.sleep(poll_interval)

    task = asyncio.ensure_future(work)
    watcher = asyncio.ensure_future(_watch())
    try:
        done, _ = await asyncio.wait({task, watcher}, return_when=asyncio.FIRST_COMPLETED)
    except asyncio.CancelledError:
        task.cancel()
        raise
    finally:
        watcher.cancel()

    if task in done:
        return task.result()
    if watcher.exception() is not None:
        # Disconnect detection failed; keep waiting for the upstream call.
        return await task

    task.cancel()
    LOGGER.info("Client disconnected; in-flight upstream call cancelled")
    return UpstreamConnectionError(reason="client_disconnected")


__all__ = ["ProxyService", "cancel_on_disconnect"]
