"""Signing helpers for BingX REST requests."""
from __future__ import annotations

import hashlib
import hmac
from typing import Callable, Mapping
from urllib.parse import urlencode

from .base import SigningStrategy, now_ms
from .models import BingXCredentials, CanonicalRequest, ExchangeId, SignedRequest

RECV_WINDOW_MS = 60_000


def canonical_query(params: Mapping[str, object]) -> str:
    """Join *params* as ``key=value`` pairs sorted by key.

    Values are used verbatim; BingX hashes the unencoded form.
    """

    return "&".join(f"{key}={params[key]}" for key in sorted(params))


def build_signature(secret: str, canonical: str) -> str:
    """Return the hex HMAC-SHA256 of *canonical* keyed with *secret*."""

    return hmac.new(secret.encode("utf-8"), canonical.encode("utf-8"), hashlib.sha256).hexdigest()


class BingXSigner(SigningStrategy[BingXCredentials]):
    exchange = ExchangeId.BINGX
    user_agent = "BingX-Proxy/1.0"

    def __init__(
        self,
        base_url: str,
        *,
        recv_window: int = RECV_WINDOW_MS,
        clock: Callable[[], int] = now_ms,
    ) -> None:
        super().__init__(base_url, clock=clock)
        self.recv_window = recv_window

    def signing_params(self, request: CanonicalRequest, timestamp: str) -> dict[str, str]:
        """Merge caller parameters with the values injected at signing time.

        The last occurrence of a repeated caller key wins; ``timestamp`` and
        ``recvWindow`` always carry the gateway's values.  A caller supplied
        ``signature`` is dropped because the gateway appends its own.
        """

        params = dict(request.query_params)
        params.pop("signature", None)
        params["timestamp"] = timestamp
        params["recvWindow"] = str(self.recv_window)
        return params

    def canonicalize(self, request: CanonicalRequest, *, timestamp: str | None = None) -> str:
        if timestamp is None:
            raise ValueError("BingX canonical string requires a timestamp")
        return canonical_query(self.signing_params(request, timestamp))

    def sign(self, request: CanonicalRequest, credentials: BingXCredentials) -> SignedRequest:
        timestamp = self.mint_timestamp()
        params = self.signing_params(request, timestamp)
        signature = build_signature(credentials.secret_key, canonical_query(params))

        query = urlencode([*sorted(params.items()), ("signature", signature)])
        headers = self.base_headers()
        headers["X-BX-APIKEY"] = credentials.api_key
        return SignedRequest(
            method=request.method,
            url=self.build_url(request.path, query),
            headers=headers,
            body=request.body,
        )


__all__ = ["BingXSigner", "RECV_WINDOW_MS", "build_signature", "canonical_query"]
