"""MEXC pass-through strategy.

Callers sign MEXC requests themselves and embed the signature in the query
string.  The gateway forwards that query byte-for-byte and only relocates the
key and request time into the headers MEXC expects.  The client signature is
neither recomputed nor validated.
"""
from __future__ import annotations

from .base import SigningStrategy
from .models import CanonicalRequest, ExchangeId, MexcCredentials, SignedRequest

PATH_CONTRACT_PING = "/api/v1/contract/ping"


class MexcPassthrough(SigningStrategy[MexcCredentials]):
    exchange = ExchangeId.MEXC
    user_agent = "MEXC-Proxy/1.0"

    def canonicalize(self, request: CanonicalRequest, *, timestamp: str | None = None) -> str:
        return request.raw_query

    def sign(self, request: CanonicalRequest, credentials: MexcCredentials) -> SignedRequest:
        headers = self.base_headers()
        headers["ApiKey"] = credentials.api_key
        headers["Request-Time"] = credentials.request_time
        return SignedRequest(
            method=request.method,
            url=self.build_url(request.path, self.canonicalize(request)),
            headers=headers,
            body=request.body,
        )


__all__ = ["MexcPassthrough", "PATH_CONTRACT_PING"]
