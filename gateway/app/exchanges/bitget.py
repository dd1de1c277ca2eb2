"""Signing helpers for Bitget REST requests."""
from __future__ import annotations

import base64
import hashlib
import hmac

from .base import SigningStrategy
from .models import BitgetCredentials, CanonicalRequest, ExchangeId, SignedRequest

_BODY_METHODS = frozenset({"POST", "PUT", "DELETE"})


def request_path(path: str, raw_query: str) -> str:
    """Return ``path?query``, or just *path* when there is no query."""

    return f"{path}?{raw_query}" if raw_query else path


def signing_body(method: str, body: bytes) -> str:
    """Return the body text Bitget expects in the prehash.

    Only POST, PUT and DELETE carry a body; an empty JSON object counts as
    no body at all.
    """

    if method.upper() not in _BODY_METHODS:
        return ""
    text = body.decode("utf-8").strip()
    if text in ("", "{}"):
        return ""
    return text


def prehash(timestamp: str, method: str, path: str, body: str) -> str:
    return f"{timestamp}{method.upper()}{path}{body}"


def build_signature(secret: str, message: str) -> str:
    """Return the base64 HMAC-SHA256 of *message* keyed with *secret*."""

    digest = hmac.new(secret.encode("utf-8"), message.encode("utf-8"), hashlib.sha256).digest()
    return base64.b64encode(digest).decode("utf-8")


class BitgetSigner(SigningStrategy[BitgetCredentials]):
    exchange = ExchangeId.BITGET
    user_agent = "Bitget-Proxy/1.0"

    def canonicalize(self, request: CanonicalRequest, *, timestamp: str | None = None) -> str:
        if timestamp is None:
            raise ValueError("Bitget prehash requires a timestamp")
        return prehash(
            timestamp,
            request.method,
            request_path(request.path, request.raw_query),
            signing_body(request.method, request.body),
        )

    def sign(self, request: CanonicalRequest, credentials: BitgetCredentials) -> SignedRequest:
        timestamp = credentials.timestamp or self.mint_timestamp()
        signature = build_signature(
            credentials.secret_key, self.canonicalize(request, timestamp=timestamp)
        )

        headers = self.base_headers()
        headers.update(
            {
                "ACCESS-KEY": credentials.api_key,
                "ACCESS-SIGN": signature,
                "ACCESS-TIMESTAMP": timestamp,
                "ACCESS-PASSPHRASE": credentials.passphrase,
            }
        )
        # The forwarded body must match the signed one byte-for-byte.
        body = signing_body(request.method, request.body).encode("utf-8")
        return SignedRequest(
            method=request.method,
            url=f"{self.base_url}{request_path(request.path, request.raw_query)}",
            headers=headers,
            body=body,
        )


__all__ = ["BitgetSigner", "build_signature", "prehash", "request_path", "signing_body"]
