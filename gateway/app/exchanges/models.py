"""Request-scoped data structures shared by the signing strategies."""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Mapping, Union
from urllib.parse import parse_qsl


class ExchangeId(str, Enum):
    """Exchanges reachable through the gateway."""

    MEXC = "mexc"
    BINGX = "bingx"
    BITGET = "bitget"


@dataclass(frozen=True)
class MexcCredentials:
    api_key: str
    request_time: str


@dataclass(frozen=True)
class BingXCredentials:
    api_key: str
    secret_key: str = field(repr=False)


@dataclass(frozen=True)
class BitgetCredentials:
    api_key: str
    secret_key: str = field(repr=False)
    passphrase: str = field(repr=False)
    timestamp: str | None = None


CredentialSet = Union[MexcCredentials, BingXCredentials, BitgetCredentials]


@dataclass(frozen=True)
class CanonicalRequest:
    """Inbound request reduced to the parts that take part in signing.

    ``raw_query`` is the query string exactly as the caller sent it, while
    ``query_params`` holds the decoded pairs in their original order.
    """

    method: str
    path: str
    raw_query: str = ""
    query_params: tuple[tuple[str, str], ...] = ()
    body: bytes = b""

    @classmethod
    def build(cls, method: str, path: str, raw_query: str = "", body: bytes = b"") -> "CanonicalRequest":
        params = tuple(parse_qsl(raw_query, keep_blank_values=True))
        return cls(
            method=method.upper(),
            path=path or "/",
            raw_query=raw_query,
            query_params=params,
            body=body,
        )


@dataclass(frozen=True)
class SignedRequest:
    """Outbound request ready for dispatch."""

    method: str
    url: str
    headers: Mapping[str, str]
    body: bytes = b""


__all__ = [
    "BingXCredentials",
    "BitgetCredentials",
    "CanonicalRequest",
    "CredentialSet",
    "ExchangeId",
    "MexcCredentials",
    "SignedRequest",
]
