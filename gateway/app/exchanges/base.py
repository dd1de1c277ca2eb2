"""Common interface implemented by every exchange signing strategy."""
from __future__ import annotations

import time
from abc import ABC, abstractmethod
from typing import Callable, ClassVar, Generic, TypeVar

from .models import CanonicalRequest, ExchangeId, SignedRequest

C = TypeVar("C")


def now_ms() -> int:
    """Return the current epoch time in milliseconds."""

    return int(time.time() * 1000)


class SigningStrategy(ABC, Generic[C]):
    """Turn a canonical request plus credentials into a dispatchable request.

    Strategies hold configuration only (upstream host, clock, constants).
    Every value derived from a request is computed inside :meth:`sign` and
    discarded with the returned :class:`SignedRequest`.
    """

    exchange: ClassVar[ExchangeId]
    user_agent: ClassVar[str]

    def __init__(self, base_url: str, *, clock: Callable[[], int] = now_ms) -> None:
        self.base_url = base_url.rstrip("/")
        self._clock = clock

    @abstractmethod
    def canonicalize(self, request: CanonicalRequest, *, timestamp: str | None = None) -> str:
        """Return the exact string this exchange authenticates."""

    @abstractmethod
    def sign(self, request: CanonicalRequest, credentials: C) -> SignedRequest:
        """Return the outbound request carrying the exchange's auth material."""

    def mint_timestamp(self) -> str:
        return str(int(self._clock()))

    def base_headers(self) -> dict[str, str]:
        return {
            "Content-Type": "application/json",
            "User-Agent": self.user_agent,
        }

    def build_url(self, path: str, query: str = "") -> str:
        url = f"{self.base_url}{path}"
        if query:
            url = f"{url}?{query}"
        return url


__all__ = ["SigningStrategy", "now_ms"]
