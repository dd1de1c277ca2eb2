"""Failure variants produced while proxying a request.

Steps of the proxy pipeline return one of these values instead of raising, so
a failed step can never leak into the next one.  Each variant knows the HTTP
status it maps to and renders to the shared :class:`ErrorEnvelope`.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

from fastapi import status

from .schemas import ErrorEnvelope


@dataclass(frozen=True)
class GatewayError:
    status_code: ClassVar[int] = status.HTTP_500_INTERNAL_SERVER_ERROR

    @property
    def message(self) -> str:
        raise NotImplementedError

    def to_envelope(self) -> ErrorEnvelope:
        return ErrorEnvelope(code=self.status_code, msg=self.message)


@dataclass(frozen=True)
class MissingCredentials(GatewayError):
    """Required credential headers were absent; no network call was made."""

    status_code: ClassVar[int] = status.HTTP_400_BAD_REQUEST

    exchange: str
    fields: tuple[str, ...]

    @property
    def message(self) -> str:
        return f"missing credentials for {self.exchange}: {', '.join(self.fields)}"


@dataclass(frozen=True)
class UpstreamConnectionError(GatewayError):
    """No response was received from the exchange (timeout, DNS, refused)."""

    reason: str = ""

    @property
    def message(self) -> str:
        return "connection error"


@dataclass(frozen=True)
class InternalSigningError(GatewayError):
    """Canonicalizing or signing failed; indicates a logic defect."""

    exchange: str
    reason: str = ""

    @property
    def message(self) -> str:
        return f"failed to sign {self.exchange} request"


@dataclass(frozen=True)
class RouteNotFound(GatewayError):
    status_code: ClassVar[int] = status.HTTP_404_NOT_FOUND

    path: str

    @property
    def message(self) -> str:
        return f"no route for {self.path}"


@dataclass(frozen=True)
class MethodNotAllowed(GatewayError):
    status_code: ClassVar[int] = status.HTTP_405_METHOD_NOT_ALLOWED

    method: str
    path: str

    @property
    def message(self) -> str:
        return f"{self.method} not allowed on {self.path}"


__all__ = [
    "GatewayError",
    "InternalSigningError",
    "MethodNotAllowed",
    "MissingCredentials",
    "RouteNotFound",
    "UpstreamConnectionError",
]
