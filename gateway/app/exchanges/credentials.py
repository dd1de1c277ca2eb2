"""Read per-request exchange credentials from inbound headers."""
from __future__ import annotations

from typing import Mapping

from ..errors import MissingCredentials
from .models import (
    BingXCredentials,
    BitgetCredentials,
    CredentialSet,
    ExchangeId,
    MexcCredentials,
)

# Header aliases are tried in order; the first non-blank value wins.
MEXC_API_KEY_HEADERS = ("ApiKey",)
MEXC_REQUEST_TIME_HEADERS = ("Request-Time",)

BINGX_API_KEY_HEADERS = ("X-API-KEY",)
BINGX_SECRET_HEADERS = ("X-SECRET-KEY",)

BITGET_API_KEY_HEADERS = ("X-API-KEY", "ACCESS-KEY", "ApiKey")
BITGET_SECRET_HEADERS = ("X-SECRET-KEY", "X-SECRET", "ACCESS-SECRET", "SecretKey")
BITGET_PASSPHRASE_HEADERS = ("X-PASSPHRASE", "ACCESS-PASSPHRASE", "Passphrase")
BITGET_TIMESTAMP_HEADERS = ("X-TIMESTAMP", "ACCESS-TIMESTAMP", "Request-Time")

CREDENTIAL_HEADERS = tuple(
    dict.fromkeys(
        MEXC_API_KEY_HEADERS
        + MEXC_REQUEST_TIME_HEADERS
        + BINGX_API_KEY_HEADERS
        + BINGX_SECRET_HEADERS
        + BITGET_API_KEY_HEADERS
        + BITGET_SECRET_HEADERS
        + BITGET_PASSPHRASE_HEADERS
        + BITGET_TIMESTAMP_HEADERS
    )
)


def _first_header(headers: Mapping[str, str], candidates: tuple[str, ...]) -> str | None:
    """Return the first non-blank header among *candidates*, case-insensitively."""

    lowered = {key.lower(): value for key, value in headers.items()}
    for name in candidates:
        value = lowered.get(name.lower())
        if isinstance(value, str) and value.strip():
            return value.strip()
    return None


def _missing(exchange: ExchangeId, **values: str | None) -> MissingCredentials | None:
    absent = tuple(name for name, value in values.items() if value is None)
    if absent:
        return MissingCredentials(exchange=exchange.value, fields=absent)
    return None


def extract_credentials(
    exchange: ExchangeId, headers: Mapping[str, str]
) -> CredentialSet | MissingCredentials:
    """Return the credential set for *exchange* or the fields that are absent."""

    if exchange is ExchangeId.MEXC:
        api_key = _first_header(headers, MEXC_API_KEY_HEADERS)
        request_time = _first_header(headers, MEXC_REQUEST_TIME_HEADERS)
        failure = _missing(exchange, ApiKey=api_key, **{"Request-Time": request_time})
        if failure is not None:
            return failure
        return MexcCredentials(api_key=api_key, request_time=request_time)

    if exchange is ExchangeId.BINGX:
        api_key = _first_header(headers, BINGX_API_KEY_HEADERS)
        secret_key = _first_header(headers, BINGX_SECRET_HEADERS)
        failure = _missing(exchange, **{"X-API-KEY": api_key, "X-SECRET-KEY": secret_key})
        if failure is not None:
            return failure
        return BingXCredentials(api_key=api_key, secret_key=secret_key)

    if exchange is ExchangeId.BITGET:
        api_key = _first_header(headers, BITGET_API_KEY_HEADERS)
        secret_key = _first_header(headers, BITGET_SECRET_HEADERS)
        passphrase = _first_header(headers, BITGET_PASSPHRASE_HEADERS)
        failure = _missing(exchange, apiKey=api_key, secretKey=secret_key, passphrase=passphrase)
        if failure is not None:
            return failure
        return BitgetCredentials(
            api_key=api_key,
            secret_key=secret_key,
            passphrase=passphrase,
            timestamp=_first_header(headers, BITGET_TIMESTAMP_HEADERS),
        )

    raise ValueError(f"Unsupported exchange: {exchange!r}")


__all__ = ["CREDENTIAL_HEADERS", "extract_credentials"]
