"""Tests for reading exchange credentials from request headers."""

from __future__ import annotations

import pytest

from gateway.app.errors import MissingCredentials
from gateway.app.exchanges import (
    BingXCredentials,
    BitgetCredentials,
    ExchangeId,
    MexcCredentials,
    extract_credentials,
)


def test_mexc_headers_are_read_case_insensitively() -> None:
    result = extract_credentials(ExchangeId.MEXC, {"apikey": "k", "REQUEST-TIME": "123"})

    assert result == MexcCredentials(api_key="k", request_time="123")


def test_bingx_requires_both_headers() -> None:
    result = extract_credentials(ExchangeId.BINGX, {"X-API-KEY": "k"})

    assert isinstance(result, MissingCredentials)
    assert result.fields == ("X-SECRET-KEY",)
    assert result.status_code == 400


def test_bingx_credentials() -> None:
    result = extract_credentials(ExchangeId.BINGX, {"x-api-key": "k", "x-secret-key": "s"})

    assert result == BingXCredentials(api_key="k", secret_key="s")


@pytest.mark.parametrize(
    ("exchange", "expected"),
    [
        (ExchangeId.MEXC, ("ApiKey", "Request-Time")),
        (ExchangeId.BINGX, ("X-API-KEY", "X-SECRET-KEY")),
        (ExchangeId.BITGET, ("apiKey", "secretKey", "passphrase")),
    ],
)
def test_missing_fields_are_all_named(exchange: ExchangeId, expected: tuple[str, ...]) -> None:
    result = extract_credentials(exchange, {})

    assert isinstance(result, MissingCredentials)
    assert result.fields == expected
    for field in expected:
        assert field in result.message


def test_blank_header_counts_as_missing() -> None:
    result = extract_credentials(ExchangeId.MEXC, {"ApiKey": "   ", "Request-Time": "1"})

    assert isinstance(result, MissingCredentials)
    assert result.fields == ("ApiKey",)


@pytest.mark.parametrize(
    "headers",
    [
        {"X-API-KEY": "k", "X-SECRET-KEY": "s", "X-PASSPHRASE": "p"},
        {"ACCESS-KEY": "k", "ACCESS-SECRET": "s", "ACCESS-PASSPHRASE": "p"},
        {"ApiKey": "k", "SecretKey": "s", "Passphrase": "p"},
        {"apikey": "k", "x-secret": "s", "passphrase": "p"},
    ],
)
def test_bitget_accepts_header_aliases(headers: dict[str, str]) -> None:
    result = extract_credentials(ExchangeId.BITGET, headers)

    assert result == BitgetCredentials(api_key="k", secret_key="s", passphrase="p")


def test_bitget_alias_precedence_is_deterministic() -> None:
    headers = {
        "ACCESS-KEY": "access-key",
        "X-API-KEY": "x-key",
        "ACCESS-SECRET": "access-secret",
        "X-SECRET-KEY": "x-secret",
        "ACCESS-PASSPHRASE": "access-phrase",
        "X-PASSPHRASE": "x-phrase",
        "Request-Time": "3",
        "ACCESS-TIMESTAMP": "2",
        "X-TIMESTAMP": "1",
    }

    result = extract_credentials(ExchangeId.BITGET, headers)

    assert result == BitgetCredentials(
        api_key="x-key", secret_key="x-secret", passphrase="x-phrase", timestamp="1"
    )


def test_bitget_timestamp_is_optional() -> None:
    result = extract_credentials(
        ExchangeId.BITGET, {"X-API-KEY": "k", "X-SECRET-KEY": "s", "X-PASSPHRASE": "p"}
    )

    assert isinstance(result, BitgetCredentials)
    assert result.timestamp is None


def test_secrets_are_hidden_from_repr() -> None:
    credentials = BitgetCredentials(api_key="k", secret_key="top-secret", passphrase="hidden")

    assert "top-secret" not in repr(credentials)
    assert "hidden" not in repr(credentials)
