"""Tests for the BingX HMAC-hex signing strategy."""

from __future__ import annotations

import hashlib
import hmac
from urllib.parse import parse_qsl, urlsplit

import pytest

from gateway.app.exchanges import BingXCredentials, BingXSigner, CanonicalRequest
from gateway.app.exchanges.bingx import build_signature, canonical_query

NOW_MS = 1_700_000_000_000


def _signer(**kwargs) -> BingXSigner:
    return BingXSigner("https://open-api.bingx.com", clock=lambda: NOW_MS, **kwargs)


def _hex_hmac(secret: str, message: str) -> str:
    return hmac.new(secret.encode(), message.encode(), hashlib.sha256).hexdigest()


def test_balance_request_without_query_signs_injected_parameters_only() -> None:
    request = CanonicalRequest.build("GET", "/openApi/swap/v2/user/balance")

    canonical = _signer().canonicalize(request, timestamp=str(NOW_MS))
    signed = _signer().sign(request, BingXCredentials(api_key="K", secret_key="S"))

    assert canonical == "recvWindow=60000&timestamp=1700000000000"
    query = dict(parse_qsl(urlsplit(signed.url).query))
    assert query["signature"] == _hex_hmac("S", canonical)
    assert signed.url.startswith("https://open-api.bingx.com/openApi/swap/v2/user/balance?")


def test_signed_query_is_caller_params_plus_injected_fields() -> None:
    request = CanonicalRequest.build(
        "GET", "/openApi/swap/v2/trade/allOrders", "symbol=BTC-USDT&limit=50"
    )

    signed = _signer().sign(request, BingXCredentials(api_key="K", secret_key="S"))

    pairs = parse_qsl(urlsplit(signed.url).query)
    params = dict(pairs)
    assert set(params) == {"symbol", "limit", "timestamp", "recvWindow", "signature"}
    unsigned = {key: value for key, value in params.items() if key != "signature"}
    assert params["signature"] == _hex_hmac("S", canonical_query(unsigned))
    assert pairs[-1][0] == "signature"


def test_injected_timestamp_and_recv_window_override_caller_values() -> None:
    request = CanonicalRequest.build("GET", "/x", "timestamp=1&recvWindow=5&symbol=ETH-USDT")

    canonical = _signer().canonicalize(request, timestamp=str(NOW_MS))

    assert canonical == "recvWindow=60000&symbol=ETH-USDT&timestamp=1700000000000"


def test_caller_signature_is_replaced() -> None:
    request = CanonicalRequest.build("GET", "/x", "symbol=BTC-USDT&signature=forged")

    signed = _signer().sign(request, BingXCredentials(api_key="K", secret_key="S"))

    pairs = parse_qsl(urlsplit(signed.url).query)
    signatures = [value for key, value in pairs if key == "signature"]
    assert len(signatures) == 1
    assert signatures[0] != "forged"


def test_repeated_caller_key_keeps_last_value() -> None:
    request = CanonicalRequest.build("GET", "/x", "symbol=A&symbol=B")

    assert "symbol=B" in _signer().canonicalize(request, timestamp="1")
    assert "symbol=A" not in _signer().canonicalize(request, timestamp="1")


def test_canonical_string_uses_unencoded_values_but_url_is_encoded() -> None:
    request = CanonicalRequest.build("POST", "/x", "note=a%20b")

    canonical = _signer().canonicalize(request, timestamp="1")
    signed = _signer().sign(request, BingXCredentials(api_key="K", secret_key="S"))

    assert "note=a b" in canonical
    assert "note=a+b" in signed.url


def test_headers_carry_api_key_and_transport_defaults() -> None:
    signed = _signer().sign(CanonicalRequest.build("GET", "/x"), BingXCredentials("K", "S"))

    assert signed.headers["X-BX-APIKEY"] == "K"
    assert signed.headers["Content-Type"] == "application/json"
    assert signed.headers["User-Agent"] == "BingX-Proxy/1.0"
    assert "S" not in signed.headers.values()


def test_recv_window_is_configurable() -> None:
    canonical = _signer(recv_window=5000).canonicalize(CanonicalRequest.build("GET", "/x"), timestamp="1")

    assert canonical == "recvWindow=5000&timestamp=1"


def test_canonicalize_requires_timestamp() -> None:
    with pytest.raises(ValueError):
        _signer().canonicalize(CanonicalRequest.build("GET", "/x"))


def test_build_signature_is_lowercase_hex() -> None:
    signature = build_signature("secret", "a=1")

    assert len(signature) == 64
    assert signature == signature.lower()
