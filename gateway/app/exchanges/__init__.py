"""Exchange signing strategies and credential handling."""
from __future__ import annotations

from typing import Callable

from .base import SigningStrategy, now_ms
from .bingx import BingXSigner
from .bitget import BitgetSigner
from .credentials import CREDENTIAL_HEADERS, extract_credentials
from .mexc import MexcPassthrough
from .models import (
    BingXCredentials,
    BitgetCredentials,
    CanonicalRequest,
    CredentialSet,
    ExchangeId,
    MexcCredentials,
    SignedRequest,
)


def build_strategies(
    *,
    bingx_base_url: str,
    mexc_base_url: str,
    bitget_base_url: str,
    bingx_recv_window: int,
    clock: Callable[[], int] = now_ms,
) -> dict[ExchangeId, SigningStrategy]:
    """Return one strategy per supported exchange."""

    return {
        ExchangeId.MEXC: MexcPassthrough(mexc_base_url, clock=clock),
        ExchangeId.BINGX: BingXSigner(bingx_base_url, recv_window=bingx_recv_window, clock=clock),
        ExchangeId.BITGET: BitgetSigner(bitget_base_url, clock=clock),
    }


__all__ = [
    "BingXCredentials",
    "BingXSigner",
    "BitgetCredentials",
    "BitgetSigner",
    "CREDENTIAL_HEADERS",
    "CanonicalRequest",
    "CredentialSet",
    "ExchangeId",
    "MexcCredentials",
    "MexcPassthrough",
    "SignedRequest",
    "SigningStrategy",
    "build_strategies",
    "extract_credentials",
    "now_ms",
]
