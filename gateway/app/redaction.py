"""Helpers that keep credential material out of log records."""
from __future__ import annotations

import re

REDACTED = "<redacted>"

_SIGNATURE_PARAM = re.compile(r"((?:^|[?&])signature=)[^&\s]*", re.IGNORECASE)


def mask_api_key(api_key: str | None, *, visible: int = 6) -> str:
    """Return a short prefix of *api_key* suitable for diagnostics."""

    if not api_key:
        return "<none>"
    if len(api_key) <= visible:
        return "*" * len(api_key)
    return f"{api_key[:visible]}..."


def redact_signature(text: str) -> str:
    """Replace the value of any ``signature`` query parameter in *text*."""

    if not text:
        return ""
    return _SIGNATURE_PARAM.sub(rf"\1{REDACTED}", text)


__all__ = ["REDACTED", "mask_api_key", "redact_signature"]
