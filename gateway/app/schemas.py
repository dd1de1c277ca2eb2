"""Pydantic schemas for the responses the gateway manufactures itself."""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_serializer


class ErrorEnvelope(BaseModel):
    """Error body shared by every failure the gateway reports on its own."""

    code: int
    msg: str
    data: None = None


class HealthStatus(BaseModel):
    status: str = "OK"
    timestamp: datetime
    message: str

    @field_serializer("timestamp")
    def _iso_utc(self, value: datetime) -> str:
        # Millisecond precision with a ``Z`` suffix, e.g. 2024-01-01T00:00:00.000Z
        return value.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class MexcPingResult(BaseModel):
    """Outcome of the MEXC connectivity check."""

    success: bool
    data: Any = None
    error: Optional[str] = None

    def as_payload(self) -> dict[str, Any]:
        if self.error is not None:
            return {"success": self.success, "error": self.error}
        return {"success": self.success, "data": self.data}


class MexcServerTime(BaseModel):
    """Upstream ``Date`` header captured to diagnose clock skew."""

    model_config = ConfigDict(populate_by_name=True)

    success: bool
    status: Optional[int] = None
    server_date: Optional[str] = Field(default=None, alias="serverDate")
    data: Any = None
    error: Optional[str] = None

    def as_payload(self) -> dict[str, Any]:
        if self.error is not None:
            return {"success": self.success, "error": self.error}
        return {
            "success": self.success,
            "status": self.status,
            "serverDate": self.server_date,
            "data": self.data,
        }


__all__ = ["ErrorEnvelope", "HealthStatus", "MexcPingResult", "MexcServerTime"]
