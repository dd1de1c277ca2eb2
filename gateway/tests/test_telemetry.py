from __future__ import annotations

import pytest
from fastapi import FastAPI

from gateway.app import telemetry
from gateway.app.config import Settings
from gateway.app.telemetry import configure_telemetry


def test_telemetry_is_skipped_when_disabled() -> None:
    settings = Settings(telemetry_enabled=False)

    assert configure_telemetry(FastAPI(), settings) is False


def test_every_app_is_instrumented(monkeypatch: pytest.MonkeyPatch) -> None:
    pytest.importorskip("opentelemetry.instrumentation.fastapi")
    pytest.importorskip("opentelemetry.instrumentation.httpx")
    pytest.importorskip("opentelemetry.exporter.otlp.proto.http.trace_exporter")
    # Skip the process-wide provider and httpx patching; only per-app wiring is under test.
    monkeypatch.setattr(telemetry, "_PROVIDER_INSTALLED", True)
    settings = Settings(telemetry_enabled=True)
    first, second = FastAPI(), FastAPI()

    assert configure_telemetry(first, settings) is True
    assert configure_telemetry(second, settings) is True
    assert getattr(first, "_is_instrumented_by_opentelemetry", False) is True
    assert getattr(second, "_is_instrumented_by_opentelemetry", False) is True
