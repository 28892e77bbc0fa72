"""Shared test fixtures for the Runtime Guard Console test suite."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from app.config import Settings
from core.models import (
    ContainerInfo,
    Detection,
    NetworkInfo,
    ProcessInfo,
    ReplayEvent,
    ResponseAction,
    Severity,
)

T0 = datetime(2026, 1, 10, 21, 12, 33, tzinfo=timezone.utc)


def make_event(index: int, event_type: str = "process_exec") -> ReplayEvent:
    return ReplayEvent(
        event_id=f"evt-{index:03d}",
        timestamp=T0 + timedelta(seconds=index),
        event_type=event_type,
        process=ProcessInfo(pid=12345, exe="/bin/bash", cmdline="bash -i"),
        container=ContainerInfo(namespace="prod", pod="vuln-nginx-7c9b", image="nginx:1.25"),
    )


def make_reel(length: int) -> list[ReplayEvent]:
    return [make_event(i) for i in range(length)]


@pytest.fixture
def mock_settings() -> Settings:
    """Return a Settings instance configured for mock mode."""
    return Settings(
        console_mode="mock",
        mock_scenario="reverse_shell",
        mock_delay_enabled=False,
    )


@pytest.fixture
def reel_factory():
    """Build a reel of *n* events one second apart."""
    return make_reel


@pytest.fixture
def sample_reel() -> list[ReplayEvent]:
    """The three-event reverse shell reel."""
    reel = make_reel(3)
    reel[1] = reel[1].model_copy(update={"event_type": "file_open"})
    reel[2] = reel[2].model_copy(
        update={
            "event_type": "network_connect",
            "network": NetworkInfo(dst_ip="203.0.113.50", dst_port=4444, proto="tcp"),
        }
    )
    return reel


@pytest.fixture
def sample_detection() -> Detection:
    return Detection(
        id="alert-101",
        timestamp=T0,
        rule_name="Interactive shell in container",
        severity=Severity.HIGH,
        description="bash -i started with a TTY",
    )


@pytest.fixture
def sample_action() -> ResponseAction:
    return ResponseAction(
        id="act-201",
        timestamp=T0 + timedelta(seconds=5),
        action_type="isolate_pod",
        target="prod/vuln-nginx-7c9b",
        status="success",
    )


@pytest.fixture
def raw_detection() -> dict:
    return {
        "type": "alert",
        "id": "alert-102",
        "timestamp": "2026-01-10T21:12:35.456Z",
        "rule_name": "Service account token read",
        "severity": "critical",
        "description": "Token read by a shell",
        "event": {
            "process": {"pid": 12345, "exe": "/bin/cat", "cmdline": "cat token"},
            "container": {"namespace": "prod", "pod": "vuln-nginx-7c9b", "image": "nginx:1.25"},
        },
    }


@pytest.fixture
def raw_action() -> dict:
    return {
        "type": "action",
        "id": "act-202",
        "timestamp": "2026-01-10T21:12:39.010Z",
        "action_type": "kill_process",
        "target": "prod/vuln-nginx-7c9b:12345",
        "status": "blocked",
        "message": "Kill requires approval",
    }
