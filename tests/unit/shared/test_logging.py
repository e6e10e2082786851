from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import pytest
import structlog

from particle_cloud.shared.consts import EnumEnvironment, EnumLogLevel
from particle_cloud.shared.logging import (
    REDACTED,
    configure_logging,
    gateway_context,
    get_logger,
    redact_secrets,
    update_logging_from_settings,
)


@pytest.fixture(autouse=True)
def restore_logging():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    httpx_level = logging.getLogger("httpx").level
    yield
    root.handlers = handlers
    root.setLevel(level)
    logging.getLogger("httpx").setLevel(httpx_level)
    structlog.reset_defaults()


def _json_events(output: str) -> List[Dict[str, Any]]:
    return [json.loads(line) for line in output.splitlines() if line.startswith("{")]


def test_redact_secrets_masks_tokens_and_bearer_headers() -> None:
    event = redact_secrets(
        None,
        "info",
        {
            "event": "particle.device.request",
            "access_token": "secret-token",
            "headers": {"Authorization": "Bearer secret-token", "Accept": "json"},
            "response_text": "rejected Bearer secret-token",
            "target": "blue",
        },
    )

    assert event["access_token"] == REDACTED
    assert event["headers"] == {"Authorization": REDACTED, "Accept": "json"}
    assert event["response_text"] == f"rejected Bearer {REDACTED}"
    assert event["target"] == "blue"


def test_rendered_events_never_contain_the_token(capsys) -> None:
    configure_logging(level="INFO", environment=EnumEnvironment.PRODUCTION.value)

    get_logger("particle_cloud.test").info(
        "particle.device.request",
        access_token="secret-token",
        headers={"Authorization": "Bearer secret-token"},
    )
    logging.getLogger("third.party").warning("sent Bearer secret-token")

    output = capsys.readouterr().out
    assert "secret-token" not in output
    events = {event["event"]: event for event in _json_events(output)}
    assert events["particle.device.request"]["access_token"] == REDACTED
    assert events["sent Bearer [redacted]"]["level"] == "warning"


def test_gateway_context_is_bound_only_inside(capsys) -> None:
    configure_logging(level="INFO", environment=EnumEnvironment.PRODUCTION.value)
    logger = get_logger("particle_cloud.test")

    with gateway_context("https://api.test", "blue"):
        logger.info("inside")
    logger.info("outside")

    events = {event["event"]: event for event in _json_events(capsys.readouterr().out)}
    assert events["inside"]["particle_api_url"] == "https://api.test"
    assert events["inside"]["particle_target"] == "blue"
    assert "particle_api_url" not in events["outside"]
    assert "particle_api_url" not in structlog.contextvars.get_contextvars()


@pytest.mark.parametrize(
    "level, httpx_level",
    [("DEBUG", logging.WARNING), ("INFO", logging.WARNING), ("ERROR", logging.ERROR)],
)
def test_httpx_never_logs_below_warning(level, httpx_level) -> None:
    configure_logging(level=level)

    assert logging.getLogger().level == getattr(logging, level)
    assert logging.getLogger("httpx").level == httpx_level
    assert logging.getLogger("httpcore").level == httpx_level


def test_log_file_gets_a_handler(tmp_path) -> None:
    log_file = tmp_path / "particle.log"

    configure_logging(level="INFO", file_path=str(log_file))
    get_logger("particle_cloud.test").info("written")

    assert any(
        isinstance(handler, logging.FileHandler)
        for handler in logging.getLogger().handlers
    )
    assert "written" in log_file.read_text(encoding="utf-8")


@dataclass
class _LoggingSettings:
    level: EnumLogLevel = EnumLogLevel.ERROR
    file_path: Optional[str] = None


@dataclass
class _Settings:
    logging: _LoggingSettings = field(default_factory=_LoggingSettings)
    environment: EnumEnvironment = EnumEnvironment.PRODUCTION


def test_update_logging_from_settings_applies_enum_values() -> None:
    update_logging_from_settings(_Settings())

    assert logging.getLogger().level == logging.ERROR
    assert logging.getLogger("httpx").level == logging.ERROR
