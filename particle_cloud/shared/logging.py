"""
Logging Configuration - Shared Layer

Structured logging for the Particle cloud client. Library code only asks for
loggers; applications embedding the client call ``configure_logging`` once
at startup, or ``update_logging_from_settings`` with their ``AppSettings``.

Every event goes through ``redact_secrets`` so access tokens never reach a
handler, and gateway calls carry the API URL and device target through
structlog context variables.
"""

import logging
import os
import re
import sys
from contextlib import AbstractContextManager
from typing import Any, List, Mapping, Optional

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

from particle_cloud.shared.consts import EnumEnvironment

REDACTED = "[redacted]"
SECRET_KEYS = frozenset({"access_token", "authorization", "token", "password"})
BEARER_PATTERN = re.compile(r"(Bearer\s+)[^\s\"',]+", re.IGNORECASE)

# Loggers that repeat what the gateway already logs at INFO.
CHATTY_LOGGERS = ("httpx", "httpcore")


def _redact(value: Any) -> Any:
    if isinstance(value, str):
        return BEARER_PATTERN.sub(rf"\1{REDACTED}", value)
    if isinstance(value, Mapping):
        return {
            key: REDACTED if str(key).lower() in SECRET_KEYS else _redact(item)
            for key, item in value.items()
        }
    if isinstance(value, (list, tuple)):
        return type(value)(_redact(item) for item in value)
    return value


def redact_secrets(
    logger: WrappedLogger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Mask access tokens and bearer headers anywhere in the event."""
    for key in list(event_dict):
        if key.lower() in SECRET_KEYS:
            event_dict[key] = REDACTED
        else:
            event_dict[key] = _redact(event_dict[key])
    return event_dict


def gateway_context(
    api_url: str, target: Optional[str] = None
) -> AbstractContextManager:
    """Bind the cloud URL and device target to every event logged inside."""
    return structlog.contextvars.bound_contextvars(
        particle_api_url=api_url, particle_target=target
    )


def _processors(timestamper: Processor) -> List[Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        timestamper,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        redact_secrets,
    ]


def configure_logging(
    level: Optional[str] = None,
    file_path: Optional[str] = None,
    environment: str = EnumEnvironment.DEVELOPMENT.value,
) -> None:
    """
    Route structlog and stdlib records through one redacting pipeline.

    Args:
        level: Log level name, ``LOG_LEVEL`` or INFO when omitted.
        file_path: Optional log file, ``LOG_FILE_PATH`` when omitted.
        environment: Production renders JSON lines, anything else renders
            for a console.
    """
    log_level = (level or os.environ.get("LOG_LEVEL") or "INFO").upper()
    log_file = file_path or os.environ.get("LOG_FILE_PATH")
    numeric_level = getattr(logging, log_level, logging.INFO)

    renderer: Processor
    if environment.lower() == EnumEnvironment.PRODUCTION.value:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer()

    timestamper = structlog.processors.TimeStamper(fmt="iso", utc=True)
    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=_processors(timestamper),
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )

    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file))
    for handler in handlers:
        handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
    root_logger.handlers = handlers
    root_logger.setLevel(numeric_level)

    for name in CHATTY_LOGGERS:
        logging.getLogger(name).setLevel(max(numeric_level, logging.WARNING))

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *_processors(timestamper),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    get_logger(__name__).debug(
        "logging.configured",
        level=log_level,
        file_path=log_file,
        environment=environment,
    )


def update_logging_from_settings(settings: Any) -> None:
    """Reconfigure logging from ``AppSettings`` or an object shaped like it."""
    level = getattr(settings.logging.level, "value", settings.logging.level)
    environment = getattr(settings.environment, "value", settings.environment)
    configure_logging(
        level=level,
        file_path=settings.logging.file_path,
        environment=environment,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a structlog logger configured for the project."""
    return structlog.get_logger(name)

