"""
Shared module - Cross-cutting concerns

Constants, enums and the logging helpers used by every other layer. Nothing
here depends on the domain, infrastructure or composition root.
"""

from .consts import (
    DEFAULT_API_URL,
    DEFAULT_REQUEST_TIMEOUT,
    UNKNOWN_PRODUCT,
    EnumEnvironment,
    EnumLogLevel,
)
from .logging import (
    configure_logging,
    gateway_context,
    get_logger,
    update_logging_from_settings,
)

__all__ = [
    "DEFAULT_API_URL",
    "DEFAULT_REQUEST_TIMEOUT",
    "UNKNOWN_PRODUCT",
    "EnumEnvironment",
    "EnumLogLevel",
    "configure_logging",
    "gateway_context",
    "get_logger",
    "update_logging_from_settings",
]
