"""
Domain Entities Package

The Device entity, the values its actions return and the errors gateways
raise.
"""

from .device import (
    ID_PATTERN,
    PRODUCT_IDS,
    ById,
    ByName,
    Device,
    DeviceReference,
    FromAttributes,
    LoadKind,
    LoadState,
    classify_target,
)
from .errors import (
    AuthenticationError,
    DeviceNotFoundError,
    DomainError,
    MalformedResponseError,
    ParticleCloudError,
    ParticleConnectionError,
    RateLimitError,
)
from .results import CompileResult, FlashOptions, FlashResult

__all__ = [
    "Device",
    "DeviceReference",
    "ById",
    "ByName",
    "FromAttributes",
    "LoadKind",
    "LoadState",
    "ID_PATTERN",
    "PRODUCT_IDS",
    "classify_target",
    "FlashOptions",
    "FlashResult",
    "CompileResult",
    "DomainError",
    "ParticleCloudError",
    "AuthenticationError",
    "DeviceNotFoundError",
    "RateLimitError",
    "MalformedResponseError",
    "ParticleConnectionError",
]
