"""
Particle cloud client.

Layer Structure:
- Domain: the lazily loaded Device entity and the gateway contract
- Application: use cases and DTOs over the device inventory
- Infrastructure: HTTP gateway to the Particle cloud
- Shared: constants and logging
- Main: settings and composition root
"""

from particle_cloud.domain.entities import (
    CompileResult,
    Device,
    FlashOptions,
    FlashResult,
    LoadKind,
    LoadState,
    ParticleCloudError,
)
from particle_cloud.infrastructure.gateways import ParticleCloudGateway

__version__ = "0.1.0"

__all__ = [
    "Device",
    "LoadKind",
    "LoadState",
    "FlashOptions",
    "FlashResult",
    "CompileResult",
    "ParticleCloudError",
    "ParticleCloudGateway",
]
