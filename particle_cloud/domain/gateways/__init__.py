"""
Gateways Package - Domain Layer

Contracts for talking to the Particle cloud. Implementations are provided
by the infrastructure layer.
"""

from .particle_cloud_gateway import IParticleCloudGateway

__all__ = ["IParticleCloudGateway"]
