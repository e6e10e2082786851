"""
Gateways Package - Infrastructure Layer

HTTP implementations of the domain gateway contracts.
"""

from .particle_cloud_gateway import ParticleCloudGateway

__all__ = ["ParticleCloudGateway"]
