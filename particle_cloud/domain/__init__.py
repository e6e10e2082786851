"""
Domain Layer Package

The Device entity and the gateway contract it depends on, free of any HTTP
or framework concerns.
"""

from particle_cloud.domain import entities, gateways

__all__ = ["entities", "gateways"]
