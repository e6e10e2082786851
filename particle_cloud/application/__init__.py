"""
Application Layer Package

Use cases and DTOs built on top of the domain entities.
"""

from particle_cloud.application import dtos, use_cases

__all__ = ["dtos", "use_cases"]
