"""
Use Cases Package - Application Layer

Use cases orchestrating the device entities and the cloud gateway.
"""

from .device_use_cases import ListDevicesUseCase

__all__ = ["ListDevicesUseCase"]
