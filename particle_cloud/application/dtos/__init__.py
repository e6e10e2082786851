"""
DTOs Package - Application Layer

Data Transfer Objects returned by the application use cases.
"""

from .device_dto import DeviceSummaryDTO, DevicesResponseDTO, GroupedDevicesDTO

__all__ = [
    "DeviceSummaryDTO",
    "GroupedDevicesDTO",
    "DevicesResponseDTO",
]
