"""
Device DTOs - Application Layer

Data Transfer Objects describing the device inventory of an account, built
from the partial attributes of a device listing.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field


class DeviceSummaryDTO(BaseModel):
    """DTO for one device as reported by the device listing."""

    id: str = Field(description="24 hex character device ID")
    name: Optional[str] = Field(default=None, description="User assigned name")
    connected: bool = Field(default=False, description="Online right now")
    product_id: Optional[int] = Field(default=None, description="Product code")
    last_heard: Optional[datetime] = Field(
        default=None, description="Last time the cloud heard from the device"
    )
    last_ip_address: Optional[str] = Field(
        default=None, description="Last public IP address"
    )

    model_config = {
        "json_schema_extra": {
            "example": {
                "id": "0123456789abcdef01234567",
                "name": "garage_door",
                "connected": True,
                "product_id": 6,
                "last_heard": "2024-05-01T12:00:00.000Z",
                "last_ip_address": "203.0.113.7",
            }
        }
    }


class GroupedDevicesDTO(BaseModel):
    """DTO for devices grouped by product name."""

    product: str = Field(description="Human readable product name")
    devices: List[DeviceSummaryDTO] = Field(description="Devices of this product")

    @property
    def connected_count(self) -> int:
        return sum(1 for device in self.devices if device.connected)


class DevicesResponseDTO(BaseModel):
    """DTO for the whole device inventory."""

    count: int = Field(description="Total number of devices")
    groups: List[GroupedDevicesDTO] = Field(description="Devices grouped by product")
