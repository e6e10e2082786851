"""
Particle Cloud Gateway Interface - Domain Layer

This module defines the contract a Device uses to reach the Particle cloud.
Implementations live in the infrastructure layer; tests use in-memory fakes.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

from particle_cloud.domain.entities.device import Device
from particle_cloud.domain.entities.results import (
    CompileResult,
    FlashOptions,
    FlashResult,
)


class IParticleCloudGateway(ABC):
    """Interface for Particle cloud gateways."""

    def device(self, target: Union[str, Mapping[str, Any]]) -> Device:
        """
        Build a Device bound to this gateway.

        Args:
            target: Device id, device name or attributes from the cloud

        Returns:
            Device: Not fetched yet, resolves lazily through this gateway
        """
        return Device(self, target)

    @abstractmethod
    def list_devices(self) -> List[Device]:
        """List the devices of the account.

        The listing has no functions or variables, so the devices come back
        partially loaded.
        """
        pass

    @abstractmethod
    def provision_device(self, product_id: int) -> Device:
        """Create a new device in a product and return it."""
        pass

    @abstractmethod
    def device_attributes(self, device: Device) -> Dict[str, Any]:
        """
        Retrieve every attribute of one device.

        Args:
            device: Device to fetch, addressed by ``device.path``

        Returns:
            Dict[str, Any]: Attributes including functions and variables

        Raises:
            ParticleCloudError: If the cloud call fails
        """
        pass

    @abstractmethod
    def claim_device(self, device: Device) -> Dict[str, Any]:
        """Add the device to the account."""
        pass

    @abstractmethod
    def remove_device(self, device: Device) -> bool:
        """Remove the device from the account."""
        pass

    @abstractmethod
    def rename_device(self, device: Device, name: str) -> str:
        """Rename the device and return the name the cloud stored."""
        pass

    @abstractmethod
    def call_function(self, device: Device, name: str, argument: str) -> int:
        """Call a firmware function and return its integer result."""
        pass

    @abstractmethod
    def get_variable(self, device: Device, name: str) -> Any:
        """Read a firmware variable."""
        pass

    @abstractmethod
    def signal_device(self, device: Device, enabled: bool) -> bool:
        """Toggle the identification LED pattern, return the new state."""
        pass

    @abstractmethod
    def flash_device(
        self, device: Device, file_paths: Sequence[str], options: FlashOptions
    ) -> FlashResult:
        """Send source or binary files to the cloud and flash the device."""
        pass

    @abstractmethod
    def compile(
        self,
        file_paths: Sequence[str],
        *,
        device_id: Optional[str] = None,
        platform_id: Optional[int] = None,
        product_id: Optional[int] = None,
    ) -> CompileResult:
        """Compile source files for a device or platform."""
        pass

    @abstractmethod
    def change_device_product(
        self, device: Device, product_id: int, should_update: bool
    ) -> bool:
        """Move the device to another product."""
        pass

    @abstractmethod
    def update_device_public_key(
        self, device: Device, public_key: str, algorithm: str
    ) -> bool:
        """Replace the public key of the device."""
        pass
