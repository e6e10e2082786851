"""
Device Use Cases - Application Layer

Use cases that work on the device inventory of the account behind the
configured access token.
"""

from collections import defaultdict
from typing import Dict, List

from dependency_injector.wiring import Provide, inject

from particle_cloud.application.dtos.device_dto import (
    DeviceSummaryDTO,
    DevicesResponseDTO,
    GroupedDevicesDTO,
)
from particle_cloud.domain.entities.device import Device
from particle_cloud.domain.gateways.particle_cloud_gateway import (
    IParticleCloudGateway,
)
from particle_cloud.shared import UNKNOWN_PRODUCT, get_logger

logger = get_logger(__name__)


class ListDevicesUseCase:
    """Use case for listing the account's devices grouped by product."""

    @inject
    def __init__(
        self,
        particle_cloud_gateway: IParticleCloudGateway = Provide[
            "particle_cloud_gateway"
        ],
    ):
        """
        Initialize the use case with its dependencies.

        Args:
            particle_cloud_gateway: Gateway for the Particle cloud
        """
        self.particle_cloud_gateway = particle_cloud_gateway

    def execute(self, only_connected: bool = False) -> DevicesResponseDTO:
        """
        List devices and group them by product name.

        Only fields of the listing are read, so no device is fetched one by
        one.

        Args:
            only_connected: Drop devices that are offline

        Returns:
            DevicesResponseDTO: Devices grouped by product, unknown product
            codes grouped under "unknown"

        Raises:
            ParticleCloudError: If the listing fails
        """
        logger.info("devices.list_started", only_connected=only_connected)

        try:
            devices = self.particle_cloud_gateway.list_devices()
        except Exception as e:
            logger.error("devices.list_failed", error=str(e), exc_info=e)
            raise

        grouped: Dict[str, List[DeviceSummaryDTO]] = defaultdict(list)
        for device in devices:
            if only_connected and not device.connected:
                logger.debug("devices.skip_offline", device=device.id_or_name)
                continue
            grouped[device.product or UNKNOWN_PRODUCT].append(self._summary(device))

        groups = [
            GroupedDevicesDTO(product=product, devices=summaries)
            for product, summaries in sorted(grouped.items())
        ]
        count = sum(len(group.devices) for group in groups)

        logger.info("devices.grouped", group_count=len(groups), count=count)
        return DevicesResponseDTO(count=count, groups=groups)

    @staticmethod
    def _summary(device: Device) -> DeviceSummaryDTO:
        # Read the bag directly, device.name would fetch when it is missing.
        attributes = device.attributes
        return DeviceSummaryDTO(
            id=attributes.get("id"),
            name=attributes.get("name"),
            connected=bool(device.connected),
            product_id=device.product_id,
            last_heard=device.last_heard,
            last_ip_address=device.last_ip_address,
        )
