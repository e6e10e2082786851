from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence, Tuple

import pytest

from particle_cloud.domain.entities.device import Device
from particle_cloud.domain.entities.results import (
    CompileResult,
    FlashOptions,
    FlashResult,
)
from particle_cloud.domain.gateways.particle_cloud_gateway import (
    IParticleCloudGateway,
)

DEVICE_ID = "0123456789abcdef01234567"


class FakeParticleCloudGateway(IParticleCloudGateway):
    """In-memory gateway recording every call made through it."""

    def __init__(self, attributes: Optional[Dict[str, Any]] = None) -> None:
        self.attributes = attributes or {}
        self.listing: List[Dict[str, Any]] = []
        self.calls: List[Tuple[str, Tuple[Any, ...]]] = []
        self.fail_with: Optional[Exception] = None

    def _record(self, operation: str, *args: Any) -> None:
        self.calls.append((operation, args))
        if self.fail_with is not None:
            raise self.fail_with

    def calls_to(self, operation: str) -> List[Tuple[Any, ...]]:
        return [args for name, args in self.calls if name == operation]

    def list_devices(self) -> List[Device]:
        self._record("list_devices")
        return [self.device(item) for item in self.listing]

    def provision_device(self, product_id: int) -> Device:
        self._record("provision_device", product_id)
        return self.device(DEVICE_ID)

    def device_attributes(self, device: Device) -> Dict[str, Any]:
        self._record("device_attributes", device)
        return dict(self.attributes)

    def claim_device(self, device: Device) -> Dict[str, Any]:
        self._record("claim_device", device)
        return {"ok": True}

    def remove_device(self, device: Device) -> bool:
        self._record("remove_device", device)
        return True

    def rename_device(self, device: Device, name: str) -> str:
        self._record("rename_device", device, name)
        return name

    def call_function(self, device: Device, name: str, argument: str) -> int:
        self._record("call_function", device, name, argument)
        return 1

    def get_variable(self, device: Device, name: str) -> Any:
        self._record("get_variable", device, name)
        return 12.5

    def signal_device(self, device: Device, enabled: bool) -> bool:
        self._record("signal_device", device, enabled)
        return enabled

    def flash_device(
        self, device: Device, file_paths: Sequence[str], options: FlashOptions
    ) -> FlashResult:
        self._record("flash_device", device, file_paths, options)
        return FlashResult(ok=True, message="Update started")

    def compile(
        self,
        file_paths: Sequence[str],
        *,
        device_id: Optional[str] = None,
        platform_id: Optional[int] = None,
        product_id: Optional[int] = None,
    ) -> CompileResult:
        self._record("compile", file_paths, device_id)
        return CompileResult(ok=True, binary_id="b1")

    def change_device_product(
        self, device: Device, product_id: int, should_update: bool
    ) -> bool:
        self._record("change_device_product", device, product_id, should_update)
        return True

    def update_device_public_key(
        self, device: Device, public_key: str, algorithm: str
    ) -> bool:
        self._record("update_device_public_key", device, public_key, algorithm)
        return True


@pytest.fixture()
def full_attributes() -> Dict[str, Any]:
    return {
        "id": DEVICE_ID,
        "name": "garage_door",
        "connected": True,
        "product_id": 6,
        "last_heard": "2024-05-01T12:00:00.000Z",
        "last_app": "door-opener",
        "last_ip_address": "203.0.113.7",
        "functions": ["open", "close"],
        "variables": {"position": "int32"},
    }


@pytest.fixture()
def fake_gateway(full_attributes: Dict[str, Any]) -> FakeParticleCloudGateway:
    return FakeParticleCloudGateway(attributes=full_attributes)


@pytest.fixture()
def device_id() -> str:
    return DEVICE_ID
