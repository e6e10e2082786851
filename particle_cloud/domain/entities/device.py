"""
Device Entity - Domain Layer

A Particle device as seen from the client side. The entity keeps a bag of
attributes, fetches more through its gateway only when an accessor needs
data it does not have, and forwards every action to the gateway.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import (
    TYPE_CHECKING,
    Any,
    Dict,
    List,
    Mapping,
    Optional,
    Sequence,
    Union,
)

from .results import CompileResult, FlashOptions, FlashResult

if TYPE_CHECKING:
    from particle_cloud.domain.gateways.particle_cloud_gateway import (
        IParticleCloudGateway,
    )

ID_PATTERN = re.compile(r"[0-9a-fA-F]{24}")

PRODUCT_IDS: Mapping[int, str] = MappingProxyType(
    {
        0: "Core",
        6: "Photon",
        8: "P1",
        10: "Electron",
        31: "Raspberry Pi",
    }
)


@dataclass(slots=True, frozen=True)
class ById:
    """Device referenced by its 24 hex character ID."""

    device_id: str


@dataclass(slots=True, frozen=True)
class ByName:
    """Device referenced by its user assigned name."""

    name: str


@dataclass(slots=True, frozen=True)
class FromAttributes:
    """Device built from attributes returned by the cloud."""

    attributes: Mapping[str, Any]


DeviceReference = Union[ById, ByName, FromAttributes]


def classify_target(target: Union[str, Mapping[str, Any]]) -> DeviceReference:
    """Turn raw constructor input into a device reference.

    Strings that are exactly 24 hex characters are IDs, every other string
    is a name. Mappings are taken as attributes.
    """
    if isinstance(target, str):
        if ID_PATTERN.fullmatch(target):
            return ById(target)
        return ByName(target)
    if isinstance(target, Mapping):
        return FromAttributes(target)
    raise TypeError(
        f"Device target must be an id, a name or a mapping, not {type(target).__name__}"
    )


class LoadState(str, Enum):
    """How much of the device the attribute bag is known to cover."""

    UNLOADED = "unloaded"
    PARTIALLY_LOADED = "partially_loaded"
    FULLY_LOADED = "fully_loaded"


class LoadKind(str, Enum):
    """What an accessor needs before it can answer."""

    IDENTITY = "identity"
    FULL = "full"


class Device:
    """A Particle device bound to the gateway that talks to the cloud."""

    LIST_PATH = "v1/devices"
    CLAIM_PATH = "v1/devices"
    PROVISION_PATH = "v1/devices"
    UPDATE_KEYS_PATH = "/v1/provisioning/x"

    def __init__(
        self,
        gateway: "IParticleCloudGateway",
        target: Union[str, Mapping[str, Any], DeviceReference],
    ):
        self._gateway = gateway
        if not isinstance(target, (ById, ByName, FromAttributes)):
            target = classify_target(target)
        self.reference = target

        self._attributes: Dict[str, Any]
        if isinstance(target, ById):
            self._attributes = {"id": target.device_id}
            self._state = LoadState.UNLOADED
        elif isinstance(target, ByName):
            self._attributes = {"name": target.name}
            self._state = LoadState.UNLOADED
        else:
            # Device listings and claim responses leave out functions and
            # variables, a single device fetch always has them.
            self._attributes = dict(target.attributes)
            if "variables" in self._attributes:
                self._state = LoadState.FULLY_LOADED
            else:
                self._state = LoadState.PARTIALLY_LOADED

    def __repr__(self) -> str:
        return f"<Device {self.id_or_name!r} ({self._state.value})>"

    # ------------------------------------------------------------------
    # Load state
    # ------------------------------------------------------------------
    @property
    def load_state(self) -> LoadState:
        return self._state

    @property
    def loaded(self) -> bool:
        return self._state is not LoadState.UNLOADED

    @property
    def fully_loaded(self) -> bool:
        return self._state is LoadState.FULLY_LOADED

    @property
    def attributes(self) -> Mapping[str, Any]:
        """Read-only view of the attributes known right now."""
        return MappingProxyType(self._attributes)

    def ensure_loaded(self, kind: LoadKind, attribute: Optional[str] = None) -> bool:
        """Fetch the device if ``kind`` cannot be answered from the bag.

        ``LoadKind.IDENTITY`` needs ``attribute`` to be present,
        ``LoadKind.FULL`` needs the device to be fully loaded.

        Returns:
            True when a fetch was performed.
        """
        if kind is LoadKind.IDENTITY:
            if attribute is None:
                raise ValueError("An identity load needs the attribute to check")
            needed = self._attributes.get(attribute) is None
        else:
            needed = self._state is not LoadState.FULLY_LOADED

        if needed:
            self.get_attributes()
        return needed

    def get_attributes(self) -> Mapping[str, Any]:
        """Fetch every attribute of the device and replace the bag with them.

        The bag and load state only change once the gateway call returns, so
        a failed fetch leaves the device as it was.
        """
        attributes = self._gateway.device_attributes(self)
        self._attributes = dict(attributes)
        self._state = LoadState.FULLY_LOADED
        return self.attributes

    # ------------------------------------------------------------------
    # Identity
    # ------------------------------------------------------------------
    @property
    def id(self) -> Optional[str]:
        self.ensure_loaded(LoadKind.IDENTITY, "id")
        return self._attributes.get("id")

    @property
    def name(self) -> Optional[str]:
        self.ensure_loaded(LoadKind.IDENTITY, "name")
        return self._attributes.get("name")

    @property
    def id_or_name(self) -> Optional[str]:
        return self._attributes.get("id") or self._attributes.get("name")

    # ------------------------------------------------------------------
    # Status, never fetched on demand
    # ------------------------------------------------------------------
    @property
    def connected(self) -> Optional[bool]:
        return self._attributes.get("connected")

    is_connected = connected

    @property
    def product_id(self) -> Optional[int]:
        return self._attributes.get("product_id")

    @property
    def last_heard(self) -> Any:
        return self._attributes.get("last_heard")

    @property
    def last_app(self) -> Optional[str]:
        return self._attributes.get("last_app")

    @property
    def last_ip_address(self) -> Optional[str]:
        return self._attributes.get("last_ip_address")

    @property
    def product(self) -> Optional[str]:
        """Product name for ``product_id``, None for codes not in the table."""
        return PRODUCT_IDS.get(self.product_id)

    # ------------------------------------------------------------------
    # Firmware capabilities
    # ------------------------------------------------------------------
    @property
    def functions(self) -> Optional[List[str]]:
        self.ensure_loaded(LoadKind.FULL)
        return self._attributes.get("functions")

    @property
    def variables(self) -> Optional[Dict[str, str]]:
        self.ensure_loaded(LoadKind.FULL)
        return self._attributes.get("variables")

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------
    def claim(self) -> "Device":
        """Add this device to the account of the configured access token.

        Example:
            >>> gateway.device("0123456789abcdef01234567").claim()
        """
        self._gateway.claim_device(self)
        return self

    def remove(self) -> bool:
        """Remove this device from the account."""
        return self._gateway.remove_device(self)

    def rename(self, name: str) -> str:
        """
        Rename the device in the cloud.

        The local ``name`` keeps its old value until the device is fetched
        again.

        Args:
            name: New name for the device

        Returns:
            str: The name confirmed by the cloud
        """
        return self._gateway.rename_device(self, name)

    def function(self, name: str, argument: str = "") -> int:
        """
        Call a function exposed by the device firmware.

        Args:
            name: Firmware function to run
            argument: Argument string passed to the function

        Returns:
            int: Value returned by the firmware function
        """
        return self._gateway.call_function(self, name, argument)

    call = function

    def variable(self, name: str) -> Any:
        """Read a variable exposed by the device firmware."""
        return self._gateway.get_variable(self, name)

    get = variable

    def signal(self, enabled: bool = True) -> bool:
        """Start or stop the rainbow LED pattern used to spot a device.

        Returns:
            bool: True while signaling, False once stopped
        """
        return self._gateway.signal_device(self, enabled)

    def flash(
        self, file_paths: Sequence[str], options: Optional[FlashOptions] = None
    ) -> FlashResult:
        """
        Flash new firmware from source files or a compiled binary.

        Args:
            file_paths: Files to send to the cloud
            options: ``FlashOptions(binary=True)`` skips the compile stage

        Returns:
            FlashResult: ``ok`` on success, compile output in ``errors``
        """
        return self._gateway.flash_device(
            self, list(file_paths), options or FlashOptions()
        )

    def compile(self, file_paths: Sequence[str]) -> CompileResult:
        """Compile firmware for this device without flashing it."""
        return self._gateway.compile(list(file_paths), device_id=self.id)

    def change_product(self, product_id: int, should_update: bool = False) -> bool:
        """
        Move the device to another product.

        This changes which firmware updates the device receives and only
        works for products that granted permission.

        Args:
            product_id: New product id
            should_update: Update the device right after the change

        Returns:
            bool: True on success
        """
        return self._gateway.change_device_product(self, product_id, should_update)

    def update_public_key(self, public_key: str, algorithm: str = "rsa") -> bool:
        """
        Replace the public key the cloud holds for this device.

        Args:
            public_key: Key in PEM format, as generated by openssl
            algorithm: Key algorithm

        Returns:
            bool: True on success
        """
        return self._gateway.update_device_public_key(self, public_key, algorithm)

    # ------------------------------------------------------------------
    # Request paths
    # ------------------------------------------------------------------
    @property
    def path(self) -> str:
        target = self.id_or_name
        if target is None:
            raise ValueError("Device has neither an id nor a name")
        return f"/v1/devices/{target}"

    def function_path(self, name: str) -> str:
        return f"{self.path}/{name}"

    def variable_path(self, name: str) -> str:
        return f"{self.path}/{name}"
