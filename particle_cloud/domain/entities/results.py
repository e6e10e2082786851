"""Result values returned by firmware-related device actions."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(slots=True, frozen=True)
class FlashOptions:
    """Options for flashing firmware to a device.

    ``binary`` sends the files as an already compiled binary and skips the
    cloud compile stage.
    """

    binary: bool = False


@dataclass(slots=True, frozen=True)
class FlashResult:
    """Outcome of a flash request."""

    ok: bool
    errors: str = ""
    message: Optional[str] = None

    @property
    def failed(self) -> bool:
        return not self.ok


@dataclass(slots=True, frozen=True)
class CompileResult:
    """Outcome of a cloud compile request."""

    ok: bool
    errors: str = ""
    binary_id: Optional[str] = None
    binary_url: Optional[str] = None
    expires_at: Optional[str] = None
    size_info: Optional[str] = None

    @property
    def failed(self) -> bool:
        return not self.ok
