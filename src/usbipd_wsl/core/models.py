"""Domain models for usbipd-wsl.

All models are **frozen** dataclasses — immutable value objects with no
behaviour beyond parsing and rendering.  They carry zero I/O, zero
dependencies on external packages, and must remain pure across the
entire lifecycle.
"""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass
from typing import Union

from usbipd_wsl.exceptions import FormatError

_BUS_ID_RE = re.compile(r"(0|[1-9][0-9]{0,2})-(0|[1-9][0-9]{0,2})")
_HARDWARE_ID_RE = re.compile(r"([0-9a-fA-F]{4}):([0-9a-fA-F]{4})")


# ---------------------------------------------------------------------------
# Identifiers
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True, order=True)
class BusId:
    """Position of a device on the bus topology, e.g. ``3-42``.

    Ordering is structural: bus first, then port.
    """

    bus: int
    """Bus (host controller) number."""

    port: int
    """Port number on that bus."""

    @classmethod
    def parse(cls, text: str) -> BusId:
        """Parse the canonical ``<bus>-<port>`` form.

        Raises
        ------
        FormatError
            On any deviation: wrong separator, extra segments, non-digits,
            empty components, leading zeros, or more than three digits.
        """
        match = _BUS_ID_RE.fullmatch(text)
        if match is None:
            raise FormatError(
                f"'{text}' is not a valid bus id (expected <bus>-<port>, e.g. 3-42)",
                text=text,
            )
        return cls(bus=int(match.group(1)), port=int(match.group(2)))

    def __str__(self) -> str:
        return f"{self.bus}-{self.port}"


@dataclass(frozen=True, slots=True)
class HardwareId:
    """Vendor/product identification pair, e.g. ``0123:cdef``.

    Identifies a device *model*, not a physical unit.
    """

    vendor: int
    """16-bit USB vendor id (VID)."""

    product: int
    """16-bit USB product id (PID)."""

    @classmethod
    def parse(cls, text: str) -> HardwareId:
        """Parse ``VID:PID`` with exactly four hex digits per group.

        Case is accepted either way; rendering is always lowercase.

        Raises
        ------
        FormatError
            When *text* is not two four-digit hex groups separated by a
            single colon.
        """
        match = _HARDWARE_ID_RE.fullmatch(text)
        if match is None:
            raise FormatError(
                f"'{text}' is not a valid hardware id (expected VID:PID, e.g. 0123:cdef)",
                text=text,
            )
        return cls(vendor=int(match.group(1), 16), product=int(match.group(2), 16))

    def __str__(self) -> str:
        return f"{self.vendor:04x}:{self.product:04x}"


# ---------------------------------------------------------------------------
# Selector: exactly one variant per invocation
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class SelectAll:
    """Detach every device currently attached."""

    def __str__(self) -> str:
        return "all devices"


@dataclass(frozen=True, slots=True)
class SelectByBus:
    """Detach the device at a bus position."""

    bus_id: BusId

    def __str__(self) -> str:
        return f"bus id {self.bus_id}"


@dataclass(frozen=True, slots=True)
class SelectByHardware:
    """Detach every device matching a hardware id."""

    hardware_id: HardwareId

    def __str__(self) -> str:
        return f"hardware id {self.hardware_id}"


Selector = Union[SelectAll, SelectByBus, SelectByHardware]


# ---------------------------------------------------------------------------
# Outcome
# ---------------------------------------------------------------------------

class Outcome(enum.Enum):
    """Category of a finished detach operation."""

    SUCCEEDED = "succeeded"
    OPERATION_FAILED = "operation-failed"
    CANCELED = "canceled"


@dataclass(frozen=True, slots=True)
class DetachResult:
    """What the dispatcher hands to the exit-status translator."""

    outcome: Outcome

    reason: str | None = None
    """Backend-supplied failure text, for diagnostics only."""

    hint: str | None = None
    """Backend-supplied guidance shown below the reason."""
