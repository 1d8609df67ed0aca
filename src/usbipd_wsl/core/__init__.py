"""Core / service layer — pure domain logic and dispatch.

Rules
-----
* No ``print()`` calls.
* No filesystem, subprocess or network I/O.
* No imports from ``cli`` or ``infra``.
* All functions must be fully typed and deterministic.
"""

from usbipd_wsl.core.dispatcher import DetachDispatcher
from usbipd_wsl.core.models import (
    BusId,
    DetachResult,
    HardwareId,
    Outcome,
    SelectAll,
    SelectByBus,
    SelectByHardware,
    Selector,
)
from usbipd_wsl.core.protocols import Console, DetachBackend
from usbipd_wsl.core.selector import SelectorOptions, validate_selector

__all__: list[str] = [
    "BusId",
    "Console",
    "DetachBackend",
    "DetachDispatcher",
    "DetachResult",
    "HardwareId",
    "Outcome",
    "SelectAll",
    "SelectByBus",
    "SelectByHardware",
    "Selector",
    "SelectorOptions",
    "validate_selector",
]
