"""Protocols (interfaces) consumed by the core layer.

These define the contracts that infrastructure adapters must satisfy.
Core code depends ONLY on these protocols — never on concrete
implementations — preserving the dependency inversion principle.
"""

from __future__ import annotations

import asyncio
from typing import Protocol

from usbipd_wsl.core.models import BusId, HardwareId, Outcome


class Console(Protocol):
    """Output sink for human-readable diagnostics."""

    def print(self, *objects: object) -> None:
        ...  # pragma: no cover


class DetachBackend(Protocol):
    """Contract for device-sharing backends.

    Any object that implements the three coroutine methods below with
    the correct signatures satisfies this protocol structurally (no
    explicit inheritance required).

    Every method receives the shared cancellation *cancel* event and
    must observe it cooperatively: either by raising
    :class:`asyncio.CancelledError` /
    :class:`~usbipd_wsl.exceptions.OperationCanceledError`, or by
    returning :attr:`Outcome.CANCELED`.

    A logical failure (device not attached, tool reported an error) is
    reported by returning :attr:`Outcome.OPERATION_FAILED` or by raising
    :class:`~usbipd_wsl.exceptions.DetachFailedError`.  Anything else
    raised is treated as a defect and propagates.
    """

    async def detach_all(self, console: Console, cancel: asyncio.Event) -> Outcome:
        """Detach every device currently attached."""
        ...  # pragma: no cover

    async def detach_by_bus(
        self,
        bus_id: BusId,
        console: Console,
        cancel: asyncio.Event,
    ) -> Outcome:
        """Detach the device at *bus_id*."""
        ...  # pragma: no cover

    async def detach_by_hardware(
        self,
        hardware_id: HardwareId,
        console: Console,
        cancel: asyncio.Event,
    ) -> Outcome:
        """Detach every device whose VID:PID equals *hardware_id*."""
        ...  # pragma: no cover
