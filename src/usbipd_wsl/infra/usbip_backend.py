"""``usbip`` client backed implementation of :class:`~usbipd_wsl.core.protocols.DetachBackend`.

This module is the **only** place in the codebase that runs the
``usbip`` tool.  Every subprocess failure is caught here and re-raised
as :class:`~usbipd_wsl.exceptions.DetachFailedError`.

Rules
-----
* Subprocesses via :func:`asyncio.create_subprocess_exec` only — no shell.
* The cancellation event is checked before every subprocess; a running
  subprocess is killed when the awaiting task is cancelled.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
import re
from dataclasses import dataclass

from usbipd_wsl.core.models import BusId, HardwareId, Outcome
from usbipd_wsl.core.protocols import Console
from usbipd_wsl.exceptions import (
    DetachFailedError,
    FormatError,
    OperationCanceledError,
    append_usbip_install_suggestion,
)

logger = logging.getLogger(__name__)

_PORT_RE = re.compile(r"^Port\s+(\d+):", re.MULTILINE)
_HARDWARE_ID_RE = re.compile(r"\(([0-9a-fA-F]{4}:[0-9a-fA-F]{4})\)")
_REMOTE_BUS_ID_RE = re.compile(r"usbip://[^/\s]+/(\S+)")


# ---------------------------------------------------------------------------
# ``usbip port`` listing
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class ImportedDevice:
    """One ``Port NN:`` entry reported by ``usbip port``.

    Attributes
    ----------
    port : int
        Local virtual host controller port, as passed to ``usbip detach``.
    bus_id : BusId | None
        Bus id on the sharing host, or ``None`` if not reported.
    hardware_id : HardwareId | None
        VID:PID of the device, or ``None`` if not reported.
    """

    port: int
    bus_id: BusId | None
    hardware_id: HardwareId | None


def parse_port_listing(text: str) -> list[ImportedDevice]:
    """Parse ``usbip port`` output into :class:`ImportedDevice` entries.

    Blocks that lack a bus id or hardware id still produce an entry so
    that ``detach_all`` can release them.
    """
    starts = list(_PORT_RE.finditer(text))
    devices: list[ImportedDevice] = []
    for index, match in enumerate(starts):
        end = starts[index + 1].start() if index + 1 < len(starts) else len(text)
        block = text[match.end():end]

        hardware_id: HardwareId | None = None
        hw_match = _HARDWARE_ID_RE.search(block)
        if hw_match is not None:
            hardware_id = HardwareId.parse(hw_match.group(1))

        bus_id: BusId | None = None
        bus_match = _REMOTE_BUS_ID_RE.search(block)
        if bus_match is not None:
            try:
                bus_id = BusId.parse(bus_match.group(1))
            except FormatError:
                logger.debug("Port %s: unrecognised remote bus id %r", match.group(1), bus_match.group(1))

        devices.append(
            ImportedDevice(port=int(match.group(1)), bus_id=bus_id, hardware_id=hardware_id),
        )
    return devices


# ---------------------------------------------------------------------------
# Backend
# ---------------------------------------------------------------------------

class UsbipBackend:
    """Concrete :class:`DetachBackend` driving the ``usbip`` client tool.

    This class satisfies the :class:`~usbipd_wsl.core.protocols.DetachBackend`
    protocol structurally — no explicit inheritance required.

    Parameters
    ----------
    usbip_path:
        Executable name or path of the ``usbip`` tool.
    timeout_s:
        Upper bound for each subprocess.
    """

    def __init__(self, usbip_path: str = "usbip", *, timeout_s: float = 30.0) -> None:
        self._usbip_path: str = usbip_path
        self._timeout_s: float = timeout_s

    async def _run(self, *args: str, cancel: asyncio.Event) -> tuple[int, str, str]:
        """Run ``usbip *args`` and return (returncode, stdout, stderr)."""
        if cancel.is_set():
            raise OperationCanceledError("Operation canceled.")

        cmd = (self._usbip_path, *args)
        logger.debug("Running %s", " ".join(cmd))
        try:
            process = await asyncio.create_subprocess_exec(
                *cmd,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except FileNotFoundError as exc:
            raise DetachFailedError(
                f"'{self._usbip_path}' was not found.",
                hint=append_usbip_install_suggestion(
                    "Set USBIPD_USBIP_PATH if usbip is installed elsewhere.",
                ),
            ) from exc
        except OSError as exc:
            raise DetachFailedError(
                f"could not run '{self._usbip_path}': {exc.strerror or exc}",
            ) from exc

        try:
            stdout, stderr = await asyncio.wait_for(
                process.communicate(), timeout=self._timeout_s,
            )
        except asyncio.TimeoutError as exc:
            await _kill(process)
            raise DetachFailedError(
                f"'{' '.join(cmd)}' timed out after {self._timeout_s:g}s",
            ) from exc
        except asyncio.CancelledError:
            await _kill(process)
            raise

        return (
            process.returncode or 0,
            stdout.decode(errors="replace").strip(),
            stderr.decode(errors="replace").strip(),
        )

    async def list_imported(self, cancel: asyncio.Event) -> list[ImportedDevice]:
        """Return the devices currently attached through usbip."""
        returncode, stdout, stderr = await self._run("port", cancel=cancel)
        if returncode != 0:
            raise DetachFailedError(f"usbip port failed: {stderr or stdout}")
        return parse_port_listing(stdout)

    async def _detach_ports(
        self,
        devices: list[ImportedDevice],
        console: Console,
        cancel: asyncio.Event,
    ) -> Outcome:
        for device in devices:
            returncode, stdout, stderr = await self._run(
                "detach", "--port", str(device.port), cancel=cancel,
            )
            if returncode != 0:
                raise DetachFailedError(
                    f"failed to detach port {device.port}: {stderr or stdout}",
                )
            label = device.bus_id if device.bus_id is not None else "unknown bus id"
            console.print(f"Detached port {device.port} ({label})")
        return Outcome.SUCCEEDED

    # ------------------------------------------------------------------
    # Protocol methods
    # ------------------------------------------------------------------

    async def detach_all(self, console: Console, cancel: asyncio.Event) -> Outcome:
        devices = await self.list_imported(cancel)
        if not devices:
            console.print("No devices are attached.")
            return Outcome.SUCCEEDED
        return await self._detach_ports(devices, console, cancel)

    async def detach_by_bus(
        self,
        bus_id: BusId,
        console: Console,
        cancel: asyncio.Event,
    ) -> Outcome:
        devices = [d for d in await self.list_imported(cancel) if d.bus_id == bus_id]
        if not devices:
            raise DetachFailedError(f"There is no device with bus id '{bus_id}' attached.")
        return await self._detach_ports(devices, console, cancel)

    async def detach_by_hardware(
        self,
        hardware_id: HardwareId,
        console: Console,
        cancel: asyncio.Event,
    ) -> Outcome:
        devices = [d for d in await self.list_imported(cancel) if d.hardware_id == hardware_id]
        if not devices:
            raise DetachFailedError(
                f"There is no device with hardware id '{hardware_id}' attached.",
            )
        return await self._detach_ports(devices, console, cancel)


async def _kill(process: asyncio.subprocess.Process) -> None:
    with contextlib.suppress(ProcessLookupError):
        process.kill()
    await process.wait()
