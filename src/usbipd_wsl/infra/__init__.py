"""Infrastructure layer — external system integration.

This layer wraps all interaction with the ``usbip`` client tool and
the operating system.  Every raw subprocess exception must be caught
here and re-raised as a :class:`~usbipd_wsl.exceptions.UsbipdError`
subclass.

Rules
-----
* No imports from ``cli``.
* No Rich rendering; plain messages go through the injected console.
* Must expose clean, typed interfaces consumed by the core layer.
"""

from usbipd_wsl.infra.usbip_backend import ImportedDevice, UsbipBackend, parse_port_listing

__all__: list[str] = [
    "ImportedDevice",
    "UsbipBackend",
    "parse_port_listing",
]
