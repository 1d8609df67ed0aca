"""Allow ``python -m usbipd_wsl`` invocation.

This module simply delegates to the CLI error-boundary entry point so
that ``python -m usbipd_wsl`` behaves identically to the ``usbipd``
console script.
"""

from __future__ import annotations

from usbipd_wsl.cli.app import cli

if __name__ == "__main__":
    cli()
