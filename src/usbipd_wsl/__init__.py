"""usbipd-wsl — detach USB devices shared into WSL.

Built around a small command-dispatch core with an injectable
device-sharing backend.
"""

from usbipd_wsl.version import __version__

__all__: list[str] = ["__version__"]
