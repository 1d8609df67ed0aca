"""Central configuration for usbipd-wsl."""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass

logger = logging.getLogger(__name__)

DEFAULT_LOG_LEVEL = "WARNING"
DEFAULT_USBIP_PATH = "usbip"
DEFAULT_TIMEOUT_S = 30.0


@dataclass(frozen=True)
class Settings:
    """Configuration settings for usbipd-wsl.

    All settings are loaded from environment variables with sensible defaults.
    """

    LOG_LEVEL: str
    USBIP_PATH: str
    TIMEOUT_S: float


def _read_timeout(raw: str | None) -> float:
    if not raw:
        return DEFAULT_TIMEOUT_S
    try:
        value = float(raw)
    except ValueError:
        logger.warning("USBIPD_TIMEOUT_S=%r is not a number; using %s", raw, DEFAULT_TIMEOUT_S)
        return DEFAULT_TIMEOUT_S
    if value <= 0:
        logger.warning("USBIPD_TIMEOUT_S must be positive; using %s", DEFAULT_TIMEOUT_S)
        return DEFAULT_TIMEOUT_S
    return value


def load_settings(environ: Mapping[str, str] | None = None) -> Settings:
    """Read all configuration from environment variables.

    Args:
        environ: Mapping to read from. Defaults to ``os.environ``.

    Returns:
        Settings object with all configuration values.

    Note:
        Invalid numeric values fall back to defaults with a logged warning.
    """
    env = os.environ if environ is None else environ
    return Settings(
        LOG_LEVEL=(env.get("USBIPD_LOG_LEVEL") or DEFAULT_LOG_LEVEL).upper(),
        USBIP_PATH=env.get("USBIPD_USBIP_PATH") or DEFAULT_USBIP_PATH,
        TIMEOUT_S=_read_timeout(env.get("USBIPD_TIMEOUT_S")),
    )
