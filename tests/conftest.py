"""Shared pytest fixtures and configuration for the usbipd-wsl test suite.

Guidelines
----------
* No real ``usbip`` subprocess in any test.
* The backend must be mocked at the :class:`DetachBackend` boundary.
* Core tests must be pure — no side effects.
* Tests must not depend on OS state or ``USBIPD_*`` variables.
"""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest

from usbipd_wsl.core.models import Outcome


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("USBIPD_LOG_LEVEL", "USBIPD_USBIP_PATH", "USBIPD_TIMEOUT_S"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def backend() -> AsyncMock:
    """A backend whose three operations succeed unless reconfigured."""
    mock = AsyncMock()
    mock.detach_all.return_value = Outcome.SUCCEEDED
    mock.detach_by_bus.return_value = Outcome.SUCCEEDED
    mock.detach_by_hardware.return_value = Outcome.SUCCEEDED
    return mock


@pytest.fixture
def cli_backend(backend: AsyncMock, monkeypatch: pytest.MonkeyPatch) -> AsyncMock:
    """Wire :func:`backend` into the CLI in place of the usbip backend."""
    from usbipd_wsl.cli import app as app_module

    monkeypatch.setattr(app_module, "_build_backend", lambda settings: backend)
    return backend
