"""Core detach dispatcher — runs exactly one backend operation.

This service delegates the actual detach to a
:class:`~usbipd_wsl.core.protocols.DetachBackend` injected at
construction time.  It is responsible for:

* Mapping the validated selector onto one backend coroutine.
* Racing that coroutine against the cancellation event.
* Folding the result into a :class:`~usbipd_wsl.core.models.DetachResult`.

Guarantees
----------
* One backend call per dispatch — no retry, batching or reordering.
* Once cancellation is observed the outcome is ``CANCELED``, whatever
  the backend managed to do.
* Only logical failures are converted; any other backend exception
  propagates unchanged.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import Awaitable

from usbipd_wsl.core.models import (
    DetachResult,
    Outcome,
    SelectAll,
    SelectByBus,
    SelectByHardware,
    Selector,
)
from usbipd_wsl.core.protocols import Console, DetachBackend
from usbipd_wsl.exceptions import DetachFailedError, OperationCanceledError

logger = logging.getLogger(__name__)

_CANCELED = DetachResult(Outcome.CANCELED)


class DetachDispatcher:
    """Stateless service that drives a single detach operation.

    Parameters
    ----------
    backend:
        Any object satisfying the :class:`DetachBackend` protocol.
    console:
        Output sink forwarded to the backend for progress messages.
    """

    def __init__(self, backend: DetachBackend, console: Console) -> None:
        self._backend: DetachBackend = backend
        self._console: Console = console

    # ------------------------------------------------------------------
    # Selector → backend call (pure)
    # ------------------------------------------------------------------

    def _operation(self, selector: Selector, cancel: asyncio.Event) -> Awaitable[Outcome]:
        if isinstance(selector, SelectAll):
            return self._backend.detach_all(self._console, cancel)
        if isinstance(selector, SelectByBus):
            return self._backend.detach_by_bus(selector.bus_id, self._console, cancel)
        if isinstance(selector, SelectByHardware):
            return self._backend.detach_by_hardware(
                selector.hardware_id, self._console, cancel,
            )
        raise TypeError(f"unsupported selector: {selector!r}")

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def dispatch(self, selector: Selector, cancel: asyncio.Event) -> DetachResult:
        """Run the backend operation for *selector*.

        Parameters
        ----------
        selector:
            An already-validated selector.
        cancel:
            Broadcast cancellation signal.  Set once, never reset.

        Returns
        -------
        DetachResult
            ``SUCCEEDED``, ``OPERATION_FAILED`` (with the backend's
            reason) or ``CANCELED``.
        """
        if cancel.is_set():
            logger.info("Cancellation requested before detaching %s", selector)
            return _CANCELED

        logger.debug("Detaching %s", selector)
        task = asyncio.ensure_future(self._operation(selector, cancel))
        waiter = asyncio.ensure_future(cancel.wait())
        try:
            await asyncio.wait({task, waiter}, return_when=asyncio.FIRST_COMPLETED)
        except asyncio.CancelledError:
            task.cancel()
            raise
        finally:
            waiter.cancel()

        if not task.done():
            logger.info("Cancellation requested while detaching %s", selector)
            task.cancel()
            with contextlib.suppress(
                asyncio.CancelledError, OperationCanceledError, DetachFailedError,
            ):
                await task
            return _CANCELED

        result = self._collect(task)
        if cancel.is_set():
            return _CANCELED
        logger.info("Detach %s: %s", selector, result.outcome.value)
        return result

    @staticmethod
    def _collect(task: asyncio.Future[Outcome]) -> DetachResult:
        try:
            outcome = task.result()
        except (asyncio.CancelledError, OperationCanceledError):
            return _CANCELED
        except DetachFailedError as exc:
            return DetachResult(Outcome.OPERATION_FAILED, reason=str(exc), hint=exc.hint)
        return DetachResult(outcome)
