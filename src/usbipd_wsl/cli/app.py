"""CLI application entry point and command routing for usbipd-wsl.

This module is the **sole error boundary** for the entire application.
It catches every :class:`~usbipd_wsl.exceptions.UsbipdError` raised while
reading the command line, ``KeyboardInterrupt``, and reports any
unexpected ``Exception`` before letting it propagate, returning
well-defined exit codes otherwise.

Architecture notes
------------------
* No business logic lives here — validation and dispatch are delegated
  to the core layer, device access to the infrastructure layer.
* This module is the only place that translates between the domain world
  and the OS process exit code.
"""

from __future__ import annotations

import argparse
import asyncio
import contextlib
import logging
import signal
import sys
from typing import NoReturn

from usbipd_wsl.cli import exit_codes
from usbipd_wsl.cli.console import console, escape
from usbipd_wsl.config import Settings, load_settings
from usbipd_wsl.core.dispatcher import DetachDispatcher
from usbipd_wsl.core.models import DetachResult, Outcome, Selector
from usbipd_wsl.core.protocols import DetachBackend
from usbipd_wsl.core.selector import SelectorOptions, validate_selector
from usbipd_wsl.exceptions import (
    CommandLineSyntaxError,
    SelectorValidationError,
    UsbipdError,
)
from usbipd_wsl.utils.log import setup_logging
from usbipd_wsl.version import __version__

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Argument parser
# ---------------------------------------------------------------------------

class _HelpDisplayed(Exception):
    """argparse has rendered ``--help`` or ``--version``."""


class _ArgumentParser(argparse.ArgumentParser):
    """Parser that raises instead of exiting the process."""

    def error(self, message: str) -> NoReturn:
        raise CommandLineSyntaxError(message, usage=self.format_usage())

    def exit(self, status: int = 0, message: str | None = None) -> NoReturn:
        if message:
            self._print_message(message, sys.stderr)
        raise _HelpDisplayed()


def _build_parser() -> argparse.ArgumentParser:
    """Construct the top-level argument parser.

    * ``usbipd wsl detach --all``
    * ``usbipd wsl detach --busid <BUSID>``
    * ``usbipd wsl detach --hardware-id <VID:PID>``
    * ``usbipd --version``

    The selector options accept an optional value and may repeat so that
    presence, repetition and value shape are judged by
    :func:`~usbipd_wsl.core.selector.validate_selector`, not by argparse.
    """
    parser = _ArgumentParser(
        prog="usbipd",
        description="Shares locally connected USB devices with WSL.",
        allow_abbrev=False,
    )
    parser.add_argument(
        "-V",
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    commands = parser.add_subparsers(dest="command", metavar="COMMAND", required=True)

    wsl = commands.add_parser(
        "wsl",
        help="Manage USB devices attached to WSL.",
        description="Manage USB devices attached to WSL.",
        allow_abbrev=False,
    )
    wsl_commands = wsl.add_subparsers(dest="wsl_command", metavar="COMMAND", required=True)

    detach = wsl_commands.add_parser(
        "detach",
        help="Detach a USB device from WSL.",
        description=(
            "Detaches one or more USB devices from WSL. "
            "Exactly one of the options must be specified."
        ),
        usage="%(prog)s (--all | --busid BUSID | --hardware-id VID:PID)",
        allow_abbrev=False,
    )
    detach.add_argument(
        "-a",
        "--all",
        dest="all",
        action="append",
        nargs="?",
        const=None,
        help="Detach all USB devices.",
    )
    detach.add_argument(
        "-b",
        "--busid",
        dest="busid",
        action="append",
        nargs="?",
        const=None,
        metavar="BUSID",
        help="Detach the device having <BUSID>, e.g. 3-42.",
    )
    detach.add_argument(
        "-i",
        "--hardware-id",
        dest="hardware_id",
        action="append",
        nargs="?",
        const=None,
        metavar="VID:PID",
        help="Detach all devices having <VID>:<PID>, e.g. 0123:cdef.",
    )
    detach.set_defaults(handler=_handle_wsl_detach, usage=detach.format_usage())
    return parser


# ---------------------------------------------------------------------------
# Backend wiring
# ---------------------------------------------------------------------------

def _build_backend(settings: Settings) -> DetachBackend:
    """Instantiate the production backend."""
    from usbipd_wsl.infra.usbip_backend import UsbipBackend

    return UsbipBackend(settings.USBIP_PATH, timeout_s=settings.TIMEOUT_S)


async def _detach(dispatcher: DetachDispatcher, selector: Selector) -> DetachResult:
    """Dispatch *selector* with Ctrl+C wired to the cancellation event."""
    cancel = asyncio.Event()
    loop = asyncio.get_running_loop()
    handler_installed = False
    # Not available on Windows event loops or outside the main thread.
    with contextlib.suppress(NotImplementedError, RuntimeError, ValueError):
        loop.add_signal_handler(signal.SIGINT, cancel.set)
        handler_installed = True
    try:
        return await dispatcher.dispatch(selector, cancel)
    finally:
        if handler_installed:
            loop.remove_signal_handler(signal.SIGINT)


# ---------------------------------------------------------------------------
# Command dispatch
# ---------------------------------------------------------------------------

def _report_error(exc: UsbipdError, usage: str | None = None) -> None:
    console.print(f"[bold red]Error:[/bold red] {escape(str(exc))}")
    if exc.hint:
        console.print(f"[yellow]Hint:[/yellow] {escape(exc.hint)}")
    if usage:
        print(usage, end="", file=sys.stderr)


def _handle_wsl_detach(
    args: argparse.Namespace,
    extras: list[str],
    settings: Settings,
) -> int:
    """Validate the selector, run the detach, and translate the outcome."""
    options = SelectorOptions(
        all=tuple(args.all or ()),
        busid=tuple(args.busid or ()),
        hardware_id=tuple(args.hardware_id or ()),
        strays=tuple(extras),
    )
    try:
        selector = validate_selector(options)
    except SelectorValidationError as exc:
        logger.debug("Rejected wsl detach options: %s", exc)
        _report_error(exc, args.usage)
        return exit_codes.PARSE_ERROR

    dispatcher = DetachDispatcher(_build_backend(settings), console)
    result = asyncio.run(_detach(dispatcher, selector))

    if result.outcome is Outcome.OPERATION_FAILED:
        reason = result.reason or "Detach failed."
        console.print(f"[bold red]Error:[/bold red] {escape(reason)}")
        if result.hint:
            console.print(f"[yellow]Hint:[/yellow] {escape(result.hint)}")
    elif result.outcome is Outcome.CANCELED:
        console.print("[yellow]Operation canceled.[/yellow]")

    return exit_codes.for_outcome(result.outcome)


# ---------------------------------------------------------------------------
# Main entry point
# ---------------------------------------------------------------------------

def main(argv: list[str] | None = None) -> int:
    """Run the usbipd-wsl CLI.

    Parameters
    ----------
    argv:
        Explicit argument list.  When ``None`` (default), ``sys.argv[1:]``
        is used.  Accepting *argv* enables deterministic testing without
        monkeypatching.

    Returns
    -------
    int
        OS process exit code, see :mod:`usbipd_wsl.cli.exit_codes`.
    """
    settings = load_settings()
    setup_logging(settings.LOG_LEVEL)

    parser = _build_parser()
    try:
        args, extras = parser.parse_known_args(argv)
    except _HelpDisplayed:
        return exit_codes.SUCCESS
    except CommandLineSyntaxError as exc:
        _report_error(exc, exc.usage)
        return exit_codes.PARSE_ERROR

    return args.handler(args, extras, settings)


# ---------------------------------------------------------------------------
# Script-level error boundary
# ---------------------------------------------------------------------------

def cli() -> None:
    """Top-level error boundary invoked by the console-script entry point.

    Ctrl+C outside the cancellable section still maps to
    :data:`exit_codes.CANCELED`.  Anything unexpected is reported and
    re-raised so the traceback stays visible.
    """
    try:
        code = main()
    except KeyboardInterrupt:
        console.print("\n[yellow]Operation canceled.[/yellow]")
        code = exit_codes.CANCELED
    except Exception as exc:
        logger.debug("Unhandled exception", exc_info=True)
        console.print(
            "[bold red]Unexpected error.[/bold red] "
            "Please report this issue.\n"
            f"  {type(exc).__name__}: {escape(str(exc))}"
        )
        raise
    sys.exit(code)
