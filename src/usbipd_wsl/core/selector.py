"""Selector validation for ``wsl detach``.

Turns the raw option occurrences collected by the CLI parser into a
single :data:`~usbipd_wsl.core.models.Selector`, or raises the first
structural problem found.

Checks run in a fixed order so diagnostics are reproducible:

1. presence / count of selector options,
2. value shape (bare flag vs. valued option, then value parsing),
3. stray tokens.
"""

from __future__ import annotations

from dataclasses import dataclass

from usbipd_wsl.core.models import (
    BusId,
    HardwareId,
    SelectAll,
    SelectByBus,
    SelectByHardware,
    Selector,
)
from usbipd_wsl.exceptions import (
    ConflictingSelectorsError,
    FormatError,
    InvalidArgumentError,
    MissingArgumentError,
    MissingSelectorError,
    StrayArgumentError,
    UnexpectedArgumentError,
)

OPTION_ALL = "--all"
OPTION_BUSID = "--busid"
OPTION_HARDWARE_ID = "--hardware-id"


@dataclass(frozen=True, slots=True)
class SelectorOptions:
    """Raw selector input as supplied on the command line.

    Each option field holds one entry per occurrence of the option;
    an entry is ``None`` when the occurrence carried no value.
    """

    all: tuple[str | None, ...] = ()
    busid: tuple[str | None, ...] = ()
    hardware_id: tuple[str | None, ...] = ()
    strays: tuple[str, ...] = ()

    def supplied(self) -> list[tuple[str, str | None]]:
        """Return ``(option, value)`` for every occurrence, in canonical order."""
        occurrences: list[tuple[str, str | None]] = []
        for option, values in (
            (OPTION_ALL, self.all),
            (OPTION_BUSID, self.busid),
            (OPTION_HARDWARE_ID, self.hardware_id),
        ):
            occurrences.extend((option, value) for value in values)
        return occurrences


def validate_selector(options: SelectorOptions) -> Selector:
    """Validate *options* and build the one active :data:`Selector`.

    Raises
    ------
    MissingSelectorError
        No selector option was supplied (stray tokens notwithstanding).
    ConflictingSelectorsError
        More than one selector option occurrence was supplied.
    UnexpectedArgumentError
        ``--all`` was given a value.
    MissingArgumentError
        ``--busid`` or ``--hardware-id`` was given without a value.
    InvalidArgumentError
        The value does not parse as a bus id / hardware id.
    StrayArgumentError
        Unconsumed tokens remain.
    """
    supplied = options.supplied()

    if not supplied:
        raise MissingSelectorError(
            f"exactly one of {OPTION_ALL}/{OPTION_BUSID}/{OPTION_HARDWARE_ID} is required",
        )

    if len(supplied) > 1:
        first, second = supplied[0][0], supplied[1][0]
        if first == second:
            message = f"option '{first}' may only be given once"
        else:
            message = f"options '{first}' and '{second}' cannot be used together"
        raise ConflictingSelectorsError(message, options=(first, second))

    option, value = supplied[0]
    selector = _build_selector(option, value)

    if options.strays:
        joined = " ".join(options.strays)
        raise StrayArgumentError(
            f"unrecognized argument(s): {joined}",
            tokens=options.strays,
        )

    return selector


def _build_selector(option: str, value: str | None) -> Selector:
    if option == OPTION_ALL:
        if value is not None:
            raise UnexpectedArgumentError(
                f"option '{OPTION_ALL}' does not take an argument (got '{value}')",
            )
        return SelectAll()

    if value is None:
        raise MissingArgumentError(f"option '{option}' requires an argument")

    try:
        if option == OPTION_BUSID:
            return SelectByBus(BusId.parse(value))
        return SelectByHardware(HardwareId.parse(value))
    except FormatError as exc:
        raise InvalidArgumentError(
            f"invalid value for '{option}': {exc}",
            option=option,
            text=exc.text,
        ) from exc
