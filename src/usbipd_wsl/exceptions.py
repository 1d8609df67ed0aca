"""Custom exception hierarchy for usbipd-wsl.

All exceptions that cross layer boundaries must inherit from
:class:`UsbipdError`.  Raw subprocess / OS exceptions must NEVER
propagate beyond the infrastructure layer — they must be caught and
re-raised as a typed subclass defined here.

Hierarchy
---------
UsbipdError
├── FormatError
├── CommandLineSyntaxError
├── SelectorValidationError
│   ├── MissingSelectorError
│   ├── ConflictingSelectorsError
│   ├── UnexpectedArgumentError
│   ├── MissingArgumentError
│   ├── InvalidArgumentError
│   └── StrayArgumentError
├── DetachFailedError
├── OperationCanceledError
└── EnvironmentError
"""

from __future__ import annotations


class UsbipdError(Exception):
    """Base exception for all usbipd-wsl errors.

    Every user-visible error condition must map to a subclass of this
    exception so that the CLI error boundary can render a clean message
    without leaking internal stack traces.
    """

    def __init__(self, message: str, *, hint: str | None = None) -> None:
        super().__init__(message)
        self.hint: str | None = hint
        """Optional actionable guidance shown below the error message."""


# --- Identifier parsing ----------------------------------------------------

class FormatError(UsbipdError):
    """Raised when a bus id or hardware id does not match its grammar."""

    def __init__(self, message: str, *, text: str, hint: str | None = None) -> None:
        super().__init__(message, hint=hint)
        self.text: str = text
        """The rejected input, verbatim."""


# --- Command line ----------------------------------------------------------

class CommandLineSyntaxError(UsbipdError):
    """Raised when argparse rejects the token stream (unknown option, etc.)."""

    def __init__(self, message: str, *, usage: str | None = None) -> None:
        super().__init__(message)
        self.usage: str | None = usage


class SelectorValidationError(UsbipdError):
    """Base for every selector validation failure of ``wsl detach``.

    Raised before any backend call is attempted.
    """


class MissingSelectorError(SelectorValidationError):
    """None of ``--all``, ``--busid``, ``--hardware-id`` was given."""


class ConflictingSelectorsError(SelectorValidationError):
    """More than one selector option was given."""

    def __init__(self, message: str, *, options: tuple[str, str]) -> None:
        super().__init__(message)
        self.options: tuple[str, str] = options


class UnexpectedArgumentError(SelectorValidationError):
    """A bare flag (``--all``) was given a value."""


class MissingArgumentError(SelectorValidationError):
    """A valued option was given without its value."""


class InvalidArgumentError(SelectorValidationError):
    """An option value failed to parse."""

    def __init__(self, message: str, *, option: str, text: str) -> None:
        super().__init__(message)
        self.option: str = option
        self.text: str = text


class StrayArgumentError(SelectorValidationError):
    """Tokens were left over that no option consumed."""

    def __init__(self, message: str, *, tokens: tuple[str, ...]) -> None:
        super().__init__(message)
        self.tokens: tuple[str, ...] = tokens


# --- Backend ---------------------------------------------------------------

class DetachFailedError(UsbipdError):
    """Raised by a backend when a detach did not logically succeed.

    Device not attached, not currently shared, or the helper tool
    reported an error.  Recoverable from the user's perspective.
    """


class OperationCanceledError(UsbipdError):
    """Raised by a backend that observed the cancellation signal."""


# --- Environment / tooling -------------------------------------------------

class EnvironmentError(UsbipdError):
    """Raised when a required runtime dependency is not available."""


def append_usbip_install_suggestion(hint: str) -> str:
    """Append usbip client install guidance to an existing hint text.

    The suggestion is appended only once and preserves the original
    hint content verbatim.
    """
    marker = "Install the usbip client tools:"
    if marker in hint:
        return hint
    return "\n".join(
        (
            hint,
            marker,
            "    sudo apt install linux-tools-generic hwdata",
        )
    )
