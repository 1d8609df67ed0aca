"""Exit-code constants used by the CLI layer.

Centralised here so that every exit path uses a well-known, tested
value rather than magic integers scattered across the codebase.  The
numbers are a public contract: scripts branch on them, so they never
change between releases.
"""

from __future__ import annotations

from usbipd_wsl.core.models import Outcome

SUCCESS: int = 0
"""Command completed, or ``--help`` / ``--version`` was displayed."""

FAILURE: int = 1
"""The backend reported that the operation did not succeed."""

PARSE_ERROR: int = 2
"""The command line was rejected.  Same value argparse uses for usage errors."""

CANCELED: int = 130
"""The operation was canceled (Ctrl+C).  Follows POSIX convention (128 + SIGINT=2)."""


_BY_OUTCOME: dict[Outcome, int] = {
    Outcome.SUCCEEDED: SUCCESS,
    Outcome.OPERATION_FAILED: FAILURE,
    Outcome.CANCELED: CANCELED,
}


def for_outcome(outcome: Outcome) -> int:
    """Return the process exit code for a dispatch *outcome*."""
    return _BY_OUTCOME[outcome]
