"""CLI console helpers with optional Rich support.

This module intentionally avoids module-level imports of optional UI
dependencies so bootstrap paths (``--help``, ``--version``) remain
functional even when Rich is not installed.
"""

from __future__ import annotations

import re
import sys
from typing import Any

from usbipd_wsl.exceptions import EnvironmentError

# Only the styles the CLI itself emits; user text may contain brackets.
_STYLE_TAG_RE = re.compile(r"\[/?(?:bold red|yellow)\]")


def _load_rich_console_class() -> type[Any]:
    """Return ``rich.console.Console`` class or raise ``EnvironmentError``."""
    try:
        from rich.console import Console
    except ModuleNotFoundError as exc:
        raise EnvironmentError(
            "rich is not installed. Install with: pip install rich",
        ) from exc
    return Console


def get_rich_console() -> Any:
    """Create a Rich console instance targeting stderr."""
    console_class = _load_rich_console_class()
    return console_class(stderr=True, highlight=False)


def escape(text: str) -> str:
    """Quote *text* so it is printed literally inside console markup.

    Without Rich there is no markup parser, so *text* is returned as is.
    """
    try:
        from rich.markup import escape as escape_markup
    except ModuleNotFoundError:
        return text
    return escape_markup(text)


class _ConsoleProxy:
    """Minimal ``print``-compatible proxy with Rich fallback.

    Satisfies :class:`~usbipd_wsl.core.protocols.Console`.
    """

    def print(self, *objects: object) -> None:
        """Render with Rich when available, else plain stderr print."""
        try:
            rich_console = get_rich_console()
        except EnvironmentError:
            print(*(_strip_styles(obj) for obj in objects), file=sys.stderr)
            return
        rich_console.print(*objects)


def _strip_styles(obj: object) -> object:
    if isinstance(obj, str):
        return _STYLE_TAG_RE.sub("", obj)
    return obj


console = _ConsoleProxy()
