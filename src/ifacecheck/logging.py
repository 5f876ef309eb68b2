# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Console messages for sweep results, rendered with Rich."""

from __future__ import annotations

import sys
from typing import Final

from rich.console import Console
from rich.rule import Rule
from rich.text import Text

from .cache import memoize

_MARKERS: Final[dict[str, tuple[str, str]]] = {
    "info": ("ℹ️ ", "cyan"),
    "ok": ("✅ ", "green"),
    "warn": ("⚠️ ", "yellow"),
    "fail": ("❌ ", "red"),
}


def _stdout_is_tty() -> bool:
    try:
        return sys.stdout.isatty()
    except (AttributeError, ValueError):
        return False


class RichConsoleManager:
    """Hand out one Rich console per colour and emoji combination."""

    def __init__(self) -> None:
        self._consoles: dict[tuple[bool, bool], Console] = {}

    def get(self, *, color: bool, emoji: bool) -> Console:
        """Return the console for the requested output style.

        Args:
            color: Emit ANSI styling.
            emoji: Let Rich render emoji codes.

        Returns:
            Console: Console shared by every caller asking for the same style.
        """

        key = (color, emoji)
        console = self._consoles.get(key)
        if console is None:
            console = Console(
                color_system="auto" if color else None,
                no_color=not color,
                emoji=emoji,
                soft_wrap=True,
            )
            self._consoles[key] = console
        return console


@memoize
def get_console_manager() -> RichConsoleManager:
    """Return the process-wide :class:`RichConsoleManager`."""

    return RichConsoleManager()


def _emit(level: str, msg: str, *, use_emoji: bool, use_color: bool | None) -> None:
    color = _stdout_is_tty() if use_color is None else use_color
    glyph, style = _MARKERS[level]
    text = Text(f"{glyph if use_emoji else ''}{msg}", style=style if color else "")
    get_console_manager().get(color=color, emoji=use_emoji).print(text)


def section(title: str, *, use_color: bool) -> None:
    """Print a header separating blocks of command output."""

    console = get_console_manager().get(color=use_color, emoji=True)
    if use_color:
        console.print()
        console.print(Rule(title))
    else:
        console.print(f"\n--- {title} ---")


def info(msg: str, *, use_emoji: bool, use_color: bool | None = None) -> None:
    _emit("info", msg, use_emoji=use_emoji, use_color=use_color)


def ok(msg: str, *, use_emoji: bool, use_color: bool | None = None) -> None:
    _emit("ok", msg, use_emoji=use_emoji, use_color=use_color)


def warn(msg: str, *, use_emoji: bool, use_color: bool | None = None) -> None:
    _emit("warn", msg, use_emoji=use_emoji, use_color=use_color)


def fail(msg: str, *, use_emoji: bool, use_color: bool | None = None) -> None:
    _emit("fail", msg, use_emoji=use_emoji, use_color=use_color)


__all__ = ["fail", "get_console_manager", "info", "ok", "section", "warn"]
