# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""User-facing logging helpers with optional colour and emoji support."""

from __future__ import annotations

from dataclasses import dataclass

from rich.console import Console
from rich.rule import Rule
from rich.text import Text

from .console import detect_tty, get_console_manager

_PREFIXES = {
    "info": "ℹ️ ",
    "ok": "✅ ",
    "warn": "⚠️ ",
    "fail": "❌ ",
}
_STYLES = {
    "info": "cyan",
    "ok": "green",
    "warn": "yellow",
    "fail": "red",
}


def emoji(symbol: str, enable: bool) -> str:
    """Return *symbol* when emoji output is enabled, otherwise blank."""

    return symbol if enable else ""


def _render(console: Console, kind: str, msg: str, *, use_emoji: bool) -> None:
    text = Text(f"{emoji(_PREFIXES[kind], use_emoji)}{msg}")
    if not console.no_color:
        text.stylize(_STYLES[kind])
    console.print(text)


def _default_console(use_emoji: bool, use_color: bool | None) -> Console:
    color_enabled = detect_tty() if use_color is None else use_color
    return get_console_manager().get(color=color_enabled, emoji=use_emoji)


def section(title: str, *, use_color: bool) -> None:
    """Render a section header to delineate console output blocks.

    Args:
        title: Section title displayed to the user.
        use_color: Flag indicating whether ANSI colour support is desired.
    """

    console = get_console_manager().get(color=use_color, emoji=True)
    if use_color:
        console.print()
        console.print(Rule(title))
    else:
        console.print(f"\n--- {title} ---")


def fail(msg: str, *, use_emoji: bool, use_color: bool | None = None) -> None:
    """Emit an error message."""

    _render(_default_console(use_emoji, use_color), "fail", msg, use_emoji=use_emoji)


@dataclass(slots=True)
class ActionLogger:
    """Logger handed to every pipeline component instead of module-level state.

    Attributes:
        console: Rich console receiving all output.
        use_emoji: Whether messages carry emoji prefixes.
        debug_enabled: Whether :meth:`debug` lines are printed.
    """

    console: Console
    use_emoji: bool = True
    debug_enabled: bool = False

    def info(self, message: str) -> None:
        """Log an informational message."""

        _render(self.console, "info", message, use_emoji=self.use_emoji)

    def ok(self, message: str) -> None:
        """Log a success message."""

        _render(self.console, "ok", message, use_emoji=self.use_emoji)

    def warn(self, message: str) -> None:
        """Log a warning message."""

        _render(self.console, "warn", message, use_emoji=self.use_emoji)

    def fail(self, message: str) -> None:
        """Log a failure message."""

        _render(self.console, "fail", message, use_emoji=self.use_emoji)

    def debug(self, message: str) -> None:
        """Emit ``message`` only when debug logging is enabled."""

        if self.debug_enabled:
            text = Text("[debug] ", style="bold cyan")
            text.append(message, style="dim")
            self.console.print(text)


def build_action_logger(*, emoji: bool, debug: bool = False, no_color: bool = False) -> ActionLogger:
    """Return an :class:`ActionLogger` bound to a dedicated Rich console.

    Args:
        emoji: Whether log output may include emoji glyphs.
        debug: Whether debug logging should be enabled.
        no_color: Whether terminal colour output should be disabled.

    Returns:
        ActionLogger: Logger ready to be passed to pipeline components.
    """

    console = Console(no_color=no_color, highlight=False, soft_wrap=True)
    return ActionLogger(console=console, use_emoji=emoji, debug_enabled=debug)


__all__ = [
    "ActionLogger",
    "build_action_logger",
    "emoji",
    "fail",
    "section",
]
