"""Mixins for screen functionality.

This module contains the debug panel mixin shared by the user input screens.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, cast

import pyperclip
from textual.containers import Container, Horizontal
from textual.css.query import NoMatches
from textual.widgets import Button, Label, RichLog

from userinput.constants import MAX_DEBUG_MESSAGES
from userinput.logging_utils import get_logger, tui_log_handler

if TYPE_CHECKING:
    from textual.screen import Screen

logger = get_logger(__name__)


class DebugMixin:
    """Mixin class to add debug functionality to screens.

    This mixin should be used with classes that inherit from Screen.
    """

    def _populate_debug_log(self, debug_log: RichLog) -> None:
        """Populate debug log with current messages.

        Parameters
        ----------
        debug_log : RichLog
            The RichLog widget to populate with debug messages

        """
        messages = tui_log_handler.get_messages()

        if not messages:
            debug_log.write("[dim]No debug messages available yet.[/dim]")
            return
        for msg in messages[-MAX_DEBUG_MESSAGES:]:
            debug_log.write(msg)

    def update_debug_output(self) -> None:
        """Refresh the debug log widget with the latest captured log messages."""
        screen = cast("Screen[None]", self)
        try:
            debug_log = screen.query_one("#debug_log", RichLog)
        except NoMatches:
            # Debug panel not shown
            return
        debug_log.clear()
        self._populate_debug_log(debug_log)

    def _copy_debug_output(self) -> None:
        """Copy all captured debug messages to the system clipboard."""
        screen = cast("Screen[None]", self)
        try:
            pyperclip.copy("\n".join(tui_log_handler.get_messages()))
        except pyperclip.PyperclipException as e:
            screen.notify(f"Failed to copy debug output: {e}", timeout=3, severity="error")
            return
        screen.notify("Debug output copied to clipboard!", timeout=2, severity="information")

    def action_toggle_debug(self) -> None:
        """Show or hide the debug panel."""
        screen = cast("Screen[None]", self)
        try:
            screen.query_one("#debug_container").remove()
            return
        except NoMatches:
            pass

        try:
            main_container = screen.query_one("#panel-container")
        except NoMatches:
            logger.debug("DebugMixin: no main container for the debug panel")
            return

        debug_log = RichLog(max_lines=MAX_DEBUG_MESSAGES, wrap=True, highlight=True, markup=True, id="debug_log")
        self._populate_debug_log(debug_log)
        main_container.mount(
            Container(
                Horizontal(
                    Label("Debug Output (Ctrl+D to toggle):", classes="debug-title"),
                    Button("Copy Debug", id="copy_debug_btn", classes="debug-copy-btn"),
                    id="debug-header",
                ),
                debug_log,
                id="debug_container",
                classes="debug-panel",
            ),
        )
