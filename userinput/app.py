"""Main application class for the user input panel.

This module contains the UserInputApp class which walks through the panels
of a specification document and collects the values to record.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from textual.app import App
from textual.binding import Binding

from .automation import write_automation_file
from .conditions import RulesEngine
from .config import InstallData
from .logging_utils import get_logger
from .platform_matcher import PlatformMatcher
from .screens import UserInputScreen
from .spec_source import TomlSpecificationSource, load_conditions, panel_ids

if TYPE_CHECKING:
    from collections.abc import Sequence

logger = get_logger(__name__)


class UserInputApp(App[None]):
    """Interactive installer front-end showing one screen per panel."""

    CSS = """
    #panel-container {
        padding: 1 2;
    }
    #form {
        height: 1fr;
        margin: 1 0 0 0;
    }
    .title {
        text-style: bold;
        margin-bottom: 1;
    }
    .field-group {
        height: auto;
        margin-bottom: 1;
    }
    .field-title {
        text-style: bold underline;
    }
    #button-row {
        height: auto;
        align-horizontal: right;
    }
    .debug-panel {
        height: 12;
        border: round $warning;
    }
    """

    BINDINGS = [
        Binding("ctrl+q", "quit", "Quit"),
    ]

    def __init__(
        self,
        spec_path: Path | str,
        panels: Sequence[str] | None = None,
        install_data: InstallData | None = None,
        matcher: PlatformMatcher | None = None,
        record_path: Path | str | None = None,
    ) -> None:
        """Initialize the application.

        Parameters
        ----------
        spec_path : Path | str
            Location of the specification document
        panels : Sequence[str] | None, optional
            Identifiers of the panels to show, by default all declared panels
        install_data : InstallData | None, optional
            Installation data, by default an empty one
        matcher : PlatformMatcher | None, optional
            Platform matcher, by default matching the running platform
        record_path : Path | str | None, optional
            Where to write the automation record when all panels are done

        """
        super().__init__()
        self.spec_path = Path(spec_path)
        self.install_data = install_data if install_data is not None else InstallData()
        self.matcher = matcher if matcher is not None else PlatformMatcher()
        self.rules = RulesEngine.from_declarations(load_conditions(self.spec_path))
        self.record_path = Path(record_path) if record_path is not None else None
        self.pending: list[str] = list(panels) if panels else panel_ids(self.spec_path)
        self.records: dict[str, dict[str, str | None]] = {}

    def on_mount(self) -> None:
        """Show the first panel."""
        self.show_next_panel()

    def show_next_panel(self) -> None:
        """Show the next pending panel, or finish when none is left."""
        if not self.pending:
            self.finish()
            return
        panel_id = self.pending.pop(0)
        source = TomlSpecificationSource(self.spec_path, panel_id)
        self.push_screen(UserInputScreen(panel_id, source, self.install_data, self.rules, self.matcher))

    def after_panel(self, panel_id: str, data: dict[str, str | None] | None) -> None:
        """Called when a panel screen is left.

        Parameters
        ----------
        panel_id : str
            Identifier of the panel
        data : dict[str, str | None] | None
            The panel's recorded values, None when it was skipped

        """
        if data is not None:
            self.records[panel_id] = data
            logger.debug("Panel %s completed with %d values", panel_id, len(data))
        else:
            logger.debug("Panel %s skipped", panel_id)
        self.show_next_panel()

    def finish(self) -> None:
        """Write the automation record if requested and exit."""
        if self.record_path is not None:
            write_automation_file(self.record_path, self.records)
        self.exit()

    async def action_quit(self) -> None:
        """Quit the application."""
        self.exit()
