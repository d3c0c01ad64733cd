"""Entry point for the user input panel.

This module provides the main() function and command-line interface for
interactive (Textual) and automated (record replay) runs.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from rich.console import Console
from rich.table import Table

from userinput.app import UserInputApp
from userinput.automation import replay_automation_file
from userinput.config import InstallData
from userinput.constants import DEBUG_MODE
from userinput.errors import UserInputError
from userinput.logging_utils import debug_log_path, get_logger, setup_logging
from userinput.variables import Variables

logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Create the command line parser."""
    parser = argparse.ArgumentParser(
        prog="userinput",
        description="Declarative user input panels for installers",
        epilog="Interactive runs show one screen per panel; --auto replays a record without a UI.",
    )
    parser.add_argument("spec", nargs="?", help="Panel specification document (TOML)")
    parser.add_argument(
        "--panel",
        action="append",
        dest="panels",
        metavar="ID",
        help="Panel to show or replay, may be repeated (default: all panels)",
    )
    parser.add_argument("--packs", default="", help="Comma separated names of the selected packs")
    parser.add_argument(
        "--var",
        action="append",
        default=[],
        metavar="NAME=VALUE",
        help="Preset an installer variable, may be repeated",
    )
    parser.add_argument("--auto", metavar="FILE", help="Replay an automation record instead of showing panels")
    parser.add_argument("--record", metavar="FILE", help="Write an automation record after the interactive run")
    parser.add_argument("--print", action="store_true", dest="print_variables", help="Print the resulting variables")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging and the debug panel")
    return parser


def parse_variables(assignments: list[str]) -> Variables:
    """Build the initial store from ``NAME=VALUE`` assignments.

    Raises
    ------
    UserInputError
        If an assignment has no ``=``

    """
    variables = Variables()
    for assignment in assignments:
        name, sep, value = assignment.partition("=")
        if not sep or not name:
            msg = f"Invalid variable assignment '{assignment}', expected NAME=VALUE"
            raise UserInputError(msg)
        variables.set(name, value)
    return variables


def print_variables(install_data: InstallData, console: Console | None = None) -> None:
    """Print all installer variables as a table."""
    console = console or Console()
    table = Table(title="Installer variables")
    table.add_column("Variable", style="cyan")
    table.add_column("Value")
    for name, value in sorted(install_data.variables.as_dict().items()):
        table.add_row(name, value)
    console.print(table)


def main(argv: list[str] | None = None) -> int:
    """Main entry point.

    Parameters
    ----------
    argv : list[str] | None, optional
        Command line arguments, by default ``sys.argv[1:]``

    Returns
    -------
    int
        Process exit code

    """
    args = build_parser().parse_args(argv)
    setup_logging(args.debug or DEBUG_MODE)
    console = Console(stderr=True)

    try:
        packs = [pack.strip() for pack in args.packs.split(",") if pack.strip()]
        install_data = InstallData(parse_variables(args.var), selected_packs=packs)

        if args.auto:
            replayed = replay_automation_file(args.auto, install_data, args.panels)
            logger.info("Replayed panels: %s", ", ".join(replayed))
        else:
            if not args.spec:
                console.print("[red]Error:[/red] a specification document is required without --auto")
                return 2
            app = UserInputApp(Path(args.spec), args.panels, install_data, record_path=args.record)
            logger.debug("Application starting - Debug functionality available (Ctrl+D)")
            app.run()
    except KeyboardInterrupt:
        console.print("\nOperation cancelled by user.")
        return 130
    except UserInputError as e:
        console.print(f"[red]Error:[/red] {e}")
        logger.debug("Aborted, see %s", debug_log_path())
        return 1

    if args.print_variables:
        print_variables(install_data)
    return 0


if __name__ == "__main__":
    sys.exit(main())
