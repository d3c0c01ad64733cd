"""Automation records for headless re-runs.

A record maps each panel identifier to the variables the panel set::

    [paths]
    "app.home" = "/opt/app"
    "data.dir" = "/opt/app/data"
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import toml

from userinput.errors import AutomationError
from userinput.logging_utils import get_logger

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from userinput.config import InstallData

logger = get_logger(__name__)


def write_automation_file(path: Path | str, panels: Mapping[str, Mapping[str, str | None]]) -> None:
    """Write the recorded panel values.

    Parameters
    ----------
    path : Path | str
        Destination of the record
    panels : Mapping[str, Mapping[str, str | None]]
        Variables per panel identifier. Unset variables are omitted.

    Raises
    ------
    AutomationError
        If the file cannot be written

    """
    path = Path(path)
    document = {
        panel_id: {name: value for name, value in sorted(entries.items()) if value is not None}
        for panel_id, entries in panels.items()
    }
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf-8") as f:
            toml.dump(document, f)
    except OSError as e:
        msg = f"Could not write automation record {path}: {e}"
        raise AutomationError(msg) from e
    logger.info("Automation record written to %s", path)


def read_automation_file(path: Path | str) -> dict[str, dict[str, str]]:
    """Read a record written by :func:`write_automation_file`.

    Raises
    ------
    AutomationError
        If the file is missing or malformed

    """
    path = Path(path)
    if not path.exists():
        msg = f"Automation record not found: {path}"
        raise AutomationError(msg)
    try:
        with path.open(encoding="utf-8") as f:
            document = toml.load(f)
    except toml.TomlDecodeError as e:
        msg = f"Could not parse automation record {path}: {e}"
        raise AutomationError(msg) from e

    panels: dict[str, dict[str, str]] = {}
    for panel_id, entries in document.items():
        if not isinstance(entries, dict):
            msg = f"Entry '{panel_id}' of {path} is not a table"
            raise AutomationError(msg)
        panels[panel_id] = {name: str(value) for name, value in entries.items()}
    return panels


def run_automated(install_data: InstallData, entries: Mapping[str, str]) -> None:
    """Set every recorded variable of one panel."""
    for name, value in entries.items():
        install_data.set_variable(name, value)
    logger.debug("Replayed %d recorded variables", len(entries))


def replay_automation_file(
    path: Path | str,
    install_data: InstallData,
    panels: Sequence[str] | None = None,
) -> list[str]:
    """Replay a record into the installation data.

    Parameters
    ----------
    path : Path | str
        Location of the record
    install_data : InstallData
        Installation data receiving the recorded variables
    panels : Sequence[str] | None, optional
        Identifiers of the panels to replay, by default every recorded panel

    Returns
    -------
    list[str]
        Identifiers of the replayed panels

    """
    record = read_automation_file(path)
    replayed = []
    for panel_id in panels if panels else list(record):
        entries = record.get(panel_id)
        if entries is None:
            logger.warning("No recorded values for panel %s in %s", panel_id, path)
            continue
        run_automated(install_data, entries)
        replayed.append(panel_id)
    return replayed
