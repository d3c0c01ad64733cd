"""Panel specification sources.

A TOML specification document holds one ``[[panel]]`` table per panel and
the shared ``[conditions]`` table::

    [conditions.wants_docs]
    type = "variable"
    variable = "install.docs"
    value = "true"

    [[panel]]
    id = "paths"
    topBuffer = 10
    packs = ["core"]

    [[panel.variable]]
    name = "app.home"
    value = "${INSTALL_PATH}/app"

    [[panel.field]]
    type = "dir"
    variable = "data.dir"
    label = "Data directory"
    default = "${app.home}/data"
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Any

import toml

from userinput.constants import DEFAULT_TOP_BUFFER
from userinput.errors import SpecificationError
from userinput.logging_utils import get_logger
from userinput.model import PanelSpec, VariableEntry, parse_os_constraints

if TYPE_CHECKING:
    from collections.abc import Mapping

logger = get_logger(__name__)


def _parse_top_buffer(panel: Mapping[str, Any]) -> int:
    try:
        return int(panel["topBuffer"])
    except (KeyError, TypeError, ValueError):
        return DEFAULT_TOP_BUFFER


def parse_variable_entry(declaration: Mapping[str, Any]) -> VariableEntry:
    """Build a variable entry from a ``[[panel.variable]]`` table.

    The value comes from the ``value`` key; a ``value = { content = "..." }``
    table stands for a value given as element content.
    """
    raw_value = declaration.get("value")
    content_value = None
    if isinstance(raw_value, dict):
        content_value = raw_value.get("content")
        raw_value = None
    return VariableEntry(
        name=declaration.get("name"),
        raw_value=None if raw_value is None else str(raw_value),
        content_value=None if content_value is None else str(content_value),
        condition_id=declaration.get("condition"),
        os_constraints=parse_os_constraints(declaration.get("os")),
    )


def parse_panel(panel: Mapping[str, Any]) -> PanelSpec:
    """Build a panel specification from a ``[[panel]]`` table."""
    fields = panel.get("field", [])
    if not isinstance(fields, list) or not all(isinstance(field, dict) for field in fields):
        msg = f"Fields of panel '{panel.get('id')}' must be a list of tables"
        raise SpecificationError(msg)
    return PanelSpec(
        panel_id=str(panel.get("id", "")),
        variables=tuple(parse_variable_entry(decl) for decl in panel.get("variable", [])),
        fields=tuple(fields),
        packs=tuple(panel.get("packs", ())),
        unselected_packs=tuple(panel.get("unselected_packs", ())),
        os_constraints=parse_os_constraints(panel.get("os")),
        top_buffer=_parse_top_buffer(panel),
    )


def load_document(path: Path) -> dict[str, Any] | None:
    """Load a specification document.

    Returns
    -------
    dict[str, Any] | None
        The parsed document, or None when the file does not exist

    Raises
    ------
    SpecificationError
        If the document is not valid TOML

    """
    if not path.exists():
        logger.warning("Specification file not found: %s", path)
        return None
    try:
        with path.open(encoding="utf-8") as f:
            return toml.load(f)
    except toml.TomlDecodeError as e:
        msg = f"Could not parse specification {path}: {e}"
        raise SpecificationError(msg) from e


def panel_ids(path: Path) -> list[str]:
    """Return the identifiers of all panels declared in a document."""
    document = load_document(path)
    if document is None:
        return []
    return [str(panel.get("id", "")) for panel in document.get("panel", [])]


class TomlSpecificationSource:
    """Reads one panel's specification from a TOML document."""

    def __init__(self, path: Path | str, panel_id: str | None = None) -> None:
        """Initialize the source.

        Parameters
        ----------
        path : Path | str
            Location of the specification document
        panel_id : str | None, optional
            Identifier of the panel, by default the first panel of the document

        """
        self.path = Path(path)
        self.panel_id = panel_id

    def read(self) -> PanelSpec | None:
        """Return the panel specification, or None when it is unavailable."""
        document = load_document(self.path)
        if document is None:
            return None

        panels = document.get("panel", [])
        for panel in panels:
            if self.panel_id is None or str(panel.get("id")) == self.panel_id:
                return parse_panel(panel)

        logger.warning("No panel %r in %s", self.panel_id, self.path)
        return None


class StaticSpecificationSource:
    """Supplies a prebuilt panel specification."""

    def __init__(self, spec: PanelSpec | None) -> None:
        self.spec = spec

    def read(self) -> PanelSpec | None:
        return self.spec


def load_conditions(path: Path | str) -> dict[str, dict[str, Any]]:
    """Return the condition declarations of a document, empty when it is missing."""
    document = load_document(Path(path))
    if document is None:
        return {}
    return document.get("conditions", {})
