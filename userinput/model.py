"""Declarative data types of a user input panel specification."""

from __future__ import annotations

from typing import Any, NamedTuple

from userinput.constants import DEFAULT_TOP_BUFFER


class OsConstraint(NamedTuple):
    """A platform predicate. Attributes left as None match any platform."""

    family: str | None = None
    name: str | None = None
    arch: str | None = None
    version: str | None = None


class VariableEntry(NamedTuple):
    """A declared variable assignment."""

    name: str | None
    raw_value: str | None = None
    content_value: str | None = None
    condition_id: str | None = None
    os_constraints: tuple[OsConstraint, ...] = ()

    @property
    def value(self) -> str | None:
        """The declared value: the attribute value, else the nested content."""
        if self.raw_value is not None:
            return self.raw_value
        return self.content_value


class PanelSpec(NamedTuple):
    """The parsed specification of one user input panel."""

    panel_id: str
    variables: tuple[VariableEntry, ...] = ()
    fields: tuple[dict[str, Any], ...] = ()
    packs: tuple[str, ...] = ()
    unselected_packs: tuple[str, ...] = ()
    os_constraints: tuple[OsConstraint, ...] = ()
    top_buffer: int = DEFAULT_TOP_BUFFER


def parse_os_constraints(declarations: Any) -> tuple[OsConstraint, ...]:
    """Build OS constraints from declared tables.

    Parameters
    ----------
    declarations : Any
        None, a single mapping or a list of mappings with the optional keys
        ``family``, ``name``, ``arch`` and ``version``

    Returns
    -------
    tuple[OsConstraint, ...]
        The constraints, empty when none are declared

    """
    if not declarations:
        return ()
    if isinstance(declarations, dict):
        declarations = [declarations]
    return tuple(
        OsConstraint(
            family=decl.get("family"),
            name=decl.get("name"),
            arch=decl.get("arch"),
            version=decl.get("version"),
        )
        for decl in declarations
    )
