"""Installation data container for the user input panel."""

from __future__ import annotations

from typing import TYPE_CHECKING

from userinput.variables import Variables

if TYPE_CHECKING:
    from collections.abc import Iterable


class InstallData:
    """Container for the state shared by all panels of an installation."""

    def __init__(self, variables: Variables | None = None, selected_packs: Iterable[str] = ()) -> None:
        """Initialize the InstallData.

        Parameters
        ----------
        variables : Variables | None, optional
            The installer variable store, a new empty store when None
        selected_packs : Iterable[str], optional
            Names of the packs selected for installation, by default none

        """
        self.variables: Variables = variables if variables is not None else Variables()
        self.selected_packs: list[str] = list(selected_packs)

    def get_variable(self, name: str) -> str | None:
        """Return the value of an installer variable."""
        return self.variables.get(name)

    def set_variable(self, name: str, value: str | None) -> None:
        """Set the value of an installer variable."""
        self.variables.set(name, value)

    def is_pack_selected(self, pack: str) -> bool:
        """Return True if the named pack is selected for installation."""
        return pack in self.selected_packs
