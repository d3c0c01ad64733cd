"""Protocol definitions for the user input panel.

This module contains the interfaces the panel core consumes. Concrete
implementations live in :mod:`userinput.variables`, :mod:`userinput.conditions`,
:mod:`userinput.platform_matcher`, :mod:`userinput.spec_source` and the
Textual screens.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from collections.abc import Sequence

    from userinput.config import InstallData
    from userinput.model import OsConstraint, PanelSpec
    from userinput.views import FieldView


class VariableStore(Protocol):
    """Named string slots with reference substitution."""

    def get(self, name: str, default: str | None = None) -> str | None:
        """Return the value of a variable."""
        ...

    def set(self, name: str, value: str | None) -> None:
        """Set or, with None, unset a variable."""
        ...

    def replace(self, text: str | None) -> str | None:
        """Substitute variable references in a text."""
        ...


class ConditionEvaluator(Protocol):
    """Evaluates conditions by identifier."""

    def is_condition_true(self, condition_id: str, install_data: InstallData) -> bool:
        """Return True if the condition holds for the installation data.

        Parameters
        ----------
        condition_id : str
            Identifier (or combined expression) of the condition
        install_data : InstallData
            The installation data the condition is evaluated against

        """
        ...


class PlatformMatcher(Protocol):
    """Matches OS constraints against the current platform."""

    def matches_current_platform(self, constraints: Sequence[OsConstraint]) -> bool:
        """Return True if the constraints allow the current platform."""
        ...


class SpecificationSource(Protocol):
    """Supplies the specification of a panel."""

    def read(self) -> PanelSpec | None:
        """Return the panel specification, or None when it is unavailable."""
        ...


class UpdateListener(Protocol):
    """Callback fired by a view when its content changed."""

    def __call__(self) -> None:
        """Handle the change notification."""
        ...


class PanelHost(Protocol):
    """The display surface a panel renders its views into."""

    def reset_view(self) -> None:
        """Discard every widget of the previous build."""
        ...

    def attach(self, view: FieldView) -> None:
        """Show the widgets of a view."""
        ...

    def detach(self, view: FieldView) -> None:
        """Hide the widgets of a view, keeping its state."""
        ...

    def emit_error(self, title: str, message: str) -> None:
        """Show an error to the user."""
        ...

    def skip_panel(self) -> None:
        """Move on without showing this panel."""
        ...
