"""Cycle-safe variable resolution."""

from __future__ import annotations

from typing import TYPE_CHECKING

from userinput.logging_utils import get_logger

if TYPE_CHECKING:
    from userinput.protocols import VariableStore

logger = get_logger(__name__)


class VariableResolver:
    """Resolve variable references in values and assign them to the store."""

    def __init__(self, store: VariableStore) -> None:
        """Initialize the resolver.

        Parameters
        ----------
        store : VariableStore
            The variable store used for lookups and assignments

        """
        self.store = store

    def resolve(self, text: str | None) -> str | None:
        """Replace variable references in a text using the store's semantics."""
        return self.store.replace(text)

    def assign(self, name: str, value: str | None) -> str | None:
        """Resolve ``value`` and commit it to the variable ``name``.

        The variable is cleared to the empty string before the value is
        resolved, so a value referring to its own variable sees an empty
        string for itself. ``x = "prefix-${x}"`` always commits ``"prefix-"``.
        References between distinct variables get a single substitution pass.

        Parameters
        ----------
        name : str
            Name of the variable to assign
        value : str | None
            Raw value, possibly containing variable references. None unsets
            the variable.

        Returns
        -------
        str | None
            The committed value

        """
        if value is None:
            self.store.set(name, None)
            return None

        self.store.set(name, "")
        resolved = self.resolve(value)
        self.store.set(name, resolved)
        logger.debug("Resolved %s: %r -> %r", name, value, resolved)
        return resolved
