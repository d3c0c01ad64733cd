"""Exception hierarchy for the user input panel."""

from __future__ import annotations


class UserInputError(Exception):
    """Base exception for user input panel operations."""


class SpecificationError(UserInputError):
    """Raised when a panel specification cannot be read or is invalid."""


class AutomationError(UserInputError):
    """Raised when an automation record cannot be read or written."""


class PanelStateError(UserInputError):
    """Raised when a panel operation is invalid in the current lifecycle state."""
