"""Activation of declared panel variables."""

from __future__ import annotations

from typing import TYPE_CHECKING

from userinput.logging_utils import get_logger
from userinput.resolver import VariableResolver

if TYPE_CHECKING:
    from collections.abc import Iterable

    from userinput.config import InstallData
    from userinput.model import VariableEntry
    from userinput.protocols import ConditionEvaluator, PlatformMatcher

logger = get_logger(__name__)


class FieldActivationEngine:
    """Applies declared variable entries to the installation variables."""

    def __init__(self, install_data: InstallData, rules: ConditionEvaluator, matcher: PlatformMatcher) -> None:
        """Initialize the engine.

        Parameters
        ----------
        install_data : InstallData
            Installation data holding the variable store
        rules : ConditionEvaluator
            Evaluates the entries' conditions
        matcher : PlatformMatcher
            Matches the entries' OS constraints

        """
        self.install_data = install_data
        self.rules = rules
        self.matcher = matcher
        self.resolver = VariableResolver(install_data.variables)

    def is_applicable(self, entry: VariableEntry) -> bool:
        """Return True if the entry's condition and OS constraints allow it."""
        if entry.condition_id is not None and not self.rules.is_condition_true(entry.condition_id, self.install_data):
            logger.debug("Variable %s skipped, condition %s is false", entry.name, entry.condition_id)
            return False
        if entry.os_constraints and not self.matcher.matches_current_platform(entry.os_constraints):
            logger.debug("Variable %s skipped, OS constraints do not match", entry.name)
            return False
        return True

    def apply(self, entries: Iterable[VariableEntry]) -> set[str]:
        """Apply the entries in declared order.

        Later entries see the values committed by earlier ones. Entries
        without a name are skipped.

        Parameters
        ----------
        entries : Iterable[VariableEntry]
            The declared variable entries

        Returns
        -------
        set[str]
            Names of the variables set by this pass

        """
        touched: set[str] = set()
        for entry in entries:
            value = entry.value
            if not self.is_applicable(entry):
                continue
            if entry.name is None:
                logger.warning("Ignoring variable declaration without a name (value=%r)", value)
                continue
            self.resolver.assign(entry.name, value)
            touched.add(entry.name)
        return touched
