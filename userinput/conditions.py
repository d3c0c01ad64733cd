"""Conditions and the rules engine that evaluates them.

Conditions are declared by identifier. Identifiers can be combined into
expressions: ``!a`` (not), ``a\\b`` (xor), ``a+b`` (and) and ``a|b`` (or),
listed from the tightest binding operator to the loosest.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from userinput.constants import CONDITION_AND, CONDITION_NOT, CONDITION_OR, CONDITION_XOR
from userinput.errors import SpecificationError
from userinput.logging_utils import get_logger

if TYPE_CHECKING:
    from collections.abc import Mapping

    from userinput.config import InstallData

logger = get_logger(__name__)


class Condition:
    """Base class of declared conditions."""

    def __init__(self, condition_id: str) -> None:
        self.condition_id = condition_id

    def is_true(self, install_data: InstallData) -> bool:
        """Evaluate the condition against the installation data."""
        raise NotImplementedError


class VariableCondition(Condition):
    """True when a variable equals the declared value."""

    def __init__(self, condition_id: str, variable: str, value: str) -> None:
        super().__init__(condition_id)
        self.variable = variable
        self.value = value

    def is_true(self, install_data: InstallData) -> bool:
        return install_data.get_variable(self.variable) == self.value


class ExistsCondition(Condition):
    """True when a variable is set to a non-empty value."""

    def __init__(self, condition_id: str, variable: str) -> None:
        super().__init__(condition_id)
        self.variable = variable

    def is_true(self, install_data: InstallData) -> bool:
        return bool(install_data.get_variable(self.variable))


class PackSelectionCondition(Condition):
    """True when a pack is selected for installation."""

    def __init__(self, condition_id: str, pack: str) -> None:
        super().__init__(condition_id)
        self.pack = pack

    def is_true(self, install_data: InstallData) -> bool:
        return install_data.is_pack_selected(self.pack)


def create_condition(condition_id: str, declaration: Mapping[str, Any]) -> Condition:
    """Create a condition from its declaration.

    Parameters
    ----------
    condition_id : str
        Identifier of the condition
    declaration : Mapping[str, Any]
        The declared attributes, ``type`` selects the condition class

    Returns
    -------
    Condition
        The condition instance

    Raises
    ------
    SpecificationError
        If the type is unknown or a required attribute is missing

    """
    kind = declaration.get("type")
    try:
        if kind == "variable":
            return VariableCondition(condition_id, declaration["variable"], str(declaration["value"]))
        if kind == "exists":
            return ExistsCondition(condition_id, declaration["variable"])
        if kind == "packselection":
            return PackSelectionCondition(condition_id, declaration["pack"])
    except KeyError as e:
        msg = f"Condition '{condition_id}' is missing attribute {e}"
        raise SpecificationError(msg) from e
    msg = f"Condition '{condition_id}' has unknown type '{kind}'"
    raise SpecificationError(msg)


class RulesEngine:
    """Evaluates declared conditions and condition expressions."""

    def __init__(self, conditions: Mapping[str, Condition] | None = None) -> None:
        self.conditions: dict[str, Condition] = dict(conditions or {})

    @classmethod
    def from_declarations(cls, declarations: Mapping[str, Mapping[str, Any]] | None) -> RulesEngine:
        """Build a rules engine from condition declarations keyed by identifier."""
        conditions = {cid: create_condition(cid, decl) for cid, decl in (declarations or {}).items()}
        return cls(conditions)

    def add_condition(self, condition: Condition) -> None:
        """Register a condition, replacing any with the same identifier."""
        self.conditions[condition.condition_id] = condition

    def is_condition_true(self, condition_id: str, install_data: InstallData) -> bool:
        """Evaluate a condition identifier or expression.

        Parameters
        ----------
        condition_id : str
            A condition identifier, optionally combined with operators
        install_data : InstallData
            The installation data to evaluate against

        Returns
        -------
        bool
            The result. Unknown identifiers evaluate to False.

        """
        expression = condition_id.strip()
        for operator in (CONDITION_OR, CONDITION_AND, CONDITION_XOR):
            if operator in expression:
                operands = [self.is_condition_true(part, install_data) for part in expression.split(operator)]
                if operator == CONDITION_OR:
                    return any(operands)
                if operator == CONDITION_AND:
                    return all(operands)
                return sum(operands) % 2 == 1
        if expression.startswith(CONDITION_NOT):
            return not self.is_condition_true(expression[1:], install_data)

        condition = self.conditions.get(expression)
        if condition is None:
            logger.warning("Condition not found: %s", expression)
            return False
        return condition.is_true(install_data)
