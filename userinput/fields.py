"""Field variants of a user input panel.

A field is the declared, toolkit independent half of a form input: it knows
its bound variable, its applicability rules and how to validate a candidate
value. Its interactive half is a :class:`userinput.views.FieldView`.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import TYPE_CHECKING, Any, NamedTuple

from userinput.constants import (
    DEFAULT_CHECK_FALSE_VALUE,
    DEFAULT_CHECK_TRUE_VALUE,
    MULTIPLE_FILE_SEPARATOR,
    STATIC_FIELD_KINDS,
)
from userinput.errors import SpecificationError
from userinput.logging_utils import get_logger
from userinput.model import parse_os_constraints

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from userinput.config import InstallData
    from userinput.protocols import ConditionEvaluator, PlatformMatcher

logger = get_logger(__name__)


class Field:
    """Base class of all fields."""

    def __init__(
        self,
        declaration: Mapping[str, Any],
        install_data: InstallData,
        rules: ConditionEvaluator,
        matcher: PlatformMatcher,
    ) -> None:
        """Initialize the field from its declaration.

        Parameters
        ----------
        declaration : Mapping[str, Any]
            The declared attributes of the field
        install_data : InstallData
            Installation data holding the variable store
        rules : ConditionEvaluator
            Evaluates the field's condition
        matcher : PlatformMatcher
            Matches the field's OS constraints

        """
        self.kind: str = declaration.get("type", "text")
        self.variable: str | None = declaration.get("variable")
        self.label: str = declaration.get("label", "")
        self.description: str = declaration.get("description", "")
        self.default: str | None = declaration.get("default")
        self.condition_id: str | None = declaration.get("condition")
        self.packs: tuple[str, ...] = tuple(declaration.get("packs", ()))
        self.unselected_packs: tuple[str, ...] = tuple(declaration.get("unselected_packs", ()))
        self.os_constraints = parse_os_constraints(declaration.get("os"))
        self.install_data = install_data
        self.rules = rules
        self.matcher = matcher

    @property
    def value(self) -> str | None:
        """The current value of the bound variable."""
        return self.get_value()

    def get_value(self) -> str | None:
        """Return the bound variable's value, falling back to the default."""
        if self.variable is None:
            return None
        value = self.install_data.get_variable(self.variable)
        if value is None:
            value = self.get_default_value()
        return value

    def get_default_value(self) -> str | None:
        """Return the declared default with variables substituted."""
        return self.install_data.variables.replace(self.default)

    def set_value(self, value: str | None) -> None:
        """Commit a value to the bound variable."""
        if self.variable is not None:
            self.install_data.set_variable(self.variable, value)

    def get_variables(self) -> list[str]:
        """Return all variables this field updates."""
        return [self.variable] if self.variable is not None else []

    def is_condition_true(self) -> bool:
        """Return True if the field has no condition or its condition holds."""
        if self.condition_id is None:
            return True
        return self.rules.is_condition_true(self.condition_id, self.install_data)

    def is_required_for_packs(self) -> bool:
        """Return True if no packs are declared or any of them is selected."""
        if not self.packs:
            return True
        return any(self.install_data.is_pack_selected(pack) for pack in self.packs)

    def is_required_for_unselected_packs(self) -> bool:
        """Return True if none of the declared unselected packs is selected."""
        return not any(self.install_data.is_pack_selected(pack) for pack in self.unselected_packs)

    def is_required(self) -> bool:
        """Return True if the field applies to the current installation."""
        return (
            self.is_required_for_packs()
            and self.is_required_for_unselected_packs()
            and self.matcher.matches_current_platform(self.os_constraints)
            and self.is_condition_true()
        )

    def validate(self, value: str) -> str | None:
        """Validate a candidate value.

        Returns
        -------
        str | None
            An error message, or None when the value is valid

        """
        return None

    def __repr__(self) -> str:
        return f"{type(self).__name__}(kind={self.kind!r}, variable={self.variable!r})"


class FieldValidator(NamedTuple):
    """A declared text validator."""

    pattern: re.Pattern[str] | None
    message: str
    not_empty: bool = False

    def check(self, value: str) -> bool:
        """Return True if the value passes the validator."""
        if self.not_empty and not value.strip():
            return False
        return self.pattern is None or self.pattern.fullmatch(value) is not None


def _parse_validators(field_name: str, declarations: Sequence[Mapping[str, Any]]) -> list[FieldValidator]:
    validators = []
    for decl in declarations:
        message = decl.get("message", f"Invalid value for {field_name}")
        if decl.get("type") == "notempty":
            validators.append(FieldValidator(None, message, not_empty=True))
            continue
        regex = decl.get("regex")
        if regex is None:
            msg = f"Validator of field '{field_name}' needs a 'regex' or type 'notempty'"
            raise SpecificationError(msg)
        try:
            validators.append(FieldValidator(re.compile(regex), message))
        except re.error as e:
            msg = f"Invalid validator regex for field '{field_name}': {e}"
            raise SpecificationError(msg) from e
    return validators


class TextField(Field):
    """Single line text or password input."""

    def __init__(
        self,
        declaration: Mapping[str, Any],
        install_data: InstallData,
        rules: ConditionEvaluator,
        matcher: PlatformMatcher,
    ) -> None:
        super().__init__(declaration, install_data, rules, matcher)
        self.password = self.kind == "password"
        self.validators = _parse_validators(self.variable or self.label, declaration.get("validators", ()))

    def validate(self, value: str) -> str | None:
        for validator in self.validators:
            if not validator.check(value):
                return validator.message
        return None


class AbstractFileField(Field):
    """Common behaviour of file and directory fields."""

    def __init__(
        self,
        declaration: Mapping[str, Any],
        install_data: InstallData,
        rules: ConditionEvaluator,
        matcher: PlatformMatcher,
    ) -> None:
        super().__init__(declaration, install_data, rules, matcher)
        self.must_exist: bool = declaration.get("must_exist", True)
        self.allow_empty: bool = declaration.get("allow_empty", False)

    def path_exists(self, path: Path) -> bool:
        """Return True if the path exists with the expected type."""
        raise NotImplementedError

    def validate(self, value: str) -> str | None:
        if not value.strip():
            return None if self.allow_empty else f"{self.label or 'A path'} must not be empty"
        if self.must_exist and not self.path_exists(Path(value).expanduser()):
            return f"Path does not exist: {value}"
        return None


class FileField(AbstractFileField):
    """File selection field."""

    def path_exists(self, path: Path) -> bool:
        return path.is_file()


class DirField(AbstractFileField):
    """Directory selection field."""

    def path_exists(self, path: Path) -> bool:
        return path.is_dir()


class MultipleFileField(FileField):
    """Selection of several files.

    With ``multiple_variables`` each file gets its own variable, named
    ``name``, ``name_1``, ``name_2``... Otherwise the files are joined into
    the single variable, each followed by ``;``.
    """

    def __init__(
        self,
        declaration: Mapping[str, Any],
        install_data: InstallData,
        rules: ConditionEvaluator,
        matcher: PlatformMatcher,
    ) -> None:
        super().__init__(declaration, install_data, rules, matcher)
        self.multiple_variables: bool = declaration.get("multiple_variables", False)
        self.variables: list[str] = self.get_variables_in_store()

    def variable_name(self, index: int) -> str:
        """Return the variable holding the file at ``index``.

        Raises
        ------
        SpecificationError
            If the field declares no variable

        """
        if self.variable is None:
            msg = "Multiple file field declares no variable"
            raise SpecificationError(msg)
        return self.variable if index == 0 else f"{self.variable}_{index}"

    def get_variables_in_store(self) -> list[str]:
        """Return the fan-out variables that currently hold a value."""
        if self.variable is None:
            return []
        if not self.multiple_variables:
            return [self.variable]
        variables = [self.variable]
        index = 1
        while self.variable_name(index) in self.install_data.variables:
            variables.append(self.variable_name(index))
            index += 1
        return variables

    def get_values(self) -> list[str]:
        """Return the selected files as held in the variables."""
        if self.variable is None:
            return []
        if self.multiple_variables:
            values = [self.install_data.get_variable(name) for name in self.get_variables_in_store()]
            return [value for value in values if value]
        value = self.get_value() or ""
        return [part for part in value.split(MULTIPLE_FILE_SEPARATOR) if part]

    def set_values(self, values: Sequence[str]) -> None:
        """Commit the selected files to the variable(s)."""
        if self.variable is None:
            return
        if self.multiple_variables:
            for stale in self.get_variables_in_store()[len(values) :]:
                self.install_data.set_variable(stale, None)
            self.variables = [self.variable]
            for index, value in enumerate(values):
                name = self.variable_name(index)
                if index > 0:
                    self.variables.append(name)
                self.install_data.set_variable(name, value)
        else:
            self.set_value("".join(f"{value}{MULTIPLE_FILE_SEPARATOR}" for value in values))

    def get_variables(self) -> list[str]:
        return list(self.variables)

    def validate_values(self, values: Sequence[str]) -> str | None:
        """Validate every selected file."""
        if not values:
            return None if self.allow_empty else f"{self.label or 'Files'} must not be empty"
        for value in values:
            error = self.validate(value)
            if error is not None:
                return error
        return None


class Choice(NamedTuple):
    """One option of a choice field."""

    value: str
    label: str
    condition_id: str | None = None
    selected: bool = False


class ChoiceField(Field):
    """Combo box or radio group."""

    def __init__(
        self,
        declaration: Mapping[str, Any],
        install_data: InstallData,
        rules: ConditionEvaluator,
        matcher: PlatformMatcher,
    ) -> None:
        super().__init__(declaration, install_data, rules, matcher)
        self.all_choices = [
            Choice(
                value=str(decl["value"]),
                label=decl.get("label", str(decl["value"])),
                condition_id=decl.get("condition"),
                selected=decl.get("selected", False),
            )
            for decl in declaration.get("choices", ())
        ]
        if not self.all_choices:
            msg = f"Choice field '{self.variable}' declares no choices"
            raise SpecificationError(msg)

    @property
    def choices(self) -> list[Choice]:
        """The choices whose condition holds."""
        return [
            choice
            for choice in self.all_choices
            if choice.condition_id is None or self.rules.is_condition_true(choice.condition_id, self.install_data)
        ]

    def get_default_value(self) -> str | None:
        default = super().get_default_value()
        if default is not None:
            return default
        choices = self.choices
        for choice in choices:
            if choice.selected:
                return choice.value
        return choices[0].value if choices else None

    def is_required(self) -> bool:
        """Return True if the field applies and at least one choice is available."""
        if not super().is_required():
            return False
        if not self.choices:
            logger.warning("No choice of field %s is available, the field is hidden", self.variable)
            return False
        return True

    def validate(self, value: str) -> str | None:
        if value not in [choice.value for choice in self.choices]:
            return f"Invalid selection for {self.label or self.variable}: {value}"
        return None


class CheckField(Field):
    """Check box mapping its state to a true and a false value."""

    def __init__(
        self,
        declaration: Mapping[str, Any],
        install_data: InstallData,
        rules: ConditionEvaluator,
        matcher: PlatformMatcher,
    ) -> None:
        super().__init__(declaration, install_data, rules, matcher)
        self.true_value = str(declaration.get("true_value", DEFAULT_CHECK_TRUE_VALUE))
        self.false_value = str(declaration.get("false_value", DEFAULT_CHECK_FALSE_VALUE))

    def get_default_value(self) -> str | None:
        default = super().get_default_value()
        return default if default is not None else self.false_value

    def is_checked(self) -> bool:
        """Return True if the bound variable holds the true value."""
        return self.get_value() == self.true_value


class StaticField(Field):
    """Presentational text, title, divider or spacer without a variable."""

    def __init__(
        self,
        declaration: Mapping[str, Any],
        install_data: InstallData,
        rules: ConditionEvaluator,
        matcher: PlatformMatcher,
    ) -> None:
        super().__init__(declaration, install_data, rules, matcher)
        self.variable = None
        self.text: str = declaration.get("text", self.label)

    def get_text(self) -> str:
        """Return the displayed text with variables substituted."""
        return self.install_data.variables.replace(self.text) or ""


class FieldFactory:
    """Creates fields from declarations, keyed on the declared type."""

    FIELD_TYPES: dict[str, type[Field]] = {
        "text": TextField,
        "password": TextField,
        "file": FileField,
        "dir": DirField,
        "multifile": MultipleFileField,
        "combo": ChoiceField,
        "radio": ChoiceField,
        "check": CheckField,
        **{kind: StaticField for kind in STATIC_FIELD_KINDS},
    }

    def __init__(self, install_data: InstallData, rules: ConditionEvaluator, matcher: PlatformMatcher) -> None:
        self.install_data = install_data
        self.rules = rules
        self.matcher = matcher

    def create(self, declaration: Mapping[str, Any]) -> Field:
        """Create the field for a declaration.

        Raises
        ------
        SpecificationError
            If the declared type is unknown

        """
        kind = declaration.get("type", "text")
        field_class = self.FIELD_TYPES.get(kind)
        if field_class is None:
            msg = f"Unknown field type '{kind}'"
            raise SpecificationError(msg)
        return field_class(declaration, self.install_data, self.rules, self.matcher)
