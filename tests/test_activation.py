"""Tests for the activation of declared variables."""

from unittest.mock import Mock

from userinput.activation import FieldActivationEngine
from userinput.config import InstallData
from userinput.model import OsConstraint, VariableEntry


class TestFieldActivationEngine:
    """Test the FieldActivationEngine class."""

    def test_entries_are_applied_in_order(self, install_data: InstallData, rules, matcher) -> None:
        """Test later entries see the values of earlier ones."""
        engine = FieldActivationEngine(install_data, rules, matcher)
        touched = engine.apply([VariableEntry("a", raw_value="1"), VariableEntry("b", raw_value="${a}-2")])

        assert install_data.get_variable("b") == "1-2"
        assert touched == {"a", "b"}

    def test_each_entry_set_once_per_pass(self, install_data: InstallData, rules, matcher) -> None:
        """Test an unconstrained entry is committed exactly once."""
        install_data.variables = Mock(wraps=install_data.variables)
        engine = FieldActivationEngine(install_data, rules, matcher)
        engine.apply([VariableEntry("a", raw_value="value")])

        committed = [c for c in install_data.variables.set.call_args_list if c.args == ("a", "value")]
        assert len(committed) == 1

    def test_self_reference(self, install_data: InstallData, rules, matcher) -> None:
        """Test a self referencing entry resolves its reference to empty."""
        FieldActivationEngine(install_data, rules, matcher).apply([VariableEntry("x", raw_value="prefix-${x}")])
        assert install_data.get_variable("x") == "prefix-"

    def test_false_condition_skips_entry(self, install_data: InstallData, rules, matcher) -> None:
        """Test an entry whose condition is false leaves the store untouched."""
        engine = FieldActivationEngine(install_data, rules, matcher)
        touched = engine.apply([VariableEntry("x", raw_value="1", condition_id="advanced")])

        assert "x" not in install_data.variables
        assert touched == set()

    def test_true_condition_applies_entry(self, install_data: InstallData, rules, matcher) -> None:
        """Test an entry whose condition holds is applied."""
        install_data.set_variable("mode", "advanced")
        FieldActivationEngine(install_data, rules, matcher).apply(
            [VariableEntry("x", raw_value="1", condition_id="advanced")],
        )
        assert install_data.get_variable("x") == "1"

    def test_os_mismatch_skips_entry(self, install_data: InstallData, rules, matcher) -> None:
        """Test an entry for another platform is skipped."""
        install_data.set_variable("x", "keep")
        FieldActivationEngine(install_data, rules, matcher).apply(
            [VariableEntry("x", raw_value="1", os_constraints=(OsConstraint(family="windows"),))],
        )
        assert install_data.get_variable("x") == "keep"

    def test_entry_without_name_is_ignored(self, install_data: InstallData, rules, matcher) -> None:
        """Test a nameless entry is a no-op rather than an error."""
        touched = FieldActivationEngine(install_data, rules, matcher).apply([VariableEntry(None, raw_value="1")])
        assert touched == set()
        assert len(install_data.variables) == 0

    def test_content_value_used_when_no_raw_value(self, install_data: InstallData, rules, matcher) -> None:
        """Test the nested content is the fallback value."""
        FieldActivationEngine(install_data, rules, matcher).apply([VariableEntry("x", content_value="body")])
        assert install_data.get_variable("x") == "body"

    def test_raw_value_preferred_over_content(self, install_data: InstallData, rules, matcher) -> None:
        """Test the attribute value wins over the nested content."""
        FieldActivationEngine(install_data, rules, matcher).apply(
            [VariableEntry("x", raw_value="attr", content_value="body")],
        )
        assert install_data.get_variable("x") == "attr"

    def test_missing_value_clears_variable(self, install_data: InstallData, rules, matcher) -> None:
        """Test an entry without any value clears the variable but is recorded."""
        install_data.set_variable("x", "old")
        touched = FieldActivationEngine(install_data, rules, matcher).apply([VariableEntry("x")])
        assert "x" not in install_data.variables
        assert touched == {"x"}

    def test_idempotent(self, install_data: InstallData, rules, matcher) -> None:
        """Test two passes give the same store as one."""
        entries = [
            VariableEntry("a", raw_value="1"),
            VariableEntry("b", raw_value="${a}-${b}"),
            VariableEntry("c", raw_value="${missing}/${b}"),
        ]
        engine = FieldActivationEngine(install_data, rules, matcher)
        engine.apply(entries)
        first = install_data.variables.as_dict()
        engine.apply(entries)
        assert install_data.variables.as_dict() == first
