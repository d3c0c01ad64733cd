"""Tests for the user input panel lifecycle."""

import pytest

from userinput.config import InstallData
from userinput.errors import PanelStateError, SpecificationError
from userinput.model import OsConstraint, PanelSpec, VariableEntry
from userinput.panel import SPEC_NOT_FOUND_TITLE, PanelState, UserInputPanel
from userinput.spec_source import StaticSpecificationSource

from conftest import RecordingHost


@pytest.fixture
def spec() -> PanelSpec:
    """Panel with a mode selector and a field shown only in advanced mode."""
    return PanelSpec(
        panel_id="settings",
        variables=(
            VariableEntry("base", raw_value="/opt"),
            VariableEntry("home", raw_value="${base}/app"),
        ),
        fields=(
            {
                "type": "combo",
                "variable": "mode",
                "choices": [{"value": "simple"}, {"value": "advanced"}],
            },
            {"type": "text", "variable": "tuning", "condition": "advanced", "default": "${home}/tune"},
            {"type": "text", "variable": "docs.dir", "packs": ["docs"]},
            {"type": "title", "text": "Settings for ${home}"},
        ),
    )


def view_for(panel: UserInputPanel, variable: str):
    """Return the panel's view bound to a variable."""
    return next(view for view in panel.views if view.field.variable == variable)


class TestActivation:
    """Test panel activation."""

    def test_activate_builds_and_attaches(self, make_panel, spec: PanelSpec, host: RecordingHost) -> None:
        """Test activation resolves variables and attaches applicable views."""
        panel = make_panel(spec)
        panel.activate()

        assert panel.state is PanelState.ACTIVE
        assert panel.install_data.get_variable("home") == "/opt/app"
        assert panel.events_activated
        # tuning has no view while its condition is false; docs.dir has one but is not shown
        assert [view.field.variable for view in panel.views] == ["mode", "docs.dir", None]
        assert [view.field.variable for view in host.attached] == ["mode", None]
        assert not view_for(panel, "docs.dir").displayed

    def test_views_read_initial_values(self, make_panel, spec: PanelSpec) -> None:
        """Test views are filled after the variables are activated."""
        panel = make_panel(spec)
        panel.install_data.set_variable("mode", "advanced")
        panel.activate()
        assert view_for(panel, "tuning").content == "/opt/app/tune"
        assert panel.views[-1].content == "Settings for /opt/app"

    def test_missing_spec(self, make_panel, host: RecordingHost) -> None:
        """Test an unavailable specification shows an error and skips the panel."""
        panel = make_panel(None)
        panel.activate()

        assert host.errors[0][0] == SPEC_NOT_FOUND_TITLE
        assert host.skipped == 1
        assert panel.views == []
        assert panel.state is PanelState.INACTIVE

    def test_unreadable_spec(self, install_data: InstallData, rules, matcher, host: RecordingHost) -> None:
        """Test a specification error is treated as an unavailable specification."""

        class BrokenSource:
            def read(self) -> PanelSpec | None:
                raise SpecificationError("broken")

        UserInputPanel(BrokenSource(), install_data, rules, matcher, host).activate()
        assert host.skipped == 1
        assert len(host.errors) == 1

    @pytest.mark.parametrize(
        "declaration",
        [
            {"type": "bogus", "variable": "x"},
            {"type": "text", "variable": "x", "validators": [{"regex": "("}]},
            {"type": "text", "variable": "x", "validators": [{"message": "no pattern"}]},
            {"type": "combo", "variable": "x"},
        ],
    )
    def test_invalid_field_declaration(self, make_panel, host: RecordingHost, declaration: dict) -> None:
        """Test a rejected field declaration makes the panel unavailable."""
        panel = make_panel(PanelSpec(panel_id="p", fields=({"variable": "ok"}, declaration)))
        panel.activate()

        assert host.errors[0][0] == SPEC_NOT_FOUND_TITLE
        assert host.skipped == 1
        assert host.attached == []
        assert panel.views == []
        assert panel.state is PanelState.INACTIVE

    def test_panel_for_unselected_pack_is_skipped(self, make_panel, host: RecordingHost) -> None:
        """Test panel level pack constraints skip the panel."""
        panel = make_panel(PanelSpec(panel_id="docs", packs=("docs",), fields=({"variable": "x"},)))
        panel.activate()
        assert host.skipped == 1
        assert host.attached == []

    def test_panel_for_other_os_is_skipped(self, make_panel, host: RecordingHost) -> None:
        """Test panel level OS constraints skip the panel."""
        panel = make_panel(PanelSpec(panel_id="win", os_constraints=(OsConstraint(family="windows"),)))
        panel.activate()
        assert host.skipped == 1

    def test_spec_read_once(self, install_data: InstallData, rules, matcher, host: RecordingHost, spec) -> None:
        """Test the specification is cached across rebuilds."""
        reads: list[int] = []

        class CountingSource:
            def read(self) -> PanelSpec:
                reads.append(1)
                return spec

        panel = UserInputPanel(CountingSource(), install_data, rules, matcher, host)
        panel.activate()
        panel.update_dialog()
        assert len(reads) == 1


class TestRebuild:
    """Test the change notification driven rebuild."""

    def test_selection_shows_conditional_field(self, make_panel, spec: PanelSpec) -> None:
        """Test a change notification re-evaluates field conditions."""
        panel = make_panel(spec)
        panel.activate()
        assert all(view.field.variable != "tuning" or not view.displayed for view in panel.views)

        mode = view_for(panel, "mode")
        mode.set_content("advanced")
        mode.notify_update()

        assert panel.rebuild_count == 1
        assert panel.state is PanelState.ACTIVE
        assert panel.install_data.get_variable("mode") == "advanced"
        assert view_for(panel, "tuning").displayed

    def test_rebuild_proceeds_with_invalid_input(self, make_panel) -> None:
        """Test validation failure does not block a rebuild."""
        panel = make_panel(
            PanelSpec(
                panel_id="p",
                fields=(
                    {"variable": "port", "validators": [{"regex": "[0-9]+"}]},
                    {"type": "check", "variable": "flag"},
                ),
            ),
        )
        panel.activate()
        view_for(panel, "port").set_content("abc")
        flag = view_for(panel, "flag")
        flag.set_content("true")
        flag.notify_update()

        assert panel.rebuild_count == 1
        assert panel.install_data.get_variable("flag") == "true"
        assert "port" not in panel.install_data.variables

    def test_notification_during_rebuild_is_dropped(self, install_data, rules, matcher, spec) -> None:
        """Test the reentrancy guard drops synchronous notifications."""

        class ReentrantHost(RecordingHost):
            def __init__(self) -> None:
                super().__init__()
                self.panel: UserInputPanel | None = None
                self.fired = 0

            def attach(self, view) -> None:
                super().attach(view)
                if self.panel is not None and self.panel.state is PanelState.REBUILDING:
                    self.fired += 1
                    view.notify_update()

        host = ReentrantHost()
        panel = UserInputPanel(StaticSpecificationSource(spec), install_data, rules, matcher, host)
        host.panel = panel
        panel.activate()
        panel.update_dialog()

        assert host.fired == 2
        assert panel.rebuild_count == 1
        assert panel.events_activated
        assert panel.state is PanelState.ACTIVE

    def test_rebuild_is_idempotent(self, make_panel, spec: PanelSpec) -> None:
        """Test a rebuild without edits leaves the store unchanged."""
        panel = make_panel(spec)
        panel.activate()
        panel.is_validated()
        before = panel.install_data.variables.as_dict()
        panel.update_dialog()
        assert panel.install_data.variables.as_dict() == before

    def test_user_edit_survives_rebuild(self, make_panel, spec: PanelSpec) -> None:
        """Test values read before the rebuild are shown again after it."""
        panel = make_panel(spec)
        panel.install_data.set_variable("mode", "advanced")
        panel.activate()
        view_for(panel, "tuning").set_content("/custom")
        panel.update_dialog()
        assert view_for(panel, "tuning").content == "/custom"


class TestAttachDetach:
    """Test attaching and detaching views."""

    def test_detach_keeps_content(self, make_panel, spec: PanelSpec, host: RecordingHost) -> None:
        """Test a view hidden and shown again keeps its last content."""
        panel = make_panel(spec)
        panel.install_data.set_variable("mode", "advanced")
        panel.activate()
        tuning = view_for(panel, "tuning")
        tuning.set_content("/edited")

        panel.install_data.set_variable("mode", "simple")
        panel.build_ui()
        assert not tuning.displayed
        assert host.detached == [tuning]
        assert tuning.content == "/edited"

        panel.install_data.set_variable("mode", "advanced")
        panel.build_ui()
        assert tuning.displayed
        assert tuning.content == "/edited"
        assert host.attached.count(tuning) == 2

    def test_hidden_views_are_not_validated(self, make_panel) -> None:
        """Test only displayed views block advancement."""
        panel = make_panel(
            PanelSpec(
                panel_id="p",
                fields=({"variable": "docs", "packs": ["docs"], "validators": [{"type": "notempty"}]},),
            ),
        )
        panel.activate()
        assert panel.is_validated()


class TestValidation:
    """Test read_input and advancement."""

    def test_invalid_view_blocks_advancement(self, make_panel) -> None:
        """Test one invalid displayed view fails the panel but valid ones are committed."""
        panel = make_panel(
            PanelSpec(
                panel_id="p",
                fields=(
                    {"variable": "name", "validators": [{"type": "notempty", "message": "Name required"}]},
                    {"variable": "city"},
                ),
            ),
        )
        panel.activate()
        view_for(panel, "city").set_content("Paris")

        assert not panel.is_validated()
        assert panel.errors() == ["Name required"]
        assert panel.install_data.get_variable("city") == "Paris"

        view_for(panel, "name").set_content("Ada")
        assert panel.is_validated()
        assert panel.errors() == []

    def test_choice_without_available_choices_does_not_block(self, make_panel, host: RecordingHost) -> None:
        """Test a choice field with every choice filtered out is hidden and not validated."""
        panel = make_panel(
            PanelSpec(
                panel_id="p",
                fields=({"type": "combo", "variable": "tier", "choices": [{"value": "gold", "condition": "advanced"}]},),
            ),
        )
        panel.activate()

        assert host.attached == []
        assert not view_for(panel, "tier").displayed
        assert panel.is_validated()


class TestTeardown:
    """Test panel disposal and the automation output."""

    def test_operations_after_teardown(self, make_panel, spec: PanelSpec) -> None:
        """Test mutations are refused and notifications dropped after teardown."""
        panel = make_panel(spec)
        panel.activate()
        view = panel.views[0]
        panel.teardown()

        assert panel.state is PanelState.TORN_DOWN
        view.notify_update()
        assert panel.rebuild_count == 0
        with pytest.raises(PanelStateError):
            panel.activate()
        with pytest.raises(PanelStateError):
            panel.update_variables()
        panel.update_dialog()
        assert panel.rebuild_count == 0

    def test_automation_data(self, make_panel, spec: PanelSpec) -> None:
        """Test recorded values cover declared variables and field variables."""
        panel = make_panel(spec)
        panel.activate()
        assert panel.is_validated()

        data = panel.automation_data()
        assert data["base"] == "/opt"
        assert data["home"] == "/opt/app"
        assert data["mode"] == "simple"
        assert "docs.dir" in data
        assert data["docs.dir"] is None
