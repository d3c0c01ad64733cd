"""User input panel screen.

This module contains the UserInputScreen class which renders the views of a
:class:`userinput.panel.UserInputPanel` as Textual widgets and feeds widget
edits back into the views.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, cast

from textual.binding import Binding
from textual.containers import Container, Horizontal, ScrollableContainer, Vertical
from textual.screen import Screen
from textual.widgets import (
    Button,
    Checkbox,
    Footer,
    Header,
    Input,
    Label,
    RadioButton,
    RadioSet,
    Rule,
    Select,
    Static,
)

from userinput.logging_utils import get_logger
from userinput.panel import UserInputPanel
from userinput.views import (
    CheckFieldView,
    ChoiceFieldView,
    FieldView,
    FileFieldView,
    MultipleFileFieldView,
    StaticFieldView,
    TextFieldView,
)

from .mixins import DebugMixin

if TYPE_CHECKING:
    from textual.app import ComposeResult
    from textual.events import Key
    from textual.widget import Widget

    from userinput.app import UserInputApp
    from userinput.config import InstallData
    from userinput.protocols import ConditionEvaluator, PlatformMatcher, SpecificationSource

logger = get_logger(__name__)


class UserInputScreen(Screen[None], DebugMixin):
    """Screen hosting one user input panel."""

    BINDINGS = [
        Binding("ctrl+n", "next", "Next"),
        Binding("ctrl+q", "quit", "Quit"),
        Binding("ctrl+d", "toggle_debug", "Debug", show=True),
    ]

    def __init__(
        self,
        panel_id: str,
        source: SpecificationSource,
        install_data: InstallData,
        rules: ConditionEvaluator,
        matcher: PlatformMatcher,
    ) -> None:
        """Initialize the screen.

        Parameters
        ----------
        panel_id : str
            Identifier of the panel, used as the title and the record key
        source : SpecificationSource
            Supplies the panel specification
        install_data : InstallData
            Installation data shared by all panels
        rules : ConditionEvaluator
            Evaluates declared conditions
        matcher : PlatformMatcher
            Matches OS constraints

        """
        super().__init__()
        self.panel_id = panel_id
        self.panel = UserInputPanel(source, install_data, rules, matcher, host=self)
        self._groups: dict[FieldView, Vertical] = {}
        self._widget_views: dict[Widget, FieldView] = {}
        self._finished = False

    def compose(self) -> ComposeResult:
        """Create the layout for this screen."""
        yield Header()
        yield Container(
            Label(self.panel_id, classes="title"),
            ScrollableContainer(id="form"),
            Horizontal(
                Button("Next", id="next_btn", variant="primary"),
                id="button-row",
            ),
            id="panel-container",
        )
        yield Footer()

    def on_mount(self) -> None:
        """Activate the panel once the form container exists."""
        logger.debug("UserInputScreen %s mounted", self.panel_id)
        self.set_interval(1.0, self.update_debug_output)
        self.panel.activate()
        if self.panel.spec is not None and self.panel.spec.top_buffer == 0:
            # topBuffer=0 keeps the form from shifting when fields are shown or hidden
            self.query_one("#form", ScrollableContainer).styles.margin = (0, 0, 0, 0)

    # PanelHost

    def reset_view(self) -> None:
        """Remove the widgets of the previous build."""
        self._groups.clear()
        self._widget_views.clear()
        self.query_one("#form", ScrollableContainer).remove_children()

    def attach(self, view: FieldView) -> None:
        """Show a view, mounting its widgets on first use."""
        group = self._groups.get(view)
        if group is None:
            group = self.build_group(view)
            self._groups[view] = group
            self.query_one("#form", ScrollableContainer).mount(group)
        group.display = True

    def detach(self, view: FieldView) -> None:
        """Hide a view's widgets. The widgets keep their state."""
        group = self._groups.get(view)
        if group is not None:
            group.display = False

    def emit_error(self, title: str, message: str) -> None:
        """Show an error notification."""
        logger.error("%s %s", title, message)
        self.notify(message, title=title, severity="error", timeout=10)

    def skip_panel(self) -> None:
        """Leave the screen without recording the panel."""
        self.app.call_later(self.finish, False)

    # Widgets

    def build_input(self, view: FieldView) -> Widget:
        """Create the input widget for a view."""
        field = view.field
        if isinstance(view, StaticFieldView):
            if field.kind == "title":
                return Label(view.content, classes="field-title")
            if field.kind == "divider":
                return Rule()
            return Static(view.content)
        if isinstance(view, CheckFieldView):
            return Checkbox(field.label or field.variable or "", value=view.checked)
        if isinstance(view, ChoiceFieldView):
            choices = view.field.choices
            if field.kind == "radio":
                return RadioSet(*[RadioButton(choice.label, value=choice.value == view.content) for choice in choices])
            values = [choice.value for choice in choices]
            return Select(
                [(choice.label, choice.value) for choice in choices],
                value=view.content if view.content in values else Select.BLANK,
            )
        if isinstance(view, MultipleFileFieldView):
            return Input(value=view.content, placeholder="file1;file2;...")
        if isinstance(view, FileFieldView):
            return Input(value=view.content, placeholder="directory" if field.kind == "dir" else "file")
        if isinstance(view, TextFieldView):
            return Input(value=view.content, password=view.field.password)
        return Input(value=view.content)

    def build_group(self, view: FieldView) -> Vertical:
        """Create the labelled widget group of a view."""
        field = view.field
        children: list[Widget] = []
        if field.label and not isinstance(view, (StaticFieldView, CheckFieldView)):
            children.append(Label(field.label, classes="field-label"))
        if field.description:
            children.append(Label(f"[dim]{field.description}[/dim]", classes="field-description"))
        widget = self.build_input(view)
        self._widget_views[widget] = view
        children.append(widget)
        return Vertical(*children, classes="field-group")

    # Events

    def on_input_changed(self, event: Input.Changed) -> None:
        """Track text edits without rebuilding the panel."""
        view = self._widget_views.get(event.input)
        if view is not None:
            view.set_content(event.value)

    def on_input_submitted(self, event: Input.Submitted) -> None:
        """Rebuild the panel when a text input is submitted."""
        view = self._widget_views.get(event.input)
        if view is not None:
            view.notify_update()

    def on_select_changed(self, event: Select.Changed) -> None:
        """Record a combo selection and rebuild the panel."""
        view = self._widget_views.get(event.select)
        value = event.value if isinstance(event.value, str) else ""
        if view is not None and view.set_content(value):
            view.notify_update()

    def on_radio_set_changed(self, event: RadioSet.Changed) -> None:
        """Record a radio selection and rebuild the panel."""
        view = self._widget_views.get(event.radio_set)
        if isinstance(view, ChoiceFieldView) and view.select_index(event.index):
            view.notify_update()

    def on_checkbox_changed(self, event: Checkbox.Changed) -> None:
        """Record a check box change and rebuild the panel."""
        view = self._widget_views.get(event.checkbox)
        if isinstance(view, CheckFieldView) and view.set_checked(event.value):
            view.notify_update()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        """Handle button press events."""
        if event.button.id == "next_btn":
            self.action_next()
        elif event.button.id == "copy_debug_btn":
            self._copy_debug_output()

    def key_ctrl_d(self, event: Key) -> None:
        """Handle Ctrl+D key even when Input widgets have focus."""
        event.stop()
        self.action_toggle_debug()

    # Actions

    def action_next(self) -> None:
        """Advance when every displayed field holds valid input."""
        if not self.panel.is_validated():
            errors = self.panel.errors()
            self.notify("\n".join(errors) or "Invalid input", severity="error")
            return
        self.finish(True)

    def action_quit(self) -> None:
        """Quit the application."""
        self.app.exit()

    def finish(self, completed: bool) -> None:
        """Tear the panel down and hand its values to the app.

        Parameters
        ----------
        completed : bool
            False when the panel was skipped, nothing is recorded then

        """
        if self._finished:
            return
        self._finished = True
        data = self.panel.automation_data() if completed else None
        self.panel.teardown()
        app = cast("UserInputApp", self.app)
        self.app.call_later(app.after_panel, self.panel_id, data)
        self.app.pop_screen()
