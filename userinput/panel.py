"""The user input panel lifecycle.

The panel reads its specification, activates the declared variables,
creates a view for every field whose condition holds and attaches the views
that apply to the current installation to a :class:`PanelHost`. A change
notification from any view rebuilds the panel from the specification.

States::

    INACTIVE -> BUILT -> ACTIVE -> REBUILDING -> ACTIVE ... -> TORN_DOWN
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

from userinput.activation import FieldActivationEngine
from userinput.errors import PanelStateError, SpecificationError
from userinput.fields import FieldFactory
from userinput.logging_utils import get_logger
from userinput.views import FieldView, FieldViewFactory

if TYPE_CHECKING:
    from userinput.config import InstallData
    from userinput.model import PanelSpec
    from userinput.protocols import ConditionEvaluator, PanelHost, PlatformMatcher, SpecificationSource

logger = get_logger(__name__)

SPEC_NOT_FOUND_TITLE = "User input specification could not be found."
SPEC_NOT_FOUND_MESSAGE = (
    "The specification for the user input panel could not be found. Please contact the packager."
)


class PanelState(Enum):
    """Lifecycle states of a user input panel."""

    INACTIVE = "inactive"
    BUILT = "built"
    ACTIVE = "active"
    REBUILDING = "rebuilding"
    TORN_DOWN = "torn_down"


class UserInputPanel:
    """Orchestrates variables, fields and views of one user input panel."""

    def __init__(
        self,
        source: SpecificationSource,
        install_data: InstallData,
        rules: ConditionEvaluator,
        matcher: PlatformMatcher,
        host: PanelHost,
    ) -> None:
        """Initialize the panel.

        Parameters
        ----------
        source : SpecificationSource
            Supplies the panel specification
        install_data : InstallData
            Installation data shared by all panels
        rules : ConditionEvaluator
            Evaluates the conditions of variables, fields and choices
        matcher : PlatformMatcher
            Matches OS constraints against the current platform
        host : PanelHost
            The display surface views are attached to

        """
        self.source = source
        self.install_data = install_data
        self.rules = rules
        self.matcher = matcher
        self.host = host

        self.spec: PanelSpec | None = None
        self.state = PanelState.INACTIVE
        self.events_activated = False
        self.variables: set[str] = set()
        self.views: list[FieldView] = []
        self.rebuild_count = 0

        self.engine = FieldActivationEngine(install_data, rules, matcher)
        self.field_factory = FieldFactory(install_data, rules, matcher)
        self.view_factory = FieldViewFactory()

    def _check_alive(self, operation: str) -> None:
        if self.state is PanelState.TORN_DOWN:
            msg = f"Cannot {operation}: the panel has been torn down"
            raise PanelStateError(msg)

    def read_spec(self) -> PanelSpec | None:
        """Read the panel specification, treating unreadable documents as missing."""
        try:
            return self.source.read()
        except SpecificationError as e:
            logger.error("Could not read the user input specification: %s", e)
            return None

    def is_required(self) -> bool:
        """Return True if the panel applies to the selected packs and platform."""
        if self.spec is None:
            return False
        selected = self.install_data.selected_packs
        if self.spec.packs and not any(pack in selected for pack in self.spec.packs):
            return False
        if any(pack in selected for pack in self.spec.unselected_packs):
            return False
        return self.matcher.matches_current_platform(self.spec.os_constraints)

    def activate(self) -> None:
        """Activate the panel: build its views and attach the applicable ones."""
        self._check_alive("activate")
        self.init()

        if self.spec is None:
            self.host.emit_error(SPEC_NOT_FOUND_TITLE, SPEC_NOT_FOUND_MESSAGE)
            self.host.skip_panel()
            return

        self.update_ui_elements()

        if not self.is_required():
            logger.debug("Panel %s does not apply to the selected packs or platform", self.spec.panel_id)
            self.host.skip_panel()
            return

        self.build_ui()

    def init(self) -> None:
        """Read the specification, activate variables and create the views."""
        self._check_alive("initialize")
        self.events_activated = False
        self.views.clear()
        self.host.reset_view()

        if self.spec is None:
            self.spec = self.read_spec()
        if self.spec is None:
            # Nothing to build; activate() skips the panel
            self.state = PanelState.INACTIVE
            return

        self.update_variables()

        try:
            fields = [self.field_factory.create(declaration) for declaration in self.spec.fields]
        except SpecificationError as e:
            logger.error("Invalid field in panel %s: %s", self.spec.panel_id, e)
            self.spec = None
            self.state = PanelState.INACTIVE
            return

        for field in fields:
            if field.is_condition_true():
                view = self.view_factory.create(field)
                view.set_update_listener(self.update_dialog)
                self.views.append(view)

        logger.debug("Panel %s built with %d views", self.spec.panel_id, len(self.views))
        if self.state is not PanelState.REBUILDING:
            # update_dialog re-enables events once the whole rebuild is done
            self.state = PanelState.BUILT
            self.events_activated = True

    def update_variables(self) -> None:
        """Apply the panel's variable declarations to the installation."""
        self._check_alive("update variables")
        if self.spec is None:
            return
        self.variables |= self.engine.apply(self.spec.variables)

    def update_ui_elements(self) -> bool:
        """Push the current variable values into the views.

        Returns
        -------
        bool
            True if any view was updated

        """
        updated = False
        for view in self.views:
            updated |= view.update_view()
        return updated

    def build_ui(self) -> None:
        """Attach the views whose field applies and detach the others."""
        self._check_alive("build the UI")
        for view in self.views:
            if view.field.is_required():
                if not view.displayed:
                    view.displayed = True
                    self.host.attach(view)
            elif view.displayed:
                view.displayed = False
                self.host.detach(view)
        self.state = PanelState.ACTIVE

    def read_input(self) -> bool:
        """Validate every displayed view and commit the valid ones.

        Returns
        -------
        bool
            True if all displayed views hold valid content

        """
        valid = True
        for view in self.views:
            if view.displayed and not view.update_field():
                valid = False
        return valid

    def is_validated(self) -> bool:
        """Return True if the panel's input allows moving to the next panel."""
        return self.read_input()

    def errors(self) -> list[str]:
        """Return the validation messages of the displayed views."""
        return [view.error for view in self.views if view.displayed and view.error]

    def update_dialog(self) -> None:
        """Rebuild the panel after a view changed.

        Notifications received while a rebuild is running, or after the
        panel has been torn down, are dropped.
        """
        if not self.events_activated:
            logger.debug("Change notification ignored while the panel is %s", self.state.value)
            return

        self.events_activated = False
        self.state = PanelState.REBUILDING
        self.rebuild_count += 1
        try:
            if not self.read_input():
                logger.debug("Rebuilding panel with invalid input: %s", self.errors())
            self.init()
            if self.spec is None:
                self.host.emit_error(SPEC_NOT_FOUND_TITLE, SPEC_NOT_FOUND_MESSAGE)
                self.host.skip_panel()
                return
            self.update_ui_elements()
            self.build_ui()
        finally:
            if self.state not in (PanelState.TORN_DOWN, PanelState.INACTIVE):
                self.events_activated = True

    def teardown(self) -> None:
        """Dispose of the panel. No further lifecycle operation is permitted."""
        self.events_activated = False
        for view in self.views:
            view.set_update_listener(None)
        self.views.clear()
        self.state = PanelState.TORN_DOWN

    def automation_data(self) -> dict[str, str | None]:
        """Return the values to record for an automated re-run.

        Returns
        -------
        dict[str, str | None]
            Every variable set by the variable declarations and every variable
            updated by a view's field, with its current value

        """
        entries = {name: self.install_data.get_variable(name) for name in self.variables}
        for view in self.views:
            for name in view.field.get_variables():
                entries[name] = self.install_data.get_variable(name)
        return entries
