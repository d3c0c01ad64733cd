"""Field views: the interactive half of a field.

A view holds the edit state (``content``) shown to the user for one field.
It is synchronized with its field only through :meth:`FieldView.update_view`
(field to view) and :meth:`FieldView.update_field` (view to field). Hiding a
view never clears its content.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from userinput.constants import MULTIPLE_FILE_SEPARATOR
from userinput.fields import (
    AbstractFileField,
    CheckField,
    ChoiceField,
    Field,
    MultipleFileField,
    StaticField,
    TextField,
)
from userinput.logging_utils import get_logger

if TYPE_CHECKING:
    from userinput.protocols import UpdateListener

logger = get_logger(__name__)


class FieldView:
    """Base class of field views."""

    def __init__(self, field: Field) -> None:
        """Initialize the view.

        Parameters
        ----------
        field : Field
            The field this view binds

        """
        self.field = field
        self.displayed = False
        self.content: str = ""
        self.error: str | None = None
        self._listener: UpdateListener | None = None

    def set_update_listener(self, listener: UpdateListener | None) -> None:
        """Register the callback fired by :meth:`notify_update`."""
        self._listener = listener

    def notify_update(self) -> None:
        """Tell the listener the view's content changed."""
        if self._listener is not None:
            self._listener()

    def set_content(self, content: str) -> bool:
        """Replace the edit state.

        Returns
        -------
        bool
            True if the content changed

        """
        if content == self.content:
            return False
        self.content = content
        return True

    def update_field(self) -> bool:
        """Validate the content and commit it to the field.

        Returns
        -------
        bool
            True if the field was updated, False if the content is invalid

        """
        error = self.field.validate(self.content)
        self.error = error
        if error is not None:
            logger.debug("Validation failed for %r: %s", self.field, error)
            return False
        self.field.set_value(self.content)
        return True

    def update_view(self) -> bool:
        """Load the field's value into the content.

        Returns
        -------
        bool
            True if the view was updated

        """
        value = self.field.get_value()
        if value is None:
            return False
        self.content = value
        return True


class TextFieldView(FieldView):
    """View of text and password fields."""

    field: TextField


class FileFieldView(FieldView):
    """View of file and directory fields. Committed paths are absolute."""

    field: AbstractFileField

    def update_field(self) -> bool:
        content = self.content.strip()
        error = self.field.validate(content)
        self.error = error
        if error is not None:
            logger.debug("Validation failed for %r: %s", self.field, error)
            return False
        self.field.set_value(str(Path(content).expanduser().absolute()) if content else "")
        return True


class MultipleFileFieldView(FieldView):
    """View of a multiple file field. The content lists files separated by ``;``."""

    field: MultipleFileField

    def get_files(self) -> list[str]:
        """Return the files listed in the content."""
        return [part.strip() for part in self.content.split(MULTIPLE_FILE_SEPARATOR) if part.strip()]

    def update_field(self) -> bool:
        files = self.get_files()
        error = self.field.validate_values(files)
        self.error = error
        if error is not None:
            logger.debug("Validation failed for %r: %s", self.field, error)
            return False
        self.field.set_values([str(Path(name).expanduser().absolute()) for name in files])
        return True

    def update_view(self) -> bool:
        files = self.field.get_values()
        if not files:
            return False
        self.content = MULTIPLE_FILE_SEPARATOR.join(files)
        return True


class ChoiceFieldView(FieldView):
    """View of combo and radio fields. The content is the selected choice value."""

    field: ChoiceField

    def selected_index(self) -> int | None:
        """Return the index of the selected choice among the available ones."""
        for index, choice in enumerate(self.field.choices):
            if choice.value == self.content:
                return index
        return None

    def select_index(self, index: int) -> bool:
        """Select the available choice at ``index``."""
        return self.set_content(self.field.choices[index].value)


class CheckFieldView(FieldView):
    """View of a check field. The content is the field's true or false value."""

    field: CheckField

    @property
    def checked(self) -> bool:
        """Whether the box is ticked."""
        return self.content == self.field.true_value

    def set_checked(self, checked: bool) -> bool:
        """Tick or clear the box."""
        return self.set_content(self.field.true_value if checked else self.field.false_value)


class StaticFieldView(FieldView):
    """View of presentational fields. Always valid, never bound."""

    field: StaticField

    def update_field(self) -> bool:
        return True

    def update_view(self) -> bool:
        self.content = self.field.get_text()
        return False


class FieldViewFactory:
    """Creates the view matching a field's variant."""

    VIEW_TYPES: list[tuple[type[Field], type[FieldView]]] = [
        (MultipleFileField, MultipleFileFieldView),
        (AbstractFileField, FileFieldView),
        (ChoiceField, ChoiceFieldView),
        (CheckField, CheckFieldView),
        (StaticField, StaticFieldView),
        (TextField, TextFieldView),
    ]

    def create(self, field: Field) -> FieldView:
        """Create a view for the field, with its content loaded from the field."""
        view_class: type[FieldView] = FieldView
        for field_class, candidate in self.VIEW_TYPES:
            if isinstance(field, field_class):
                view_class = candidate
                break
        view = view_class(field)
        view.update_view()
        return view
