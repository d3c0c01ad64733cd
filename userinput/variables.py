"""Installer variable store.

Variables are named string slots shared by every panel of an installation.
References of the form ``${name}`` or ``$name`` inside a text are substituted
by :meth:`Variables.replace`.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from userinput.logging_utils import get_logger

if TYPE_CHECKING:
    from collections.abc import Iterator, Mapping

logger = get_logger(__name__)

# ${name} accepts dots and dashes, bare $name stops at the first non-word character
VARIABLE_PATTERN = re.compile(r"\$\{([A-Za-z0-9_.\-]+)\}|\$([A-Za-z_][A-Za-z0-9_]*)")


class Variables:
    """Key/value store of installer variables."""

    def __init__(self, initial: Mapping[str, str] | None = None) -> None:
        """Initialize the store.

        Parameters
        ----------
        initial : Mapping[str, str] | None, optional
            Variables to seed the store with, by default None

        """
        self._values: dict[str, str] = dict(initial or {})

    def get(self, name: str, default: str | None = None) -> str | None:
        """Return the value of a variable, or ``default`` when it is not set."""
        return self._values.get(name, default)

    def set(self, name: str, value: str | None) -> None:
        """Set a variable. Setting ``None`` removes it from the store.

        Parameters
        ----------
        name : str
            Name of the variable
        value : str | None
            New value, or None to unset the variable

        """
        if value is None:
            if self._values.pop(name, None) is not None:
                logger.debug("Variable unset: %s", name)
            return
        self._values[name] = value
        logger.debug("Variable set: %s=%r", name, value)

    def replace(self, text: str | None) -> str | None:
        """Substitute variable references in a text.

        Substitution is a single pass: values inserted into the text are not
        scanned again. References to unknown variables are left unchanged.

        Parameters
        ----------
        text : str | None
            The text to perform replacement on

        Returns
        -------
        str | None
            The text with known variables replaced, or None if text is None

        """
        if text is None:
            return None

        def substitute(match: re.Match[str]) -> str:
            name = match.group(1) or match.group(2)
            value = self._values.get(name)
            return match.group(0) if value is None else value

        return VARIABLE_PATTERN.sub(substitute, text)

    def as_dict(self) -> dict[str, str]:
        """Return a copy of all variables."""
        return dict(self._values)

    def __contains__(self, name: object) -> bool:
        return name in self._values

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"Variables({self._values!r})"
