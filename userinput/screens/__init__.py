"""Screen package for the user input panel.

This package contains the Textual screens and their shared mixins.
"""

from .mixins import DebugMixin
from .panel import UserInputScreen

__all__ = [
    "DebugMixin",
    "UserInputScreen",
]
