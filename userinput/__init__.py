"""User Input Panel Library.

This package contains the modules for a declarative installer user input
panel: variable resolution, entry activation, field views and the panel
lifecycle, plus a Textual front-end for interactive runs.
"""

from __future__ import annotations

__version__ = "1.0.0"
