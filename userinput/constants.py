"""Constants used throughout the user input panel."""

from __future__ import annotations

import os

# Global debug flag - can be set via environment variable or command line
DEBUG_MODE = os.getenv("DEBUG", "false").lower() in ("true", "1", "yes", "on")

# Logging
MAX_LOG_MESSAGES = 100  # Ring buffer size of the TUI log handler
MAX_DEBUG_MESSAGES = 50  # Maximum number of debug messages to display at once
DEBUG_LOG_FILE_NAME = "userinput_debug.log"

# Panel specification defaults
DEFAULT_TOP_BUFFER = 25
MULTIPLE_FILE_SEPARATOR = ";"
DEFAULT_CHECK_TRUE_VALUE = "true"
DEFAULT_CHECK_FALSE_VALUE = "false"

# Field kinds that never bind a variable
STATIC_FIELD_KINDS = ("static", "title", "divider", "space")

# Condition expression operators, lowest precedence first
CONDITION_OR = "|"
CONDITION_AND = "+"
CONDITION_XOR = "\\"
CONDITION_NOT = "!"
