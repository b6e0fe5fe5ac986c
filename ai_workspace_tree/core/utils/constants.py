"""Constants used throughout the application."""

# Directory tree rendering defaults
DEFAULT_TREE_THRESHOLD = 20
DEFAULT_INCLUDE_HIDDEN = False
DEFAULT_COUNT_FILES_ONLY = False
DEFAULT_SORT_ENTRIES = True

# Tree drawing
DIR_SUFFIX = "/"
HIDDEN_PREFIX = "."
ELISION_MARKER = "**"
BRANCH_CONNECTOR = "├── "
LAST_CONNECTOR = "└── "
BRANCH_EXTENSION = "│   "
LAST_EXTENSION = "    "

# Per-directory scan diagnostics
PERMISSION_DENIED_DIAGNOSTIC = "permission denied"
OSERROR_DIAGNOSTIC_PREFIX = "oserror"
