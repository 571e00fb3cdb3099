"""realtime_cli.config.defaults
============================

Small, stable default values used across the CLI and the interactive shell.
Only plain constants live here; no imports from other realtime_cli packages.
"""

from __future__ import annotations

# ---- Program identity ----
PROGRAM_NAME = "realtime"
PROMPT = "realtime> "

# ---- Interactive shell ----
# Bounded command history kept in memory and in the history file.
HISTORY_SIZE_DEFAULT = 1000
# Exit code telling a supervising wrapper the user typed "exit" on purpose.
EXIT_CODE_USER_EXIT = 42
EXIT_CODE_OK = 0
EXIT_CODE_ERROR = 1
EXIT_CODE_USAGE = 2
# 128 + SIGINT
EXIT_CODE_INTERRUPTED = 130
INTERRUPT_HINT = '(To exit, press Ctrl+D or type "exit")'
WELCOME_BANNER = (
    "Welcome to the realtime interactive shell.\n"
    "Type 'help' to list commands, press TAB to complete, 'exit' to quit."
)

# ---- Control API ----
CONTROL_API_DEFAULT_HOST = "control.ably.net"
CONTROL_API_VERSION_PATH = "/v1"
CONTROL_API_TIMEOUT_SECONDS = 15.0

# ---- Service status ----
STATUS_URL = "https://ably.com/status/up.json"
STATUS_PAGE_URL = "https://status.ably.com"

# ---- Config storage ----
CONFIG_DIR_NAME = ".realtime"
CONFIG_FILE_NAME = "config"
