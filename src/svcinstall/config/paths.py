"""Environment lookups used to fill in configuration defaults.

Values come from the invoking environment, not from any file:
- user: $USER, falling back to the login name
- home: $HOME, falling back to the platform home directory
- cwd: the current working directory
"""

import getpass
import os
from pathlib import Path

LOG_LEVEL_ENV_VAR = "SVCINSTALL_LOG_LEVEL"


def get_current_user() -> str | None:
    """Get the name of the invoking user.

    Resolution order:
    1. USER environment variable (if set)
    2. getpass.getuser() (LOGNAME, USERNAME or the password database)

    Returns:
        The username, or None if it cannot be determined.
    """
    if user := os.environ.get("USER"):
        return user
    try:
        return getpass.getuser()
    except (KeyError, OSError):
        return None


def get_home_dir() -> str | None:
    """Get the invoking user's home directory."""
    if home := os.environ.get("HOME"):
        return home
    try:
        return str(Path.home())
    except RuntimeError:
        return None


def get_working_dir() -> str:
    """Get the current working directory."""
    return os.getcwd()
