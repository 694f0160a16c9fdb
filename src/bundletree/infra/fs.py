from __future__ import annotations

"""
FileSystem Infrastructure Layer.

Resolves the per-user data directory where the configuration file is stored,
with uniform behavior on Windows and Unix-like systems.
"""

import os

# -----------------------------------------------------------------------------
# GLOBAL CONSTANTS
# -----------------------------------------------------------------------------

APP_DIR_NAME = "BundleTree"
UNIX_APP_DIR_NAME = ".bundletree"

# Overrides the data directory (used by tests and portable installs)
DATA_DIR_ENV = "BUNDLETREE_HOME"

# -----------------------------------------------------------------------------
# PATH RESOLUTION API
# -----------------------------------------------------------------------------

def get_user_data_dir() -> str:
    """
    Resolve the standard OS-specific directory for persistent application data.

    Automatically creates the hierarchy if it does not exist.
    Standards:
    - $BUNDLETREE_HOME when set
    - Windows: %LOCALAPPDATA%/BundleTree
    - Linux/Mac: ~/.bundletree

    Returns:
        str: Absolute path to the application data directory.
    """
    path = os.environ.get(DATA_DIR_ENV, "").strip()

    # Windows specific resolution
    if not path and os.name == "nt":
        base = os.environ.get("LOCALAPPDATA") or os.environ.get("APPDATA")
        if base:
            path = os.path.join(base, APP_DIR_NAME)

    # Posix fallback (Linux/Mac)
    if not path:
        path = os.path.join(os.path.expanduser("~"), UNIX_APP_DIR_NAME)

    # Idempotent directory creation
    try:
        os.makedirs(path, exist_ok=True)
    except OSError:
        pass

    return os.path.abspath(path)


def get_config_path() -> str:
    return os.path.join(get_user_data_dir(), "config.json")
