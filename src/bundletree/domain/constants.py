from __future__ import annotations

"""
Domain Constants.

Centralized separators, markers, defaults and versioning shared by the
tree builders, the concrete readers and the configuration layer.
"""

from typing import List

CURRENT_CONFIG_VERSION = "1.0.0"

# Separator used by bundle entry names, independent of the host OS
PATH_SEPARATOR = "/"

# Entry suffixes treated as asset documents unless configured otherwise
DEFAULT_DECODABLE_EXTENSIONS: List[str] = [".assets", ".json"]

# Name given to the root field of every decoded object
ROOT_FIELD_NAME = "Base"

# Marker rendered in place of a subtree that has not been expanded yet
UNLOADED_MARKER = "…"
