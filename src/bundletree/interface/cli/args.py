from __future__ import annotations

"""
CLI Argument Definition and Mapping.

Defines the command-line interface schema and translates parsed argparse
namespaces into configuration overrides.
"""

import argparse
from typing import Any, Dict, List, Optional

from bundletree import __version__

# -----------------------------------------------------------------------------
# ARGUMENT DEFINITION
# -----------------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    """
    Construct the argument parser for the bundletree CLI.

    Returns:
        argparse.ArgumentParser: Configured parser instance.
    """
    p = argparse.ArgumentParser(
        prog="bundletree",
        description="Browse asset bundles and asset documents as a lazily expanded tree.",
    )

    p.add_argument(
        "path",
        nargs="?",
        default=None,
        help="Bundle (.zip) or asset document (.json) to open.",
    )

    # --- Expansion ---
    p.add_argument(
        "--expand-all",
        action="store_true",
        help="Expand every deferred entry and object.",
    )
    p.add_argument(
        "--depth",
        dest="expand_depth",
        type=int,
        default=None,
        help="Expand deferred nodes up to this depth below the root.",
    )

    # --- Bundle reading ---
    p.add_argument(
        "--ext",
        dest="decodable_extensions",
        default=None,
        help="Comma-separated entry suffixes decoded as asset documents.",
    )

    # --- Rendering ---
    p.add_argument(
        "--no-types",
        action="store_true",
        help="Hide declared field types.",
    )
    p.add_argument(
        "--max-value-length",
        dest="max_value_length",
        type=int,
        default=None,
        help="Truncate scalar values longer than this (0 disables truncation).",
    )
    p.add_argument(
        "--json",
        dest="json_output",
        action="store_true",
        help="Print the tree as JSON instead of ASCII art.",
    )

    # --- Configuration and diagnostics ---
    p.add_argument(
        "--use-defaults",
        action="store_true",
        help="Ignore the saved configuration file.",
    )
    p.add_argument(
        "--dump-config",
        action="store_true",
        help="Print the effective configuration and exit.",
    )
    p.add_argument(
        "--save-config",
        action="store_true",
        help="Persist the effective configuration as the new default.",
    )
    p.add_argument(
        "--log-file",
        dest="log_file",
        default=None,
        help="Also write diagnostics to this rotating log file.",
    )
    p.add_argument(
        "--debug",
        action="store_true",
        help="Elevate logging verbosity to DEBUG.",
    )
    p.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    return p

# -----------------------------------------------------------------------------
# ARGUMENT MAPPING
# -----------------------------------------------------------------------------

def args_to_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    """
    Translate the argparse Namespace into configuration overrides.

    Args:
        args: Parsed command-line arguments.

    Returns:
        Dict[str, Any]: Configuration overrides subset.
    """
    overrides: Dict[str, Any] = {}

    if args.expand_all:
        overrides["expand_all"] = True
    if args.expand_depth is not None:
        overrides["expand_depth"] = args.expand_depth
    if args.decodable_extensions:
        overrides["decodable_extensions"] = _split_csv(args.decodable_extensions)
    if args.no_types:
        overrides["show_types"] = False
    if args.max_value_length is not None:
        overrides["max_value_length"] = args.max_value_length
    if args.debug:
        overrides["log_level"] = "DEBUG"

    return overrides

# -----------------------------------------------------------------------------
# HELPERS
# -----------------------------------------------------------------------------

def _split_csv(value: Optional[str]) -> Optional[List[str]]:
    """
    Convert a comma-separated string into a list of sanitized strings.
    """
    if value is None:
        return None
    parts = [x.strip() for x in value.split(",")]
    return [x for x in parts if x]
