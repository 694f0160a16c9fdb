from __future__ import annotations

"""
Command Line Interface (CLI) Application Controller.

Orchestrates the CLI lifecycle: configuration resolution (defaults, saved
file, command-line overrides), logging bootstrap, tree model construction,
expansion and rendering.
"""

import json
import os
import sys
from typing import Any, Dict, List, Optional

from bundletree.core.analysis.tree_renderer import render_tree
from bundletree.core.services.events import TreeModelListener
from bundletree.core.services.tree_model import TreeModel
from bundletree.core.services.validator import validate_config
from bundletree.domain.config import get_default_config, load_config, save_config
from bundletree.domain.errors import ArchiveOpenError
from bundletree.domain.tree_models import TreeNode
from bundletree.infra.logging import LoggingConfig, configure_logging, get_logger
from bundletree.interface.cli import args as cli_args

logger = get_logger(__name__)


class _ConsoleListener(TreeModelListener):
    """Presentation-side observer for the terminal: busy state goes to the log."""

    def busy_changed(self, busy: bool) -> None:
        logger.debug("Decoding..." if busy else "Idle.")

    def subtree_replaced(self, node: TreeNode) -> None:
        logger.debug(f"Expanded {'/'.join(node.path())} ({len(node.children)} children)")

# -----------------------------------------------------------------------------
# ENTRYPOINT ORCHESTRATOR
# -----------------------------------------------------------------------------

def main(argv: Optional[List[str]] = None) -> int:
    """
    Execute the CLI workflow.

    Args:
        argv: Optional list of command line arguments. Defaults to sys.argv.

    Returns:
        int: Process exit code (0 success, 1 failure, 2 bad input, 130 interrupted).
    """
    if sys.platform == "win32" and hasattr(sys.stdout, "reconfigure"):
        sys.stdout.reconfigure(encoding="utf-8")

    # 1. Argument parsing
    parser = cli_args.build_parser()
    args = parser.parse_args(argv)

    # 2. Configuration hierarchy: defaults/saved file, then CLI overrides
    base_conf = get_default_config() if args.use_defaults else load_config()
    raw_conf = _merge_config(base_conf, cli_args.args_to_overrides(args))
    config, warnings = validate_config(raw_conf, strict=False)

    # 3. Logging bootstrap (console on stderr, optional rotating file)
    configure_logging(LoggingConfig(level=config["log_level"], console=True, log_file=args.log_file))
    for w in warnings:
        logger.warning(f"Configuration Constraint: {w}")

    if args.dump_config:
        print(json.dumps(config, ensure_ascii=False, indent=2))
        return 0

    if args.save_config:
        save_config(config)

    # 4. Input verification
    if not args.path:
        if args.save_config:
            return 0
        parser.print_usage(sys.stderr)
        print("ERROR: no input file given", file=sys.stderr)
        return 2
    if not os.path.isfile(args.path):
        logger.error(f"Input file does not exist: {args.path}")
        print(f"ERROR: input file does not exist: {args.path}", file=sys.stderr)
        return 2

    # 5. Model construction and expansion
    try:
        model = TreeModel.from_path(args.path, config, listener=_ConsoleListener())
        if config["expand_all"]:
            model.expand_all()
        elif config["expand_depth"]:
            model.expand_all(max_depth=config["expand_depth"])
    except ArchiveOpenError as e:
        logger.error(str(e))
        print(f"ERROR: {e}", file=sys.stderr)
        return 2
    except KeyboardInterrupt:
        logger.warning("Interrupted by user.")
        return 130
    except Exception as e:
        logger.critical(f"Failed to build tree: {e}", exc_info=True)
        print(f"ERROR: {e}", file=sys.stderr)
        return 1

    # 6. Output rendering
    if args.json_output:
        print(json.dumps(model.root.to_dict(), ensure_ascii=False, indent=2))
    else:
        lines = render_tree(
            model.root,
            show_types=config["show_types"],
            max_value_length=config["max_value_length"],
        )
        print("\n".join(lines))

    return 0

# -----------------------------------------------------------------------------
# CONFIGURATION MERGING
# -----------------------------------------------------------------------------

def _merge_config(base: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    """
    Shallow merge of known, non-None override values into the base configuration.
    """
    out = dict(base)
    for k in get_default_config():
        if k in overrides and overrides[k] is not None:
            out[k] = overrides[k]
    return out


if __name__ == "__main__":
    sys.exit(main())
