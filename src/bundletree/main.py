from __future__ import annotations

"""
Main Entry Point and Global Supervisor.

Installs a last-resort exception hook so unexpected crashes are logged with
their stack trace, then hands control to the CLI controller.
"""

import logging
import os
import sys
import traceback
from typing import Any, List, Optional

# Allow running this file directly from a source checkout
BASE_DIR = os.path.dirname(os.path.abspath(__file__))
SRC_DIR = os.path.dirname(BASE_DIR)
if SRC_DIR not in sys.path:
    sys.path.insert(0, SRC_DIR)


def global_exception_handler(exctype: type, value: BaseException, tb: Any) -> None:
    """
    Log unhandled exceptions and print the trace to stderr.

    Args:
        exctype: Exception class.
        value: Exception instance.
        tb: Traceback object.
    """
    stack_trace = "".join(traceback.format_exception(exctype, value, tb))

    logger = logging.getLogger("bundletree.supervisor")
    logger.critical(f"FATAL EXCEPTION DETECTED: {value}\n{stack_trace}")

    print("\n" + "=" * 80, file=sys.stderr)
    print("CRITICAL ERROR (BUNDLETREE)", file=sys.stderr)
    print("=" * 80, file=sys.stderr)
    print(stack_trace, file=sys.stderr)


def main(argv: Optional[List[str]] = None) -> int:
    """
    Run the CLI.

    Returns:
        int: Standard process exit code.
    """
    sys.excepthook = global_exception_handler

    from bundletree.interface.cli.app import main as cli_main
    return cli_main(argv)


if __name__ == "__main__":
    sys.exit(main())
