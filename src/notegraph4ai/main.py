from __future__ import annotations

"""
NoteGraph4AI entry point.

Installs a crash hook that records fatal errors in the log and prints the trace
with the tail of the persistent log, then hands control to the CLI controller.
"""

import logging
import os
import sys
import traceback
from typing import Any, List, Optional

# Running this file directly from a checkout: make 'notegraph4ai' importable
if not getattr(sys, "frozen", False):
    _SRC_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
    if _SRC_DIR not in sys.path:
        sys.path.insert(0, _SRC_DIR)

CRASH_LOG_TAIL_LINES = 20


def global_exception_handler(exctype: type[BaseException], value: BaseException, tb: Any) -> None:
    """
    Log an unhandled exception at CRITICAL and print a crash report.

    Args:
        exctype: Exception class.
        value: Exception instance.
        tb: Traceback object.
    """
    stack_trace = "".join(traceback.format_exception(exctype, value, tb))
    logging.getLogger("notegraph4ai.supervisor").critical(f"Unhandled exception: {value}\n{stack_trace}")

    from notegraph4ai.infra.logging import get_default_log_path, get_recent_logs

    log_path = get_default_log_path()
    report = [
        "=" * 80,
        "NOTEGRAPH4AI CRASHED",
        "=" * 80,
        stack_trace.rstrip(),
        "-" * 80,
        f"Recent log ({log_path}):",
        get_recent_logs(CRASH_LOG_TAIL_LINES, log_path=log_path).rstrip(),
    ]
    print("\n".join(report), file=sys.stderr)


sys.excepthook = global_exception_handler


def main(argv: Optional[List[str]] = None) -> int:
    """Run the CLI and return its exit code."""
    from notegraph4ai.interface.cli.app import main as cli_main

    try:
        return cli_main(argv)
    except Exception as e:
        global_exception_handler(type(e), e, e.__traceback__)
        return 1


if __name__ == "__main__":
    sys.exit(main())
