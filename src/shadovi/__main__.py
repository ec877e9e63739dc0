#!/usr/bin/env python3
# src/shadovi/__main__.py
"""
ShadoVi Main Entry Point
========================

This module is the entry point for launching the shadovi editor
(``shadovi [file]`` or ``python -m shadovi [file]``). It performs:
1) Configuration & Logging: loads config and initializes logging ASAP.
2) Core Import: imports the Editor class after logging is ready.
3) Curses Wrapper: safely initializes/tears down curses to avoid terminal corruption.
4) Application Run: instantiates the Editor and starts its main loop.
"""

import curses
import locale
import logging
import signal
import sys
from pathlib import Path
from typing import Any, Optional

# --- Step 1: Immediate Logging and Configuration Setup ---
try:
    from shadovi.utils.logging_config import setup_logging
    from shadovi.utils.utils import load_config

    config: dict[str, Any] = load_config()
    setup_logging(config)
    logger = logging.getLogger("shadovi")
except Exception as e:
    # Logging is not ready; print to stderr and exit.
    print(f"FATAL: Could not initialize configuration or logging system: {e}", file=sys.stderr)
    import traceback
    traceback.print_exc()
    sys.exit(1)

# --- Step 2: Import the Core Application ---
from shadovi.core.Editor import Editor  # noqa: E402
from shadovi.ui.TerminalAppMode import TerminalAppMode  # noqa: E402


def _resolve_cli_path(argv: list[str]) -> Optional[str]:
    """
    Resolve an optional CLI path from argv[1], expanded to a user path.
    The file does NOT need to exist on disk; a missing file opens as an
    empty buffer carrying that name so Save creates it.
    """
    if len(argv) <= 1:
        return None
    raw = argv[1].strip()
    if not raw:
        return None
    return str(Path(raw).expanduser())


# --- Step 3: Curses Application Runner ---
def main_app_runner(stdscr: "curses.window", config: dict[str, Any], file_to_open: Optional[str]) -> None:
    """
    Target for `curses.wrapper`. Puts the terminal into raw mode and runs the editor.

    Args:
        stdscr: Curses standard screen window provided by wrapper.
        config: Application configuration dict.
        file_to_open: Optional CLI path (may or may not exist on disk).
    """
    mode = TerminalAppMode()
    mode.enter(stdscr)
    try:
        # Ignore terminal suspension (Ctrl+Z), typical for full-screen TUIs.
        if hasattr(signal, "SIGTSTP"):
            signal.signal(signal.SIGTSTP, signal.SIG_IGN)

        editor = Editor(stdscr, config, file_name=file_to_open)
        editor.run()
    finally:
        mode.exit()


def start() -> None:
    """
    Initializes locale and runs the curses application via wrapper.
    Exits with status 1 when the session ends with an unrecoverable error.
    """
    logger.info("ShadoVi editor starting up...")

    # Locale is important for proper character width/encoding behavior in curses.
    try:
        locale.setlocale(locale.LC_ALL, "")
    except locale.Error:
        logger.warning("Could not set system locale. Character rendering may be affected.")

    file_to_open = _resolve_cli_path(sys.argv)

    try:
        # wrapper() will set up/tear down curses safely.
        curses.wrapper(main_app_runner, config, file_to_open)
        logger.info("ShadoVi editor shut down gracefully.")
    except Exception as e:
        logger.critical("Unhandled exception at the top level.", exc_info=True)
        print(f"shadovi: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    start()
