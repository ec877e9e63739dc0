# shadovi/ui/TerminalAppMode.py
"""TerminalAppMode.py
========================
Puts the terminal into the state the editor needs and restores it on exit.

While active, every keystroke (Ctrl-S and Ctrl-Q included) reaches the editor
unprocessed, nothing is echoed, and the session runs on the alternate screen
so the shell's scrollback is left untouched.
"""

import curses
import logging
from typing import Optional

ESC_DELAY_MS = 25


class TerminalAppMode:
    """
    Raw input mode for the editor session:

    - Alternate screen buffer (smcup/rmcup).
    - Application cursor keys (smkx/rmkx).
    - raw + noecho (cbreak when raw is unavailable), keypad(True).
    - A short ESC delay so a lone Esc cancels prompts promptly.

    `enter(stdscr)` must be paired with `exit()`; `exit` is a no-op when the
    mode was never entered.
    """

    def __init__(self) -> None:
        self._entered: bool = False
        self._stdscr: Optional["curses.window"] = None

    @property
    def entered(self) -> bool:
        return self._entered

    def enter(self, stdscr: "curses.window") -> None:
        self._stdscr = stdscr

        self._tputs("smcup")
        self._tputs("smkx")

        try:
            curses.raw()
        except curses.error:
            curses.cbreak()
        curses.noecho()
        stdscr.keypad(True)

        try:
            curses.set_escdelay(ESC_DELAY_MS)
        except (AttributeError, curses.error):
            logging.debug("set_escdelay is not available; keeping the terminal default.")

        stdscr.scrollok(False)
        stdscr.leaveok(False)
        stdscr.clearok(True)
        stdscr.erase()
        stdscr.refresh()

        self._entered = True
        logging.debug("TerminalAppMode: entered raw mode on the alternate screen.")

    def exit(self) -> None:
        if not self._entered:
            return

        try:
            if self._stdscr is not None:
                self._stdscr.keypad(False)
            curses.noraw()
            curses.echo()
        except curses.error as e:
            logging.debug("TerminalAppMode: restoring input modes failed: %r", e)

        self._tputs("rmkx")
        self._tputs("rmcup")

        self._entered = False
        logging.debug("TerminalAppMode: exited, terminal modes restored.")

    def _tputs(self, capname: str) -> None:
        try:
            sequence = curses.tigetstr(capname)
            if sequence:
                curses.putp(sequence)
        except curses.error as e:
            # capability missing, e.g. on the FreeBSD console
            logging.debug("tputs(%s) skipped: %r", capname, e)
