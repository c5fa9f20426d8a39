"""Single-keypress reader for the terminal frontend.

Arrow keys, WASD, and command letters are read without Enter and
normalised to action strings.  POSIX terminals use tty/termios; Windows
falls back to msvcrt.
"""

from __future__ import annotations

import os
import sys
import time

# action -> keys that trigger it
_BINDINGS: dict[str, str] = {
    "up": "wW",
    "down": "sS",
    "left": "aA",
    "right": "dD",
    "quit": "qQ\x03",  # includes Ctrl-C
    "restart": "rR",
    "solve": "vV",
    "hint": "nN",
    "undo": "uUzZ",
    "enter": "\r\n",
}

_KEY_MAP: dict[str, str] = {
    key: action for action, keys in _BINDINGS.items() for key in keys
}

# Final byte of the ESC [ x sequences sent by arrow keys.
_ARROW_MAP: dict[str, str] = {
    "A": "up",
    "B": "down",
    "C": "right",
    "D": "left",
}


def resolve(ch: str) -> str:
    """Map a raw character to its action string."""
    return _KEY_MAP.get(ch, ch if ch.isprintable() else "")


# -- platform readers ----------------------------------------------------------


def _read_windows(timeout: float | None) -> str | None:
    import msvcrt  # type: ignore[import-not-found]

    if timeout is not None:
        end = time.monotonic() + timeout
        while not msvcrt.kbhit():
            if time.monotonic() >= end:
                return None
            time.sleep(0.02)
    ch = msvcrt.getch().decode("utf-8", errors="ignore")
    if ch in ("\x00", "\xe0"):  # arrow prefix
        code = msvcrt.getch().decode("utf-8", errors="ignore")
        return {"H": "up", "P": "down", "M": "right", "K": "left"}.get(code, "")
    return resolve(ch)


def _read_posix(timeout: float | None) -> str | None:
    import select
    import termios
    import tty

    fd = sys.stdin.fileno()
    old = termios.tcgetattr(fd)

    def ready(wait: float | None) -> bool:
        return bool(select.select([fd], [], [], wait)[0])

    def read1() -> str:
        # os.read is unbuffered, so select() keeps seeing the rest of an
        # escape sequence.
        return os.read(fd, 1).decode("utf-8", errors="ignore")

    try:
        tty.setraw(fd)
        if not ready(timeout):
            return None
        ch = read1()
        if ch != "\x1b":
            return resolve(ch)
        # Bare Escape quits; ESC [ x is an arrow key.
        if not ready(0.1) or read1() != "[":
            return "quit"
        if not ready(0.1):
            return ""
        return _ARROW_MAP.get(read1(), "")
    finally:
        termios.tcsetattr(fd, termios.TCSADRAIN, old)


_read = _read_windows if os.name == "nt" else _read_posix


# -- public API ----------------------------------------------------------------


def get_key() -> str:
    """Block until a key is pressed and return its action string.

    Possible return values:
        "up", "down", "left", "right"  — movement
        "quit"                         — q / Ctrl-C / Escape
        "restart"                      — r
        "solve"                        — v (auto-solve)
        "hint"                         — n (next best move)
        "undo"                         — u / z
        "enter"                        — Enter / Return
        "<char>"                       — unmapped printable char
        ""                             — unrecognised key
    """
    key = _read(None)
    return key if key is not None else ""


def get_key_timeout(timeout: float) -> str | None:
    """Like ``get_key`` but returns ``None`` after *timeout* seconds without input."""
    return _read(timeout)
