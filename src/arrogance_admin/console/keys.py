"""Terminal keypress decoding."""

import termios
import tty
from collections.abc import Iterator
from contextlib import contextmanager

_SEQUENCES = {
    "\x1b[A": "up",
    "\x1b[B": "down",
    "\x1b[C": "right",
    "\x1b[D": "left",
    "\x1bOA": "up",
    "\x1bOB": "down",
    "\x1bOC": "right",
    "\x1bOD": "left",
    "\x1b[3~": "delete",
}

_CONTROL_KEYS = {
    "\r": "enter",
    "\n": "enter",
    "\t": "tab",
    "\x1b": "esc",
    "\x7f": "delete",
    "\x08": "delete",
    "\x03": "ctrl+c",
    "\x04": "ctrl+d",
}


def decode_keys(data: str) -> list[str]:
    """Translate raw terminal input into key names."""
    keys: list[str] = []
    index = 0
    while index < len(data):
        for sequence, name in _SEQUENCES.items():
            if data.startswith(sequence, index):
                keys.append(name)
                index += len(sequence)
                break
        else:
            char = data[index]
            keys.append(_CONTROL_KEYS.get(char, char))
            index += 1
    return keys


@contextmanager
def keypress_mode(fd: int) -> Iterator[None]:
    """Deliver single keypresses, including ctrl+c, as input bytes."""
    saved = termios.tcgetattr(fd)
    try:
        tty.setcbreak(fd)
        mode = termios.tcgetattr(fd)
        mode[tty.LFLAG] &= ~termios.ISIG
        termios.tcsetattr(fd, termios.TCSANOW, mode)
        yield
    finally:
        termios.tcsetattr(fd, termios.TCSADRAIN, saved)
