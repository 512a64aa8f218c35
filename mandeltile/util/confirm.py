from __future__ import annotations

import sys
from typing import Callable, Optional, TextIO

class InteractiveConfirmation:
    """Ask on the console; an empty answer counts as yes."""

    def __init__(self, *, reader: Optional[Callable[[], str]] = None, stream: Optional[TextIO] = None):
        self._reader = reader or sys.stdin.readline
        self._stream = stream or sys.stdout

    def __call__(self, path: str) -> bool:
        self._stream.write(f"Picture '{path}' already exists. Overwrite? [Y/n] ")
        self._stream.flush()
        answer = self._reader().strip().lower()
        return answer in ("", "y", "yes")

class DeclineConfirmation:
    """Never overwrite. Used for unattended runs."""

    def __call__(self, path: str) -> bool:
        return False

def choose_confirmation(*, silence_output: bool) -> Callable[[str], bool]:
    if silence_output or not sys.stdin.isatty():
        return DeclineConfirmation()
    return InteractiveConfirmation()
