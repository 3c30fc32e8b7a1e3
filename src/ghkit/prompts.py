"""Line prompts and y/N confirmations."""

from __future__ import annotations

import sys
from collections.abc import Callable
from typing import TextIO

from .ux import Colors, colorize


class Prompter:
    """Reads answers from ``input``; end-of-input counts as an empty answer.

    ``KeyboardInterrupt`` is not caught here: the runtime turns it into an
    ``Aborted.`` exit.
    """

    def __init__(
        self,
        input_fn: Callable[[str], str] = input,
        stream: TextIO | None = None,
    ) -> None:
        self._input = input_fn
        self._stream = stream

    def _read(self, text: str) -> str:
        try:
            return self._input(text)
        except EOFError:
            return ""

    def ask(self, text: str) -> str:
        stream = self._stream or sys.stdout
        return self._read(colorize(f"{text}: ", Colors.YELLOW, stream=stream)).strip()

    def confirm(self, question: str, *, danger: bool = False, on_eof: bool = False) -> bool:
        """Ask a ``(y/N)`` question; only ``y``/``Y`` confirms.

        End-of-input returns ``on_eof``.
        """
        stream = self._stream or sys.stdout
        color = Colors.RED if danger else Colors.YELLOW
        try:
            answer = self._input(colorize(f"{question} (y/N): ", color, stream=stream))
        except EOFError:
            return on_eof
        return answer.strip().lower() == "y"


__all__ = ["Prompter"]
