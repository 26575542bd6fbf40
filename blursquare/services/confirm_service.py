# services/confirm_service.py
"""
Yes/no confirmation before anything gets overwritten.

Modelled as a small state machine:

    PROMPTING ──"y"/"yes"──▶ CONFIRMED
        │  ▲
        │  └── anything else (re-prompt)
        ├────"n"/"no"───▶ DECLINED
        └──read error/EOF─▶ IO_FAILURE

Answers are matched case-insensitively after stripping whitespace.
"""
from __future__ import annotations
from enum import Enum
from typing import Optional, TextIO
import sys

from ..errors import PromptIOError

_YES = ("y", "yes")
_NO = ("n", "no")


class ConfirmState(Enum):
    PROMPTING = "prompting"
    CONFIRMED = "confirmed"
    DECLINED = "declined"
    IO_FAILURE = "io_failure"


class ConfirmService:

    def __init__(self, stdin: Optional[TextIO] = None, stdout: Optional[TextIO] = None):
        # Resolved lazily so tests that swap sys.stdin still work
        self._stdin = stdin
        self._stdout = stdout

    @property
    def stdin(self) -> TextIO:
        return self._stdin or sys.stdin

    @property
    def stdout(self) -> TextIO:
        return self._stdout or sys.stdout

    def _read_answer(self) -> Optional[str]:
        """Read one line and normalise it. None means the stream failed or ended."""
        try:
            line = self.stdin.readline()
        except (OSError, ValueError):
            return None
        if line == "":
            return None
        return line.strip().lower()

    @staticmethod
    def _next_state(answer: Optional[str]) -> ConfirmState:
        if answer is None:
            return ConfirmState.IO_FAILURE
        if answer in _YES:
            return ConfirmState.CONFIRMED
        if answer in _NO:
            return ConfirmState.DECLINED
        return ConfirmState.PROMPTING

    def ask(self, msg: str) -> ConfirmState:
        """Prompt with *msg* until the answer is yes, no, or the stream fails."""
        state = ConfirmState.PROMPTING
        while state is ConfirmState.PROMPTING:
            self.stdout.write(msg)
            self.stdout.flush()
            state = self._next_state(self._read_answer())
        return state

    def confirm(self, msg: str) -> bool:
        """
        True on yes, False on no.
        Raises PromptIOError when the answer cannot be read.
        """
        state = self.ask(msg)
        if state is ConfirmState.IO_FAILURE:
            raise PromptIOError("Error while trying to read stdin")
        return state is ConfirmState.CONFIRMED
