"""
User Prompts

Interactive input behind a small interface so that commands can be tested
with canned answers.
"""

import sys
from abc import ABC, abstractmethod
from typing import List, Optional, TextIO

from ..error_handling import UserDeclinedError

AFFIRMATIVE_ANSWERS = ("y", "yes")


def is_affirmative(response: str) -> bool:
    """Accept y or yes in any case, ignoring surrounding whitespace."""
    return response.strip().lower() in AFFIRMATIVE_ANSWERS


class Prompter(ABC):
    """Interactive capability used by init, get and rollback."""

    @abstractmethod
    def is_interactive(self) -> bool:
        """Whether a user is attached who can answer prompts."""

    @abstractmethod
    def input(self, message: str, placeholder: str = "") -> str:
        pass

    @abstractmethod
    def select(self, message: str, options: List[str]) -> str:
        """Return one of ``options`` chosen by the user."""


class TerminalPrompter(Prompter):
    """Prompts on the controlling terminal using ``input()``."""

    def __init__(self, stdin: Optional[TextIO] = None, stderr: Optional[TextIO] = None):
        self.stdin = stdin or sys.stdin
        self.stderr = stderr or sys.stderr

    def is_interactive(self) -> bool:
        isatty = getattr(self.stdin, "isatty", None)
        return bool(isatty and isatty())

    def input(self, message: str, placeholder: str = "") -> str:
        hint = f" [{placeholder}]" if placeholder else ""
        try:
            response = input(f"{message}{hint}: ")
        except (EOFError, KeyboardInterrupt) as e:
            raise UserDeclinedError("input cancelled") from e
        return response or placeholder

    def select(self, message: str, options: List[str]) -> str:
        if not options:
            raise ValueError("no options to select from")

        print(message, file=self.stderr)
        for i, option in enumerate(options, start=1):
            print(f"  {i}) {option}", file=self.stderr)

        while True:
            answer = self.input("Enter a number or name").strip()
            if answer in options:
                return answer
            if answer.isdigit() and 1 <= int(answer) <= len(options):
                return options[int(answer) - 1]
            print(f"Invalid selection: {answer}", file=self.stderr)
