"""
Terminal I/O

Thin wrapper around a rich Console used by every interactive workflow. Answers
are read with ``Console.input``; when a ``stream`` is given, lines come from
its ``readline()`` instead of the keyboard, which is how tests script a
session. Re-asking until an answer is valid is left to rich.prompt.
"""

import logging
from typing import Callable, TypeVar

from rich.console import Console
from rich.prompt import Confirm, InvalidResponse, Prompt
from rich.text import Text

logger = logging.getLogger(__name__)

T = TypeVar("T")

INVALID_YES_NO = "Invalid input. Please enter 'y' or 'n'."


class ParsedPrompt(Prompt):
    """
    Prompt whose answer is converted by a parse function.

    The parser raises ValueError with a user facing message for bad input;
    the message is printed in red and the same prompt is shown again. There is
    no retry limit.
    """

    prompt_suffix = ""

    def __init__(self, prompt: str, parser: Callable[[str], T], console: Console = None):
        super().__init__(Text(prompt), console=console)
        self.parser = parser

    def process_response(self, value: str) -> T:
        # readline() keeps the line ending
        raw = value.rstrip("\r\n")
        try:
            return self.parser(raw)
        except ValueError as e:
            logger.debug("Rejected input %r for prompt %r: %s", raw, self.prompt.plain, e)
            raise InvalidResponse(Text(str(e), style="red")) from e


class YesNoPrompt(Confirm):
    """Confirm that only takes "y" or "n" and says so when it gets anything else."""

    prompt_suffix = ""
    validate_error_message = Text(INVALID_YES_NO, style="red")


class Terminal:
    """Prompting and printing for one interactive session."""

    def __init__(self, console: Console = None, stream=None):
        self.console = console or Console(highlight=False)
        self.stream = stream

    def read(self, prompt: str) -> str:
        """Show ``prompt`` and return one line of input. Raises EOFError at end of input."""
        return self.console.input(prompt, markup=False, stream=self.stream).rstrip("\r\n")

    def say(self, message: str = "", style: str = None) -> None:
        self.console.print(message, style=style, markup=False, highlight=False)

    def error(self, message: str) -> None:
        self.say(message, style="red")

    def success(self, message: str) -> None:
        self.say(message, style="green")

    def show(self, renderable) -> None:
        self.console.print(renderable)

    def ask(self, prompt: str) -> str:
        return self.read(prompt).strip()

    def ask_valid(self, prompt: str, parser: Callable[[str], T]) -> T:
        """Prompt until ``parser`` accepts the answer."""
        return ParsedPrompt(prompt, parser, console=self.console)(stream=self.stream)

    def confirm(self, prompt: str) -> bool:
        """Single shot confirmation, only "y" counts as yes."""
        return self.ask(prompt).lower() == "y"

    def ask_yes_no(self, prompt: str) -> bool:
        """Ask until the answer is "y" or "n"."""
        return YesNoPrompt.ask(Text(prompt), console=self.console, show_choices=False, stream=self.stream)
