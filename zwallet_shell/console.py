"""Interactive shell for the light wallet."""

from __future__ import annotations

import logging
import shlex

from .commands import do_user_command
from .wallet_core import WalletCore

logger = logging.getLogger(__name__)

PROMPT = "zwallet> "
BANNER = "Light wallet shell. Type 'help' for a list of commands, 'quit' to save and exit."


def split_command_line(line: str) -> list[str]:
    """Split a shell line into the command name and its arguments.

    Shell quoting rules apply, so a JSON argument can be wrapped in single
    quotes and keep its inner double quotes.
    """

    return shlex.split(line)


def run_shell(core: WalletCore, prompt: str = PROMPT) -> None:
    """Read commands until ``quit`` or end of input, printing each report."""

    print(BANNER)
    while True:
        try:
            line = input(prompt)
        except (EOFError, KeyboardInterrupt):
            print()
            logger.info("Input closed; saving wallet before exit")
            report = do_user_command("save", [], core)
            print(report)
            return

        try:
            tokens = split_command_line(line)
        except ValueError as exc:
            print(f"Couldn't parse command line: {exc}")
            continue
        if not tokens:
            continue

        command, args = tokens[0], tokens[1:]
        report = do_user_command(command, args, core)
        if report:
            print(report)
        if command.lower() == "quit":
            return
