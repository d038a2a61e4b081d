"""Base class shared by every shell command."""

from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from typing import Any, Callable, Sequence

from .errors import WalletCoreError
from .wallet_core import WalletCore

logger = logging.getLogger(__name__)


def pretty(value: Any) -> str:
    """Render a structured report the way every command prints it."""

    return json.dumps(value, indent=2)


def error_report(exc: BaseException) -> str:
    return pretty({"error": str(exc)})


class Command(ABC):
    """A named shell command.

    Subclasses fill in the class attributes below; :meth:`help` assembles
    them into the long help text::

        <description lines>
        Usage:
        <usage lines>

        <notes>
        Example:
        <example lines>
    """

    name: str = ""
    summary: str = ""
    description: tuple[str, ...] = ()
    usage: tuple[str, ...] = ()
    notes: tuple[str, ...] = ()
    example: tuple[str, ...] = ()

    def help(self) -> str:
        lines = [*self.description, "Usage:", *self.usage, "", *self.notes]
        if self.example:
            lines.extend(["Example:", *self.example])
        return "\n".join(lines)

    def short_help(self) -> str:
        return self.summary

    @abstractmethod
    def execute(self, args: Sequence[str], core: WalletCore) -> str:
        """Run the command and return the report shown to the user."""

    def usage_error(self, diagnostic: str) -> str:
        return f"{diagnostic}\n{self.help()}"

    def call_core(self, func: Callable[[], Any]) -> str:
        """Invoke a wallet-core operation and render its result or failure."""

        try:
            result = func()
        except WalletCoreError as exc:
            logger.debug("%s: wallet core call failed: %s", self.name, exc)
            return error_report(exc)
        if isinstance(result, str):
            return result
        return pretty(result)

    def call_core_for_status(self, func: Callable[[], Any]) -> str:
        """Invoke a wallet-core operation that only reports success or failure."""

        try:
            func()
        except WalletCoreError as exc:
            logger.debug("%s: wallet core call failed: %s", self.name, exc)
            return pretty({"result": "error", "error": str(exc)})
        return pretty({"result": "success"})

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name!r}>"
