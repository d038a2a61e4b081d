"""Error taxonomy shared by the command layer.

Validation errors are raised by the request parsers and caught by the
command that invoked them, which renders ``str(exc)`` followed by its long
help. Wallet-core failures are reported as ``{"error": ...}`` objects instead.
"""

from __future__ import annotations


class CommandError(RuntimeError):
    """Base class for errors reported back to the shell user."""


class ParseError(CommandError):
    """Raised when the structured argument is not valid JSON."""

    def __init__(self, detail: str) -> None:
        super().__init__(f"Couldn't understand JSON: {detail}")
        self.detail = detail


class MissingField(CommandError):
    """Raised when a mandatory key is absent from a request."""

    def __init__(self, field: str, message: str | None = None) -> None:
        super().__init__(f"Error: {message or f'Need {field}'}")
        self.field = field


class InvalidShape(CommandError):
    """Raised when a key holds a value of the wrong type."""

    def __init__(self, field: str, message: str) -> None:
        super().__init__(message)
        self.field = field


class BadEncoding(CommandError):
    """Raised when a base58 field cannot be decoded."""

    def __init__(self, field: str, reason: str) -> None:
        super().__init__(f"Error: '{field}' is not valid base58: {reason}")
        self.field = field
        self.reason = reason


class InvalidNumber(CommandError):
    """Raised when a numeric field does not hold a usable integer."""

    def __init__(self, field: str, message: str | None = None) -> None:
        super().__init__(f"Error: {message or f'{field} must be a number'}")
        self.field = field


class InsufficientFunds(CommandError):
    """Raised when the spendable balance cannot cover the transaction fee."""

    def __init__(self, message: str = "Not enough in wallet to pay transaction fee") -> None:
        super().__init__(f"Error: {message}")


class NonLiteralAmount(InsufficientFunds):
    """Raised by the HTLC redemption parser for amounts that are not integers.

    The redemption path has always reported this case with the insufficient
    funds text; the subclass keeps that text while letting callers tell the
    two conditions apart.
    """

    def __init__(self, output_index: int) -> None:
        super().__init__(
            "Not enough in wallet to pay transaction fee "
            f"(output {output_index} needs a literal amount in zatoshis)"
        )
        self.output_index = output_index


class UnknownCommand(CommandError):
    """Raised when a command name is not registered."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Unknown command : {name}. Type 'help' for a list of commands.")
        self.name = name


class WalletCoreError(RuntimeError):
    """Raised by wallet-core implementations when a delegated call fails."""
