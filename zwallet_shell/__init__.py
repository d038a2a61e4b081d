"""Command layer of a shielded light wallet shell."""

from .amounts import BalanceSnapshot, resolve_amount
from .binary_fields import decode_base58, encode_base58
from .command import Command
from .commands import do_user_command, get_commands
from .errors import (
    BadEncoding,
    CommandError,
    InsufficientFunds,
    InvalidNumber,
    InvalidShape,
    MissingField,
    NonLiteralAmount,
    ParseError,
    UnknownCommand,
    WalletCoreError,
)
from .model import (
    DEFAULT_FEE,
    ENTIRE_VERIFIED_BALANCE,
    FixedAmount,
    HTLCRedemptionRequest,
    OutputSpec,
    P2SHTransactionRequest,
    ResolvedOutput,
    TransactionRequest,
)
from .tx_requests import (
    parse_redeem_p2sh_request,
    parse_send_p2sh_request,
    parse_send_request,
)
from .wallet_core import ScanStatus, WalletCore

__all__ = [
    "BadEncoding",
    "BalanceSnapshot",
    "Command",
    "CommandError",
    "DEFAULT_FEE",
    "ENTIRE_VERIFIED_BALANCE",
    "FixedAmount",
    "HTLCRedemptionRequest",
    "InsufficientFunds",
    "InvalidNumber",
    "InvalidShape",
    "MissingField",
    "NonLiteralAmount",
    "OutputSpec",
    "P2SHTransactionRequest",
    "ParseError",
    "ResolvedOutput",
    "ScanStatus",
    "TransactionRequest",
    "UnknownCommand",
    "WalletCore",
    "WalletCoreError",
    "decode_base58",
    "do_user_command",
    "encode_base58",
    "get_commands",
    "parse_redeem_p2sh_request",
    "parse_send_p2sh_request",
    "parse_send_request",
    "resolve_amount",
]
