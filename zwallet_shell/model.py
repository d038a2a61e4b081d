"""Request structures produced by the command parsers.

Every structure here is built fresh from user input for a single command
invocation, validated completely, and only then handed to the wallet core.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

# Zatoshis charged per transaction when the request omits ``fee``.
DEFAULT_FEE = 10_000

ENTIRE_BALANCE_KEYWORD = "entire-verified-zbalance"

# Largest value a 32-bit transaction lock time can hold.
MAX_LOCK_TIME = 0xFFFFFFFF


@dataclass(frozen=True)
class FixedAmount:
    """A literal number of zatoshis."""

    value: int


@dataclass(frozen=True)
class EntireVerifiedBalance:
    """Sentinel asking for the verified spendable balance minus the fee."""

    def __str__(self) -> str:
        return ENTIRE_BALANCE_KEYWORD


ENTIRE_VERIFIED_BALANCE = EntireVerifiedBalance()

AmountSpec = Union[FixedAmount, EntireVerifiedBalance]


@dataclass(frozen=True)
class OutputSpec:
    """One requested payment before its amount has been resolved."""

    address: str
    amount: AmountSpec
    memo: str | None = None


@dataclass(frozen=True)
class ResolvedOutput:
    """A payment with a concrete amount, in the order the user gave it."""

    address: str
    amount: int
    memo: str | None = None

    def as_tuple(self) -> tuple[str, int, str | None]:
        return self.address, self.amount, self.memo


@dataclass(frozen=True)
class TransactionRequest:
    """Validated ``send`` request."""

    from_address: str
    fee: int
    outputs: tuple[ResolvedOutput, ...]


@dataclass(frozen=True)
class P2SHTransactionRequest(TransactionRequest):
    """Validated ``sendp2sh`` request carrying the decoded redeem script."""

    script: bytes = b""


@dataclass(frozen=True)
class HTLCRedemptionRequest(TransactionRequest):
    """Validated ``redeemp2sh`` request.

    The binary fields are always populated by the parser; the defaults only
    exist so the dataclass can extend :class:`TransactionRequest`.
    """

    script: bytes = b""
    txid: bytes = b""
    lock_time: int = 0
    secret: bytes = b""
    privkey: bytes = b""

    def __repr__(self) -> str:
        return (
            f"HTLCRedemptionRequest(from_address={self.from_address!r}, fee={self.fee}, "
            f"outputs={self.outputs!r}, lock_time={self.lock_time}, secret=<redacted>, "
            "privkey=<redacted>)"
        )


@dataclass(frozen=True)
class ImportKeyRequest:
    """Validated ``import`` request."""

    key: str
    birthday: int
    rescan: bool = True
