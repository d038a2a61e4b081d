"""Resolution of per-output amount specifications."""

from __future__ import annotations

import logging
from typing import Callable

from .errors import InsufficientFunds
from .model import AmountSpec, EntireVerifiedBalance, FixedAmount

logger = logging.getLogger(__name__)

BalanceQuery = Callable[[], int]


class BalanceSnapshot:
    """Lazily query the verified balance once and reuse it for a whole request.

    A request with several outputs resolves each of them against the same
    figure, so the wallet core is asked at most once per request and never
    between two outputs of the same request.
    """

    def __init__(self, query: BalanceQuery) -> None:
        self._query = query
        self._value: int | None = None

    def __call__(self) -> int:
        if self._value is None:
            self._value = int(self._query())
            logger.debug("Verified spendable balance snapshot: %s", self._value)
        return self._value


def resolve_amount(spec: AmountSpec, fee: int, balance_query: BalanceQuery) -> int:
    """Return the concrete zatoshi amount for ``spec``.

    Fixed amounts are returned unchanged; the wallet core reports
    insufficient funds for those when it builds the transaction. The entire
    balance sentinel resolves to ``balance - fee`` and raises
    :class:`InsufficientFunds` when the balance cannot cover the fee.
    """

    if isinstance(spec, FixedAmount):
        return spec.value
    if isinstance(spec, EntireVerifiedBalance):
        balance = balance_query()
        if balance < fee:
            logger.debug("Balance %s does not cover fee %s", balance, fee)
            raise InsufficientFunds()
        return balance - fee
    raise TypeError(f"Unsupported amount specification: {spec!r}")
