import pytest

from zwallet_shell.amounts import BalanceSnapshot, resolve_amount
from zwallet_shell.errors import InsufficientFunds
from zwallet_shell.model import DEFAULT_FEE, ENTIRE_VERIFIED_BALANCE, FixedAmount


def _never_called() -> int:
    raise AssertionError("balance must not be queried for fixed amounts")


def test_fixed_amount_is_returned_unchanged() -> None:
    assert resolve_amount(FixedAmount(1000), DEFAULT_FEE, _never_called) == 1000


def test_fixed_amount_is_not_checked_against_balance() -> None:
    assert resolve_amount(FixedAmount(10**12), DEFAULT_FEE, lambda: 0) == 10**12


def test_entire_balance_subtracts_fee() -> None:
    assert resolve_amount(ENTIRE_VERIFIED_BALANCE, 1000, lambda: 5000) == 4000


def test_entire_balance_equal_to_fee_resolves_to_zero() -> None:
    assert resolve_amount(ENTIRE_VERIFIED_BALANCE, 5000, lambda: 5000) == 0


def test_entire_balance_below_fee_is_insufficient() -> None:
    with pytest.raises(InsufficientFunds) as excinfo:
        resolve_amount(ENTIRE_VERIFIED_BALANCE, DEFAULT_FEE, lambda: 5000)

    assert "Not enough in wallet to pay transaction fee" in str(excinfo.value)


def test_balance_snapshot_queries_once() -> None:
    calls = []

    def query() -> int:
        calls.append(1)
        return 50_000

    snapshot = BalanceSnapshot(query)
    first = resolve_amount(ENTIRE_VERIFIED_BALANCE, DEFAULT_FEE, snapshot)
    second = resolve_amount(ENTIRE_VERIFIED_BALANCE, DEFAULT_FEE, snapshot)

    assert first == second == 40_000
    assert len(calls) == 1
