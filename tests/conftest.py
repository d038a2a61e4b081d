from __future__ import annotations

from typing import Any

import pytest

from zwallet_shell.errors import WalletCoreError
from zwallet_shell.wallet_core import ScanStatus


class StubCore:
    """In-memory wallet core that records every call it receives."""

    def __init__(
        self,
        balance: int = 5_000_000,
        fail: set[str] | None = None,
        syncing: bool = False,
    ) -> None:
        self.balance_value = balance
        self.fail = fail or set()
        self.syncing = syncing
        self.calls: list[tuple[str, tuple[Any, ...]]] = []

    def _record(self, name: str, *args: Any) -> None:
        self.calls.append((name, args))
        if name in self.fail:
            raise WalletCoreError(f"{name} failed")

    def called(self, name: str) -> list[tuple[Any, ...]]:
        return [args for call, args in self.calls if call == name]

    def sync(self, rescan: bool) -> dict[str, Any]:
        self._record("sync", rescan)
        return {"result": "success", "latest_block": 1_500_000}

    def scan_status(self) -> ScanStatus:
        self._record("scan_status")
        if self.syncing:
            return ScanStatus(is_syncing=True, synced_blocks=10, total_blocks=40)
        return ScanStatus(is_syncing=False)

    def verified_balance(self, address: str | None = None) -> int:
        self._record("verified_balance", address)
        return self.balance_value

    def send(self, from_address, outputs, fee) -> str:
        self._record("send", from_address, list(outputs), fee)
        return "txid-send"

    def send_p2sh(self, from_address, outputs, fee, script) -> str:
        self._record("send_p2sh", from_address, list(outputs), fee, script)
        return "txid-p2sh"

    def redeem_p2sh(self, from_address, outputs, fee, script, txid, lock_time, secret, privkey) -> str:
        self._record(
            "redeem_p2sh", from_address, list(outputs), fee, script, txid, lock_time, secret, privkey
        )
        return "txid-redeem"

    def info(self) -> Any:
        self._record("info")
        return {"chain_name": "main", "latest_block_height": 1_500_000}

    def balance(self) -> dict[str, Any]:
        self._record("balance")
        return {"zbalance": self.balance_value, "verified_zbalance": self.balance_value}

    def addresses(self) -> dict[str, Any]:
        self._record("addresses")
        return {"z_addresses": ["zs1first"], "t_addresses": ["R9first"]}

    def encryption_status(self) -> dict[str, Any]:
        self._record("encryption_status")
        return {"encrypted": False, "locked": False}

    def last_scanned_height(self) -> int:
        self._record("last_scanned_height")
        return 1_500_000

    def clear_state(self) -> None:
        self._record("clear_state")

    def export(self, address: str | None = None) -> Any:
        self._record("export", address)
        return [{"address": address or "zs1first", "private_key": "secret-extended-key"}]

    def encrypt(self, password: str) -> None:
        self._record("encrypt", password)

    def decrypt(self, password: str) -> None:
        self._record("decrypt", password)

    def unlock(self, password: str) -> None:
        self._record("unlock", password)

    def lock(self) -> None:
        self._record("lock")

    def import_key(self, key: str, birthday: int) -> Any:
        self._record("import_key", key, birthday)
        return ["zs1imported"]

    def save(self) -> None:
        self._record("save")

    def seed_phrase(self) -> dict[str, Any]:
        self._record("seed_phrase")
        return {"seed": "youth strong sweet gorilla", "birthday": 0}

    def list_transactions(self, include_memo_hex: bool) -> Any:
        self._record("list_transactions", include_memo_hex)
        return []

    def list_notes(self, include_spent: bool) -> Any:
        self._record("list_notes", include_spent)
        return {"unspent_notes": [], "spent_notes": [] if include_spent else None}

    def new_address(self, kind: str) -> Any:
        self._record("new_address", kind)
        return [f"{kind}-new-address"]


@pytest.fixture
def core() -> StubCore:
    return StubCore()
