"""Interface of the wallet core the shell commands delegate to.

The wallet core owns syncing, note scanning, keys, persistence and
transaction construction. Implementations raise
:class:`~zwallet_shell.errors.WalletCoreError` when an operation fails; the
commands turn those into ``{"error": ...}`` reports.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional, Protocol, Sequence

from .errors import WalletCoreError

OutputTuple = tuple[str, int, Optional[str]]

__all__ = ["OutputTuple", "ScanStatus", "WalletCore", "WalletCoreError"]


@dataclass(frozen=True)
class ScanStatus:
    is_syncing: bool
    synced_blocks: int = 0
    total_blocks: int = 0


class WalletCore(Protocol):
    def sync(self, rescan: bool) -> dict[str, Any]: ...

    def scan_status(self) -> ScanStatus: ...

    def verified_balance(self, address: str | None = None) -> int: ...

    def send(self, from_address: str, outputs: Sequence[OutputTuple], fee: int) -> str: ...

    def send_p2sh(
        self, from_address: str, outputs: Sequence[OutputTuple], fee: int, script: bytes
    ) -> str: ...

    def redeem_p2sh(
        self,
        from_address: str,
        outputs: Sequence[OutputTuple],
        fee: int,
        script: bytes,
        txid: bytes,
        lock_time: int,
        secret: bytes,
        privkey: bytes,
    ) -> str: ...

    def info(self) -> Any: ...

    def balance(self) -> dict[str, Any]: ...

    def addresses(self) -> dict[str, Any]: ...

    def encryption_status(self) -> dict[str, Any]: ...

    def last_scanned_height(self) -> int: ...

    def clear_state(self) -> None: ...

    def export(self, address: str | None = None) -> Any: ...

    def encrypt(self, password: str) -> None: ...

    def decrypt(self, password: str) -> None: ...

    def unlock(self, password: str) -> None: ...

    def lock(self) -> None: ...

    def import_key(self, key: str, birthday: int) -> Any: ...

    def save(self) -> None: ...

    def seed_phrase(self) -> dict[str, Any]: ...

    def list_transactions(self, include_memo_hex: bool) -> Any: ...

    def list_notes(self, include_spent: bool) -> Any: ...

    def new_address(self, kind: str) -> Any: ...
