"""JSON-RPC client for a light wallet daemon.

:class:`LightClientRPC` implements :class:`~zwallet_shell.wallet_core.WalletCore`
by forwarding every operation to a wallet daemon that owns the keys, the note
database and the connection to lightwalletd. Requests are already validated by
the command layer; this module only moves them over the wire and surfaces
failures as :class:`~zwallet_shell.errors.WalletCoreError` subclasses.
Binary request fields are sent hex encoded.
"""

from __future__ import annotations

import json
import logging
import uuid
from typing import Any, Optional, Sequence

import requests
from requests import RequestException, Response

from .config import ServerConfig, load_server_config
from .errors import WalletCoreError
from .wallet_core import OutputTuple, ScanStatus

logger = logging.getLogger(__name__)

# Parameters that must never reach the debug log.
_REDACTED_METHODS = {"encrypt", "decrypt", "unlock", "redeemp2sh", "import", "seed", "export"}


class RPCError(WalletCoreError):
    """Raised when the wallet daemon responds with an RPC error."""

    def __init__(self, code: int, message: str) -> None:
        super().__init__(message)
        self.code = code
        self.message = message


class RPCTransportError(WalletCoreError):
    """Raised when the wallet daemon is unreachable or returns malformed data."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


def _expect_int(value: Any, what: str) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, str)):
        raise RPCTransportError(f"Wallet daemon returned an unexpected response for {what}")
    try:
        return int(value)
    except ValueError as exc:
        raise RPCTransportError(f"Wallet daemon returned an unexpected response for {what}") from exc


def _outputs_param(outputs: Sequence[OutputTuple]) -> list[dict[str, Any]]:
    params = []
    for address, amount, memo in outputs:
        entry: dict[str, Any] = {"address": address, "amount": amount}
        if memo is not None:
            entry["memo"] = memo
        params.append(entry)
    return params


class LightClientRPC:
    """Typed JSON-RPC client for the light wallet daemon.

    Each helper maps to one daemon method and returns the parsed ``result``.
    """

    def __init__(self, config: ServerConfig) -> None:
        self.config = config
        self._session = requests.Session()

    @classmethod
    def from_env(cls) -> "LightClientRPC":
        """Instantiate a client using environment variables or config file."""

        return cls(load_server_config())

    def call(self, method: str, params: Optional[list[Any]] = None) -> Any:
        """Perform a JSON-RPC request."""

        payload = {
            "jsonrpc": "2.0",
            "id": str(uuid.uuid4()),
            "method": method,
            "params": params or [],
        }
        if method in _REDACTED_METHODS:
            logger.debug("RPC call %s params=<redacted>", method)
        else:
            logger.debug("RPC call %s params=%s", method, params)
        try:
            response = self._session.post(
                self.config.base_url,
                data=json.dumps(payload),
                headers={"content-type": "application/json"},
                auth=self.config.auth,
                timeout=self.config.timeout,
            )
        except RequestException as exc:
            logger.error(
                "RPC connection failed: %s",
                exc,
                exc_info=logger.isEnabledFor(logging.DEBUG),
            )
            raise RPCTransportError(
                "Couldn't reach the wallet daemon. Check that it is running and that "
                "ZWALLET_RPC_* variables (or ~/.zwallet-shell.yaml) point to the right host and port."
            ) from exc
        self._raise_for_status(response)
        try:
            result = response.json()
        except ValueError as exc:
            logger.debug("RPC JSON parse error: %s", response.text, exc_info=True)
            raise RPCTransportError("Wallet daemon returned malformed JSON") from exc
        if not isinstance(result, dict):
            raise RPCTransportError("Wallet daemon returned an unexpected response")
        if result.get("error"):
            error = result["error"]
            if isinstance(error, dict):
                raise RPCError(error.get("code", -1), error.get("message", "unknown"))
            raise RPCError(-1, str(error))
        return result.get("result")

    def _raise_for_status(self, response: Response) -> None:
        if response.ok:
            return
        # JSON-RPC errors arrive as HTTP 500 with a normal error body.
        if response.status_code == 500:
            return
        logger.error("RPC HTTP error %s from %s", response.status_code, response.url)
        if response.status_code == 401:
            raise RPCTransportError(
                "Unauthorized (401). Check ZWALLET_RPC_USER/ZWALLET_RPC_PASSWORD "
                "(or the rpc section of ~/.zwallet-shell.yaml).",
                status_code=response.status_code,
            )
        raise RPCTransportError(
            f"Wallet daemon returned HTTP {response.status_code}",
            status_code=response.status_code,
        )

    # Wallet core operations -------------------------------------------------

    def sync(self, rescan: bool) -> dict[str, Any]:
        return self.call("rescan" if rescan else "sync")

    def scan_status(self) -> ScanStatus:
        status = self.call("syncstatus") or {}
        if not isinstance(status, dict):
            raise RPCTransportError("Wallet daemon returned an unexpected response for syncstatus")
        return ScanStatus(
            is_syncing=status.get("syncing") in (True, "true"),
            synced_blocks=_expect_int(status.get("synced_blocks", 0), "synced_blocks"),
            total_blocks=_expect_int(status.get("total_blocks", 0), "total_blocks"),
        )

    def verified_balance(self, address: str | None = None) -> int:
        params = [address] if address is not None else []
        return _expect_int(self.call("verifiedbalance", params), "verifiedbalance")

    def send(self, from_address: str, outputs: Sequence[OutputTuple], fee: int) -> str:
        return self.call("send", [from_address, _outputs_param(outputs), fee])

    def send_p2sh(
        self, from_address: str, outputs: Sequence[OutputTuple], fee: int, script: bytes
    ) -> str:
        return self.call("sendp2sh", [from_address, _outputs_param(outputs), fee, script.hex()])

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
    ) -> str:
        return self.call(
            "redeemp2sh",
            [
                from_address,
                _outputs_param(outputs),
                fee,
                script.hex(),
                txid.hex(),
                lock_time,
                secret.hex(),
                privkey.hex(),
            ],
        )

    def info(self) -> Any:
        return self.call("info")

    def balance(self) -> dict[str, Any]:
        return self.call("balance")

    def addresses(self) -> dict[str, Any]:
        return self.call("addresses")

    def encryption_status(self) -> dict[str, Any]:
        return self.call("encryptionstatus")

    def last_scanned_height(self) -> int:
        return _expect_int(self.call("height"), "height")

    def clear_state(self) -> None:
        self.call("clear")

    def export(self, address: str | None = None) -> Any:
        return self.call("export", [address] if address is not None else [])

    def encrypt(self, password: str) -> None:
        self.call("encrypt", [password])

    def decrypt(self, password: str) -> None:
        self.call("decrypt", [password])

    def unlock(self, password: str) -> None:
        self.call("unlock", [password])

    def lock(self) -> None:
        self.call("lock")

    def import_key(self, key: str, birthday: int) -> Any:
        return self.call("import", [key, birthday])

    def save(self) -> None:
        self.call("save")

    def seed_phrase(self) -> dict[str, Any]:
        return self.call("seed")

    def list_transactions(self, include_memo_hex: bool) -> Any:
        return self.call("list", [include_memo_hex])

    def list_notes(self, include_spent: bool) -> Any:
        return self.call("notes", [include_spent])

    def new_address(self, kind: str) -> Any:
        return self.call("new", [kind])
