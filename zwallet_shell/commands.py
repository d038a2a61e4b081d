"""Shell commands, the command registry and the dispatcher.

:func:`do_user_command` is the single entry point used by the interactive
shell and the one-shot CLI. The registry returned by :func:`get_commands` is
rebuilt on every call; commands hold no state, so building it is cheap.
"""

from __future__ import annotations

import logging
from abc import abstractmethod
from types import MappingProxyType
from typing import Callable, Mapping, Sequence

from .command import Command, error_report, pretty
from .errors import CommandError, UnknownCommand, WalletCoreError
from .model import DEFAULT_FEE, TransactionRequest
from .tx_requests import (
    parse_import_args,
    parse_redeem_p2sh_request,
    parse_send_p2sh_request,
    parse_send_request,
)
from .wallet_core import WalletCore

logger = logging.getLogger(__name__)

EXAMPLE_ADDRESS = "zs1x65nq4dgp0qfywgxcwk9n0fvm4fysmapgr2q00p85ju252h6l7mmxu2jg9cqqhtvzd69jwhgv8d"
FEE_NOTE = (
    f"NOTE: The fee required to send this transaction (currently {DEFAULT_FEE} zatoshis, "
    "unless 'fee' is given) is additionally deducted from your balance."
)
PASSWORD_NOTE = (
    "Note 2: If you forget the password, the only way to recover the wallet is to restore",
    "        from the seed phrase.",
)


class SyncCommand(Command):
    name = "sync"
    summary = "Download CompactBlocks and sync to the server"
    description = ("Sync the light client with the server",)
    usage = ("sync",)

    def execute(self, args: Sequence[str], core: WalletCore) -> str:
        return self.call_core(lambda: core.sync(False))


class RescanCommand(Command):
    name = "rescan"
    summary = "Rescan the wallet, downloading and scanning all blocks and transactions"
    description = ("Rescan the wallet, rescanning all blocks for new transactions",)
    usage = ("rescan",)
    notes = (
        "This command will download all blocks since the initial block again from the light client server",
        "and attempt to scan each block for transactions belonging to the wallet.",
    )

    def execute(self, args: Sequence[str], core: WalletCore) -> str:
        return self.call_core(lambda: core.sync(True))


class SyncStatusCommand(Command):
    name = "syncstatus"
    summary = "Get the sync status of the wallet"
    description = ("Get the sync status of the wallet",)
    usage = ("syncstatus",)

    def execute(self, args: Sequence[str], core: WalletCore) -> str:
        try:
            status = core.scan_status()
        except WalletCoreError as exc:
            return error_report(exc)
        if not status.is_syncing:
            return pretty({"syncing": "false"})
        return pretty(
            {
                "syncing": "true",
                "synced_blocks": status.synced_blocks,
                "total_blocks": status.total_blocks,
            }
        )


class EncryptionStatusCommand(Command):
    name = "encryptionstatus"
    summary = "Check if the wallet is encrypted and if it is locked"
    description = ("Check if the wallet is encrypted and if it is locked",)
    usage = ("encryptionstatus",)

    def execute(self, args: Sequence[str], core: WalletCore) -> str:
        return self.call_core(core.encryption_status)


class ClearCommand(Command):
    name = "clear"
    summary = "Clear the wallet state, rolling back the wallet to an empty state."
    description = ("Clear the wallet state, rolling back the wallet to an empty state.",)
    usage = ("clear",)
    notes = (
        "This command will clear all notes, utxos and transactions from the wallet, "
        "setting up the wallet to be synced from scratch.",
    )

    def execute(self, args: Sequence[str], core: WalletCore) -> str:
        return self.call_core_for_status(core.clear_state)


class HelpCommand(Command):
    name = "help"
    summary = "Lists all available commands"
    description = ("List all available commands",)
    usage = ("help [command_name]",)
    notes = (
        'If no "command_name" is specified, a list of all available commands is returned',
    )
    example = ("help send", "")

    def execute(self, args: Sequence[str], core: WalletCore) -> str:
        commands = get_commands()
        if not args:
            lines = ["Available commands:"]
            lines.extend(f"{name} - {commands[name].short_help()}" for name in sorted(commands))
            return "\n".join(lines)
        if len(args) == 1:
            command = commands.get(args[0].lower())
            if command is None:
                return f"Command {args[0]} not found"
            return command.help()
        return self.help()


class InfoCommand(Command):
    name = "info"
    summary = "Get the lightwalletd server's info"
    description = ("Get info about the lightwalletd we're connected to",)
    usage = ("info",)

    def execute(self, args: Sequence[str], core: WalletCore) -> str:
        return self.call_core(core.info)


class BalanceCommand(Command):
    name = "balance"
    summary = "Show the current ARRR balance in the wallet"
    description = ("Show the current ARRR balance in the wallet",)
    usage = ("balance",)
    notes = ("Shielded balances, along with the addresses they belong to are displayed",)

    def execute(self, args: Sequence[str], core: WalletCore) -> str:
        return self.call_core(core.balance)


class AddressesCommand(Command):
    name = "addresses"
    summary = "List all addresses in the wallet"
    description = ("List current addresses in the wallet",)
    usage = ("addresses",)

    def execute(self, args: Sequence[str], core: WalletCore) -> str:
        return self.call_core(core.addresses)


class ExportCommand(Command):
    name = "export"
    summary = "Export private key for wallet addresses"
    description = (
        "Export private key for an individual wallet addresses.",
        "Note: To backup the whole wallet, use the 'seed' command instead",
    )
    usage = ("export [z-address]",)
    notes = (
        "If no address is passed, private key for all addresses in the wallet are exported.",
        "",
    )
    example = (f"export {EXAMPLE_ADDRESS}",)

    def execute(self, args: Sequence[str], core: WalletCore) -> str:
        if len(args) > 1:
            return self.help()
        address = args[0] if args else None
        return self.call_core(lambda: core.export(address))


class EncryptCommand(Command):
    name = "encrypt"
    summary = "Encrypt the wallet with a password"
    description = (
        "Encrypt the wallet with a password",
        "Note 1: This will encrypt the seed and the private keys.",
        "        Use 'unlock' to temporarily unlock the wallet for spending or 'decrypt' ",
        "        to permanently remove the encryption",
        *PASSWORD_NOTE,
    )
    usage = ("encrypt password",)
    example = ("encrypt my_strong_password",)

    def execute(self, args: Sequence[str], core: WalletCore) -> str:
        if len(args) != 1:
            return self.help()
        password = args[0]
        return self.call_core_for_status(lambda: core.encrypt(password))


class DecryptCommand(Command):
    name = "decrypt"
    summary = "Completely remove wallet encryption"
    description = (
        "Completely remove wallet encryption, storing the wallet in plaintext on disk",
        "Note 1: This will decrypt the seed and the private keys and store them on disk.",
        "        Use 'unlock' to temporarily unlock the wallet for spending",
        *PASSWORD_NOTE,
    )
    usage = ("decrypt password",)
    example = ("decrypt my_strong_password",)

    def execute(self, args: Sequence[str], core: WalletCore) -> str:
        if len(args) != 1:
            return self.help()
        password = args[0]
        return self.call_core_for_status(lambda: core.decrypt(password))


class UnlockCommand(Command):
    name = "unlock"
    summary = "Unlock wallet encryption for spending"
    description = (
        "Unlock the wallet's encryption in memory, allowing spending from this wallet.",
        "Note 1: This will decrypt spending keys in memory only. The wallet remains encrypted on disk",
        "        Use 'decrypt' to remove the encryption permanently.",
        *PASSWORD_NOTE,
    )
    usage = ("unlock password",)
    example = ("unlock my_strong_password",)

    def execute(self, args: Sequence[str], core: WalletCore) -> str:
        if len(args) != 1:
            return self.help()
        password = args[0]
        return self.call_core_for_status(lambda: core.unlock(password))


class LockCommand(Command):
    name = "lock"
    summary = "Lock a wallet that's been temporarily unlocked"
    description = (
        "Lock a wallet that's been temporarily unlocked. You should already have encryption enabled.",
        "Note 1: This will remove all spending keys from memory. The wallet remains encrypted on disk",
        *PASSWORD_NOTE,
    )
    usage = ("lock",)
    example = ("lock",)

    def execute(self, args: Sequence[str], core: WalletCore) -> str:
        if args:
            return self.usage_error("Extra arguments to lock. Did you mean 'encrypt'?\n")
        return self.call_core_for_status(core.lock)


class TransactionCommand(Command):
    """Shared tail of the send, sendp2sh and redeemp2sh commands.

    Once a request has been fully validated the wallet is synced and the
    request is handed to the wallet core. A failed sync aborts the command.
    """

    @abstractmethod
    def parse(self, raw: str, core: WalletCore) -> TransactionRequest:
        """Validate the single structured argument into a request."""

    @abstractmethod
    def submit(self, request: TransactionRequest, core: WalletCore) -> str:
        """Hand a validated request to the wallet core and return the txid."""

    def execute(self, args: Sequence[str], core: WalletCore) -> str:
        if len(args) != 1:
            return self.help()

        try:
            request = self.parse(args[0], core)
        except CommandError as exc:
            logger.debug("%s: rejected request: %s", self.name, exc)
            return self.usage_error(str(exc))
        except WalletCoreError as exc:
            return error_report(exc)

        try:
            core.sync(False)
        except WalletCoreError as exc:
            logger.warning("%s: sync before send failed: %s", self.name, exc)
            return error_report(exc)

        logger.info(
            "%s: submitting %d output(s) from %s with fee %d",
            self.name,
            len(request.outputs),
            request.from_address,
            request.fee,
        )
        try:
            txid = self.submit(request, core)
        except WalletCoreError as exc:
            return error_report(exc)
        return pretty({"txid": txid})


class SendCommand(TransactionCommand):
    name = "send"
    summary = "Send ARRR to the given address"
    description = ("Send ARRR to a given address(es)",)
    usage = (
        "send '{'input': <address>, 'output': [{'address': <address>, 'amount': <amount in zatoshis>, "
        "'memo': <optional memo>}, ...], 'fee': <optional fee in zatoshis>}'",
    )
    notes = (
        FEE_NOTE,
        "Use 'entire-verified-zbalance' as the amount to send the whole verified balance minus the fee.",
    )
    example = (
        f"send '{{\"input\":\"{EXAMPLE_ADDRESS}\", \"output\": [{{ \"address\": \"{EXAMPLE_ADDRESS}\", "
        "\"amount\": 200000, \"memo\": \"Hello from the command line\"}]}'",
        "",
    )

    def parse(self, raw: str, core: WalletCore) -> TransactionRequest:
        return parse_send_request(raw, core.verified_balance)

    def submit(self, request: TransactionRequest, core: WalletCore) -> str:
        outputs = [output.as_tuple() for output in request.outputs]
        return core.send(request.from_address, outputs, request.fee)


class SendP2SHCommand(TransactionCommand):
    name = "sendp2sh"
    summary = "Send ARRR to the given P2SH address, including supplied redeem script"
    description = ("Send ARRR to a given P2SH address(es)",)
    usage = (
        "sendp2sh '{'input': <address>, 'output': [{'address': <address>, 'amount': <amount in zatoshis>, "
        "'memo': <optional memo>}, ...], 'script': <base58 redeem script>, 'fee': <optional fee>}'",
    )
    notes = (FEE_NOTE,)
    example = (
        f"sendp2sh '{{\"input\":\"{EXAMPLE_ADDRESS}\", \"output\": [{{ \"address\": "
        "\"bPoc1HGCSJzDRGbeqsSjwU3Bkd1fPdo7m5\", \"amount\": 200000}], \"script\": \"3yZe7d\"}'",
        "",
    )

    def parse(self, raw: str, core: WalletCore) -> TransactionRequest:
        return parse_send_p2sh_request(raw, core.verified_balance)

    def submit(self, request: TransactionRequest, core: WalletCore) -> str:
        outputs = [output.as_tuple() for output in request.outputs]
        return core.send_p2sh(request.from_address, outputs, request.fee, request.script)


class RedeemP2SHCommand(TransactionCommand):
    name = "redeemp2sh"
    summary = "Redeem ARRR from a P2SH address, using redeem script, secret, and private key"
    description = ("Redeem ARRR from an HTLC",)
    usage = (
        "redeemp2sh '{'input': <P2SH address>, 'output': [{'address': <address>, 'amount': <amount in zatoshis>, "
        "'memo': <optional memo>}, ...], 'script': <redeem script>, 'txid': <funding txid>, "
        "'locktime': <lock time>, 'secret': <secret>, 'privkey': <private key>, 'fee': <optional fee>}'",
    )
    notes = (
        "script, txid, secret and privkey are base58 encoded; amounts must be literal zatoshi values.",
        FEE_NOTE,
    )
    example = (
        f"redeemp2sh '{{\"input\":\"bPoc1HGCSJzDRGbeqsSjwU3Bkd1fPdo7m5\", \"output\": [{{ \"address\": "
        f"\"{EXAMPLE_ADDRESS}\", \"amount\": 200000}}], \"script\": \"3yZe7d\", \"txid\": \"3yZe7d\", "
        "\"locktime\": 1652873471, \"secret\": \"3yZe7d\", \"privkey\": \"3yZe7d\"}'",
        "",
    )

    def parse(self, raw: str, core: WalletCore) -> TransactionRequest:
        return parse_redeem_p2sh_request(raw)

    def submit(self, request: TransactionRequest, core: WalletCore) -> str:
        outputs = [output.as_tuple() for output in request.outputs]
        return core.redeem_p2sh(
            request.from_address,
            outputs,
            request.fee,
            request.script,
            request.txid,
            request.lock_time,
            request.secret,
            request.privkey,
        )


class SaveCommand(Command):
    name = "save"
    summary = "Save wallet file to disk"
    description = ("Save the wallet to disk",)
    usage = ("save",)
    notes = (
        "The wallet is saved to disk. The wallet is periodically saved to disk (and also saved upon exit)",
        "but you can use this command to explicitly save it to disk",
    )

    def execute(self, args: Sequence[str], core: WalletCore) -> str:
        return self.call_core_for_status(core.save)


class SeedCommand(Command):
    name = "seed"
    summary = "Display the seed phrase"
    description = ("Show the wallet's seed phrase",)
    usage = ("seed",)
    notes = (
        "Your wallet is entirely recoverable from the seed phrase. "
        "Please save it carefully and don't share it with anyone",
    )

    def execute(self, args: Sequence[str], core: WalletCore) -> str:
        return self.call_core(core.seed_phrase)


class TransactionsCommand(Command):
    name = "list"
    summary = "List all transactions in the wallet"
    description = ("List all incoming and outgoing transactions from this wallet",)
    usage = ("list [allmemos]",)
    notes = ("If you include the 'allmemos' argument, all memos are returned in their raw hex format",)

    def execute(self, args: Sequence[str], core: WalletCore) -> str:
        if len(args) > 1:
            return self.usage_error("Didn't understand arguments")
        include_memo_hex = False
        if args:
            if args[0] not in {"allmemos", "true", "yes"}:
                return self.usage_error(f"Couldn't understand first argument '{args[0]}'")
            include_memo_hex = True
        return self.call_core(lambda: core.list_transactions(include_memo_hex))


class ImportCommand(Command):
    name = "import"
    summary = "Import spending or viewing keys into the wallet"
    description = ("Import an external spending or viewing key into the wallet",)
    usage = (
        "import <spending_key | viewing_key> <birthday> [norescan]",
        "OR",
        "import '{'key': <spending_key or viewing_key>, 'birthday': <birthday>, 'norescan': <true>}'",
    )
    notes = (
        "Birthday is the earliest block number that has transactions belonging to the imported key. "
        "Rescanning will start from this block. If not sure, you can specify '0', which will start "
        "rescanning from the first sapling block.",
        "Note that you can import only the full spending (private) key or the full viewing key.",
    )

    def execute(self, args: Sequence[str], core: WalletCore) -> str:
        if not args or len(args) > 3:
            return f"Insufficient arguments\n\n{self.help()}"

        try:
            request = parse_import_args(args)
        except CommandError as exc:
            return self.usage_error(str(exc))

        try:
            imported = core.import_key(request.key, request.birthday)
        except WalletCoreError as exc:
            return f"Error: {exc}"
        report = imported if isinstance(imported, str) else pretty(imported)

        if request.rescan:
            try:
                core.sync(True)
            except WalletCoreError as exc:
                return f"Error: Rescan failed: {exc}"
        return report


class HeightCommand(Command):
    name = "height"
    summary = "Get the latest block height that the wallet is at"
    description = ("Get the latest block height that the wallet is at.",)
    usage = ("height",)

    def execute(self, args: Sequence[str], core: WalletCore) -> str:
        return self.call_core(lambda: {"height": core.last_scanned_height()})


class NewAddressCommand(Command):
    name = "new"
    summary = "Create a new address in this wallet"
    description = ("Create a new address in this wallet",)
    usage = ("new [z | t]",)
    example = ("To create a new z address:", "new z")

    def execute(self, args: Sequence[str], core: WalletCore) -> str:
        if len(args) != 1:
            return self.usage_error("No address type specified")
        kind = args[0].lower()
        if kind not in {"z", "t"}:
            return self.usage_error(f"Unknown address type '{args[0]}'. Specify 'z' or 't'")
        return self.call_core(lambda: core.new_address(kind))


class NotesCommand(Command):
    name = "notes"
    summary = "List all sapling notes and utxos in the wallet"
    description = ("Show all sapling notes and utxos in this wallet",)
    usage = ("notes [all]",)
    notes = (
        'If you supply the "all" parameter, all previously spent sapling notes and spent utxos are also included',
    )

    def execute(self, args: Sequence[str], core: WalletCore) -> str:
        if len(args) > 1:
            return self.help()
        include_spent = False
        if args:
            if args[0] != "all":
                return f"Invalid argument \"{args[0]}\". Specify 'all' to include spent notes"
            include_spent = True
        return self.call_core(lambda: core.list_notes(include_spent))


class QuitCommand(Command):
    name = "quit"
    summary = "Quit the lightwallet, saving state to disk"
    description = ("Save the wallet to disk and quit",)
    usage = ("quit",)

    def execute(self, args: Sequence[str], core: WalletCore) -> str:
        try:
            core.save()
        except WalletCoreError as exc:
            return str(exc)
        return ""


COMMAND_TYPES: tuple[Callable[[], Command], ...] = (
    SyncCommand,
    SyncStatusCommand,
    EncryptionStatusCommand,
    RescanCommand,
    ClearCommand,
    HelpCommand,
    BalanceCommand,
    AddressesCommand,
    HeightCommand,
    ImportCommand,
    ExportCommand,
    InfoCommand,
    SendCommand,
    SendP2SHCommand,
    RedeemP2SHCommand,
    SaveCommand,
    QuitCommand,
    TransactionsCommand,
    NotesCommand,
    NewAddressCommand,
    SeedCommand,
    EncryptCommand,
    DecryptCommand,
    UnlockCommand,
    LockCommand,
)


def get_commands() -> Mapping[str, Command]:
    """Build the read-only mapping of command name to command."""

    commands: dict[str, Command] = {}
    for factory in COMMAND_TYPES:
        command = factory()
        key = command.name.lower()
        if key in commands:
            raise ValueError(f"Command '{key}' registered twice")
        commands[key] = command
    return MappingProxyType(commands)


def do_user_command(cmd: str, args: Sequence[str], core: WalletCore) -> str:
    """Look up ``cmd`` case-insensitively and run it with ``args``."""

    command = get_commands().get(cmd.lower())
    if command is None:
        logger.debug("Unknown command %r", cmd)
        return str(UnknownCommand(cmd))
    logger.debug("Dispatching %s with %d argument(s)", command.name, len(args))
    return command.execute(list(args), core)
