"""Validation pipelines for the transaction and key-import commands.

The parsers turn the raw shell arguments into the frozen request types of
:mod:`zwallet_shell.model`. They raise :class:`~zwallet_shell.errors.CommandError`
subclasses on the first problem found and never call into the wallet core
except through the ``balance_query`` callable, which is only consulted once
every other field of the request has been checked.
"""

from __future__ import annotations

import logging
from typing import Any, Sequence

from .amounts import BalanceQuery, BalanceSnapshot, resolve_amount
from .binary_fields import decode_base58
from .errors import InvalidNumber, InvalidShape, MissingField, NonLiteralAmount
from .model import (
    ENTIRE_BALANCE_KEYWORD,
    ENTIRE_VERIFIED_BALANCE,
    AmountSpec,
    FixedAmount,
    HTLCRedemptionRequest,
    ImportKeyRequest,
    OutputSpec,
    P2SHTransactionRequest,
    ResolvedOutput,
    TransactionRequest,
)
from .schema import (
    IMPORT_SCHEMA,
    REDEEM_P2SH_SCHEMA,
    SEND_P2SH_SCHEMA,
    SEND_SCHEMA,
    coerce_uint,
    parse_json_object,
)

logger = logging.getLogger(__name__)

NORESCAN_WORDS = {"norescan", "false", "no"}


def parse_amount(value: Any, index: int, *, allow_entire_balance: bool) -> AmountSpec:
    """Return the amount specification for output ``index``."""

    if allow_entire_balance:
        if value == ENTIRE_BALANCE_KEYWORD:
            return ENTIRE_VERIFIED_BALANCE
        return FixedAmount(coerce_uint(value, f"amount of output {index}"))
    try:
        return FixedAmount(coerce_uint(value, f"amount of output {index}"))
    except InvalidNumber as exc:
        raise NonLiteralAmount(index) from exc


def parse_outputs(raw_outputs: list[Any], *, allow_entire_balance: bool) -> list[OutputSpec]:
    """Check every entry of the ``output`` array, keeping the user's order."""

    if not raw_outputs:
        raise InvalidShape("output", "Error: 'output' must list at least one payment")

    specs: list[OutputSpec] = []
    for index, entry in enumerate(raw_outputs):
        if not isinstance(entry, dict):
            raise InvalidShape(f"output[{index}]", f"Error: output {index} must be a JSON object")
        if entry.get("address") is None or entry.get("amount") is None:
            raise MissingField(
                f"output[{index}]", f"Need 'address' and 'amount' in output {index}"
            )
        address = entry["address"]
        if not isinstance(address, str) or not address.strip():
            raise InvalidShape(
                f"output[{index}]", f"Error: address of output {index} must be a string"
            )
        memo = entry.get("memo")
        if memo is not None and not isinstance(memo, str):
            raise InvalidShape(f"output[{index}]", f"Error: memo of output {index} must be a string")
        amount = parse_amount(entry["amount"], index, allow_entire_balance=allow_entire_balance)
        specs.append(OutputSpec(address=address.strip(), amount=amount, memo=memo))
    return specs


def resolve_outputs(
    specs: Sequence[OutputSpec], fee: int, balance_query: BalanceQuery
) -> tuple[ResolvedOutput, ...]:
    """Resolve each output against one balance snapshot for the request."""

    snapshot = BalanceSnapshot(balance_query)
    return tuple(
        ResolvedOutput(spec.address, resolve_amount(spec.amount, fee, snapshot), spec.memo)
        for spec in specs
    )


def parse_send_request(raw: str, balance_query: BalanceQuery) -> TransactionRequest:
    """Validate the argument of ``send``."""

    values = SEND_SCHEMA.extract(parse_json_object(raw))
    specs = parse_outputs(values["output"], allow_entire_balance=True)
    outputs = resolve_outputs(specs, values["fee"], balance_query)
    return TransactionRequest(from_address=values["input"], fee=values["fee"], outputs=outputs)


def parse_send_p2sh_request(raw: str, balance_query: BalanceQuery) -> P2SHTransactionRequest:
    """Validate the argument of ``sendp2sh``."""

    values = SEND_P2SH_SCHEMA.extract(parse_json_object(raw))
    specs = parse_outputs(values["output"], allow_entire_balance=True)
    script = decode_base58(values["script"], "script")
    outputs = resolve_outputs(specs, values["fee"], balance_query)
    return P2SHTransactionRequest(
        from_address=values["input"],
        fee=values["fee"],
        outputs=outputs,
        script=script,
    )


def parse_redeem_p2sh_request(raw: str) -> HTLCRedemptionRequest:
    """Validate the argument of ``redeemp2sh``.

    Presence of every field and the ``locktime`` range are checked before any
    base58 field is decoded. Amounts must be literal integers, so the wallet
    balance is never consulted.
    """

    values = REDEEM_P2SH_SCHEMA.extract(parse_json_object(raw))
    specs = parse_outputs(values["output"], allow_entire_balance=False)
    decoded = {
        name: decode_base58(values[name], name) for name in ("script", "txid", "secret", "privkey")
    }
    outputs = tuple(
        ResolvedOutput(spec.address, spec.amount.value, spec.memo)
        for spec in specs
    )
    return HTLCRedemptionRequest(
        from_address=values["input"],
        fee=values["fee"],
        outputs=outputs,
        script=decoded["script"],
        txid=decoded["txid"],
        lock_time=values["locktime"],
        secret=decoded["secret"],
        privkey=decoded["privkey"],
    )


def parse_import_args(args: Sequence[str]) -> ImportKeyRequest:
    """Validate either import form: one JSON object or positional tokens."""

    if len(args) == 1:
        values = IMPORT_SCHEMA.extract(parse_json_object(args[0]))
        return ImportKeyRequest(
            key=values["key"], birthday=values["birthday"], rescan=not values["norescan"]
        )

    key, raw_birthday = args[0], args[1]
    try:
        birthday = coerce_uint(raw_birthday, "birthday")
    except InvalidNumber as exc:
        raise InvalidNumber(
            "birthday",
            f"Couldn't parse {raw_birthday} as birthday. Please specify an integer. Ok to use '0'",
        ) from exc

    rescan = True
    if len(args) == 3:
        if args[2] not in NORESCAN_WORDS:
            raise InvalidShape(
                "norescan",
                f"Couldn't understand the argument '{args[2]}'. "
                "Please pass 'norescan' to prevent rescanning the wallet",
            )
        rescan = False
    return ImportKeyRequest(key=key, birthday=birthday, rescan=rescan)
