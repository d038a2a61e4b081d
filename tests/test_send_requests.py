import json

import pytest

from zwallet_shell.errors import (
    BadEncoding,
    InsufficientFunds,
    InvalidNumber,
    InvalidShape,
    MissingField,
    ParseError,
)
from zwallet_shell.model import DEFAULT_FEE, P2SHTransactionRequest, ResolvedOutput
from zwallet_shell.schema import REDEEM_P2SH_SCHEMA, SEND_P2SH_SCHEMA, SEND_SCHEMA
from zwallet_shell.tx_requests import parse_send_p2sh_request, parse_send_request

FROM = "zs1sourceaddress"
TO = "zs1destinationaddress"


def _no_balance() -> int:
    raise AssertionError("balance must not be queried")


def _send(payload: dict, balance=_no_balance):
    return parse_send_request(json.dumps(payload), balance)


def test_field_tables_declare_mandatory_keys() -> None:
    assert SEND_SCHEMA.required_fields == ("input", "output")
    assert SEND_SCHEMA.optional_fields == ("fee",)
    assert SEND_P2SH_SCHEMA.required_fields == ("input", "output", "script")
    assert REDEEM_P2SH_SCHEMA.required_fields == (
        "input",
        "output",
        "script",
        "txid",
        "locktime",
        "secret",
        "privkey",
    )


def test_fee_defaults_and_fixed_amount_is_kept() -> None:
    request = _send({"input": FROM, "output": [{"address": TO, "amount": 1000}]})

    assert request.fee == DEFAULT_FEE
    assert request.from_address == FROM
    assert request.outputs == (ResolvedOutput(TO, 1000, None),)


def test_explicit_fee_and_memo_are_kept_in_order() -> None:
    request = _send(
        {
            "input": FROM,
            "fee": 2000,
            "output": [
                {"address": TO, "amount": 10, "memo": "first"},
                {"address": "zs1second", "amount": 20},
            ],
        }
    )

    assert request.fee == 2000
    assert [output.address for output in request.outputs] == [TO, "zs1second"]
    assert request.outputs[0].memo == "first"


def test_entire_balance_resolves_against_balance_minus_fee() -> None:
    request = _send(
        {"input": FROM, "output": [{"address": TO, "amount": "entire-verified-zbalance"}]},
        balance=lambda: 50_000,
    )

    assert request.outputs[0].amount == 50_000 - DEFAULT_FEE


def test_entire_balance_uses_explicit_fee() -> None:
    request = _send(
        {"input": FROM, "fee": 1000, "output": [{"address": TO, "amount": "entire-verified-zbalance"}]},
        balance=lambda: 5000,
    )

    assert request.outputs[0].amount == 4000


def test_entire_balance_below_fee_fails_whole_request() -> None:
    with pytest.raises(InsufficientFunds):
        _send(
            {
                "input": FROM,
                "output": [
                    {"address": TO, "amount": 100},
                    {"address": TO, "amount": "entire-verified-zbalance"},
                ],
            },
            balance=lambda: 5000,
        )


def test_balance_is_queried_once_per_request() -> None:
    calls = []

    def balance() -> int:
        calls.append(1)
        return 100_000

    request = _send(
        {
            "input": FROM,
            "output": [
                {"address": TO, "amount": "entire-verified-zbalance"},
                {"address": "zs1second", "amount": "entire-verified-zbalance"},
            ],
        },
        balance=balance,
    )

    assert [output.amount for output in request.outputs] == [90_000, 90_000]
    assert len(calls) == 1


def test_malformed_json_is_a_parse_error() -> None:
    with pytest.raises(ParseError) as excinfo:
        parse_send_request("{input: nope", _no_balance)

    assert str(excinfo.value).startswith("Couldn't understand JSON:")


def test_non_object_argument_is_rejected() -> None:
    with pytest.raises(InvalidShape):
        parse_send_request("[1, 2, 3]", _no_balance)


def test_missing_input() -> None:
    with pytest.raises(MissingField) as excinfo:
        _send({"output": [{"address": TO, "amount": 1}]})

    assert excinfo.value.field == "input"


def test_missing_output() -> None:
    with pytest.raises(MissingField) as excinfo:
        _send({"input": FROM})

    assert excinfo.value.field == "output"


def test_output_must_be_an_array() -> None:
    with pytest.raises(InvalidShape) as excinfo:
        _send({"input": FROM, "output": {"address": TO, "amount": 1}})

    assert "Couldn't parse argument as array" in str(excinfo.value)


def test_output_must_not_be_empty() -> None:
    with pytest.raises(InvalidShape):
        _send({"input": FROM, "output": []})


@pytest.mark.parametrize("entry", [{"address": TO}, {"amount": 1}, {"memo": "x"}])
def test_output_needs_address_and_amount(entry) -> None:
    with pytest.raises(MissingField) as excinfo:
        _send({"input": FROM, "output": [{"address": TO, "amount": 5}, entry]})

    assert excinfo.value.field == "output[1]"
    assert "Need 'address' and 'amount'" in str(excinfo.value)


@pytest.mark.parametrize("amount", [-1, 1.5, "lots", True, "entire-balance"])
def test_amount_must_be_a_non_negative_integer(amount) -> None:
    with pytest.raises(InvalidNumber):
        _send({"input": FROM, "output": [{"address": TO, "amount": amount}]})


def test_numeric_string_amount_is_accepted() -> None:
    request = _send({"input": FROM, "output": [{"address": TO, "amount": "1500"}]})
    assert request.outputs[0].amount == 1500


def test_invalid_fee_is_rejected() -> None:
    with pytest.raises(InvalidNumber) as excinfo:
        _send({"input": FROM, "fee": "cheap", "output": [{"address": TO, "amount": 1}]})

    assert excinfo.value.field == "fee"


def test_memo_must_be_a_string() -> None:
    with pytest.raises(InvalidShape):
        _send({"input": FROM, "output": [{"address": TO, "amount": 1, "memo": 42}]})


def test_p2sh_request_decodes_script() -> None:
    request = parse_send_p2sh_request(
        json.dumps({"input": FROM, "script": "StV1DL6CwTryKyV", "output": [{"address": TO, "amount": 7}]}),
        _no_balance,
    )

    assert isinstance(request, P2SHTransactionRequest)
    assert request.script == b"hello world"
    assert request.outputs == (ResolvedOutput(TO, 7, None),)


def test_p2sh_request_requires_script() -> None:
    with pytest.raises(MissingField) as excinfo:
        parse_send_p2sh_request(
            json.dumps({"input": FROM, "output": [{"address": TO, "amount": 7}]}), _no_balance
        )

    assert excinfo.value.field == "script"
    assert "script" in str(excinfo.value)


def test_p2sh_bad_script_fails_before_balance_query() -> None:
    with pytest.raises(BadEncoding):
        parse_send_p2sh_request(
            json.dumps(
                {
                    "input": FROM,
                    "script": "0OIl",
                    "output": [{"address": TO, "amount": "entire-verified-zbalance"}],
                }
            ),
            _no_balance,
        )


@pytest.mark.parametrize("digits", ["²", "١٢٣", "５"])
def test_non_ascii_digit_amount_is_invalid_number(digits) -> None:
    with pytest.raises(InvalidNumber):
        _send({"input": FROM, "output": [{"address": TO, "amount": digits}]})


@pytest.mark.parametrize("digits", ["²", "١٢٣", "５"])
def test_non_ascii_digit_fee_is_invalid_number(digits) -> None:
    with pytest.raises(InvalidNumber) as excinfo:
        _send({"input": FROM, "fee": digits, "output": [{"address": TO, "amount": 1}]})

    assert excinfo.value.field == "fee"


def test_deeply_nested_argument_is_a_parse_error() -> None:
    depth = 100_000

    with pytest.raises(ParseError):
        parse_send_request("[" * depth + "]" * depth, _no_balance)
