"""Field tables for the structured (JSON) command arguments.

Each transaction command declares which keys it accepts, which of them are
mandatory and how each value is checked. :meth:`RequestSchema.extract` walks
the table in order, so the table order is also the order in which validation
errors are reported.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Mapping

from .errors import InvalidNumber, InvalidShape, MissingField, ParseError
from .model import DEFAULT_FEE, MAX_LOCK_TIME

KIND_ADDRESS = "address"
KIND_TEXT = "text"
KIND_ARRAY = "array"
KIND_UINT = "uint"
KIND_U32 = "u32"
KIND_BASE58 = "base58"
KIND_FLAG = "flag"


@dataclass(frozen=True)
class FieldSpec:
    """Describe a single key of a structured argument."""

    name: str
    kind: str
    required: bool = True
    default: Any = None
    missing_message: str | None = None


@dataclass(frozen=True)
class RequestSchema:
    """Ordered collection of :class:`FieldSpec` entries for one command."""

    command: str
    fields: tuple[FieldSpec, ...]

    @property
    def required_fields(self) -> tuple[str, ...]:
        return tuple(spec.name for spec in self.fields if spec.required)

    @property
    def optional_fields(self) -> tuple[str, ...]:
        return tuple(spec.name for spec in self.fields if not spec.required)

    def extract(self, data: Mapping[str, Any]) -> dict[str, Any]:
        """Return the checked values of every declared key.

        Absent optional keys are filled with their declared default. Keys
        that are not declared are ignored.
        """

        values: dict[str, Any] = {}
        for spec in self.fields:
            if spec.name not in data or data[spec.name] is None:
                if spec.required:
                    raise MissingField(spec.name, spec.missing_message)
                values[spec.name] = spec.default
                continue
            values[spec.name] = check_value(spec, data[spec.name])
        return values


def parse_json_object(raw: str) -> dict[str, Any]:
    """Parse the single structured argument of a transaction command."""

    try:
        parsed = json.loads(raw)
    except (ValueError, RecursionError) as exc:
        raise ParseError(str(exc)) from exc
    if not isinstance(parsed, dict):
        raise InvalidShape("<argument>", "Couldn't parse argument as a JSON object")
    return parsed


def check_value(spec: FieldSpec, value: Any) -> Any:
    if spec.kind == KIND_ADDRESS:
        if not isinstance(value, str) or not value.strip():
            raise InvalidShape(spec.name, f"Error: '{spec.name}' must be an address string")
        return value.strip()
    if spec.kind == KIND_TEXT:
        if not isinstance(value, str) or not value.strip():
            raise InvalidShape(spec.name, f"Error: '{spec.name}' must be a non-empty string")
        return value.strip()
    if spec.kind == KIND_ARRAY:
        if not isinstance(value, list):
            raise InvalidShape(spec.name, "Couldn't parse argument as array")
        return value
    if spec.kind == KIND_UINT:
        return coerce_uint(value, spec.name)
    if spec.kind == KIND_U32:
        number = coerce_uint(value, spec.name)
        if number > MAX_LOCK_TIME:
            raise InvalidNumber(spec.name, f"{spec.name} must fit in 32 bits")
        return number
    if spec.kind == KIND_BASE58:
        if not isinstance(value, str):
            raise InvalidShape(spec.name, f"Error: '{spec.name}' must be a base58 string")
        return value
    if spec.kind == KIND_FLAG:
        return value is not False
    raise ValueError(f"Unknown field kind {spec.kind!r} for {spec.name}")


def coerce_uint(value: Any, field: str) -> int:
    """Return ``value`` as a non-negative integer or raise :class:`InvalidNumber`.

    JSON integers, integral floats (``1000.0``) and strings of ASCII decimal
    digits are accepted. Booleans are rejected even though they subclass ``int``.
    """

    if isinstance(value, bool):
        raise InvalidNumber(field)
    if isinstance(value, int):
        number = value
    elif isinstance(value, float) and value.is_integer():
        number = int(value)
    elif isinstance(value, str) and value.strip().isascii() and value.strip().isdigit():
        number = int(value)
    else:
        raise InvalidNumber(field)
    if number < 0:
        raise InvalidNumber(field, f"{field} must not be negative")
    return number


def base_send_fields(*extra: FieldSpec) -> tuple[FieldSpec, ...]:
    """Fields shared by every transaction command, followed by ``extra``."""

    return (
        FieldSpec("input", KIND_ADDRESS, missing_message="Need input address"),
        FieldSpec("output", KIND_ARRAY, missing_message="Need output address"),
        *extra,
        FieldSpec("fee", KIND_UINT, required=False, default=DEFAULT_FEE),
    )


SEND_SCHEMA = RequestSchema("send", base_send_fields())

SEND_P2SH_SCHEMA = RequestSchema(
    "sendp2sh",
    base_send_fields(FieldSpec("script", KIND_BASE58, missing_message="Need script")),
)

REDEEM_P2SH_SCHEMA = RequestSchema(
    "redeemp2sh",
    base_send_fields(
        FieldSpec("script", KIND_BASE58, missing_message="Need script"),
        FieldSpec("txid", KIND_BASE58, missing_message="Need funding txid"),
        FieldSpec("locktime", KIND_U32, missing_message="Need locktime"),
        FieldSpec("secret", KIND_BASE58, missing_message="Need secret"),
        FieldSpec("privkey", KIND_BASE58, missing_message="Need privkey"),
    ),
)

IMPORT_SCHEMA = RequestSchema(
    "import",
    (
        FieldSpec(
            "key",
            KIND_TEXT,
            missing_message=(
                "'key' field is required in the JSON, containing the spending or viewing key to import"
            ),
        ),
        FieldSpec(
            "birthday",
            KIND_UINT,
            missing_message=(
                "'birthday' field is required in the JSON, containing the birthday of the spending or viewing key"
            ),
        ),
        FieldSpec("norescan", KIND_FLAG, required=False, default=False),
    ),
)
