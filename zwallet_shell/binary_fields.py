"""Base58 decoding for the binary fields of P2SH and HTLC requests."""

from __future__ import annotations

from typing import Any

from .errors import BadEncoding

B58_ALPHABET = "123456789ABCDEFGHJKLMNPQRSTUVWXYZabcdefghijkmnopqrstuvwxyz"
_B58_INDEX = {char: index for index, char in enumerate(B58_ALPHABET)}


def decode_base58(value: Any, field: str) -> bytes:
    """Decode a plain (checksum-less) base58 string into bytes.

    Leading ``1`` characters map to leading zero bytes, matching the Bitcoin
    alphabet conventions. ``field`` only names the value in error messages.
    """

    if not isinstance(value, str):
        raise BadEncoding(field, "expected a string")
    if not value:
        raise BadEncoding(field, "empty value")

    long_value = 0
    for position, char in enumerate(value):
        digit = _B58_INDEX.get(char)
        if digit is None:
            raise BadEncoding(field, f"forbidden character {char!r} at position {position}")
        long_value = long_value * 58 + digit

    body = bytearray()
    while long_value > 0:
        long_value, mod = divmod(long_value, 256)
        body.append(mod)
    body.reverse()

    pad = len(value) - len(value.lstrip(B58_ALPHABET[0]))
    return bytes(pad) + bytes(body)


def encode_base58(data: bytes) -> str:
    """Encode ``data`` with the Bitcoin base58 alphabet."""

    long_value = int.from_bytes(data, "big")
    result = []
    while long_value > 0:
        long_value, mod = divmod(long_value, 58)
        result.append(B58_ALPHABET[mod])
    pad = len(data) - len(data.lstrip(b"\x00"))
    return B58_ALPHABET[0] * pad + "".join(reversed(result))
