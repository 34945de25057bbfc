"""Fixed-point scaling and ABI encoding of function results.

On-chain consumers only deal with integers, so decimal amounts are scaled by
``10**18`` (the usual token precision) and shipped as a single 32-byte ABI
word. Decimal arithmetic is used throughout so that a balance such as
``"100000.00"`` encodes to exactly ``100000 * 10**18``.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation, localcontext
from typing import Union

from eth_abi import decode as abi_decode
from eth_abi import encode as abi_encode
from eth_abi.exceptions import EncodingError

from .errors import ParseError
from .models import ReturnType

SCALE_DECIMALS = 18
WORD_BYTES = 32
UINT256_MAX = 2**256 - 1

# Wide enough for any 256-bit integer plus fractional digits
_PRECISION = 100
# 2**256 has 78 decimal digits
_MAX_DIGITS = len(str(2**256))

Numeric = Union[Decimal, float, int, str]


def to_fixed_point(value: Numeric | None, decimals: int = SCALE_DECIMALS) -> int:
    """Return ``round(value * 10**decimals)`` with ties rounded away from zero.

    Raises ``ParseError`` for ``None``, booleans, non-numeric text,
    non-finite values and magnitudes past the 256-bit range, so a malformed
    balance never becomes a plausible integer.
    """

    if value is None or isinstance(value, bool):
        raise ParseError(f"Cannot convert {value!r} to a fixed-point amount")

    with localcontext() as ctx:
        ctx.prec = _PRECISION
        try:
            amount = value if isinstance(value, Decimal) else Decimal(str(value).strip())
        except InvalidOperation as exc:
            raise ParseError(f"Cannot convert {value!r} to a fixed-point amount") from exc
        if not amount.is_finite():
            raise ParseError(f"Cannot convert {value!r} to a fixed-point amount")
        if amount and amount.adjusted() + decimals >= _MAX_DIGITS:
            raise ParseError(f"Amount {value!r} is out of range for a 256-bit word")
        try:
            scaled = amount.scaleb(decimals)
            return int(scaled.quantize(Decimal(1), rounding=ROUND_HALF_UP))
        except InvalidOperation as exc:
            raise ParseError(f"Amount {value!r} is out of range for a 256-bit word") from exc


def encode_uint256(value: int) -> bytes:
    """Encode a non-negative integer as one big-endian 32-byte word."""

    if isinstance(value, bool) or not isinstance(value, int):
        raise ParseError(f"uint256 expects an integer, got {type(value).__name__}")
    try:
        return abi_encode(["uint256"], [value])
    except EncodingError as exc:
        raise ParseError(f"Value {value} does not fit in uint256") from exc


def encode_int256(value: int) -> bytes:
    """Encode a signed integer as a two's-complement 32-byte word."""

    if isinstance(value, bool) or not isinstance(value, int):
        raise ParseError(f"int256 expects an integer, got {type(value).__name__}")
    try:
        return abi_encode(["int256"], [value])
    except EncodingError as exc:
        raise ParseError(f"Value {value} does not fit in int256") from exc


def encode_string(value: str) -> bytes:
    """Raw UTF-8 bytes; string results are not ABI-wrapped."""

    return value.encode("utf-8")


def _hex_to_bytes(hex_string: str) -> bytes:
    text = hex_string[2:] if hex_string.startswith(("0x", "0X")) else hex_string
    try:
        return bytes.fromhex(text)
    except ValueError as exc:
        raise ValueError(f"Invalid response hex string: {hex_string!r}") from exc


def decode_result(return_type: ReturnType | str, hex_string: str) -> int | str:
    """Decode a ``0x``-prefixed response into a Python value.

    ``uint256``/``int256`` give an ``int``, ``string`` gives text and
    ``bytes`` gives the normalised hex string back.
    """

    return_type = ReturnType(return_type)
    raw = _hex_to_bytes(hex_string)

    if return_type in (ReturnType.UINT256, ReturnType.INT256):
        if len(raw) != WORD_BYTES:
            raise ValueError(
                f"Expected {WORD_BYTES} bytes for {return_type.value}, got {len(raw)}"
            )
        (number,) = abi_decode([return_type.value], raw)
        return number
    if return_type is ReturnType.STRING:
        return raw.decode("utf-8")
    return "0x" + raw.hex()
