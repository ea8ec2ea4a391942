"""Hex Codec - wire-level hex strings <-> raw bytes held by the storage engine.

Invariants:
    - bytes_to_hex always emits lowercase with a 0x prefix
    - hex_to_bytes accepts the prefix optionally and raises ValueError on bad input
    - Whitespace inside or around the payload is bad input
"""

import string

HEX_PREFIX = "0x"
_HEX_DIGITS = frozenset(string.hexdigits)


def hex_to_bytes(value: str) -> bytes:
    """Decode a 0x-prefixed (or bare) hex string."""
    if value[:2].lower() == HEX_PREFIX:
        value = value[2:]
    if len(value) % 2:
        raise ValueError("hex string has odd length")
    if not _HEX_DIGITS.issuperset(value):
        raise ValueError("hex string contains non-hex characters")
    return bytes.fromhex(value)


def bytes_to_hex(value: bytes) -> str:
    return HEX_PREFIX + bytes(value).hex()


def bytes_equal(a: bytes, b: bytes) -> bool:
    """Byte-for-byte equality (length and content)."""
    return bytes(a) == bytes(b)
