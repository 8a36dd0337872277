"""
tokenhost.abi — argument checks and 32-byte word encoding.

Public entry points receive raw Python values. Before the core touches state,
every argument is checked the way an ABI decoder would check it:

- accounts are exact-width ``bytes``
- amounts are ``int`` in [0, 2**256 - 1] (``bool`` is not an amount)

Word encoders produce the 32-byte big-endian words used for structured
signing (addresses are left-padded with zeros).
"""

from __future__ import annotations

from typing import Any

from .errors import InvalidArgument

UINT256_MAX = (1 << 256) - 1
WORD_BYTES = 32


def require_address(value: Any, *, width: int = 20, name: str = "account") -> bytes:
    """Return `value` as bytes if it is a well-formed account key."""
    if not isinstance(value, bytes):
        raise InvalidArgument(f"{name} must be bytes, got {type(value).__name__}", name=name)
    if len(value) != width:
        raise InvalidArgument(f"{name} must be {width} bytes, got {len(value)}", name=name)
    return value


def require_uint(value: Any, *, bits: int = 256, name: str = "amount") -> int:
    """Return `value` if it is an int in [0, 2**bits - 1]."""
    if not isinstance(value, int) or isinstance(value, bool):
        raise InvalidArgument(f"{name} must be int, got {type(value).__name__}", name=name)
    if value < 0 or value.bit_length() > bits:
        raise InvalidArgument(f"{name} out of uint{bits} range", name=name)
    return value


def encode_uint(value: int) -> bytes:
    return require_uint(value, name="value").to_bytes(WORD_BYTES, "big")


def encode_address(value: bytes) -> bytes:
    if not isinstance(value, bytes) or len(value) > WORD_BYTES:
        raise InvalidArgument("address does not fit a 32-byte word", name="address")
    return value.rjust(WORD_BYTES, b"\x00")


__all__ = [
    "UINT256_MAX",
    "WORD_BYTES",
    "require_address",
    "require_uint",
    "encode_uint",
    "encode_address",
]
