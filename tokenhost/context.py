"""
tokenhost.context — BlockEnv/TxEnv seen by the token core (deterministic)

These lightweight environments are injected by the host so the core can read
the authenticated caller, the consensus timestamp and the chain identity in a
*deterministic* way. They contain only pure data (ints/bytes) and perform
strict validation.

Design notes
------------
- Addresses are raw bytes of the configured width (20 by default).
- Hex strings (with or without "0x") are accepted by helpers and normalized to
  bytes.
- All numeric fields are validated to be non-negative.
- `chain_id` lives in BlockEnv because permit domains are bound to it.
- `timestamp` is the consensus timestamp provided by the host; it never goes
  backwards (`BlockEnv.advance` enforces monotonicity).

This module intentionally does not expose wall-clock time.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Union

from .errors import HostError


# ----------------------------- helpers ----------------------------- #

class ContextError(HostError):
    """Validation or coercion failure for BlockEnv/TxEnv."""

    def __init__(self, message: str = "invalid environment"):
        super().__init__(message=message, code="CONTEXT_ERROR")


def _strip_0x(s: str) -> str:
    return s[2:] if s.startswith(("0x", "0X")) else s


def to_bytes(value: Union[bytes, bytearray, memoryview, str]) -> bytes:
    """
    Coerce `value` to bytes.
    - If str, interpret as hex (with or without '0x'); odd-length hex is rejected.
    - If a bytes-like object, copy to immutable bytes.
    """
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value)
    if isinstance(value, str):
        h = _strip_0x(value.strip())
        if len(h) % 2 != 0:
            raise ContextError(f"hex string must have even length, got {len(h)}")
        try:
            return bytes.fromhex(h)
        except ValueError as e:
            raise ContextError(f"invalid hex string: {value!r}") from e
    raise ContextError(f"cannot convert type {type(value).__name__} to bytes")


def to_hex(b: Union[bytes, bytearray, memoryview]) -> str:
    """Encode bytes as 0x-prefixed lowercase hex."""
    return "0x" + bytes(b).hex()


def _require_non_negative_int(name: str, v: Any) -> int:
    if not isinstance(v, int) or isinstance(v, bool):
        raise ContextError(f"{name} must be int, got {type(v).__name__}")
    if v < 0:
        raise ContextError(f"{name} must be non-negative, got {v}")
    return v


# ----------------------------- models ------------------------------ #

@dataclass(frozen=True)
class BlockEnv:
    """
    Deterministic per-block environment.

    Fields
    ------
    height:     Block height (0-based).
    timestamp:  Consensus timestamp in seconds.
    chain_id:   Integer chain identifier (part of every permit domain).
    """
    height: int
    timestamp: int
    chain_id: int

    def __post_init__(self) -> None:
        _require_non_negative_int("height", self.height)
        _require_non_negative_int("timestamp", self.timestamp)
        _require_non_negative_int("chain_id", self.chain_id)

    def advance(self, *, seconds: int = 0, blocks: int = 1) -> "BlockEnv":
        """Return the next block env; time only moves forward."""
        _require_non_negative_int("seconds", seconds)
        _require_non_negative_int("blocks", blocks)
        return replace(self, height=self.height + blocks, timestamp=self.timestamp + seconds)


@dataclass(frozen=True)
class TxEnv:
    """Per-call environment: the authenticated sender and the called contract."""
    sender: bytes
    to: bytes

    def __post_init__(self) -> None:
        object.__setattr__(self, "sender", to_bytes(self.sender))
        object.__setattr__(self, "to", to_bytes(self.to))


__all__ = [
    "ContextError",
    "to_bytes",
    "to_hex",
    "BlockEnv",
    "TxEnv",
]
