"""
tokenhost.hashing — Keccak-256 for key derivation and structured signing.

Strictly bytes-in, bytes-out (no implicit text encoding). Keccak-256 here is
the pre-standard Keccak used by Ethereum-style signers, *not* hashlib's
SHA3-256; the two differ in padding and never produce the same digest.

Provided APIs
-------------
- keccak256(data) -> bytes
"""

from __future__ import annotations

from typing import Union

from Crypto.Hash import keccak as _keccak

from .errors import HostError

BytesLike = Union[bytes, bytearray, memoryview]


def _ensure_bytes(buf: object, name: str) -> bytes:
    if isinstance(buf, (bytes, bytearray, memoryview)):
        return bytes(buf)
    raise HostError(f"{name} must be bytes-like (got {type(buf).__name__})")


def keccak256(data: BytesLike) -> bytes:
    """Return the 32-byte Keccak-256 digest of `data`."""
    h = _keccak.new(digest_bits=256)
    h.update(_ensure_bytes(data, "data"))
    return h.digest()


__all__ = ["keccak256"]
