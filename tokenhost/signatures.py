"""
tokenhost.signatures — the host's signature-recovery primitive.

The token core never verifies signatures itself; it asks the host to recover
the signer of a 32-byte digest. This module is the reference capability:
secp256k1 ECDSA with the standard recoverable encoding, behaving like the
`ecrecover` precompile:

- `v` must be 27 or 28,
- `r` and `s` must lie in [1, n-1],
- any failure yields ``None`` (never an exception).

Signatures travel either as the three-part (v, r, s) encoding or as a single
65-byte blob ``r || s || v``.

Usage
-----
    from tokenhost.signatures import recover_signer, sign_digest

    parts = sign_digest(private_key, digest)
    assert recover_signer(digest, parts) == address_of(private_key)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Union

from eth_keys import keys
from eth_keys.exceptions import BadSignature, ValidationError

from .errors import SignatureError

log = logging.getLogger(__name__)

SECP256K1_N = 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141
SIGNATURE_BYTES = 65


@dataclass(frozen=True)
class SignatureParts:
    """Recoverable ECDSA signature in its three-part form (v in {27, 28})."""

    v: int
    r: int
    s: int

    @classmethod
    def from_bytes(cls, blob: bytes) -> "SignatureParts":
        """Split a 65-byte ``r || s || v`` blob."""
        if not isinstance(blob, (bytes, bytearray)):
            raise SignatureError("signature must be bytes")
        if len(blob) != SIGNATURE_BYTES:
            raise SignatureError(
                f"signature must be {SIGNATURE_BYTES} bytes", data={"len": len(blob)}
            )
        b = bytes(blob)
        return cls(v=b[64], r=int.from_bytes(b[:32], "big"), s=int.from_bytes(b[32:64], "big"))

    def to_bytes(self) -> bytes:
        if not (0 <= self.r < 1 << 256 and 0 <= self.s < 1 << 256 and 0 <= self.v < 256):
            raise SignatureError("signature component out of range")
        return self.r.to_bytes(32, "big") + self.s.to_bytes(32, "big") + bytes([self.v])

    def to_hex(self) -> str:
        return "0x" + self.to_bytes().hex()


SignatureLike = Union[SignatureParts, bytes, bytearray]


def _as_parts(signature: SignatureLike) -> SignatureParts:
    if isinstance(signature, SignatureParts):
        return signature
    return SignatureParts.from_bytes(signature)


def recover_signer(digest: bytes, signature: SignatureLike) -> Optional[bytes]:
    """
    Recover the 20-byte address that signed `digest`, or None.
    """
    if not isinstance(digest, bytes) or len(digest) != 32:
        return None
    try:
        parts = _as_parts(signature)
    except SignatureError as e:
        log.debug("recover_signer: malformed signature: %s", e.message)
        return None
    if parts.v not in (27, 28):
        return None
    if not (0 < parts.r < SECP256K1_N and 0 < parts.s < SECP256K1_N):
        return None
    try:
        sig = keys.Signature(vrs=(parts.v - 27, parts.r, parts.s))
        pub = sig.recover_public_key_from_msg_hash(digest)
    except (BadSignature, ValidationError, ValueError) as e:
        log.debug("recover_signer: recovery failed: %r", e)
        return None
    return pub.to_canonical_address()


def sign_digest(private_key: bytes, digest: bytes) -> SignatureParts:
    """
    Sign a 32-byte digest with a raw secp256k1 private key (off-line signer side).
    """
    if not isinstance(digest, bytes) or len(digest) != 32:
        raise SignatureError("digest must be 32 bytes")
    try:
        pk = keys.PrivateKey(bytes(private_key))
    except (ValidationError, ValueError) as e:
        raise SignatureError("invalid private key") from e
    sig = pk.sign_msg_hash(digest)
    return SignatureParts(v=sig.v + 27, r=sig.r, s=sig.s)


def address_of(private_key: bytes) -> bytes:
    """Canonical 20-byte address for a raw private key."""
    try:
        return keys.PrivateKey(bytes(private_key)).public_key.to_canonical_address()
    except (ValidationError, ValueError) as e:
        raise SignatureError("invalid private key") from e


__all__ = [
    "SECP256K1_N",
    "SIGNATURE_BYTES",
    "SignatureParts",
    "SignatureLike",
    "recover_signer",
    "sign_digest",
    "address_of",
]
