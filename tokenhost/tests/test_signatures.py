from __future__ import annotations

import pytest

from tokenhost.errors import SignatureError
from tokenhost.hashing import keccak256
from tokenhost.signatures import (SECP256K1_N, SignatureParts, address_of,
                                  recover_signer, sign_digest)

KEY = keccak256(b"signer-key")
DIGEST = keccak256(b"message")


def test_sign_and_recover():
    parts = sign_digest(KEY, DIGEST)
    assert parts.v in (27, 28)
    assert recover_signer(DIGEST, parts) == address_of(KEY)
    assert recover_signer(DIGEST, parts.to_bytes()) == address_of(KEY)


def test_packed_layout_is_r_s_v():
    parts = sign_digest(KEY, DIGEST)
    blob = parts.to_bytes()
    assert len(blob) == 65
    assert blob[:32] == parts.r.to_bytes(32, "big")
    assert blob[32:64] == parts.s.to_bytes(32, "big")
    assert blob[64] == parts.v
    assert SignatureParts.from_bytes(blob) == parts


def test_other_digest_recovers_other_address():
    parts = sign_digest(KEY, DIGEST)
    assert recover_signer(keccak256(b"different"), parts) != address_of(KEY)


@pytest.mark.parametrize("v", [0, 1, 26, 29, 255])
def test_v_outside_27_28_fails(v):
    parts = sign_digest(KEY, DIGEST)
    assert recover_signer(DIGEST, SignatureParts(v=v, r=parts.r, s=parts.s)) is None


@pytest.mark.parametrize("r,s", [(0, 1), (1, 0), (SECP256K1_N, 1), (1, SECP256K1_N)])
def test_r_s_out_of_range_fails(r, s):
    assert recover_signer(DIGEST, SignatureParts(v=27, r=r, s=s)) is None


def test_malformed_inputs_return_none():
    parts = sign_digest(KEY, DIGEST)
    assert recover_signer(DIGEST, b"\x00" * 64) is None
    assert recover_signer(DIGEST[:31], parts) is None


def test_from_bytes_rejects_wrong_length():
    with pytest.raises(SignatureError):
        SignatureParts.from_bytes(b"\x00" * 66)


def test_invalid_private_key():
    with pytest.raises(SignatureError):
        sign_digest(b"\xff" * 32, DIGEST)
    with pytest.raises(SignatureError):
        address_of(b"\x01" * 31)
