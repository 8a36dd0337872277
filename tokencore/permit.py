"""
Permit (EIP-2612) — gasless approvals via signed typed data
==========================================================

An owner signs an EIP-712 ``Permit`` message off-line; anyone may submit it.
On success the allowance is set exactly as ``approve`` would, and the owner's
nonce is consumed, so each signature is usable once.

Typed data
----------
    EIP712Domain(string name,string version,uint256 chainId,address verifyingContract)
    Permit(address owner,address spender,uint256 value,uint256 nonce,uint256 deadline)

    domainSeparator = keccak256(DOMAIN_TYPEHASH || keccak256(name) || keccak256(version)
                                || chainId || verifyingContract)
    structHash      = keccak256(PERMIT_TYPEHASH || owner || spender || value || nonce || deadline)
    digest          = keccak256(0x19 0x01 || domainSeparator || structHash)

Each field is one 32-byte ABI word; addresses are left-padded.

The pure helpers at module level (``build_domain_separator``,
``permit_struct_hash``, ``permit_digest``, ``split_signature``) need no host and
are what off-line signers (and ``tokencore.cli``) use.

Check order in ``permit``:
  1) designated infinite spender -> FixedInfiniteAllowanceViolation
  2) now > deadline              -> PermitExpired
  3) recovered signer != owner   -> InvalidPermit
"""

from __future__ import annotations

import logging
from typing import Optional, Tuple, Union

from tokenhost.abi import encode_address, encode_uint, require_uint
from tokenhost.context import to_hex
from tokenhost.errors import SignatureError
from tokenhost.executor import Host
from tokenhost.hashing import keccak256
from tokenhost.signatures import SignatureParts

from .config import TokenConfig, load_config
from .errors import FixedInfiniteAllowanceViolation, InvalidPermit, PermitExpired
from .keys import key_nonce
from .ledger import Ledger
from .math import U256_MAX, wrapping_add

log = logging.getLogger(__name__)

DOMAIN_TYPEHASH = keccak256(
    b"EIP712Domain(string name,string version,uint256 chainId,address verifyingContract)"
)
PERMIT_TYPEHASH = keccak256(
    b"Permit(address owner,address spender,uint256 value,uint256 nonce,uint256 deadline)"
)

Word = Union[int, bytes]


# ---------------------------------------------------------------------------
# Pure helpers
# ---------------------------------------------------------------------------


def build_domain_separator(name: str, version: str, chain_id: int, verifying_contract: bytes) -> bytes:
    return keccak256(
        DOMAIN_TYPEHASH
        + keccak256(name.encode("utf-8"))
        + keccak256(version.encode("utf-8"))
        + encode_uint(chain_id)
        + encode_address(verifying_contract)
    )


def permit_struct_hash(owner: bytes, spender: bytes, value: int, nonce: int, deadline: int) -> bytes:
    return keccak256(
        PERMIT_TYPEHASH
        + encode_address(owner)
        + encode_address(spender)
        + encode_uint(value)
        + encode_uint(nonce)
        + encode_uint(deadline)
    )


def permit_digest(
    domain_separator: bytes,
    owner: bytes,
    spender: bytes,
    value: int,
    nonce: int,
    deadline: int,
) -> bytes:
    """The 32-byte EIP-712 digest the owner signs."""
    if len(domain_separator) != 32:
        raise ValueError("domain separator must be 32 bytes")
    return keccak256(b"\x19\x01" + domain_separator + permit_struct_hash(owner, spender, value, nonce, deadline))


def split_signature(blob: bytes) -> Tuple[int, int, int]:
    """65-byte ``r || s || v`` -> (v, r, s)."""
    parts = SignatureParts.from_bytes(blob)
    return parts.v, parts.r, parts.s


def _word(value: Word, name: str) -> int:
    if isinstance(value, (bytes, bytearray)):
        if len(value) != 32:
            raise InvalidPermit(f"{name} must be 32 bytes")
        return int.from_bytes(value, "big")
    return require_uint(value, name=name)


# ---------------------------------------------------------------------------
# Authority
# ---------------------------------------------------------------------------


class PermitAuthority:
    """
    Verifies permits against the host's live domain and writes allowances
    through the bound Ledger.
    """

    def __init__(self, host: Host, ledger: Ledger, config: Optional[TokenConfig] = None) -> None:
        self.host = host
        self.ledger = ledger
        self.config = config or ledger.config or load_config()

    def nonces(self, account: bytes) -> int:
        account = self.host.check_account(account)
        return self.host.store.get_uint(key_nonce(account))

    def domain_separator(self) -> bytes:
        # recomputed every time so it follows the host's chain id
        return build_domain_separator(
            self.config.name, self.config.version, self.host.chain_id, self.host.address
        )

    def permit(
        self,
        owner: bytes,
        spender: bytes,
        value: int,
        deadline: int,
        v: int,
        r: Word,
        s: Word,
    ) -> None:
        v = require_uint(v, bits=8, name="v")
        sig = SignatureParts(v=v, r=_word(r, "r"), s=_word(s, "s"))
        self._permit(owner, spender, value, deadline, sig)

    def permit_packed(
        self,
        owner: bytes,
        spender: bytes,
        value: int,
        deadline: int,
        signature: bytes,
    ) -> None:
        """Same as ``permit`` with a 65-byte ``r || s || v`` signature."""
        try:
            sig = SignatureParts.from_bytes(signature)
        except SignatureError as e:
            raise InvalidPermit(e.message) from e
        self._permit(owner, spender, value, deadline, sig)

    def _permit(self, owner: bytes, spender: bytes, value: int, deadline: int, sig: SignatureParts) -> None:
        host = self.host
        owner = host.check_account(owner, name="owner")
        spender = host.check_account(spender, name="spender")
        value = host.check_uint(value, name="value")
        deadline = host.check_uint(deadline, name="deadline")

        if self.ledger._is_infinite_spender(spender) and value != U256_MAX:
            raise FixedInfiniteAllowanceViolation(spender=spender, amount=value)
        if host.timestamp > deadline:
            raise PermitExpired(deadline=deadline, now=host.timestamp)

        nonce_key = key_nonce(owner)
        nonce = host.store.get_uint(nonce_key)
        digest = permit_digest(self.domain_separator(), owner, spender, value, nonce, deadline)
        signer = host.recover_signer(digest, sig)
        if signer is None or signer != owner:
            log.debug("permit rejected: owner=%s signer=%s", to_hex(owner), to_hex(signer) if signer else None)
            raise InvalidPermit(owner=owner)

        host.store.set_uint(nonce_key, wrapping_add(nonce, 1))
        self.ledger._approve(owner, spender, value)


__all__ = [
    "DOMAIN_TYPEHASH",
    "PERMIT_TYPEHASH",
    "build_domain_separator",
    "permit_struct_hash",
    "permit_digest",
    "split_signature",
    "PermitAuthority",
]
