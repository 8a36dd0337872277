"""
tokencore.keys
==============

Storage key derivation for every persistent entity of the core.

Each logical entity owns one namespace. A key is

    keccak256( len(tag) || tag || account_1 || ... || account_k )

where ``len(tag)`` is one byte, ``k`` is fixed per namespace (0, 1 or 2) and
every account has the host's fixed width. The preimage is therefore uniquely
decodable, so two distinct (namespace, accounts...) tuples can only share a
key through a Keccak collision.

Namespaces
----------
  total_supply          k=0   u256
  owner                 k=0   account bytes
  owner_initialized     k=0   u256 flag (1 once guarded init ran)
  balance               k=1   u256
  nonce                 k=1   u256
  handover              k=1   u256 expiry timestamp
  allowance             k=2   u256 (owner, spender)

The tags are persisted layout: do not change them after deploy.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Final

from tokenhost.hashing import keccak256


@dataclass(frozen=True)
class Namespace:
    name: str
    tag: bytes
    arity: int

    def key(self, *accounts: bytes) -> bytes:
        if len(accounts) != self.arity:
            raise ValueError(f"namespace {self.name!r} takes {self.arity} account(s), got {len(accounts)}")
        return keccak256(bytes([len(self.tag)]) + self.tag + b"".join(accounts))


TOTAL_SUPPLY: Final = Namespace("total_supply", b"tokencore:ledger:total_supply", 0)
BALANCE: Final = Namespace("balance", b"tokencore:ledger:balance", 1)
ALLOWANCE: Final = Namespace("allowance", b"tokencore:ledger:allowance", 2)
NONCE: Final = Namespace("nonce", b"tokencore:permit:nonce", 1)
OWNER: Final = Namespace("owner", b"tokencore:ownable:owner", 0)
OWNER_INITIALIZED: Final = Namespace("owner_initialized", b"tokencore:ownable:initialized", 0)
HANDOVER: Final = Namespace("handover", b"tokencore:ownable:handover", 1)

NAMESPACES: Final[Dict[str, Namespace]] = {
    ns.name: ns
    for ns in (TOTAL_SUPPLY, BALANCE, ALLOWANCE, NONCE, OWNER, OWNER_INITIALIZED, HANDOVER)
}


def key_total_supply() -> bytes:
    return TOTAL_SUPPLY.key()


def key_balance(account: bytes) -> bytes:
    return BALANCE.key(account)


def key_allowance(owner: bytes, spender: bytes) -> bytes:
    return ALLOWANCE.key(owner, spender)


def key_nonce(account: bytes) -> bytes:
    return NONCE.key(account)


def key_owner() -> bytes:
    return OWNER.key()


def key_owner_initialized() -> bytes:
    return OWNER_INITIALIZED.key()


def key_handover(candidate: bytes) -> bytes:
    return HANDOVER.key(candidate)


__all__ = [
    "Namespace",
    "NAMESPACES",
    "TOTAL_SUPPLY",
    "BALANCE",
    "ALLOWANCE",
    "NONCE",
    "OWNER",
    "OWNER_INITIALIZED",
    "HANDOVER",
    "key_total_supply",
    "key_balance",
    "key_allowance",
    "key_nonce",
    "key_owner",
    "key_owner_initialized",
    "key_handover",
]
