"""
Ownable — single owner with a two-step, time-bounded handover
=============================================================

State machine
-------------
    Uninitialized --_initialize_owner--> Owned
    Owned --transfer_ownership / complete_ownership_handover--> Owned (new owner)
    Owned --renounce_ownership--> Renounced (owner == zero, terminal)

Handover
--------
1) The candidate calls ``request_ownership_handover()``; the request expires
   ``handover_valid_for`` seconds later (48h by default).
2) The current owner calls ``complete_ownership_handover(candidate)`` before
   it expires. The request is cleared and ownership moves.

The expiry is a wrapping u256 sum, so an oversized validity window yields
a request that is already stale.

Requests are never swept: expiry is evaluated lazily against the host clock,
and ``ownership_handover_expires_at`` keeps reporting a stale timestamp.

Events
------
- b"OwnershipTransferred"       {"old_owner": bytes, "new_owner": bytes}
- b"OwnershipHandoverRequested" {"pending_owner": bytes}
- b"OwnershipHandoverCanceled"  {"pending_owner": bytes}
"""

from __future__ import annotations

import logging
from typing import Optional

from tokenhost.context import to_hex
from tokenhost.executor import Host

from .config import TokenConfig, load_config
from .errors import AlreadyInitialized, NewOwnerIsZeroAddress, NoHandoverRequest, Unauthorized
from .keys import key_handover, key_owner, key_owner_initialized
from .math import wrapping_add

log = logging.getLogger(__name__)

EVT_OWNERSHIP_TRANSFERRED = b"OwnershipTransferred"
EVT_HANDOVER_REQUESTED = b"OwnershipHandoverRequested"
EVT_HANDOVER_CANCELED = b"OwnershipHandoverCanceled"


class OwnershipAuthority:
    def __init__(self, host: Host, config: Optional[TokenConfig] = None) -> None:
        self.host = host
        self.config = config or load_config()

    # ------------------------------------------------------------------ #
    # Views
    # ------------------------------------------------------------------ #

    def owner(self) -> bytes:
        raw = self.host.store.get_bytes(key_owner())
        return raw or self.host.zero_address

    def ownership_handover_expires_at(self, pending_owner: bytes) -> int:
        pending_owner = self.host.check_account(pending_owner, name="pending_owner")
        return self.host.store.get_uint(key_handover(pending_owner))

    def ownership_handover_valid_for(self) -> int:
        return self.config.handover_valid_for

    # ------------------------------------------------------------------ #
    # Guards
    # ------------------------------------------------------------------ #

    def check_owner(self) -> None:
        """Raise Unauthorized unless the caller is the current owner."""
        caller = self.host.caller
        if caller != self.owner() or caller == self.host.zero_address:
            raise Unauthorized(caller=caller)

    # ------------------------------------------------------------------ #
    # Internals
    # ------------------------------------------------------------------ #

    def _set_owner(self, new_owner: bytes) -> None:
        old = self.owner()
        self.host.store.set_bytes(key_owner(), new_owner)
        self.host.emit(EVT_OWNERSHIP_TRANSFERRED, {"old_owner": old, "new_owner": new_owner})
        log.info("ownership %s -> %s", to_hex(old), to_hex(new_owner))

    def _initialize_owner(self, new_owner: bytes) -> None:
        """
        Install the first owner. With the guard engaged this works once per
        instance, even after a renounce; without it, it always overwrites.
        The zero account is accepted and leaves the contract ownerless.
        """
        new_owner = self.host.check_account(new_owner, name="new_owner")
        if self.config.guard_initialize:
            flag = key_owner_initialized()
            if self.host.store.get_uint(flag):
                raise AlreadyInitialized(owner=self.owner())
            self.host.store.set_uint(flag, 1)
        self.host.store.set_bytes(key_owner(), new_owner)
        self.host.emit(
            EVT_OWNERSHIP_TRANSFERRED, {"old_owner": self.host.zero_address, "new_owner": new_owner}
        )
        log.info("ownership initialized to %s", to_hex(new_owner))

    # ------------------------------------------------------------------ #
    # Owner-only mutations
    # ------------------------------------------------------------------ #

    def transfer_ownership(self, new_owner: bytes) -> None:
        new_owner = self.host.check_account(new_owner, name="new_owner")
        self.check_owner()
        if new_owner == self.host.zero_address:
            raise NewOwnerIsZeroAddress()
        self._set_owner(new_owner)

    def renounce_ownership(self) -> None:
        self.check_owner()
        self._set_owner(self.host.zero_address)

    def complete_ownership_handover(self, pending_owner: bytes) -> None:
        pending_owner = self.host.check_account(pending_owner, name="pending_owner")
        self.check_owner()
        key = key_handover(pending_owner)
        expires = self.host.store.get_uint(key)
        # 0 means "never requested" (or canceled), even on a clock still at 0
        if expires == 0 or self.host.timestamp > expires:
            raise NoHandoverRequest(pending_owner=pending_owner, expires_at=expires)
        self.host.store.set_uint(key, 0)
        self._set_owner(pending_owner)

    # ------------------------------------------------------------------ #
    # Candidate-side mutations
    # ------------------------------------------------------------------ #

    def request_ownership_handover(self) -> None:
        candidate = self.host.caller
        expires = wrapping_add(self.host.timestamp, self.config.handover_valid_for)
        self.host.store.set_uint(key_handover(candidate), expires)
        self.host.emit(EVT_HANDOVER_REQUESTED, {"pending_owner": candidate})
        log.debug("handover requested by %s until %d", to_hex(candidate), expires)

    def cancel_ownership_handover(self) -> None:
        candidate = self.host.caller
        self.host.store.set_uint(key_handover(candidate), 0)
        self.host.emit(EVT_HANDOVER_CANCELED, {"pending_owner": candidate})


__all__ = [
    "OwnershipAuthority",
    "EVT_OWNERSHIP_TRANSFERRED",
    "EVT_HANDOVER_REQUESTED",
    "EVT_HANDOVER_CANCELED",
]
