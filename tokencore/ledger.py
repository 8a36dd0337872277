"""
Fungible token ledger
=====================

Balances, total supply and allowances for an ERC-20-like token, persisted in
the host's keyed store.

Highlights
----------
- Implicit caller: mutating calls read ``host.caller`` (only defined inside
  ``Host.call``), so every mutation happens in an atomic unit of work.
- Deterministic storage layout from ``tokencore.keys``.
- Events emitted through the host sink:
    - b"Transfer" {"from": bytes, "to": bytes, "amount": int}
    - b"Approval" {"owner": bytes, "spender": bytes, "amount": int}
- ``U256_MAX`` allowance means "unlimited" and is never decremented.
- Optional designated always-infinite spender (``TokenConfig.infinite_spender``).

Public interface
----------------
total_supply() -> int
balance_of(account) -> int
allowance(owner, spender) -> int
approve(spender, amount) -> bool
transfer(to, amount) -> bool
transfer_from(from_, to, amount) -> bool

Internal primitives (for composing contracts and PermitAuthority)
-----------------------------------------------------------------
_mint(to, amount), _burn(from_, amount), _transfer(from_, to, amount),
_approve(owner, spender, amount), _spend_allowance(owner, spender, amount)

Notes
-----
- Zero amounts, self-transfers and the zero account are all legal.
- Crediting a balance wraps modulo 2**256 without a check: the supply
  invariant bounds every balance by the total supply, which is checked on mint.
"""

from __future__ import annotations

import logging
from typing import Optional

from tokenhost.context import to_hex
from tokenhost.executor import Host

from .config import TokenConfig, load_config
from .errors import (FixedInfiniteAllowanceViolation, InsufficientAllowance,
                     InsufficientBalance, TotalSupplyOverflow)
from .hooks import NoopHooks, TransferHooks
from .keys import key_allowance, key_balance, key_total_supply
from .math import U256_MAX, add_overflows, wrapping_add, wrapping_sub

log = logging.getLogger(__name__)

EVT_TRANSFER = b"Transfer"
EVT_APPROVAL = b"Approval"


class Ledger:
    """
    Token accounting bound to one host.

    Parameters
    ----------
    host :
        The execution host providing store, caller and event sink.
    config :
        TokenConfig; only ``infinite_spender`` is read here.
    hooks :
        TransferHooks called around every balance movement.
    """

    def __init__(
        self,
        host: Host,
        config: Optional[TokenConfig] = None,
        hooks: Optional[TransferHooks] = None,
    ) -> None:
        self.host = host
        self.config = config or load_config()
        self.hooks = hooks or NoopHooks()
        if self.config.infinite_spender is not None:
            host.check_account(self.config.infinite_spender, name="infinite_spender")

    # ------------------------------------------------------------------ #
    # Views
    # ------------------------------------------------------------------ #

    def total_supply(self) -> int:
        return self.host.store.get_uint(key_total_supply())

    def balance_of(self, account: bytes) -> int:
        account = self.host.check_account(account)
        return self.host.store.get_uint(key_balance(account))

    def allowance(self, owner: bytes, spender: bytes) -> int:
        owner = self.host.check_account(owner, name="owner")
        spender = self.host.check_account(spender, name="spender")
        if self._is_infinite_spender(spender):
            return U256_MAX
        return self.host.store.get_uint(key_allowance(owner, spender))

    # ------------------------------------------------------------------ #
    # Mutations (caller from host)
    # ------------------------------------------------------------------ #

    def approve(self, spender: bytes, amount: int) -> bool:
        spender = self.host.check_account(spender, name="spender")
        amount = self.host.check_uint(amount)
        self._approve(self.host.caller, spender, amount)
        return True

    def transfer(self, to: bytes, amount: int) -> bool:
        to = self.host.check_account(to, name="to")
        amount = self.host.check_uint(amount)
        self._transfer(self.host.caller, to, amount)
        return True

    def transfer_from(self, from_: bytes, to: bytes, amount: int) -> bool:
        from_ = self.host.check_account(from_, name="from")
        to = self.host.check_account(to, name="to")
        amount = self.host.check_uint(amount)
        self._spend_allowance(from_, self.host.caller, amount)
        self._transfer(from_, to, amount)
        return True

    # ------------------------------------------------------------------ #
    # Internals
    # ------------------------------------------------------------------ #

    def _is_infinite_spender(self, spender: bytes) -> bool:
        return self.config.infinite_spender is not None and spender == self.config.infinite_spender

    def _approve(self, owner: bytes, spender: bytes, amount: int) -> None:
        """Overwrite Allowance[owner, spender] and emit Approval."""
        if self._is_infinite_spender(spender) and amount != U256_MAX:
            raise FixedInfiniteAllowanceViolation(spender=spender, amount=amount)
        self.host.store.set_uint(key_allowance(owner, spender), amount)
        self.host.emit(EVT_APPROVAL, {"owner": owner, "spender": spender, "amount": amount})

    def _spend_allowance(self, owner: bytes, spender: bytes, amount: int) -> None:
        """Debit Allowance[owner, spender] unless it is the unlimited sentinel."""
        if self._is_infinite_spender(spender):
            return
        key = key_allowance(owner, spender)
        allowed = self.host.store.get_uint(key)
        if allowed == U256_MAX:
            return
        if amount > allowed:
            raise InsufficientAllowance(owner=owner, spender=spender, allowance=allowed, amount=amount)
        self.host.store.set_uint(key, allowed - amount)

    def _transfer(self, from_: bytes, to: bytes, amount: int) -> None:
        """Move `amount` from `from_` to `to` with hooks and a Transfer event."""
        self.hooks.before_token_transfer(from_, to, amount)

        store = self.host.store
        from_key = key_balance(from_)
        from_bal = store.get_uint(from_key)
        if from_bal < amount:
            raise InsufficientBalance(account=from_, balance=from_bal, amount=amount)
        store.set_uint(from_key, from_bal - amount)

        # read after the debit so a self-transfer nets to zero
        to_key = key_balance(to)
        store.set_uint(to_key, wrapping_add(store.get_uint(to_key), amount))

        self.host.emit(EVT_TRANSFER, {"from": from_, "to": to, "amount": amount})
        self.hooks.after_token_transfer(from_, to, amount)

    def _mint(self, to: bytes, amount: int) -> None:
        """Create `amount` tokens for `to`. Callers enforce authorization."""
        to = self.host.check_account(to, name="to")
        amount = self.host.check_uint(amount)
        zero = self.host.zero_address
        self.hooks.before_token_transfer(zero, to, amount)

        store = self.host.store
        supply = store.get_uint(key_total_supply())
        if add_overflows(supply, amount):
            raise TotalSupplyOverflow(total_supply=supply, amount=amount)
        store.set_uint(key_total_supply(), supply + amount)

        to_key = key_balance(to)
        store.set_uint(to_key, wrapping_add(store.get_uint(to_key), amount))

        self.host.emit(EVT_TRANSFER, {"from": zero, "to": to, "amount": amount})
        self.hooks.after_token_transfer(zero, to, amount)
        log.debug("mint %d to %s (supply %d)", amount, to_hex(to), supply + amount)

    def _burn(self, from_: bytes, amount: int) -> None:
        """Destroy `amount` tokens held by `from_`. Callers enforce authorization."""
        from_ = self.host.check_account(from_, name="from")
        amount = self.host.check_uint(amount)
        zero = self.host.zero_address
        self.hooks.before_token_transfer(from_, zero, amount)

        store = self.host.store
        from_key = key_balance(from_)
        from_bal = store.get_uint(from_key)
        if from_bal < amount:
            raise InsufficientBalance(account=from_, balance=from_bal, amount=amount)
        store.set_uint(from_key, from_bal - amount)
        store.set_uint(key_total_supply(), wrapping_sub(store.get_uint(key_total_supply()), amount))

        self.host.emit(EVT_TRANSFER, {"from": from_, "to": zero, "amount": amount})
        self.hooks.after_token_transfer(from_, zero, amount)
        log.debug("burn %d from %s", amount, to_hex(from_))


__all__ = ["Ledger", "EVT_TRANSFER", "EVT_APPROVAL"]
