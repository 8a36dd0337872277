"""
Token — the composed contract.

Binds one Ledger, one PermitAuthority and one OwnershipAuthority to a host
and exposes the familiar ERC-20 + EIP-2612 + Ownable surface:

Views:
  - name() / symbol() / decimals()
  - total_supply() / totalSupply()
  - balance_of(account) / balanceOf(account)
  - allowance(owner, spender)
  - nonces(owner)
  - domain_separator() / DOMAIN_SEPARATOR()
  - owner()
  - ownership_handover_expires_at(pending_owner) / ownershipHandoverExpiresAt(...)
State-changing (run through ``Host.call``, see ``Token.call``):
  - initialize(owner, initial_supply=0)
  - transfer / approve / transfer_from (transferFrom)
  - permit(owner, spender, value, deadline, v, r, s)
  - mint(to, amount)                         (owner-only)
  - burn(amount)                             (caller's own balance)
  - transfer_ownership / renounce_ownership
  - request/cancel/complete_ownership_handover

Example
-------
    host = Host()
    token = Token(host)
    token.call(deployer, "initialize", deployer, 1_000)
    token.call(deployer, "transfer", alice, 10)
    assert token.balanceOf(alice) == 10
"""

from __future__ import annotations

from typing import Any, Optional

from tokenhost.executor import Host

from .config import TokenConfig, load_config
from .hooks import TransferHooks
from .ledger import Ledger
from .ownable import OwnershipAuthority
from .permit import PermitAuthority


class Token:
    def __init__(
        self,
        host: Host,
        config: Optional[TokenConfig] = None,
        hooks: Optional[TransferHooks] = None,
    ) -> None:
        self.host = host
        self.config = config or load_config()
        self.ledger = Ledger(host, self.config, hooks)
        self.permits = PermitAuthority(host, self.ledger, self.config)
        self.ownership = OwnershipAuthority(host, self.config)

    def call(self, sender: bytes, method: str, *args: Any, **kwargs: Any) -> Any:
        """Invoke a public method atomically as `sender`."""
        fn = getattr(self, method, None)
        if fn is None or method.startswith("_") or not callable(fn):
            raise AttributeError(f"Token has no public method {method!r}")
        return self.host.call(sender, fn, *args, **kwargs)

    # ---- metadata ----

    def name(self) -> str:
        return self.config.name

    def symbol(self) -> str:
        return self.config.symbol

    def decimals(self) -> int:
        return self.config.decimals

    # ---- lifecycle ----

    def initialize(self, owner: bytes, initial_supply: int = 0) -> None:
        """Install the owner and optionally mint the initial supply to it."""
        self.ownership._initialize_owner(owner)
        if initial_supply:
            self.ledger._mint(owner, initial_supply)

    def mint(self, to: bytes, amount: int) -> bool:
        self.ownership.check_owner()
        self.ledger._mint(to, amount)
        return True

    def burn(self, amount: int) -> bool:
        self.ledger._burn(self.host.caller, amount)
        return True

    # ---- ledger ----

    def total_supply(self) -> int:
        return self.ledger.total_supply()

    def balance_of(self, account: bytes) -> int:
        return self.ledger.balance_of(account)

    def allowance(self, owner: bytes, spender: bytes) -> int:
        return self.ledger.allowance(owner, spender)

    def approve(self, spender: bytes, amount: int) -> bool:
        return self.ledger.approve(spender, amount)

    def transfer(self, to: bytes, amount: int) -> bool:
        return self.ledger.transfer(to, amount)

    def transfer_from(self, from_: bytes, to: bytes, amount: int) -> bool:
        return self.ledger.transfer_from(from_, to, amount)

    # ---- permit ----

    def nonces(self, owner: bytes) -> int:
        return self.permits.nonces(owner)

    def domain_separator(self) -> bytes:
        return self.permits.domain_separator()

    def permit(self, owner: bytes, spender: bytes, value: int, deadline: int, v: int, r: Any, s: Any) -> None:
        self.permits.permit(owner, spender, value, deadline, v, r, s)

    def permit_packed(self, owner: bytes, spender: bytes, value: int, deadline: int, signature: bytes) -> None:
        self.permits.permit_packed(owner, spender, value, deadline, signature)

    # ---- ownership ----

    def owner(self) -> bytes:
        return self.ownership.owner()

    def transfer_ownership(self, new_owner: bytes) -> None:
        self.ownership.transfer_ownership(new_owner)

    def renounce_ownership(self) -> None:
        self.ownership.renounce_ownership()

    def request_ownership_handover(self) -> None:
        self.ownership.request_ownership_handover()

    def cancel_ownership_handover(self) -> None:
        self.ownership.cancel_ownership_handover()

    def complete_ownership_handover(self, pending_owner: bytes) -> None:
        self.ownership.complete_ownership_handover(pending_owner)

    def ownership_handover_expires_at(self, pending_owner: bytes) -> int:
        return self.ownership.ownership_handover_expires_at(pending_owner)

    def ownership_handover_valid_for(self) -> int:
        return self.ownership.ownership_handover_valid_for()

    # ---- camelCase ABI names ----

    totalSupply = total_supply
    balanceOf = balance_of
    transferFrom = transfer_from
    DOMAIN_SEPARATOR = domain_separator
    transferOwnership = transfer_ownership
    renounceOwnership = renounce_ownership
    requestOwnershipHandover = request_ownership_handover
    cancelOwnershipHandover = cancel_ownership_handover
    completeOwnershipHandover = complete_ownership_handover
    ownershipHandoverExpiresAt = ownership_handover_expires_at
    ownershipHandoverValidFor = ownership_handover_valid_for


__all__ = ["Token"]
