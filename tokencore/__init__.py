"""
tokencore — fungible token ledger with signed approvals and ownership.

Modules
-------
- tokencore.ledger   balances, supply, allowances (ERC-20 semantics)
- tokencore.permit   EIP-2612 permits over EIP-712 typed data
- tokencore.ownable  single owner with a two-step, time-bounded handover
- tokencore.token    the composed contract (Token)
- tokencore.keys     storage key derivation
- tokencore.errors   typed reverts with 4-byte selectors
- tokencore.cli      off-line signer / inspection CLI
"""

from __future__ import annotations

from tokenhost.version import __version__

from .config import PERMIT2_ADDRESS, TokenConfig, load_config
from .errors import (AlreadyInitialized, FixedInfiniteAllowanceViolation,
                     InsufficientAllowance, InsufficientBalance, InvalidPermit,
                     NewOwnerIsZeroAddress, NoHandoverRequest, PermitExpired,
                     TokenError, TotalSupplyOverflow, Unauthorized)
from .hooks import NoopHooks, RecordingHooks, TransferHooks
from .ledger import Ledger
from .ownable import OwnershipAuthority
from .permit import PermitAuthority
from .token import Token

__all__ = [
    "__version__",
    "Token",
    "Ledger",
    "PermitAuthority",
    "OwnershipAuthority",
    "TokenConfig",
    "load_config",
    "PERMIT2_ADDRESS",
    "TransferHooks",
    "NoopHooks",
    "RecordingHooks",
    "TokenError",
    "InsufficientBalance",
    "InsufficientAllowance",
    "TotalSupplyOverflow",
    "FixedInfiniteAllowanceViolation",
    "InvalidPermit",
    "PermitExpired",
    "Unauthorized",
    "NewOwnerIsZeroAddress",
    "NoHandoverRequest",
    "AlreadyInitialized",
]
