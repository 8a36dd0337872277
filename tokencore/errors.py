"""
tokencore.errors — the failure taxonomy of the token core.

Every error is fatal to the enclosing call: the host rolls back all writes
and events and re-raises it. Nothing here is retried or recovered locally.

Each class carries:
  - ``code``      its own name (stable, log-friendly)
  - ``selector()`` the 4-byte ``keccak256("Name()")`` prefix, so a revert can be
                  matched against the custom-error selectors existing tooling knows
  - ``to_dict()`` JSON-safe payload for receipts
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from tokenhost.errors import Revert
from tokenhost.hashing import keccak256


class TokenError(Revert):
    """Base class for token core failures."""

    code: str = "TokenError"
    default_message: str = "token operation failed"

    def __init__(self, message: Optional[str] = None, **data: Any) -> None:
        super().__init__(
            message or self.default_message,
            code=type(self).__name__,
            data={k: _json_safe(v) for k, v in data.items()} or None,
        )

    @classmethod
    def selector(cls) -> bytes:
        return keccak256(f"{cls.__name__}()".encode("ascii"))[:4]

    def to_dict(self) -> Dict[str, Any]:
        out = super().to_dict()
        out["selector"] = "0x" + self.selector().hex()
        return out


def _json_safe(v: Any) -> Any:
    if isinstance(v, (bytes, bytearray)):
        return "0x" + bytes(v).hex()
    return v


# --- Ledger -------------------------------------------------------------------


class InsufficientBalance(TokenError):
    default_message = "balance too low"


class InsufficientAllowance(TokenError):
    default_message = "allowance too low"


class TotalSupplyOverflow(TokenError):
    default_message = "total supply would exceed 2**256 - 1"


class FixedInfiniteAllowanceViolation(TokenError):
    default_message = "allowance of the designated spender is fixed at infinity"


# --- Permit -------------------------------------------------------------------


class InvalidPermit(TokenError):
    default_message = "permit signature invalid or not signed by owner"


class PermitExpired(TokenError):
    default_message = "permit deadline has passed"


# --- Ownership ----------------------------------------------------------------


class Unauthorized(TokenError):
    default_message = "caller is not the owner"


class NewOwnerIsZeroAddress(TokenError):
    default_message = "new owner is the zero address"


class NoHandoverRequest(TokenError):
    default_message = "no valid ownership handover request"


class AlreadyInitialized(TokenError):
    default_message = "owner already initialized"


ALL_ERRORS = (
    InsufficientBalance,
    InsufficientAllowance,
    TotalSupplyOverflow,
    FixedInfiniteAllowanceViolation,
    InvalidPermit,
    PermitExpired,
    Unauthorized,
    NewOwnerIsZeroAddress,
    NoHandoverRequest,
    AlreadyInitialized,
)


def error_for_selector(selector: bytes) -> Optional[type]:
    """Map a 4-byte selector back to its error class (None if unknown)."""
    for cls in ALL_ERRORS:
        if cls.selector() == selector:
            return cls
    return None


__all__ = [
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
    "ALL_ERRORS",
    "error_for_selector",
]
