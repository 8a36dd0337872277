"""
tokenhost.errors — host-level exceptions for the token execution host.

The host communicates failures via *typed exceptions*. A call that raises
anything is rolled back by the executor; the exception is then re-raised to the
caller unchanged so upper layers can map it to a receipt or an RPC error.

Hierarchy
---------
HostError (base)
 ├─ Revert           : Contract-triggered failure (state is discarded)
 │   └─ InvalidArgument : Malformed account / integer outside u256 (ABI-style reject)
 ├─ SignatureError   : Malformed or unrecoverable signature (internal to recovery)
 └─ ContextError     : Invalid block/call environment (tokenhost.context)

Notes
-----
* `Revert` and its subclasses are *semantic* failures of a call, not host bugs.
* Plain `HostError` signals misuse of the host itself (no active call, nested
  call, broken backend). The call is still rolled back.
* These classes import nothing from the rest of the package so they can be
  used from the lowest layers (storage, journal) without cycles.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass
class HostError(Exception):
    """
    Base host error.

    Attributes:
        message: Human-readable explanation.
        code:    Stable machine code string (e.g., 'HOST_ERROR', 'REVERT').
        data:    Optional structured details (kept JSON-serializable).
    """
    message: str = "host error"
    code: str = "HOST_ERROR"
    data: Optional[Dict[str, Any]] = field(default=None)

    def __str__(self) -> str:  # pragma: no cover - trivial
        if self.data:
            return f"{self.code}: {self.message} ({self.data})"
        return f"{self.code}: {self.message}"

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to a JSON-safe dict for receipts/logs/RPC errors."""
        out: Dict[str, Any] = {"code": self.code, "message": self.message}
        if self.data is not None:
            out["data"] = self.data
        return out


class Revert(HostError):
    """
    Contract-triggered revert. Everything written during the call is discarded.

    Subclasses set a class-level ``code``; the constructor keeps it unless one
    is passed explicitly.
    """

    code: str = "REVERT"

    def __init__(
        self,
        message: str = "reverted",
        *,
        code: Optional[str] = None,
        data: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, code=code or type(self).code, data=data)


class InvalidArgument(Revert):
    """
    An argument could not be decoded into its declared type.

    Examples:
      - account key of the wrong width or type
      - integer amount outside [0, 2**256 - 1]
    """

    code: str = "INVALID_ARGUMENT"

    def __init__(self, message: str = "invalid argument", *, name: Optional[str] = None):
        super().__init__(message, data={"argument": name} if name is not None else None)


class SignatureError(HostError):
    """A signature blob or its components are malformed."""

    def __init__(self, message: str = "invalid signature", *, data: Optional[Dict[str, Any]] = None):
        super().__init__(message=message, code="BAD_SIGNATURE", data=data)


__all__ = [
    "HostError",
    "Revert",
    "InvalidArgument",
    "SignatureError",
]
