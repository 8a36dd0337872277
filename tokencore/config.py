"""
tokencore.config — token parameters and feature switches.

Configuration precedence:
  1) Explicit `TokenConfig(...)` construction
  2) Environment variables (TOKENCORE_*)
  3) Hardcoded defaults below

Key env vars (case-insensitive where boolean):
  - TOKENCORE_NAME                 (str)    default: "Animica Token"
  - TOKENCORE_SYMBOL               (str)    default: "ANT"
  - TOKENCORE_DECIMALS             (int)    default: 18
  - TOKENCORE_VERSION              (str)    default: "1"      (permit domain version)
  - TOKENCORE_HANDOVER_VALID_FOR   (int)    default: 172800   (48 hours, seconds)
  - TOKENCORE_GUARD_INITIALIZE     (bool)   default: true
  - TOKENCORE_INFINITE_SPENDER     (hex)    default: ""       (feature disabled)
      The literal value "permit2" selects PERMIT2_ADDRESS.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Dict, Optional

# Canonical Permit2 deployment address; the usual choice of designated spender.
PERMIT2_ADDRESS = bytes.fromhex("000000000022D473030F116dDEE9F6B43aC78BA3")

DEFAULT_HANDOVER_VALID_FOR = 48 * 3600


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "t", "yes", "y", "on")


def _env_int(name: str, default: int, *, min_v: int, max_v: int) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        v = int(raw, 0)
    except ValueError:
        return default
    return max(min_v, min(max_v, v))


def _env_spender(name: str) -> Optional[bytes]:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return None
    if raw.lower() == "permit2":
        return PERMIT2_ADDRESS
    h = raw[2:] if raw.startswith(("0x", "0X")) else raw
    try:
        return bytes.fromhex(h)
    except ValueError:
        return None


@dataclass(frozen=True)
class TokenConfig:
    # Metadata providers (constants, not designed here)
    name: str = "Animica Token"
    symbol: str = "ANT"
    decimals: int = 18

    # Permit domain version string
    version: str = "1"

    # Seconds a handover request stays valid
    handover_valid_for: int = DEFAULT_HANDOVER_VALID_FOR

    # Engage the one-time guard on _initialize_owner
    guard_initialize: bool = True

    # Designated always-infinite spender; None disables the feature
    infinite_spender: Optional[bytes] = None

    @property
    def infinite_allowance_enabled(self) -> bool:
        return self.infinite_spender is not None

    def as_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "symbol": self.symbol,
            "decimals": self.decimals,
            "version": self.version,
            "handover_valid_for": self.handover_valid_for,
            "guard_initialize": self.guard_initialize,
            "infinite_spender": ("0x" + self.infinite_spender.hex()) if self.infinite_spender else None,
        }


@lru_cache(maxsize=1)
def load_config() -> TokenConfig:
    """Build and cache a TokenConfig from environment + defaults."""
    return TokenConfig(
        name=os.getenv("TOKENCORE_NAME", "Animica Token"),
        symbol=os.getenv("TOKENCORE_SYMBOL", "ANT"),
        decimals=_env_int("TOKENCORE_DECIMALS", 18, min_v=0, max_v=255),
        version=os.getenv("TOKENCORE_VERSION", "1"),
        handover_valid_for=_env_int(
            "TOKENCORE_HANDOVER_VALID_FOR", DEFAULT_HANDOVER_VALID_FOR, min_v=0, max_v=(1 << 64) - 1
        ),
        guard_initialize=_env_bool("TOKENCORE_GUARD_INITIALIZE", True),
        infinite_spender=_env_spender("TOKENCORE_INFINITE_SPENDER"),
    )


__all__ = ["PERMIT2_ADDRESS", "DEFAULT_HANDOVER_VALID_FOR", "TokenConfig", "load_config"]
