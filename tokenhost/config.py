"""
tokenhost.config — host parameters and numeric caps.

This module centralizes configuration for the reference execution host. It has
NO third-party deps and is safe to import very early.

Configuration precedence:
  1) Explicit `HostConfig(...)` construction (tests, embedding hosts)
  2) Environment variables (TOKENHOST_*)
  3) Hardcoded safe defaults below

Key env vars (case-insensitive where boolean):
  - TOKENHOST_CHAIN_ID               (int)    default: 1337
  - TOKENHOST_ADDRESS_BYTES          (int)    default: 20
  - TOKENHOST_MAX_EVENTS_PER_CALL    (int)    default: 1024
  - TOKENHOST_STRICT                 (bool)   default: true

Usage:
    from tokenhost.config import load_config
    CFG = load_config()
    if CFG.strict_mode: ...
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Dict


# ----------------------------- helpers ---------------------------------------


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    val = raw.strip().lower()
    return val in ("1", "true", "t", "yes", "y", "on")


def _env_int(name: str, default: int, *, min_v: int, max_v: int) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        v = int(raw, 0)
    except ValueError:
        return default
    if v < min_v:
        return min_v
    if v > max_v:
        return max_v
    return v


# ------------------------------- config --------------------------------------


@dataclass(frozen=True)
class HostConfig:
    # Chain identity (part of every permit domain)
    chain_id: int = 1337

    # Width of an account key in bytes (160-bit addresses by default)
    address_bytes: int = 20

    # Caps
    max_events_per_call: int = 1024

    # Strict mode: reject bytearray/memoryview accounts instead of coercing
    strict_mode: bool = True

    def as_dict(self) -> Dict[str, Any]:
        return {
            "chain_id": self.chain_id,
            "address_bytes": self.address_bytes,
            "max_events_per_call": self.max_events_per_call,
            "strict_mode": self.strict_mode,
        }


@lru_cache(maxsize=1)
def load_config() -> HostConfig:
    """
    Build and cache a HostConfig from environment + safe defaults.
    """
    return HostConfig(
        chain_id=_env_int("TOKENHOST_CHAIN_ID", 1337, min_v=0, max_v=(1 << 256) - 1),
        address_bytes=_env_int("TOKENHOST_ADDRESS_BYTES", 20, min_v=1, max_v=32),
        max_events_per_call=_env_int("TOKENHOST_MAX_EVENTS_PER_CALL", 1024, min_v=1, max_v=100_000),
        strict_mode=_env_bool("TOKENHOST_STRICT", True),
    )


__all__ = ["HostConfig", "load_config"]
