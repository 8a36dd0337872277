"""
tokencore.math
==============

U256 arithmetic for the ledger.

Two styles, chosen per call site:
  1) **Wrapping**: modular over 2**256, used where an invariant already rules
     out overflow (crediting a balance, debiting after a balance check).
  2) **Checked**: a predicate the caller turns into its own typed error
     (``TotalSupplyOverflow``), so this module never raises on range.

All operations are integer-only.
"""

from __future__ import annotations

from typing import Final

U256_MOD: Final[int] = 1 << 256
U256_MAX: Final[int] = U256_MOD - 1


def wrapping_add(a: int, b: int) -> int:
    return (a + b) % U256_MOD


def wrapping_sub(a: int, b: int) -> int:
    return (a - b) % U256_MOD


def add_overflows(a: int, b: int) -> bool:
    """True iff ``a + b`` does not fit in 256 bits."""
    return a + b > U256_MAX


__all__ = ["U256_MOD", "U256_MAX", "wrapping_add", "wrapping_sub", "add_overflows"]
