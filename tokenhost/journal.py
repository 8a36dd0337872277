"""
tokenhost.journal — journaling writes, checkpoints, revert/commit.

This module provides a deterministic, in-memory write journal layered over a
storage backend. It supports nested checkpoints via a stack of overlays.
Writes go to the top overlay; reads consult overlays from top → base.
`commit()` merges the top overlay into the next layer (or the backend if it is
the last layer). `revert()` discards the top overlay.

Key properties
--------------
- Pure Python, no I/O of its own; safe for unit tests and simulations.
- Entries are overwritten, never deleted (a cleared value is a zero word).
- Nested checkpoints (begin/commit/revert) with O(changes) merge cost.
- Deterministic behavior; no reliance on wall clock or randomness.

Intended usage
--------------
    j = Journal(backend)
    j.begin()                       # start a checkpoint
    j.set(key, b"value")
    j.commit()                      # apply to parent/backend

With no open checkpoint, writes go straight to the backend (genesis/setup).
"""

from __future__ import annotations

import logging
from typing import Dict, Iterator, List, Optional, Tuple

from .errors import HostError

log = logging.getLogger(__name__)

_Overlay = Dict[bytes, bytes]


class Journal:
    """
    A copy-on-write write journal with nested checkpoints.

    Parameters
    ----------
    backend :
        Anything with get/set/items (see tokenhost.storage.StorageBackend).

    API highlights
    --------------
    - begin() / commit() / revert() / depth()
    - get(), set()
    - items(): merged view, overlays applied over the backend
    """

    def __init__(self, backend) -> None:
        self._backend = backend
        self._layers: List[_Overlay] = []

    # --------------------------------------------------------------------- #
    # Checkpointing
    # --------------------------------------------------------------------- #

    def depth(self) -> int:
        """Number of open checkpoints (0 when writing straight through)."""
        return len(self._layers)

    def begin(self) -> int:
        """Start a new checkpoint. Returns the new depth marker."""
        self._layers.append({})
        return len(self._layers)

    def commit(self) -> None:
        """
        Commit the top overlay into its parent, or into the backend if it is
        the outermost checkpoint.
        """
        if not self._layers:
            raise HostError("commit without an open checkpoint")
        top = self._layers.pop()
        if self._layers:
            self._layers[-1].update(top)
            return
        for key, value in top.items():
            self._backend.set(key, value)
        log.debug("journal: committed %d key(s) to backend", len(top))

    def revert(self) -> None:
        """Discard the top overlay."""
        if not self._layers:
            raise HostError("revert without an open checkpoint")
        top = self._layers.pop()
        log.debug("journal: reverted %d staged key(s)", len(top))

    # --------------------------------------------------------------------- #
    # Reads / writes
    # --------------------------------------------------------------------- #

    def get(self, key: bytes) -> Optional[bytes]:
        for layer in reversed(self._layers):
            if key in layer:
                return layer[key]
        return self._backend.get(key)

    def set(self, key: bytes, value: bytes) -> None:
        if self._layers:
            self._layers[-1][key] = value
        else:
            self._backend.set(key, value)

    def items(self) -> Iterator[Tuple[bytes, bytes]]:
        merged: Dict[bytes, bytes] = dict(self._backend.items())
        for layer in self._layers:
            merged.update(layer)
        for key in sorted(merged):
            yield key, merged[key]


__all__ = ["Journal"]
