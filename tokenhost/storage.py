"""
tokenhost.storage — the keyed store the token core persists into.

A KeyedStore maps 32-byte composite keys to values. The core stores two kinds
of value: fixed-width unsigned integers (balances, supply, allowances, nonces,
handover expiries) and account keys (the owner). Everything else about
persistence belongs to the backend.

Design goals
------------
- Deterministic: pure functions over (key, value) with no wall-clock or I/O.
- Simple default: in-process memory backend for local runs & tests.
- Pluggable: a tiny backend interface so a host can swap in a real state DB.
- Atomic: all access goes through a Journal so a failed call leaves nothing.

Public API
----------
- KeyedStore.get_uint(key) -> int            # 0 when absent
- KeyedStore.set_uint(key, value) -> None    # 32-byte big-endian word
- KeyedStore.get_bytes(key) -> bytes         # b"" when absent
- KeyedStore.set_bytes(key, value) -> None
- KeyedStore.checkpoint() / commit() / revert()

Host API
--------
- StorageBackend (Protocol), MemoryBackend
"""

from __future__ import annotations

from typing import Dict, Iterator, Optional, Protocol, Tuple, runtime_checkable

from .errors import HostError
from .journal import Journal

KEY_BYTES = 32
WORD_BYTES = 32
U256_MAX = (1 << 256) - 1


# ---------------------------- Backend API ---------------------------- #


@runtime_checkable
class StorageBackend(Protocol):
    """Minimal backend interface for contract storage."""

    def get(self, key: bytes) -> Optional[bytes]: ...
    def set(self, key: bytes, value: bytes) -> None: ...
    def items(self) -> Iterator[Tuple[bytes, bytes]]: ...


class MemoryBackend:
    """In-memory backend for local runs and tests."""

    def __init__(self, initial: Optional[Dict[bytes, bytes]] = None) -> None:
        self._store: Dict[bytes, bytes] = dict(initial or {})

    def get(self, key: bytes) -> Optional[bytes]:
        return self._store.get(key)

    def set(self, key: bytes, value: bytes) -> None:
        self._store[key] = value

    def items(self) -> Iterator[Tuple[bytes, bytes]]:
        return iter(sorted(self._store.items()))

    def __len__(self) -> int:
        return len(self._store)


# --------------------------- Validation helpers --------------------------- #


def _check_key(key: bytes) -> bytes:
    if not isinstance(key, bytes):
        raise HostError("storage key must be bytes")
    if len(key) != KEY_BYTES:
        raise HostError(f"storage key must be {KEY_BYTES} bytes, got {len(key)}")
    return key


def _check_value(value: bytes) -> bytes:
    if not isinstance(value, (bytes, bytearray)):
        raise HostError("storage value must be bytes")
    return bytes(value)


# ------------------------------ KeyedStore ------------------------------- #


class KeyedStore:
    """
    Journaled view over a StorageBackend.

    Values written through `set_uint` are always full 32-byte words so a raw
    dump of the backend is stable across implementations.
    """

    def __init__(self, backend: Optional[StorageBackend] = None) -> None:
        backend = backend if backend is not None else MemoryBackend()
        for attr in ("get", "set", "items"):
            if not callable(getattr(backend, attr, None)):
                raise HostError(f"backend missing method: {attr}")
        self.backend = backend
        self._journal = Journal(backend)

    # ---- transactions ----

    def checkpoint(self) -> int:
        return self._journal.begin()

    def commit(self) -> None:
        self._journal.commit()

    def revert(self) -> None:
        self._journal.revert()

    def depth(self) -> int:
        return self._journal.depth()

    # ---- raw ----

    def get_bytes(self, key: bytes) -> bytes:
        v = self._journal.get(_check_key(key))
        return v if v is not None else b""

    def set_bytes(self, key: bytes, value: bytes) -> None:
        self._journal.set(_check_key(key), _check_value(value))

    # ---- typed ----

    def get_uint(self, key: bytes) -> int:
        raw = self._journal.get(_check_key(key))
        if not raw:
            return 0
        if len(raw) != WORD_BYTES:
            raise HostError("stored word is not 32 bytes", data={"key": key.hex()})
        return int.from_bytes(raw, "big")

    def set_uint(self, key: bytes, value: int) -> None:
        if not isinstance(value, int) or value < 0 or value > U256_MAX:
            raise HostError("set_uint out of range (must fit in 256 bits)")
        self._journal.set(_check_key(key), value.to_bytes(WORD_BYTES, "big"))

    def items(self) -> Iterator[Tuple[bytes, bytes]]:
        return self._journal.items()


__all__ = [
    "KEY_BYTES",
    "WORD_BYTES",
    "U256_MAX",
    "StorageBackend",
    "MemoryBackend",
    "KeyedStore",
]
