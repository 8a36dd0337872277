"""
tokenhost.executor — the reference execution host.

Responsibilities
- Hold the shared state of one contract instance: keyed store, event sink,
  block environment and the contract's own address.
- `call(sender, fn, *args)`: run one operation to completion as `sender`
  inside a checkpoint. On success the storage overlay and the events are
  committed; on *any* exception both are discarded and the exception is
  re-raised unchanged.
- Expose the capabilities the core relies on: authenticated `caller`,
  monotonic `timestamp`, `chain_id`, `address`, `emit`, `recover_signer`.

Design notes
- One call at a time. Opening a call while another is active raises
  HostError; the inner call is never started.
- Time only moves forward (`warp`, `set_block`).
- Reads are allowed outside a call; writes outside a call go straight to the
  backend, which is how genesis/setup code seeds state.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional, TypeVar

from .abi import require_address, require_uint
from .config import HostConfig, load_config
from .context import BlockEnv, TxEnv, to_hex
from .errors import HostError
from .events import Event, EventSink
from .hashing import keccak256
from .signatures import SignatureLike, recover_signer
from .storage import KeyedStore, StorageBackend

log = logging.getLogger(__name__)

T = TypeVar("T")

RecoverFn = Callable[[bytes, SignatureLike], Optional[bytes]]


def default_contract_address(label: bytes = b"tokencore", *, width: int = 20) -> bytes:
    """Deterministic contract address derived from a label."""
    return keccak256(b"tokenhost/contract|" + label)[-width:]


class Host:
    """
    In-process host satisfying the execution contract of the token core.

    Parameters
    ----------
    config :
        HostConfig; defaults to `load_config()` (environment + defaults).
    backend :
        StorageBackend for durable state; a fresh MemoryBackend by default.
    block :
        Initial BlockEnv; defaults to height 0, timestamp 0, config chain id.
    address :
        This contract's own address (part of the permit domain).
    recover :
        Signature-recovery capability `(digest, signature) -> address | None`.
    """

    def __init__(
        self,
        *,
        config: Optional[HostConfig] = None,
        backend: Optional[StorageBackend] = None,
        block: Optional[BlockEnv] = None,
        address: Optional[bytes] = None,
        recover: RecoverFn = recover_signer,
    ) -> None:
        self.config = config or load_config()
        self.store = KeyedStore(backend)
        self.sink = EventSink(limit=self.config.max_events_per_call)
        self.block = block or BlockEnv(height=0, timestamp=0, chain_id=self.config.chain_id)
        self.address = self.check_account(
            address if address is not None else default_contract_address(width=self.config.address_bytes),
            name="address",
        )
        self._recover = recover
        self._tx: Optional[TxEnv] = None

    # ------------------------------------------------------------------ #
    # Environment
    # ------------------------------------------------------------------ #

    @property
    def zero_address(self) -> bytes:
        return b"\x00" * self.config.address_bytes

    @property
    def caller(self) -> bytes:
        """Authenticated sender of the active call."""
        if self._tx is None:
            raise HostError("no active call: caller is only defined inside Host.call")
        return self._tx.sender

    @property
    def in_call(self) -> bool:
        return self._tx is not None

    @property
    def timestamp(self) -> int:
        return self.block.timestamp

    @property
    def chain_id(self) -> int:
        return self.block.chain_id

    def set_block(self, block: BlockEnv) -> None:
        if self._tx is not None:
            raise HostError("cannot change the block during a call")
        if block.timestamp < self.block.timestamp:
            raise HostError(
                "timestamp must be monotonic",
                data={"current": self.block.timestamp, "requested": block.timestamp},
            )
        self.block = block

    def warp(self, seconds: int) -> BlockEnv:
        """Advance time by `seconds` in a new block."""
        self.set_block(self.block.advance(seconds=seconds))
        return self.block

    # ------------------------------------------------------------------ #
    # Capabilities used by the core
    # ------------------------------------------------------------------ #

    def emit(self, name: bytes, args: dict) -> Event:
        return self.sink.emit(name, args)

    def recover_signer(self, digest: bytes, signature: SignatureLike) -> Optional[bytes]:
        return self._recover(digest, signature)

    def check_account(self, value: Any, *, name: str = "account") -> bytes:
        if not self.config.strict_mode and isinstance(value, (bytearray, memoryview)):
            value = bytes(value)
        return require_address(value, width=self.config.address_bytes, name=name)

    @staticmethod
    def check_uint(value: Any, *, name: str = "amount") -> int:
        return require_uint(value, name=name)

    @property
    def events(self):
        return self.sink.events

    # ------------------------------------------------------------------ #
    # Atomic call
    # ------------------------------------------------------------------ #

    def call(self, sender: bytes, fn: Callable[..., T], *args: Any, **kwargs: Any) -> T:
        """
        Run `fn(*args, **kwargs)` as `sender`, all-or-nothing.
        """
        if self._tx is not None:
            raise HostError("a call is already active; calls cannot nest")
        sender = self.check_account(sender, name="sender")
        name = getattr(fn, "__name__", repr(fn))

        self._tx = TxEnv(sender=sender, to=self.address)
        self.store.checkpoint()
        self.sink.mark()
        try:
            result = fn(*args, **kwargs)
        except BaseException as e:
            self.store.revert()
            self.sink.rollback()
            log.debug("call %s from %s rolled back: %r", name, to_hex(sender), e)
            raise
        else:
            self.store.commit()
            self.sink.release()
            log.debug("call %s from %s committed", name, to_hex(sender))
            return result
        finally:
            self._tx = None


__all__ = ["Host", "RecoverFn", "default_contract_address"]
