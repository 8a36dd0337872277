"""
tokenhost — reference execution host for the token core.

The host owns everything the core assumes from its environment:

- a journaled keyed store (tokenhost.storage, tokenhost.journal)
- an event sink (tokenhost.events)
- block/call environments with a monotonic timestamp (tokenhost.context)
- Keccak-256 and secp256k1 signature recovery (tokenhost.hashing, tokenhost.signatures)
- the atomic call executor (tokenhost.executor.Host)

Typical use:

    from tokenhost import Host
    host = Host()
    host.call(alice, token.transfer, bob, 10)
"""

from __future__ import annotations

from .config import HostConfig, load_config
from .context import BlockEnv, TxEnv
from .errors import HostError, InvalidArgument, Revert, SignatureError
from .events import Event, EventSink
from .executor import Host
from .signatures import SignatureParts, recover_signer, sign_digest
from .storage import KeyedStore, MemoryBackend, StorageBackend
from .version import __version__

__all__ = [
    "__version__",
    "Host",
    "HostConfig",
    "load_config",
    "BlockEnv",
    "TxEnv",
    "HostError",
    "Revert",
    "InvalidArgument",
    "SignatureError",
    "Event",
    "EventSink",
    "KeyedStore",
    "MemoryBackend",
    "StorageBackend",
    "SignatureParts",
    "recover_signer",
    "sign_digest",
]
