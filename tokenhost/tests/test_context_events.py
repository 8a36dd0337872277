from __future__ import annotations

import pytest

from tokenhost.context import BlockEnv, ContextError, TxEnv, to_bytes, to_hex
from tokenhost.errors import HostError
from tokenhost.events import EventSink
from tokenhost.hashing import keccak256


def test_keccak_known_vector():
    # Ethereum Keccak-256, not NIST SHA3-256
    assert keccak256(b"").hex() == "c5d2460186f7233c927e7db2dcc703c0e500b653ca82273b7bfad8045d85a470"


def test_hashing_rejects_non_bytes():
    with pytest.raises(HostError):
        keccak256("abc")


def test_to_bytes_and_hex():
    assert to_bytes("0x0a0b") == b"\x0a\x0b"
    assert to_bytes("0a0b") == b"\x0a\x0b"
    assert to_hex(b"\x0a") == "0x0a"
    with pytest.raises(ContextError):
        to_bytes("0xabc")
    with pytest.raises(ContextError):
        to_bytes(12)


def test_context_errors_are_host_errors():
    with pytest.raises(HostError) as ei:
        to_bytes("zz")
    assert ei.value.code == "CONTEXT_ERROR"


def test_block_env_validation_and_advance():
    b = BlockEnv(height=1, timestamp=100, chain_id=1)
    n = b.advance(seconds=5)
    assert (n.height, n.timestamp, n.chain_id) == (2, 105, 1)
    with pytest.raises(ContextError):
        BlockEnv(height=-1, timestamp=0, chain_id=1)
    with pytest.raises(ContextError):
        b.advance(seconds=-1)


def test_tx_env_normalizes_hex():
    tx = TxEnv(sender="0x" + "11" * 20, to=b"\x22" * 20)
    assert tx.sender == b"\x11" * 20


def test_sink_mark_release_rollback():
    sink = EventSink()
    sink.emit(b"A", {})
    sink.mark()
    sink.emit(b"B", {"x": 1})
    sink.rollback()
    assert [e.name for e in sink.events] == [b"A"]
    sink.mark()
    sink.emit(b"C", {"ok": True})
    sink.release()
    assert len(sink) == 2
    assert sink.events[-1].args == {"ok": True}


def test_sink_validation():
    sink = EventSink()
    with pytest.raises(HostError):
        sink.emit("Transfer", {})
    with pytest.raises(HostError):
        sink.emit(b"", {})
    with pytest.raises(HostError):
        sink.emit(b"E", {"bad-key": 1})
    with pytest.raises(HostError):
        sink.emit(b"E", {"x": 1 << 256})
    with pytest.raises(HostError):
        sink.emit(b"E", {"x": 1.5})
