"""
Atomicity of Host.call: storage and events are all-or-nothing.
"""
from __future__ import annotations

import pytest

from tokenhost.config import HostConfig
from tokenhost.context import BlockEnv, ContextError
from tokenhost.errors import HostError, InvalidArgument, Revert
from tokenhost.executor import Host, default_contract_address

K = b"\x07" * 32
ALICE = b"\xaa" * 20
BOB = b"\xbb" * 20


def test_caller_only_defined_inside_call(host):
    assert not host.in_call
    with pytest.raises(HostError):
        host.caller
    assert host.call(ALICE, lambda: host.caller) == ALICE
    assert not host.in_call


def test_successful_call_commits_state_and_events(host):
    def work():
        host.store.set_uint(K, 42)
        host.emit(b"Ping", {"who": host.caller, "n": 1})
        return "ok"

    assert host.call(ALICE, work) == "ok"
    assert host.store.get_uint(K) == 42
    assert [e.name for e in host.events] == [b"Ping"]
    assert host.store.depth() == 0


def test_failed_call_rolls_back_state_and_events(host):
    host.store.set_uint(K, 1)

    def work():
        host.store.set_uint(K, 99)
        host.emit(b"Ping", {"n": 1})
        raise Revert("nope")

    with pytest.raises(Revert):
        host.call(ALICE, work)
    assert host.store.get_uint(K) == 1
    assert host.events == []
    assert host.store.depth() == 0
    assert not host.in_call


def test_any_exception_rolls_back(host):
    def work():
        host.store.set_uint(K, 5)
        raise KeyError("boom")

    with pytest.raises(KeyError):
        host.call(ALICE, work)
    assert host.store.get_uint(K) == 0


def test_rollback_keeps_events_of_earlier_calls(host):
    host.call(ALICE, host.emit, b"First", {})

    def failing():
        host.emit(b"Second", {})
        raise Revert()

    with pytest.raises(Revert):
        host.call(ALICE, failing)
    assert [e.name for e in host.events] == [b"First"]


def test_calls_cannot_nest(host):
    def outer():
        host.store.set_uint(K, 3)
        host.call(BOB, lambda: None)

    with pytest.raises(HostError, match="already active"):
        host.call(ALICE, outer)
    assert host.store.get_uint(K) == 0


def test_sender_is_validated(host):
    with pytest.raises(InvalidArgument):
        host.call(b"\x01" * 19, lambda: None)
    with pytest.raises(InvalidArgument):
        host.call("0x" + "aa" * 20, lambda: None)


def test_lenient_mode_coerces_bytearray_accounts():
    lenient = Host(config=HostConfig(strict_mode=False))
    assert lenient.check_account(bytearray(ALICE)) == ALICE
    strict = Host(config=HostConfig(strict_mode=True))
    with pytest.raises(InvalidArgument):
        strict.check_account(bytearray(ALICE))


def test_event_limit_per_call():
    h = Host(config=HostConfig(max_events_per_call=2))

    def chatty():
        for i in range(3):
            h.emit(b"E", {"i": i})

    with pytest.raises(HostError) as ei:
        h.call(ALICE, chatty)
    assert ei.value.code == "EVENT_INVALID"
    assert h.events == []


def test_time_is_monotonic(host):
    start = host.timestamp
    host.warp(10)
    assert host.timestamp == start + 10
    with pytest.raises(HostError):
        host.set_block(BlockEnv(height=0, timestamp=start, chain_id=host.chain_id))


def test_warp_backwards_is_a_host_error(host):
    start = host.block
    with pytest.raises(HostError) as ei:
        host.warp(-1)
    assert isinstance(ei.value, ContextError)
    assert host.block == start


def test_block_cannot_change_during_call(host):
    with pytest.raises(HostError):
        host.call(ALICE, host.warp, 1)


def test_chain_id_follows_block(host):
    host.set_block(BlockEnv(height=5, timestamp=host.timestamp, chain_id=7))
    assert host.chain_id == 7


def test_default_contract_address_is_deterministic():
    a = default_contract_address()
    assert a == default_contract_address()
    assert len(a) == 20
    assert default_contract_address(b"other") != a
    assert Host(config=HostConfig()).address == a


def test_injected_recovery_capability(host):
    seen = []

    def fake(digest, sig):
        seen.append((digest, sig))
        return ALICE

    h = Host(config=HostConfig(), recover=fake)
    assert h.recover_signer(b"\x00" * 32, b"sig") == ALICE
    assert seen == [(b"\x00" * 32, b"sig")]
