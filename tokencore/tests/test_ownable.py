"""
Ownership: initialization guard, direct transfer, renounce, two-step handover.
"""
from __future__ import annotations

import pytest

from tokencore.config import DEFAULT_HANDOVER_VALID_FOR, TokenConfig
from tokencore.errors import (AlreadyInitialized, NewOwnerIsZeroAddress,
                              NoHandoverRequest, Unauthorized)
from tokencore.math import U256_MAX
from tokencore.ownable import OwnershipAuthority

ZERO = b"\x00" * 20


@pytest.fixture
def auth(host, token_config):
    return OwnershipAuthority(host, token_config)


@pytest.fixture
def owned(auth, host, deployer):
    host.call(deployer.address, auth._initialize_owner, deployer.address)
    host.sink.clear()
    return auth


def test_uninitialized_owner_is_zero(auth):
    assert auth.owner() == ZERO


def test_initialize_sets_owner_and_emits(auth, host, deployer, alice):
    host.call(deployer.address, auth._initialize_owner, alice.address)
    assert auth.owner() == alice.address
    (ev,) = host.events
    assert ev.name == b"OwnershipTransferred"
    assert ev.args == {"old_owner": ZERO, "new_owner": alice.address}


def test_guarded_initialize_runs_once(owned, host, alice):
    with pytest.raises(AlreadyInitialized):
        host.call(alice.address, owned._initialize_owner, alice.address)


def test_guard_survives_renounce(owned, host, deployer, alice):
    host.call(deployer.address, owned.renounce_ownership)
    with pytest.raises(AlreadyInitialized):
        host.call(alice.address, owned._initialize_owner, alice.address)
    assert owned.owner() == ZERO


def test_unguarded_initialize_always_sets(host, alice, bob):
    auth = OwnershipAuthority(host, TokenConfig(guard_initialize=False))
    host.call(alice.address, auth._initialize_owner, alice.address)
    host.call(bob.address, auth._initialize_owner, bob.address)
    assert auth.owner() == bob.address


def test_check_owner(owned, host, deployer, alice):
    host.call(deployer.address, owned.check_owner)
    with pytest.raises(Unauthorized):
        host.call(alice.address, owned.check_owner)


def test_zero_owner_never_passes(auth, host):
    with pytest.raises(Unauthorized):
        host.call(ZERO, auth.check_owner)


def test_transfer_ownership(owned, host, deployer, alice):
    host.call(deployer.address, owned.transfer_ownership, alice.address)
    assert owned.owner() == alice.address
    (ev,) = host.events
    assert ev.args == {"old_owner": deployer.address, "new_owner": alice.address}
    with pytest.raises(Unauthorized):
        host.call(deployer.address, owned.transfer_ownership, deployer.address)


def test_transfer_ownership_to_zero(owned, host, deployer):
    with pytest.raises(NewOwnerIsZeroAddress):
        host.call(deployer.address, owned.transfer_ownership, ZERO)
    assert owned.owner() == deployer.address


def test_transfer_ownership_by_stranger(owned, host, alice):
    with pytest.raises(Unauthorized):
        host.call(alice.address, owned.transfer_ownership, alice.address)


def test_renounce_is_terminal(owned, host, deployer):
    host.call(deployer.address, owned.renounce_ownership)
    assert owned.owner() == ZERO
    for fn, args in [
        (owned.renounce_ownership, ()),
        (owned.transfer_ownership, (deployer.address,)),
        (owned.complete_ownership_handover, (deployer.address,)),
    ]:
        with pytest.raises(Unauthorized):
            host.call(deployer.address, fn, *args)


class TestHandover:
    def test_request_and_complete(self, owned, host, deployer, alice):
        host.call(alice.address, owned.request_ownership_handover)
        expires = owned.ownership_handover_expires_at(alice.address)
        assert expires == host.timestamp + DEFAULT_HANDOVER_VALID_FOR
        assert host.events[-1].name == b"OwnershipHandoverRequested"
        assert host.events[-1].args == {"pending_owner": alice.address}

        host.warp(DEFAULT_HANDOVER_VALID_FOR)  # exactly at expiry is still valid
        host.call(deployer.address, owned.complete_ownership_handover, alice.address)
        assert owned.owner() == alice.address
        assert owned.ownership_handover_expires_at(alice.address) == 0
        assert host.events[-1].args == {"old_owner": deployer.address, "new_owner": alice.address}

    def test_expired_request(self, owned, host, deployer, alice):
        host.call(alice.address, owned.request_ownership_handover)
        expires = owned.ownership_handover_expires_at(alice.address)
        host.warp(DEFAULT_HANDOVER_VALID_FOR + 1)
        with pytest.raises(NoHandoverRequest):
            host.call(deployer.address, owned.complete_ownership_handover, alice.address)
        # lazily expired: the stale timestamp is still reported
        assert owned.ownership_handover_expires_at(alice.address) == expires
        assert owned.owner() == deployer.address

    def test_no_request(self, owned, host, deployer, alice):
        with pytest.raises(NoHandoverRequest):
            host.call(deployer.address, owned.complete_ownership_handover, alice.address)

    def test_no_request_at_time_zero(self, token_config, deployer, alice):
        from tokenhost.config import HostConfig
        from tokenhost.executor import Host

        host = Host(config=HostConfig())
        assert host.timestamp == 0
        auth = OwnershipAuthority(host, token_config)
        host.call(deployer.address, auth._initialize_owner, deployer.address)
        with pytest.raises(NoHandoverRequest):
            host.call(deployer.address, auth.complete_ownership_handover, alice.address)

    def test_oversized_validity_window_wraps(self, host, deployer, alice):
        auth = OwnershipAuthority(host, TokenConfig(handover_valid_for=U256_MAX))
        host.call(deployer.address, auth._initialize_owner, deployer.address)
        host.call(alice.address, auth.request_ownership_handover)
        assert auth.ownership_handover_expires_at(alice.address) == host.timestamp - 1
        with pytest.raises(NoHandoverRequest):
            host.call(deployer.address, auth.complete_ownership_handover, alice.address)
        assert auth.owner() == deployer.address

    def test_cancel(self, owned, host, deployer, alice):
        host.call(alice.address, owned.request_ownership_handover)
        host.call(alice.address, owned.cancel_ownership_handover)
        assert owned.ownership_handover_expires_at(alice.address) == 0
        assert host.events[-1].name == b"OwnershipHandoverCanceled"
        assert host.events[-1].args == {"pending_owner": alice.address}
        with pytest.raises(NoHandoverRequest):
            host.call(deployer.address, owned.complete_ownership_handover, alice.address)

    def test_cancel_without_request_still_emits(self, owned, host, bob):
        host.call(bob.address, owned.cancel_ownership_handover)
        assert [e.name for e in host.events] == [b"OwnershipHandoverCanceled"]

    def test_only_owner_completes(self, owned, host, alice, bob):
        host.call(alice.address, owned.request_ownership_handover)
        with pytest.raises(Unauthorized):
            host.call(bob.address, owned.complete_ownership_handover, alice.address)

    def test_re_request_extends(self, owned, host, alice):
        host.call(alice.address, owned.request_ownership_handover)
        host.warp(100)
        host.call(alice.address, owned.request_ownership_handover)
        assert owned.ownership_handover_expires_at(alice.address) == host.timestamp + DEFAULT_HANDOVER_VALID_FOR

    def test_validity_is_configurable(self, host, deployer, alice):
        auth = OwnershipAuthority(host, TokenConfig(handover_valid_for=60))
        assert auth.ownership_handover_valid_for() == 60
        host.call(deployer.address, auth._initialize_owner, deployer.address)
        host.call(alice.address, auth.request_ownership_handover)
        host.warp(61)
        with pytest.raises(NoHandoverRequest):
            host.call(deployer.address, auth.complete_ownership_handover, alice.address)

    def test_request_during_renounced_state_cannot_complete(self, owned, host, deployer, alice):
        host.call(alice.address, owned.request_ownership_handover)
        host.call(deployer.address, owned.renounce_ownership)
        with pytest.raises(Unauthorized):
            host.call(deployer.address, owned.complete_ownership_handover, alice.address)
