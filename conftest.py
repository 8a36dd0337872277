# -*- coding: utf-8 -*-
"""
Shared pytest fixtures for tokenhost and tokencore.

- A fresh in-memory ``Host`` per test, with an explicit config (the cached
  environment loaders are cleared so env-driven tests don't leak).
- Deterministic secp256k1 keys derived from labels, exposed as ``Account``
  objects with their 20-byte addresses.
- A ``token`` bound to the host and an ``initialized`` token with the
  deployer as owner and an initial supply.

Usage (inside a test file):
    def test_transfer(initialized, deployer, alice):
        initialized.call(deployer.address, "transfer", alice.address, 10)
        assert initialized.balanceOf(alice.address) == 10
"""
from __future__ import annotations

import os
from dataclasses import dataclass

import pytest

from tokencore.config import TokenConfig
from tokencore.config import load_config as load_token_config
from tokencore.hooks import RecordingHooks
from tokencore.token import Token
from tokenhost.config import HostConfig
from tokenhost.config import load_config as load_host_config
from tokenhost.context import BlockEnv
from tokenhost.executor import Host
from tokenhost.hashing import keccak256
from tokenhost.signatures import address_of

os.environ.setdefault("PYTHONHASHSEED", "0")
os.environ.setdefault("TZ", "UTC")

CHAIN_ID = 1337
GENESIS_TS = 1_700_000_000
INITIAL_SUPPLY = 1_000_000


@dataclass(frozen=True)
class Account:
    label: str
    key: bytes
    address: bytes


def make_account(label: str) -> Account:
    key = keccak256(b"tokencore-tests|" + label.encode("ascii"))
    return Account(label=label, key=key, address=address_of(key))


@pytest.fixture(autouse=True)
def _clear_config_caches():
    load_host_config.cache_clear()
    load_token_config.cache_clear()
    yield
    load_host_config.cache_clear()
    load_token_config.cache_clear()


@pytest.fixture
def host_config() -> HostConfig:
    return HostConfig(chain_id=CHAIN_ID)


@pytest.fixture
def token_config() -> TokenConfig:
    return TokenConfig(name="Test Token", symbol="TST", decimals=18, version="1")


@pytest.fixture
def host(host_config: HostConfig) -> Host:
    return Host(config=host_config, block=BlockEnv(height=1, timestamp=GENESIS_TS, chain_id=CHAIN_ID))


@pytest.fixture
def deployer() -> Account:
    return make_account("deployer")


@pytest.fixture
def alice() -> Account:
    return make_account("alice")


@pytest.fixture
def bob() -> Account:
    return make_account("bob")


@pytest.fixture
def carol() -> Account:
    return make_account("carol")


@pytest.fixture
def hooks() -> RecordingHooks:
    return RecordingHooks()


@pytest.fixture
def token(host: Host, token_config: TokenConfig, hooks: RecordingHooks) -> Token:
    return Token(host, token_config, hooks)


@pytest.fixture
def initialized(token: Token, deployer: Account) -> Token:
    token.call(deployer.address, "initialize", deployer.address, INITIAL_SUPPLY)
    token.host.sink.clear()
    return token
