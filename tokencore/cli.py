"""
tokencore — off-line helper CLI for permits and storage layout.

Commands:
  - tokencore domain-separator     Print the EIP-712 domain separator
  - tokencore permit-digest        Print the digest an owner must sign
  - tokencore sign-permit          Sign a permit with a raw secp256k1 key
  - tokencore storage-key          Print the derived storage key of an entity

Domain options default to the environment (TOKENCORE_NAME, TOKENCORE_VERSION,
TOKENHOST_CHAIN_ID) and to the host's default contract address.

Examples:
  tokencore domain-separator --chain-id 1
  tokencore sign-permit --private-key 0x... --spender 0x... --value 100 --deadline 1700000000 --json
  tokencore storage-key balance 0x1111111111111111111111111111111111111111
"""

from __future__ import annotations

import json
import logging
from typing import List, Optional

import typer

from tokenhost.abi import require_uint
from tokenhost.config import load_config as load_host_config
from tokenhost.context import ContextError, to_bytes, to_hex
from tokenhost.errors import InvalidArgument, SignatureError
from tokenhost.executor import default_contract_address
from tokenhost.signatures import address_of, sign_digest
from tokenhost.version import compute_version

from .config import load_config
from .keys import NAMESPACES
from .permit import build_domain_separator, permit_digest

app = typer.Typer(
    name="tokencore",
    help="Token core helpers: permit digests, signing and storage keys",
    no_args_is_help=True,
    add_completion=False,
)


@app.callback()
def main_callback(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """
    Off-line tooling for the token core. Nothing here touches contract state.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _hex_arg(value: str, what: str, *, width: Optional[int] = None) -> bytes:
    try:
        b = to_bytes(value)
    except ContextError as e:
        raise typer.BadParameter(f"{what}: {e.message}") from e
    if width is not None and len(b) != width:
        raise typer.BadParameter(f"{what} must be {width} bytes, got {len(b)}")
    return b


def _domain(name: Optional[str], version: Optional[str], chain_id: Optional[int], contract: Optional[str]) -> bytes:
    cfg = load_config()
    host_cfg = load_host_config()
    verifying = (
        _hex_arg(contract, "contract", width=host_cfg.address_bytes)
        if contract
        else default_contract_address(width=host_cfg.address_bytes)
    )
    return build_domain_separator(
        name if name is not None else cfg.name,
        version if version is not None else cfg.version,
        _uint_arg(chain_id, "chain-id") if chain_id is not None else host_cfg.chain_id,
        verifying,
    )


def _uint_arg(value: int, what: str) -> int:
    # typer only bounds integers from below
    try:
        return require_uint(value, name=what)
    except InvalidArgument as e:
        raise typer.BadParameter(e.message, param_hint=f"--{what}") from e


# Shared domain options
NameOpt = typer.Option(None, "--name", help="Token name (default: TOKENCORE_NAME)")
VersionOpt = typer.Option(None, "--version", help="Domain version (default: TOKENCORE_VERSION)")
ChainIdOpt = typer.Option(None, "--chain-id", help="Chain id (default: TOKENHOST_CHAIN_ID)")
ContractOpt = typer.Option(None, "--contract", help="Verifying contract address (hex)")


@app.command("domain-separator")
def domain_separator(
    name: Optional[str] = NameOpt,
    version: Optional[str] = VersionOpt,
    chain_id: Optional[int] = ChainIdOpt,
    contract: Optional[str] = ContractOpt,
) -> None:
    """Print the EIP-712 domain separator."""
    typer.echo(to_hex(_domain(name, version, chain_id, contract)))


@app.command("permit-digest")
def permit_digest_cmd(
    owner: str = typer.Option(..., "--owner", help="Owner address (hex)"),
    spender: str = typer.Option(..., "--spender", help="Spender address (hex)"),
    value: int = typer.Option(..., "--value", min=0, help="Allowance to grant"),
    nonce: int = typer.Option(0, "--nonce", min=0, help="Owner's current permit nonce"),
    deadline: int = typer.Option(..., "--deadline", min=0, help="Unix deadline (inclusive)"),
    name: Optional[str] = NameOpt,
    version: Optional[str] = VersionOpt,
    chain_id: Optional[int] = ChainIdOpt,
    contract: Optional[str] = ContractOpt,
) -> None:
    """Print the 32-byte digest the owner signs."""
    width = load_host_config().address_bytes
    digest = permit_digest(
        _domain(name, version, chain_id, contract),
        _hex_arg(owner, "owner", width=width),
        _hex_arg(spender, "spender", width=width),
        _uint_arg(value, "value"),
        _uint_arg(nonce, "nonce"),
        _uint_arg(deadline, "deadline"),
    )
    typer.echo(to_hex(digest))


@app.command("sign-permit")
def sign_permit(
    private_key: str = typer.Option(
        ..., "--private-key", envvar="TOKENCORE_PRIVATE_KEY", help="Raw secp256k1 key (hex)"
    ),
    spender: str = typer.Option(..., "--spender", help="Spender address (hex)"),
    value: int = typer.Option(..., "--value", min=0, help="Allowance to grant"),
    nonce: int = typer.Option(0, "--nonce", min=0, help="Owner's current permit nonce"),
    deadline: int = typer.Option(..., "--deadline", min=0, help="Unix deadline (inclusive)"),
    name: Optional[str] = NameOpt,
    version: Optional[str] = VersionOpt,
    chain_id: Optional[int] = ChainIdOpt,
    contract: Optional[str] = ContractOpt,
    json_output: bool = typer.Option(False, "--json", help="Output JSON"),
) -> None:
    """Sign a permit; the owner is the key's address."""
    key = _hex_arg(private_key, "private key", width=32)
    spender_b = _hex_arg(spender, "spender", width=load_host_config().address_bytes)
    try:
        owner = address_of(key)
        digest = permit_digest(
            _domain(name, version, chain_id, contract),
            owner,
            spender_b,
            _uint_arg(value, "value"),
            _uint_arg(nonce, "nonce"),
            _uint_arg(deadline, "deadline"),
        )
        sig = sign_digest(key, digest)
    except SignatureError as e:
        typer.echo(f"Error: {e.message}", err=True)
        raise typer.Exit(1)

    if json_output:
        out = {
            "owner": to_hex(owner),
            "spender": to_hex(spender_b),
            "value": value,
            "nonce": nonce,
            "deadline": deadline,
            "digest": to_hex(digest),
            "v": sig.v,
            "r": "0x" + sig.r.to_bytes(32, "big").hex(),
            "s": "0x" + sig.s.to_bytes(32, "big").hex(),
            "signature": sig.to_hex(),
        }
        typer.echo(json.dumps(out, indent=2))
        return

    typer.echo(f"owner:     {to_hex(owner)}")
    typer.echo(f"digest:    {to_hex(digest)}")
    typer.echo(f"v:         {sig.v}")
    typer.echo(f"r:         0x{sig.r:064x}")
    typer.echo(f"s:         0x{sig.s:064x}")
    typer.echo(f"signature: {sig.to_hex()}")


@app.command("storage-key")
def storage_key(
    namespace: str = typer.Argument(..., help=f"One of: {', '.join(NAMESPACES)}"),
    accounts: Optional[List[str]] = typer.Argument(None, help="Account addresses (hex)"),
) -> None:
    """Print the storage key of an entity."""
    ns = NAMESPACES.get(namespace)
    if ns is None:
        raise typer.BadParameter(f"unknown namespace {namespace!r}", param_hint="namespace")
    width = load_host_config().address_bytes
    raw = [_hex_arg(a, "account", width=width) for a in (accounts or [])]
    try:
        key = ns.key(*raw)
    except ValueError as e:
        raise typer.BadParameter(str(e), param_hint="accounts") from e
    typer.echo(to_hex(key))


@app.command()
def version() -> None:
    """Print the package version."""
    typer.echo(compute_version())


def main() -> None:
    """Entry point for the tokencore CLI."""
    app()


if __name__ == "__main__":
    main()
