"""
meerbridge CLI

Command-line access to the qng adapter and the MeerChange bridge.

Commands:
  balance      - qng_getBalance
  add-balance  - qng_addBalance
  utxos        - qng_getUTXOs
  send-raw     - qng_sendRawTransaction
  cross-send   - qng_crossSend (export4337 on MeerChange)
  whoami       - Show the signing address
"""

from __future__ import annotations

import json
import logging
import sys
from dataclasses import replace
from typing import Any, NoReturn, Optional

import click

from .config import BridgeConfig, build_adapter
from .errors import BridgeError, ConfigError
from .qng.adapter import RpcAdapter
from .signer import get_address, load_private_key


# ============ Constants ============

VERSION = "0.3.0"


# ============ Main CLI Group ============


@click.group()
@click.version_option(version=VERSION, prog_name="meerbridge")
@click.option("--qng-rpc-url", envvar="QNG_RPC_URL", default=None, help="qng node RPC URL")
@click.option("--eth-rpc-url", envvar="ETH_RPC_URL", default=None, help="MeerEVM node RPC URL")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(
    ctx: click.Context,
    qng_rpc_url: Optional[str],
    eth_rpc_url: Optional[str],
    verbose: bool,
) -> None:
    """meerbridge - qng / MeerEVM bridge for the bundler."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )

    try:
        config = BridgeConfig.from_env()
    except BridgeError as exc:
        _fail(exc)
    if qng_rpc_url:
        config = replace(config, qng_rpc_url=qng_rpc_url)
    if eth_rpc_url:
        config = replace(config, eth_rpc_url=eth_rpc_url)
    ctx.obj = config


def _adapter(ctx: click.Context, method: str) -> RpcAdapter:
    config: BridgeConfig = ctx.obj
    if method != "qng_cross_send":
        # qng-only commands never sign
        config = replace(config, private_key=None)
    return build_adapter(config)


def _fail(exc: BridgeError) -> NoReturn:
    click.secho(f"ERROR: {exc}", fg="red", err=True)
    sys.exit(exc.exit_code)


def _run(ctx: click.Context, method: str, *params: Any) -> None:
    try:
        result = getattr(_adapter(ctx, method), method)(*params)
    except BridgeError as exc:
        _fail(exc)
    click.echo(json.dumps(result, indent=2))


# ============ qng Commands ============


@cli.command()
@click.argument("address")
@click.option("--coin-id", default=0, type=int, help="Coin ID (0 = MEER)")
@click.pass_context
def balance(ctx: click.Context, address: str, coin_id: int) -> None:
    """Query the qng balance of ADDRESS."""
    _run(ctx, "qng_get_balance", address, coin_id)


@cli.command("add-balance")
@click.argument("address")
@click.pass_context
def add_balance(ctx: click.Context, address: str) -> None:
    """Top up the qng balance of ADDRESS."""
    _run(ctx, "qng_add_balance", address)


@cli.command()
@click.argument("address")
@click.option("--limit", default=10, type=int, help="Maximum number of UTXOs")
@click.option("--locked/--unlocked", default=False, help="List locked UTXOs")
@click.pass_context
def utxos(ctx: click.Context, address: str, limit: int, locked: bool) -> None:
    """List UTXOs owned by ADDRESS."""
    _run(ctx, "qng_get_utxos", address, limit, locked)


@cli.command("send-raw")
@click.argument("raw_tx")
@click.option("--allow-high-fee", is_flag=True, help="Accept unusually high fees")
@click.pass_context
def send_raw(ctx: click.Context, raw_tx: str, allow_high_fee: bool) -> None:
    """Relay a signed qng transaction (hex)."""
    _run(ctx, "qng_send_raw_transaction", raw_tx, allow_high_fee)


@cli.command("cross-send")
@click.option("--txid", required=True, help="qng transaction ID (hex)")
@click.option("--idx", required=True, type=int, help="Output index")
@click.option("--fee", required=True, type=int, help="Bridge fee")
@click.option("--sig", required=True, help="Signature over the export")
@click.option("--chain-id", type=int, default=None, help="MeerEVM chain ID")
@click.option("--meerchange", envvar="MEERCHANGE_ADDRESS", default=None, help="MeerChange contract address")
@click.pass_context
def cross_send(
    ctx: click.Context,
    txid: str,
    idx: int,
    fee: int,
    sig: str,
    chain_id: Optional[int],
    meerchange: Optional[str],
) -> None:
    """Bridge a qng output onto MeerEVM via MeerChange.export4337."""
    config: BridgeConfig = ctx.obj
    if chain_id is not None:
        config = replace(config, chain_id=chain_id)
    if meerchange:
        config = replace(config, meerchange_address=meerchange)
    if not config.private_key or not config.meerchange_address:
        click.secho("ERROR: PRIVATE_KEY and MEERCHANGE_ADDRESS must be set.", fg="red", err=True)
        sys.exit(1)
    ctx.obj = config
    _run(ctx, "qng_cross_send", txid, idx, fee, sig)


# ============ Identity ============


@cli.command()
def whoami() -> None:
    """Show the address that signs bridge transactions."""
    try:
        pk = load_private_key()
        click.echo(f"Address: {get_address(pk)}")
    except ConfigError as exc:
        _fail(exc)
    except ValueError:
        click.echo("No signing key found.")
        click.echo("Set PRIVATE_KEY or add it to ~/.meerbridge/.env")
        sys.exit(1)


# ============ Entry Points ============


def main() -> None:
    """meerbridge CLI entry point."""
    cli()


if __name__ == "__main__":
    main()
