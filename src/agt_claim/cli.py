"""CLI entry point for the agt_claim server."""

from __future__ import annotations

import asyncio
import logging
import sys

import click

from agt_claim.chain.balance import Web3BalanceOracle
from agt_claim.config import load_config
from agt_claim.errors import ClaimError
from agt_claim.models.config import StorageBackend
from agt_claim.server import run_server
from agt_claim.storage.sqlite import SQLiteClaimStore
from agt_claim.sweeper import ExpirySweeper


@click.group()
@click.option("-c", "--config", "config_path", default=None, help="Path to config TOML file")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, config_path: str | None, verbose: bool) -> None:
    """agt-claim - Balance-gated, single-use claim code server."""
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path
    ctx.obj["verbose"] = verbose

    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


# ── Server ─────────────────────────────────────────────


@cli.command()
@click.option("--host", default=None, help="Override listen host")
@click.option("--port", type=int, default=None, help="Override listen port")
@click.pass_context
def serve(ctx: click.Context, host: str | None, port: int | None) -> None:
    """Start the claim server."""
    cfg = load_config(ctx.obj["config_path"])
    if host:
        cfg.server.host = host
    if port:
        cfg.server.port = port
    if not ctx.obj["verbose"]:
        logging.getLogger().setLevel(cfg.server.log_level.upper())

    click.echo(f"Starting claim server on {cfg.server.host}:{cfg.server.port}")
    asyncio.run(run_server(cfg))


# ── Info ───────────────────────────────────────────────


@cli.command()
@click.pass_context
def status(ctx: click.Context) -> None:
    """Show effective configuration."""
    cfg = load_config(ctx.obj["config_path"])
    click.echo(f"Listen:       {cfg.server.host}:{cfg.server.port}")
    click.echo(f"Trust proxy:  {cfg.server.trust_proxy}")
    click.echo(f"RPC URL:      {cfg.chain.rpc_url}")
    click.echo(f"Token:        {cfg.chain.token_address}")
    click.echo(f"Min balance:  {cfg.chain.min_balance}")
    click.echo(f"RPC timeout:  {cfg.chain.rpc_timeout}s")
    click.echo(f"Rate limit:   {cfg.rate_limit.points} per {cfg.rate_limit.duration}s")
    click.echo(f"Storage:      {cfg.storage.backend.value}")
    if cfg.storage.backend == StorageBackend.SQLITE:
        click.echo(f"DB path:      {cfg.storage.db_path}")
    click.echo(f"Secret:       {'***configured***' if cfg.claims.secret else '(not set)'}")


@cli.command()
@click.argument("address")
@click.pass_context
def balance(ctx: click.Context, address: str) -> None:
    """Query ADDRESS's token balance and report claim eligibility."""
    cfg = load_config(ctx.obj["config_path"])

    async def _balance():
        oracle = Web3BalanceOracle(
            cfg.chain.rpc_url, cfg.chain.token_address, timeout=cfg.chain.rpc_timeout,
        )
        try:
            value = await oracle.get_balance(address)
        except ClaimError as exc:
            click.echo(f"Balance query failed: {exc}", err=True)
            sys.exit(1)
        finally:
            await oracle.close()

        eligible = value >= cfg.chain.min_balance
        click.echo(f"Address:   {address}")
        click.echo(f"Balance:   {value}")
        click.echo(f"Minimum:   {cfg.chain.min_balance}")
        click.echo(f"Eligible:  {'yes' if eligible else 'no'}")

    asyncio.run(_balance())


# ── Maintenance ────────────────────────────────────────


@cli.command()
@click.pass_context
def prune(ctx: click.Context) -> None:
    """Remove expired claim records from the SQLite store."""
    cfg = load_config(ctx.obj["config_path"])
    if cfg.storage.backend != StorageBackend.SQLITE:
        click.echo("Error: prune requires the sqlite storage backend.", err=True)
        click.echo("Set storage.backend = \"sqlite\" or AGT_CLAIM_STORAGE=sqlite.", err=True)
        sys.exit(1)

    async def _prune():
        store = SQLiteClaimStore(cfg.storage.db_path)
        await store.initialize()
        try:
            removed = await ExpirySweeper(store).sweep()
            remaining = await store.count()
        finally:
            await store.close()
        click.echo(f"Removed {removed} expired claim(s), {remaining} remaining")

    asyncio.run(_prune())


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
