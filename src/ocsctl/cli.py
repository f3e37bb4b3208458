"""
ocsctl CLI

Command-line interface for invoking contract methods described by a
method-interface document.

Commands:
  methods   - List the methods of the loaded interface
  call      - Invoke one method with positional arguments
  menu      - Interactive method menu
  balance   - Show the signer's balance and nonce
  whoami    - Show the signer address
"""

from __future__ import annotations

import logging
import sys
from dataclasses import replace
from pathlib import Path
from typing import Optional

import click

from .config import ClientConfig
from .errors import InvokeError
from .networks import NETWORKS
from .pneuma.rpc import EndpointError, EndpointRejection
from .theurgy.render import describe_method, format_balance, render_error
from .theurgy.session import Session


# ============ Constants ============

VERSION = "0.3.0"


# ============ Main CLI Group ============


@click.group()
@click.version_option(version=VERSION, prog_name="ocsctl")
@click.option(
    "--interface",
    "interface_path",
    type=click.Path(path_type=Path),
    default=None,
    help="Method-interface document (default: OCSCTL_INTERFACE or exec_interface.json)",
)
@click.option(
    "--rpc-url",
    default=None,
    help="Endpoint base URL (default: OCSCTL_RPC_URL, then the wallet's rpc, then http://localhost:8080)",
)
@click.option(
    "--network",
    type=click.Choice(sorted(NETWORKS)),
    default=None,
    help="Address format and signature scheme (default: OCSCTL_NETWORK or evm)",
)
@click.option(
    "--wallet",
    "wallet_path",
    type=click.Path(path_type=Path, dir_okay=False),
    default=None,
    help="wallet.json with priv/addr/rpc (default: PRIVATE_KEY from the environment)",
)
@click.option(
    "--env-file",
    type=click.Path(path_type=Path, dir_okay=False),
    default=None,
    help="dotenv file with settings and PRIVATE_KEY (default: ~/.ocsctl/.env)",
)
@click.option("-v", "--verbose", count=True, help="Log progress (-vv for debug)")
@click.pass_context
def cli(
    ctx: click.Context,
    interface_path: Optional[Path],
    rpc_url: Optional[str],
    network: Optional[str],
    wallet_path: Optional[Path],
    env_file: Optional[Path],
    verbose: int,
) -> None:
    """ocsctl - schema-driven contract method client."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG if verbose > 1 else logging.INFO,
            format="%(levelname)s %(name)s: %(message)s",
        )

    try:
        config = ClientConfig.from_env(env_file)
    except InvokeError as exc:
        render_error(exc)
        sys.exit(exc.exit_code)
    if interface_path is not None:
        config = replace(config, interface_path=interface_path)
    if network is not None:
        config = replace(config, network=network)

    # Tests may pre-seed ctx.obj with an httpx transport.
    extras = ctx.obj if isinstance(ctx.obj, dict) else {}
    ctx.obj = Session(
        config=config,
        rpc_url=rpc_url,
        wallet_path=wallet_path,
        env_path=env_file,
        transport=extras.get("transport"),
    )


# ============ Top-level Commands ============

from .theurgy.call import call
from .theurgy.menu import menu

cli.add_command(call)
cli.add_command(menu)


@cli.command()
@click.pass_obj
def methods(session: Session) -> None:
    """List the methods of the loaded interface."""
    try:
        schema = session.schema
    except InvokeError as exc:
        render_error(exc)
        sys.exit(exc.exit_code)

    click.echo(f"contract: {schema.contract}")
    for index, method in enumerate(schema.list(), start=1):
        click.echo(describe_method(index, method))


@cli.command()
@click.pass_obj
def whoami(session: Session) -> None:
    """Show the signer address."""
    try:
        click.echo(f"Address: {session.keypair.address}")
    except InvokeError as exc:
        render_error(exc)
        sys.exit(exc.exit_code)


@cli.command()
@click.pass_obj
def balance(session: Session) -> None:
    """Show the signer's balance and nonce."""
    try:
        address = session.keypair.address
        account = session.endpoint.get_account(address)
    except InvokeError as exc:
        render_error(exc)
        sys.exit(exc.exit_code)
    except (EndpointError, EndpointRejection) as exc:
        click.secho(f"error: {exc}", fg="red")
        sys.exit(1)

    click.echo(f"Address: {address}")
    click.echo(f"Balance: {format_balance(account.balance_raw)} (raw {account.balance_raw})")
    click.echo(f"Nonce:   {account.nonce}")


# ============ Entry Points ============


def main() -> None:
    """ocsctl CLI entry point."""
    cli()


if __name__ == "__main__":
    main()
