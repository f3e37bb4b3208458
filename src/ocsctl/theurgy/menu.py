"""
Theurgy Menu - interactive method menu.

Shows the contract, the operator's balance and nonce, and the method list;
prompts for each parameter of the chosen method and dispatches it. For call
methods the operator decides whether to wait for confirmation.
"""

from __future__ import annotations

import sys

import click

from ..errors import InvokeError
from ..pneuma.rpc import EndpointError, EndpointRejection
from ..schema.models import Mutability
from .render import describe_method, format_balance, parameter_prompt, render_error, render_result
from .session import Session


@click.command("menu")
@click.pass_obj
def menu(session: Session) -> None:
    """Interactive method menu."""
    try:
        schema = session.schema
        dispatcher = session.dispatcher
    except InvokeError as exc:
        render_error(exc)
        sys.exit(exc.exit_code)

    methods = schema.list()
    while True:
        click.echo()
        click.secho("--- ocs01 client ---", fg="cyan")
        click.echo(f"contract: {schema.contract}")
        _print_account(session)

        click.echo()
        click.echo("select method:")
        for index, method in enumerate(methods, start=1):
            click.echo(describe_method(index, method))
        click.echo("0. exit")

        choice = click.prompt("\nchoice", type=int, default=0, show_default=False)
        if choice == 0:
            break
        if not 1 <= choice <= len(methods):
            click.secho("invalid choice", fg="yellow")
            continue

        method = methods[choice - 1]
        click.echo(f"\n--- {method.name} ---")
        args = [
            click.prompt(parameter_prompt(p.name, p.example, p.max), type=str)
            for p in method.parameters
        ]

        result = dispatcher.invoke(method.name, args, wait=False)
        if (
            method.mutability is Mutability.CALL
            and result.ok
            and click.confirm("wait for confirmation?", default=True)
        ):
            click.echo("waiting...")
            try:
                result = dispatcher.confirm(result)
            except KeyboardInterrupt:
                click.secho("stopped waiting; the transaction's outcome is unknown", fg="yellow")
        render_result(method, result)

        click.prompt("\npress enter to continue", default="", show_default=False)

    click.echo("\nbye")


def _print_account(session: Session) -> None:
    address = session.keypair.address
    try:
        account = session.endpoint.get_account(address)
    except (EndpointError, EndpointRejection) as exc:
        click.secho(f"balance unavailable: {exc}", fg="yellow")
        return
    click.echo(f"your balance: {format_balance(account.balance_raw)} (nonce: {account.nonce})")
