"""
Theurgy Call - invoke one interface method from the command line.
"""

from __future__ import annotations

import sys
from typing import Optional

import click

from ..errors import InvokeError, UnknownMethodError
from .render import render_error, render_result
from .session import Session


@click.command("call")
@click.argument("method_name")
@click.argument("args", nargs=-1)
@click.option("--wait/--no-wait", default=True, help="Wait for confirmation of call methods")
@click.option("--timeout", type=float, default=None, help="Confirmation timeout in seconds")
@click.pass_obj
def call(
    session: Session,
    method_name: str,
    args: tuple[str, ...],
    wait: bool,
    timeout: Optional[float],
) -> None:
    """
    Invoke METHOD_NAME with positional ARGS.

    View methods print the decoded result. Call methods are signed,
    submitted and (by default) polled until final.
    Arrays and structs are passed as JSON.
    """
    try:
        schema = session.schema
        method = schema.lookup(method_name)
        dispatcher = session.dispatcher
    except InvokeError as exc:
        render_error(exc)
        sys.exit(exc.exit_code)

    result = dispatcher.invoke(method_name, list(args), wait=wait, timeout=timeout)
    if method is None:
        error = result.error or UnknownMethodError(method_name)
        render_error(error)
        sys.exit(error.exit_code)

    code = render_result(method, result)
    if code:
        sys.exit(code)
