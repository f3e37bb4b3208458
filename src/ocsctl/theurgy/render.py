from __future__ import annotations

import json
from decimal import Decimal
from typing import Any

import click

from ..dispatch import InvocationResult
from ..errors import ConfirmationCancelledError, ConfirmationTimeoutError, InvokeError
from ..schema.coerce import format_value
from ..schema.models import MethodSpec

# Balances are reported in micro-units.
BALANCE_SCALE = Decimal(1_000_000)


def format_balance(balance_raw: int) -> str:
    return f"{Decimal(balance_raw) / BALANCE_SCALE:.6f}"


def describe_method(index: int, method: MethodSpec) -> str:
    params = ", ".join(f"{p.name}: {p.type}" for p in method.parameters)
    text = f"{index}. {method.display_label} [{method.mutability.value}] ({params})"
    if method.returns is not None:
        text += f" -> {method.returns}"
    return text


def parameter_prompt(name: str, example: str | None, maximum: int | None) -> str:
    prompt = name
    if example is not None:
        prompt += f" (e.g. {example})"
    if maximum is not None:
        prompt += f" (max: {maximum})"
    return prompt


def render_error(error: InvokeError) -> None:
    if isinstance(error, (ConfirmationTimeoutError, ConfirmationCancelledError)):
        click.secho(f"unknown: {error}", fg="yellow")
        return
    click.secho(f"error [{error.kind}]: {error}", fg="red")
    details = error.to_dict()
    for problem in details.get("errors", []):
        click.echo(f"  - {problem}")


def render_value(method: MethodSpec, value: Any) -> str:
    if method.returns is not None:
        return format_value(method.returns, value)
    if value is None:
        return "none"
    if isinstance(value, str):
        return value
    return json.dumps(value)


def render_result(method: MethodSpec, result: InvocationResult) -> int:
    """Print an invocation result; return the process exit code."""
    receipt = result.receipt
    if receipt is not None:
        click.echo(f"tx: {receipt.tx_hash}")
        if receipt.attempts > 1:
            click.echo(f"  (accepted on attempt {receipt.attempts})")

    if result.error is not None:
        render_error(result.error)
        return result.error.exit_code

    if receipt is None:
        click.echo(f"result: {render_value(method, result.value)}")
        return 0

    outcome = receipt.outcome
    if outcome is None:
        click.secho("submitted (confirmation not awaited)", fg="yellow")
        return 0
    if outcome.confirmed:
        click.secho("confirmed", fg="green")
        return 0
    click.secho(f"failed: {outcome.reason or 'execution failed'}", fg="red")
    return 1
