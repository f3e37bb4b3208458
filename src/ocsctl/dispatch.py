"""
Dispatcher - route a method invocation by its declared mutability.

view -> coerce arguments, query, decode.
call -> coerce arguments, fetch a fresh nonce, build and sign, submit,
        optionally wait for confirmation.

``invoke`` never raises an ``InvokeError``; every failure is returned in
the ``InvocationResult`` for the UI to render.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, replace
from typing import Any, Optional, Sequence

from .config import ClientConfig
from .errors import (
    ArgumentCountMismatchError,
    ConfigError,
    InvokeError,
    RejectedError,
    SubmitError,
    SubmitNetworkError,
    UnknownMethodError,
)
from .networks import AnyKeypair, get_network
from .pneuma.query import QueryExecutor
from .pneuma.rpc import Endpoint, EndpointError, EndpointRejection
from .pneuma.tracker import ConfirmationOutcome, ConfirmationTracker
from .pneuma.tx import FeeParams, SignedTransaction, TransactionBuilder
from .schema.coerce import EncodedValue, encode_all
from .schema.models import InterfaceSchema, MethodSpec, Mutability

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Receipt:
    tx_hash: str
    transaction: SignedTransaction
    outcome: Optional[ConfirmationOutcome] = None
    attempts: int = 1


@dataclass(frozen=True)
class InvocationResult:
    method: str
    mutability: Optional[Mutability] = None
    value: Any = None
    receipt: Optional[Receipt] = None
    error: Optional[InvokeError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def pending(self) -> bool:
        """Submitted but not known to be final (not awaited, timed out or cancelled)."""
        return self.receipt is not None and self.receipt.outcome is None


class Dispatcher:
    def __init__(
        self,
        schema: InterfaceSchema,
        endpoint: Endpoint,
        keypair: AnyKeypair,
        config: ClientConfig | None = None,
        tracker: ConfirmationTracker | None = None,
    ) -> None:
        self.schema = schema
        self.endpoint = endpoint
        self.keypair = keypair
        self.config = config or ClientConfig()
        self.network = get_network(self.config.network)
        if schema.addresses is not self.network.addresses:
            raise ConfigError(
                f"Interface document was loaded for {schema.addresses.name} addresses, "
                f"but the network is {self.network.name}."
            )
        self.executor = QueryExecutor(endpoint, schema.contract, keypair.address, self.network.addresses)
        self.builder = TransactionBuilder(
            schema.contract, FeeParams(ou=self.config.fee_ou), network=self.network
        )
        self.tracker = tracker or ConfirmationTracker(endpoint, poll_interval=self.config.poll_interval)

    def invoke(
        self,
        method_name: str,
        raw_args: Sequence[str],
        wait: bool = True,
        timeout: Optional[float] = None,
        cancel: Optional[threading.Event] = None,
    ) -> InvocationResult:
        method = self.schema.lookup(method_name)
        if method is None:
            return InvocationResult(method_name, error=UnknownMethodError(method_name))

        logger.debug("invoke %s %s", method.mutability.value, method.name)
        try:
            args = self._encode(method, raw_args)
            if method.mutability is Mutability.VIEW:
                return InvocationResult(
                    method.name, method.mutability, value=self.executor.query(method, args)
                )
            if method.mutability is Mutability.CALL:
                return self._call(method, args, wait, timeout, cancel)
            raise AssertionError(f"Unhandled mutability: {method.mutability}")
        except InvokeError as exc:
            logger.debug("invoke %s failed: %s", method.name, exc.kind)
            return InvocationResult(method.name, method.mutability, error=exc)

    def _encode(self, method: MethodSpec, raw_args: Sequence[str]) -> list[EncodedValue]:
        # Arity first: a short argument list must fail before any network use.
        if len(raw_args) != method.arity:
            raise ArgumentCountMismatchError(method.name, method.arity, len(raw_args))
        return encode_all(
            method.parameter_types, raw_args, method.parameter_names, self.network.addresses
        )

    def _call(
        self,
        method: MethodSpec,
        args: list[EncodedValue],
        wait: bool,
        timeout: Optional[float],
        cancel: Optional[threading.Event],
    ) -> InvocationResult:
        attempts = 0
        while True:
            attempts += 1
            nonce = self._fetch_nonce()
            signed = self.builder.build_and_sign(method, args, self.keypair, nonce)
            try:
                tx_hash = self.tracker.submit(signed)
                break
            except RejectedError:
                if attempts > self.config.reject_retries:
                    raise
                logger.warning(
                    "%s nonce=%d rejected; rebuilding with a fresh nonce (attempt %d/%d)",
                    method.name, nonce, attempts + 1, self.config.reject_retries + 1,
                )

        result = InvocationResult(
            method.name, method.mutability, receipt=Receipt(tx_hash, signed, attempts=attempts)
        )
        return self.confirm(result, timeout, cancel) if wait else result

    def confirm(
        self,
        result: InvocationResult,
        timeout: Optional[float] = None,
        cancel: Optional[threading.Event] = None,
    ) -> InvocationResult:
        """Wait for a submitted call to become final.

        A timeout or cancellation keeps the receipt and reports the fate as
        unknown; it is never turned into success or failure.
        """
        if result.receipt is None:
            return result
        try:
            outcome = self.tracker.await_confirmation(
                result.receipt.tx_hash,
                timeout=self.config.confirm_timeout if timeout is None else timeout,
                cancel=cancel,
            )
        except SubmitError as exc:
            return replace(result, error=exc)
        return replace(result, receipt=replace(result.receipt, outcome=outcome), error=None)

    def _fetch_nonce(self) -> int:
        try:
            nonce = self.endpoint.get_nonce(self.keypair.address)
        except (EndpointError, EndpointRejection) as exc:
            raise SubmitNetworkError(f"Could not fetch nonce: {exc}") from exc
        logger.debug("nonce for %s = %d", self.keypair.address, nonce)
        return nonce
