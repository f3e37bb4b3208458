"""
Query Executor - read-only method invocation.

No retries here: retrying a failed query is the caller's decision.
"""

from __future__ import annotations

import logging
from typing import Any, Sequence

from ..errors import CallNetworkError, CoercionError, DecodeMismatchError, RevertError
from ..schema.addresses import EVM_ADDRESSES, AddressFormat
from ..schema.coerce import EncodedValue, decode
from ..schema.models import MethodSpec
from .rpc import Endpoint, EndpointError, EndpointRejection

logger = logging.getLogger(__name__)


class QueryExecutor:
    def __init__(
        self,
        endpoint: Endpoint,
        contract: str,
        caller: str,
        addresses: AddressFormat = EVM_ADDRESSES,
    ) -> None:
        self.endpoint = endpoint
        self.contract = contract
        self.caller = caller
        self.addresses = addresses

    def query(self, method: MethodSpec, args: Sequence[EncodedValue]) -> Any:
        """
        Execute a view method and decode its reply.

        Returns:
            Value decoded against ``method.returns``; the raw reply when the
            method declares no return type

        Raises:
            CallNetworkError: Transport failure
            RevertError: The contract rejected the call
            DecodeMismatchError: Reply does not fit the declared return type
        """
        params = [arg.wire for arg in args]
        logger.debug("query %s(%s) on %s", method.name, params, self.contract)
        try:
            reply = self.endpoint.query(self.contract, method.name, params, self.caller)
        except EndpointRejection as exc:
            raise RevertError(str(exc)) from exc
        except EndpointError as exc:
            raise CallNetworkError(str(exc)) from exc

        if method.returns is None:
            return reply
        try:
            return decode(method.returns, reply, self.addresses)
        except CoercionError as exc:
            raise DecodeMismatchError(
                f"{method.name} returned {reply!r}, which is not a {method.returns}: {exc}"
            ) from exc
