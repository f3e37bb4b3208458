"""
Transaction Builder - assemble, canonicalize and sign contract calls.

No network access: the nonce is supplied by the caller, so the same
(method, args, nonce, keypair) always yields byte-identical payloads and
signatures. Networks that sign a timestamp take it from the builder's
clock unless one is passed in.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Optional, Sequence, Union

from ..errors import (
    ArgumentCountMismatchError,
    CoercionError,
    EncodingFailedError,
    SigningFailedError,
)
from ..networks import EVM, AnyKeypair, NetworkProfile
from ..schema.coerce import EncodedValue, encode, join_path
from ..schema.models import MethodSpec, Mutability, Parameter

logger = logging.getLogger(__name__)

Argument = Union[EncodedValue, str]


@dataclass(frozen=True)
class FeeParams:
    ou: int = 1  # operation units paid for the call
    amount: int = 0  # native value transferred with the call


@dataclass(frozen=True)
class TransactionDraft:
    """Unsigned call; built fresh for every attempt and never reused."""

    sender: str
    contract: str
    method: str
    params: tuple[Any, ...]
    calldata: Optional[str]
    nonce: int
    fee: FeeParams
    payload: bytes
    payload_hash: str
    timestamp: Optional[float] = None


@dataclass(frozen=True)
class SignedTransaction:
    draft: TransactionDraft
    signature: str
    signer: str
    public_key: Optional[str] = None
    network: NetworkProfile = field(default=EVM, repr=False, compare=False)

    def verify(self) -> bool:
        return verify_transaction(self)

    def to_wire(self) -> dict[str, Any]:
        return self.network.wire(self)


def verify_transaction(signed: SignedTransaction) -> bool:
    """Check the signature of ``signed`` against its declared signer."""
    return signed.network.verify(signed)


class TransactionBuilder:
    def __init__(
        self,
        contract: str,
        fee: FeeParams | None = None,
        network: NetworkProfile = EVM,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.contract = contract
        self.fee = fee or FeeParams()
        self.network = network
        self._clock = clock

    def build(
        self,
        method: MethodSpec,
        args: Sequence[Argument],
        sender: str,
        nonce: int,
        timestamp: Optional[float] = None,
    ) -> TransactionDraft:
        """
        Build the unsigned draft.

        Raises:
            ArgumentCountMismatchError: Supplied arity differs from the declaration
            EncodingFailedError: An argument cannot be encoded as its declared type
        """
        if method.mutability is not Mutability.CALL:
            raise EncodingFailedError(f"{method.name} is a view method; nothing to sign")
        if len(args) != method.arity:
            raise ArgumentCountMismatchError(method.name, method.arity, len(args))
        if nonce < 0:
            raise EncodingFailedError(f"Invalid nonce: {nonce}")

        encoded = [
            self._coerce_argument(param, arg)
            for param, arg in zip(method.parameters, args)
        ]
        params = tuple(value.wire for value in encoded)
        calldata = self.network.calldata(method, encoded)
        if self.network.timestamped:
            timestamp = self._clock() if timestamp is None else timestamp
        else:
            timestamp = None

        payload = self.network.payload(
            sender, self.contract, method.name, params, calldata, nonce, self.fee, timestamp
        )
        return TransactionDraft(
            sender=sender,
            contract=self.contract,
            method=method.name,
            params=params,
            calldata=calldata,
            nonce=nonce,
            fee=self.fee,
            payload=payload,
            payload_hash=self.network.digest(payload),
            timestamp=timestamp,
        )

    def build_and_sign(
        self,
        method: MethodSpec,
        args: Sequence[Argument],
        keypair: AnyKeypair,
        nonce: int,
        timestamp: Optional[float] = None,
    ) -> SignedTransaction:
        """
        Build, canonicalize and sign a call.

        Raises:
            ArgumentCountMismatchError, EncodingFailedError: Bad arguments
            SigningFailedError: Key material unusable (fatal)
        """
        draft = self.build(method, args, keypair.address, nonce, timestamp)
        signed = SignedTransaction(
            draft=draft,
            signature=self.network.sign(draft.payload, keypair),
            signer=keypair.address,
            public_key=self.network.public_key(keypair),
            network=self.network,
        )
        if not signed.verify():
            raise SigningFailedError("Signature does not verify against the signer address.")
        logger.debug("signed %s nonce=%d hash=%s", method.name, nonce, draft.payload_hash)
        return signed

    def _coerce_argument(self, param: Parameter, arg: Argument) -> EncodedValue:
        if isinstance(arg, EncodedValue):
            if arg.type != param.type:
                raise EncodingFailedError(
                    f"Argument {param.name!r} is a {arg.type}, expected {param.type}"
                )
            return arg
        try:
            return encode(param.type, arg, self.network.addresses)
        except CoercionError as exc:
            located = exc.at(join_path(param.name, exc.path))
            raise EncodingFailedError(
                f"Argument {param.name!r} cannot be encoded: {located}", located
            ) from exc
