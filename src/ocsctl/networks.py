"""
Network profiles.

A profile fixes everything that differs between node families: the
address format, the key type, how the signed payload is laid out and
what the submission body carries.

- evm: secp256k1 account, RFC 8785 payload with ABI calldata, EIP-191
  signature
- octra: ed25519 seed, the compact timestamped blob the ocs01 nodes
  verify, base64 signature plus public key on the wire
"""

from __future__ import annotations

import base64
import binascii
import hashlib
import json
from typing import TYPE_CHECKING, Any, Optional, Sequence, Union

from .errors import ConfigError, SigningFailedError
from .pneuma.abi import encode_call
from .schema.addresses import EVM_ADDRESSES, OCTRA_ADDRESSES, AddressFormat
from .schema.coerce import EncodedValue
from .schema.models import MethodSpec
from .sigil.crypto import (
    PAYLOAD_ALG,
    SIGNATURE_ALG,
    canonicalize,
    sign_payload,
    signing_hash,
    verify_signature,
)
from .sigil.keys import Keypair
from .sigil.octra import OctraKeypair, octra_address, verify_ed25519

if TYPE_CHECKING:
    from .pneuma.tx import FeeParams, SignedTransaction

AnyKeypair = Union[Keypair, OctraKeypair]


class NetworkProfile:
    name = ""
    addresses: AddressFormat = EVM_ADDRESSES
    signature_alg = ""
    payload_alg = ""
    timestamped = False

    def keypair(self, private_key: str, expected_address: Optional[str] = None) -> AnyKeypair:
        raise NotImplementedError

    def calldata(self, method: MethodSpec, args: Sequence[EncodedValue]) -> Optional[str]:
        return None

    def payload(
        self,
        sender: str,
        contract: str,
        method: str,
        params: Sequence[Any],
        calldata: Optional[str],
        nonce: int,
        fee: FeeParams,
        timestamp: Optional[float],
    ) -> bytes:
        raise NotImplementedError

    def digest(self, payload: bytes) -> str:
        raise NotImplementedError

    def sign(self, payload: bytes, keypair: AnyKeypair) -> str:
        raise NotImplementedError

    def public_key(self, keypair: AnyKeypair) -> Optional[str]:
        return None

    def verify(self, signed: SignedTransaction) -> bool:
        raise NotImplementedError

    def wire(self, signed: SignedTransaction) -> dict[str, Any]:
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"<NetworkProfile {self.name}>"


def canonical_payload(
    sender: str,
    contract: str,
    method: str,
    params: Sequence[Any],
    calldata: Optional[str],
    nonce: int,
    fee: FeeParams,
) -> dict[str, Any]:
    return {
        "amount": str(fee.amount),
        "contract": contract,
        "data": calldata,
        "from": sender,
        "method": method,
        "nonce": nonce,
        "ou": str(fee.ou),
        "params": list(params),
    }


class EvmNetwork(NetworkProfile):
    name = "evm"
    addresses = EVM_ADDRESSES
    signature_alg = SIGNATURE_ALG
    payload_alg = PAYLOAD_ALG

    def keypair(self, private_key: str, expected_address: Optional[str] = None) -> Keypair:
        return Keypair.from_private_key(private_key, expected_address)

    def calldata(self, method: MethodSpec, args: Sequence[EncodedValue]) -> str:
        return encode_call(method, args)

    def payload(
        self,
        sender: str,
        contract: str,
        method: str,
        params: Sequence[Any],
        calldata: Optional[str],
        nonce: int,
        fee: FeeParams,
        timestamp: Optional[float],
    ) -> bytes:
        return canonicalize(canonical_payload(sender, contract, method, params, calldata, nonce, fee))

    def digest(self, payload: bytes) -> str:
        return signing_hash(payload)

    def sign(self, payload: bytes, keypair: AnyKeypair) -> str:
        if not isinstance(keypair, Keypair):
            raise SigningFailedError("The evm network signs with a secp256k1 keypair.")
        return sign_payload(payload, keypair)

    def verify(self, signed: SignedTransaction) -> bool:
        return verify_signature(signed.draft.payload, signed.signature, signed.signer)

    def wire(self, signed: SignedTransaction) -> dict[str, Any]:
        draft = signed.draft
        return {
            "contract": draft.contract,
            "method": draft.method,
            "params": list(draft.params),
            "caller": signed.signer,
            "nonce": draft.nonce,
            "ou": str(draft.fee.ou),
            "amount": str(draft.fee.amount),
            "data": draft.calldata,
            "payload_hash": draft.payload_hash,
            "signature": signed.signature,
            "signature_alg": self.signature_alg,
            "payload_alg": self.payload_alg,
        }


def format_timestamp(timestamp: float) -> str:
    """Shortest decimal form; whole seconds carry no fraction."""
    if float(timestamp).is_integer():
        return str(int(timestamp))
    return repr(float(timestamp))


def param_text(value: Any) -> str:
    if isinstance(value, str):
        return value
    return json.dumps(value, separators=(",", ":"))


class OctraNetwork(NetworkProfile):
    name = "octra"
    addresses = OCTRA_ADDRESSES
    signature_alg = "ed25519"
    payload_alg = "octra_tx_json"
    timestamped = True

    def keypair(self, private_key: str, expected_address: Optional[str] = None) -> OctraKeypair:
        return OctraKeypair.from_private_key(private_key, expected_address)

    def payload(
        self,
        sender: str,
        contract: str,
        method: str,
        params: Sequence[Any],
        calldata: Optional[str],
        nonce: int,
        fee: FeeParams,
        timestamp: Optional[float],
    ) -> bytes:
        if timestamp is None:
            raise SigningFailedError("The octra network signs a timestamp; none was supplied.")
        # Field order and spacing are what the node re-serializes and verifies
        blob = (
            f'{{"from":{json.dumps(sender)},"to_":{json.dumps(contract)},'
            f'"amount":"{fee.amount}","nonce":{nonce},"ou":"{fee.ou}",'
            f'"timestamp":{format_timestamp(timestamp)}}}'
        )
        return blob.encode("utf-8")

    def digest(self, payload: bytes) -> str:
        return hashlib.sha256(payload).hexdigest()

    def sign(self, payload: bytes, keypair: AnyKeypair) -> str:
        if not isinstance(keypair, OctraKeypair):
            raise SigningFailedError("The octra network signs with an ed25519 keypair.")
        return keypair.sign(payload)

    def public_key(self, keypair: AnyKeypair) -> Optional[str]:
        return keypair.public_key if isinstance(keypair, OctraKeypair) else None

    def verify(self, signed: SignedTransaction) -> bool:
        if not signed.public_key:
            return False
        try:
            raw = base64.b64decode(signed.public_key, validate=True)
        except (binascii.Error, ValueError):
            return False
        if octra_address(raw) != signed.signer:
            return False
        return verify_ed25519(signed.draft.payload, signed.signature, signed.public_key)

    def wire(self, signed: SignedTransaction) -> dict[str, Any]:
        draft = signed.draft
        return {
            "contract": draft.contract,
            "method": draft.method,
            "params": [param_text(value) for value in draft.params],
            "caller": signed.signer,
            "nonce": draft.nonce,
            "timestamp": draft.timestamp,
            "signature": signed.signature,
            "public_key": signed.public_key,
        }


EVM = EvmNetwork()
OCTRA = OctraNetwork()
NETWORKS: dict[str, NetworkProfile] = {profile.name: profile for profile in (EVM, OCTRA)}


def get_network(name: str) -> NetworkProfile:
    try:
        return NETWORKS[name]
    except KeyError:
        raise ConfigError(
            f"Unknown network {name!r}; expected one of: {', '.join(sorted(NETWORKS))}"
        ) from None
