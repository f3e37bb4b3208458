"""
Ed25519 keypair for Octra-style networks.

- wallet ``priv`` is the standard-base64 32-byte ed25519 seed
- the address is ``oct`` + base58(SHA-256(raw public key))
- signatures and public keys travel as standard base64
"""

from __future__ import annotations

import base64
import binascii
import hashlib
from dataclasses import dataclass, field
from typing import Optional

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ed25519

from ..errors import SigningFailedError
from ..utils import b58encode

ADDRESS_PREFIX = "oct"
SEED_SIZE = 32


def octra_address(public_key: bytes) -> str:
    return ADDRESS_PREFIX + b58encode(hashlib.sha256(public_key).digest())


def _raw_public_key(private_key: ed25519.Ed25519PrivateKey) -> bytes:
    return private_key.public_key().public_bytes(
        encoding=serialization.Encoding.Raw,
        format=serialization.PublicFormat.Raw,
    )


def _signing_key(private_key: str) -> ed25519.Ed25519PrivateKey:
    try:
        seed = base64.b64decode(private_key, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise SigningFailedError("Private key is not valid base64.") from exc
    if len(seed) != SEED_SIZE:
        raise SigningFailedError(f"Private key must be a {SEED_SIZE}-byte ed25519 seed.")
    return ed25519.Ed25519PrivateKey.from_private_bytes(seed)


@dataclass(frozen=True)
class OctraKeypair:
    private_key: str = field(repr=False)
    address: str
    public_key: str  # standard base64 of the raw 32-byte key

    @classmethod
    def from_private_key(cls, private_key: str, expected_address: Optional[str] = None) -> "OctraKeypair":
        """
        Derive the address for a base64 ed25519 seed.

        Raises:
            SigningFailedError: Seed is unusable or does not match ``expected_address``
        """
        raw = _raw_public_key(_signing_key(private_key))
        address = octra_address(raw)
        if expected_address and expected_address != address:
            raise SigningFailedError(
                f"Declared address {expected_address} does not match the private key."
            )
        return cls(
            private_key=private_key,
            address=address,
            public_key=base64.b64encode(raw).decode("ascii"),
        )

    def sign(self, message: bytes) -> str:
        """Standard-base64 ed25519 signature over ``message``."""
        signature = _signing_key(self.private_key).sign(message)
        return base64.b64encode(signature).decode("ascii")


def verify_ed25519(message: bytes, signature: str, public_key: str) -> bool:
    try:
        key = ed25519.Ed25519PublicKey.from_public_bytes(base64.b64decode(public_key, validate=True))
        key.verify(base64.b64decode(signature, validate=True), message)
    except (InvalidSignature, binascii.Error, ValueError):
        return False
    return True
