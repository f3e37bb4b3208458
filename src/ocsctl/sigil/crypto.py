"""
Payload signing for ocsctl transactions.

- RFC 8785 JSON Canonicalization for deterministic signing payloads
- ECDSA/secp256k1 signing over the EIP-191 personal_sign hash
- Signer recovery for verification
"""

from __future__ import annotations

from typing import Any

import rfc8785
from eth_account import Account
from eth_account.messages import defunct_hash_message, encode_defunct

from ..errors import SigningFailedError
from .keys import Keypair

SIGNATURE_ALG = "ecdsa_secp256k1_eip191"
PAYLOAD_ALG = "rfc8785_jcs_utf8"


def canonicalize(payload: dict[str, Any]) -> bytes:
    """Canonical bytes of ``payload``; key order never depends on the caller."""
    return rfc8785.dumps(payload)


def signing_hash(canonical: bytes) -> str:
    """0x-prefixed EIP-191 hash that the signature commits to."""
    return "0x" + bytes(defunct_hash_message(primitive=canonical)).hex()


def sign_payload(canonical: bytes, keypair: Keypair) -> str:
    """
    Sign canonical payload bytes.

    Returns:
        0x-prefixed 65-byte signature (r + s + v)

    Raises:
        SigningFailedError: Key material is unusable
    """
    account = keypair.account()
    try:
        signed = account.sign_message(encode_defunct(primitive=canonical))
    except (ValueError, TypeError) as exc:
        raise SigningFailedError("Signing failed; key material is unusable.") from exc
    return "0x" + bytes(signed.signature).hex()


def recover_signer(canonical: bytes, signature: str) -> str:
    sig_bytes = bytes.fromhex(signature.removeprefix("0x"))
    return Account.recover_message(encode_defunct(primitive=canonical), signature=sig_bytes)


def verify_signature(canonical: bytes, signature: str, address: str) -> bool:
    try:
        recovered = recover_signer(canonical, signature)
    except Exception:
        return False
    return recovered.lower() == address.lower()
