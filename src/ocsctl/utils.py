from __future__ import annotations

import re

from eth_hash.auto import keccak

_HEX_ADDRESS = re.compile(r"^0x[0-9a-fA-F]{40}$")
_HEX_BODY = re.compile(r"^(?:[0-9a-fA-F]{2})*$")


def keccak256(data: bytes) -> bytes:
    # NOTE: Keccak-256 != SHA3-256 (NIST). Never use hashlib.sha3_256 here.
    return keccak(data)


def to_checksum_address(address: str) -> str:
    """Convert an address to EIP-55 checksummed format."""
    addr = address.lower().removeprefix("0x")
    addr_hash = keccak256(addr.encode("utf-8")).hex()
    result = "0x"
    for i, c in enumerate(addr):
        if c in "abcdef":
            result += c.upper() if int(addr_hash[i], 16) >= 8 else c
        else:
            result += c
    return result


def is_hex_address(value: str) -> bool:
    return bool(_HEX_ADDRESS.match(value))


def is_checksum_valid(address: str) -> bool:
    """All-lower and all-upper addresses carry no checksum and always pass."""
    body = address[2:]
    if body == body.lower() or body == body.upper():
        return True
    return to_checksum_address(address) == address


def hex_to_bytes(value: str) -> bytes:
    """Decode hex with an optional 0x prefix; whitespace and odd lengths are rejected."""
    body = value[2:] if value.startswith(("0x", "0X")) else value
    if not _HEX_BODY.fullmatch(body):
        raise ValueError(f"Not an even-length hex string: {value!r}")
    return bytes.fromhex(body)


B58_ALPHABET = "123456789ABCDEFGHJKLMNPQRSTUVWXYZabcdefghijkmnopqrstuvwxyz"


def b58encode(data: bytes) -> str:
    """Bitcoin-alphabet base58; each leading zero byte becomes a leading '1'."""
    number = int.from_bytes(data, "big")
    digits = ""
    while number:
        number, remainder = divmod(number, 58)
        digits = B58_ALPHABET[remainder] + digits
    zeros = len(data) - len(data.lstrip(b"\0"))
    return "1" * zeros + digits
