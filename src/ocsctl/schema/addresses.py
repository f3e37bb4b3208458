"""
Address formats of the supported networks.

- evm: ``0x`` + 40 hex digits; mixed case must carry a valid EIP-55
  checksum; values are normalised to checksummed form.
- octra: ``oct`` + base58 of the SHA-256 of an ed25519 public key; taken
  verbatim.
"""

from __future__ import annotations

import re

from ..utils import is_checksum_valid, is_hex_address, to_checksum_address


class AddressFormat:
    name = ""

    def matches(self, text: str) -> bool:
        raise NotImplementedError

    def checksum_ok(self, text: str) -> bool:
        return True

    def normalize(self, text: str) -> str:
        return text

    def __repr__(self) -> str:
        return f"<AddressFormat {self.name}>"


class EvmAddressFormat(AddressFormat):
    name = "evm"

    def matches(self, text: str) -> bool:
        return is_hex_address(text)

    def checksum_ok(self, text: str) -> bool:
        return is_checksum_valid(text)

    def normalize(self, text: str) -> str:
        return to_checksum_address(text)


class OctraAddressFormat(AddressFormat):
    name = "octra"

    # base58 of a 32-byte digest is 43 or 44 characters
    _PATTERN = re.compile(r"^oct[1-9A-HJ-NP-Za-km-z]{43,44}$")

    def matches(self, text: str) -> bool:
        return bool(self._PATTERN.match(text))


EVM_ADDRESSES = EvmAddressFormat()
OCTRA_ADDRESSES = OctraAddressFormat()
