"""
ECDSA / secp256k1 keypair for ocsctl.

One keypair per run, loaded before the first invocation:
- PRIVATE_KEY from the environment or ~/.ocsctl/.env (dotenv), or
- a wallet.json file ``{"priv": ..., "addr": ..., "rpc": ...}``.

The private key never appears in repr() output, logs or wire payloads.
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Optional

from dotenv import load_dotenv
from eth_account import Account
from eth_account.signers.local import LocalAccount

from ..errors import ConfigError, SigningFailedError


# Default config directory
OCSCTL_DIR = Path.home() / ".ocsctl"
OCSCTL_ENV = OCSCTL_DIR / ".env"


@dataclass(frozen=True)
class Keypair:
    private_key: str = field(repr=False)
    address: str

    @classmethod
    def from_private_key(cls, private_key: str, expected_address: Optional[str] = None) -> "Keypair":
        """
        Derive the address for a private key.

        Args:
            private_key: Hex private key (0x prefix optional)
            expected_address: Address declared alongside the key, if any

        Raises:
            SigningFailedError: Key is unusable or does not match ``expected_address``
        """
        if not private_key.startswith("0x"):
            private_key = "0x" + private_key
        account = _account_from_key(private_key)
        if expected_address and expected_address.lower() != account.address.lower():
            raise SigningFailedError(
                f"Declared address {expected_address} does not match the private key."
            )
        return cls(private_key=private_key, address=account.address)

    def account(self) -> LocalAccount:
        """Signing handle for this keypair."""
        account = _account_from_key(self.private_key)
        if account.address.lower() != self.address.lower():
            raise SigningFailedError("Keypair address does not match its private key.")
        return account


def _account_from_key(private_key: str) -> LocalAccount:
    try:
        return Account.from_key(private_key)
    except Exception as exc:
        # Never echo key material into the message
        raise SigningFailedError("Private key is malformed or unusable.") from exc


def load_secret(env_path: Optional[Path] = None) -> str:
    """
    Load PRIVATE_KEY from .env file or environment, as written.

    Args:
        env_path: Path to .env file (default: ~/.ocsctl/.env)

    Raises:
        ConfigError: If PRIVATE_KEY is not set
    """
    env_path = env_path or OCSCTL_ENV

    if env_path.exists():
        load_dotenv(env_path, override=True)

    private_key = os.environ.get("PRIVATE_KEY")
    if not private_key:
        raise ConfigError(
            f"PRIVATE_KEY not found. Set PRIVATE_KEY in {env_path} or pass --wallet."
        )
    return private_key


def load_private_key(env_path: Optional[Path] = None) -> str:
    """0x-prefixed hex PRIVATE_KEY for the secp256k1 keypair."""
    private_key = load_secret(env_path)
    if not private_key.startswith("0x"):
        private_key = "0x" + private_key

    return private_key


def load_wallet(
    path: Path,
    from_private_key: Callable[[str, Optional[str]], Any] = Keypair.from_private_key,
) -> tuple[Any, Optional[str]]:
    """
    Load a wallet.json file.

    Args:
        path: Wallet file
        from_private_key: Keypair factory for the network the wallet belongs to

    Returns:
        Tuple of (keypair, rpc_url or None)
    """
    try:
        with path.open("r", encoding="utf-8") as f:
            wallet = json.load(f)
    except (OSError, json.JSONDecodeError) as exc:
        raise ConfigError(f"Cannot read wallet file {path}: {exc}") from exc

    if not isinstance(wallet, dict) or not isinstance(wallet.get("priv"), str):
        raise ConfigError(f"Wallet file {path} must contain a 'priv' key.")

    keypair = from_private_key(wallet["priv"], wallet.get("addr"))
    return keypair, wallet.get("rpc")


def load_keypair(env_path: Optional[Path] = None) -> Keypair:
    return Keypair.from_private_key(load_private_key(env_path))
