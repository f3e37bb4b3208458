from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from dotenv import load_dotenv

from .errors import ConfigError
from .networks import NETWORKS
from .sigil.keys import OCSCTL_ENV

DEFAULT_RPC_URL = "http://localhost:8080"
DEFAULT_INTERFACE = "exec_interface.json"
DEFAULT_NETWORK = "evm"


@dataclass(frozen=True)
class ClientConfig:
    # None defers to the wallet file, then DEFAULT_RPC_URL
    rpc_url: Optional[str] = None
    network: str = DEFAULT_NETWORK
    interface_path: Path = Path(DEFAULT_INTERFACE)
    request_timeout: float = 100.0
    poll_interval: float = 5.0
    confirm_timeout: float = 100.0
    # Automatic rebuild-and-resubmit attempts after a rejection; 0 leaves it to the operator.
    reject_retries: int = 0
    fee_ou: int = 1

    @classmethod
    def from_env(
        cls,
        env_path: Optional[Path] = None,
        environ: Optional[Mapping[str, str]] = None,
    ) -> "ClientConfig":
        """
        Build configuration from the environment.

        Loads ``env_path`` (default ~/.ocsctl/.env) with python-dotenv first
        unless an explicit ``environ`` mapping is given.

        Raises:
            ConfigError: A numeric setting is malformed or out of range
                or the network is unknown
        """
        if environ is None:
            env_path = env_path or OCSCTL_ENV
            if env_path.exists():
                load_dotenv(env_path, override=False)
            environ = os.environ

        config = cls(
            rpc_url=environ.get("OCSCTL_RPC_URL") or None,
            network=environ.get("OCSCTL_NETWORK") or DEFAULT_NETWORK,
            interface_path=Path(environ.get("OCSCTL_INTERFACE", DEFAULT_INTERFACE)),
            request_timeout=_number(environ, "OCSCTL_REQUEST_TIMEOUT", 100.0),
            poll_interval=_number(environ, "OCSCTL_POLL_INTERVAL", 5.0),
            confirm_timeout=_number(environ, "OCSCTL_CONFIRM_TIMEOUT", 100.0),
            reject_retries=int(_number(environ, "OCSCTL_REJECT_RETRIES", 0, integral=True)),
            fee_ou=int(_number(environ, "OCSCTL_FEE_OU", 1, integral=True)),
        )
        config.validate()
        return config

    def validate(self) -> None:
        if self.network not in NETWORKS:
            raise ConfigError(
                f"OCSCTL_NETWORK must be one of {', '.join(sorted(NETWORKS))}, got {self.network!r}"
            )
        if self.request_timeout <= 0 or self.poll_interval <= 0 or self.confirm_timeout <= 0:
            raise ConfigError("Timeouts and poll interval must be positive.")
        if self.reject_retries < 0:
            raise ConfigError("OCSCTL_REJECT_RETRIES must not be negative.")
        if self.fee_ou < 0:
            raise ConfigError("OCSCTL_FEE_OU must not be negative.")


def _number(environ: Mapping[str, str], name: str, default: float, integral: bool = False) -> float:
    raw = environ.get(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw) if integral else float(raw)
    except ValueError as exc:
        raise ConfigError(f"{name} must be a number, got {raw!r}") from exc
