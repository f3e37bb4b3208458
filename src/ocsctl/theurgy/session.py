from __future__ import annotations

from dataclasses import dataclass
from functools import cached_property
from pathlib import Path
from typing import Optional

import httpx

from ..config import DEFAULT_RPC_URL, ClientConfig
from ..dispatch import Dispatcher
from ..networks import AnyKeypair, NetworkProfile, get_network
from ..pneuma.rpc import HttpEndpoint
from ..schema.models import InterfaceSchema
from ..sigil.keys import load_secret, load_wallet


@dataclass
class Session:
    """Per-run state; each piece is loaded on first use and then fixed."""

    config: ClientConfig
    rpc_url: Optional[str] = None
    wallet_path: Optional[Path] = None
    env_path: Optional[Path] = None
    transport: Optional[httpx.BaseTransport] = None

    @cached_property
    def network(self) -> NetworkProfile:
        return get_network(self.config.network)

    @cached_property
    def schema(self) -> InterfaceSchema:
        return InterfaceSchema.from_path(self.config.interface_path, addresses=self.network.addresses)

    @cached_property
    def _wallet(self) -> tuple[AnyKeypair, Optional[str]]:
        if self.wallet_path is not None:
            return load_wallet(self.wallet_path, self.network.keypair)
        return self.network.keypair(load_secret(self.env_path)), None

    @property
    def keypair(self) -> AnyKeypair:
        return self._wallet[0]

    @cached_property
    def endpoint(self) -> HttpEndpoint:
        # --rpc-url, then OCSCTL_RPC_URL (shell or dotenv), then the wallet's rpc
        url = self.rpc_url or self.config.rpc_url or self._wallet[1] or DEFAULT_RPC_URL
        return HttpEndpoint(url, timeout=self.config.request_timeout, transport=self.transport)

    @cached_property
    def dispatcher(self) -> Dispatcher:
        return Dispatcher(self.schema, self.endpoint, self.keypair, self.config)
