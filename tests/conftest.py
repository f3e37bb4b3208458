"""Shared fixtures: fixed keypair, sample interface, in-memory endpoint."""

from __future__ import annotations

import copy
from collections import deque
from typing import Any, Optional

import pytest

from ocsctl.pneuma.rpc import EndpointError, EndpointRejection, TxState, TxStatus
from ocsctl.schema.models import InterfaceSchema
from ocsctl.sigil.keys import Keypair

# Well-known test key; never use it for anything real.
PRIVATE_KEY = "0x4c0883a69102937d6231471b5dbb6204fe5129617082792ae468d01a3f362318"
OTHER_PRIVATE_KEY = "0x" + "22" * 32

# RFC 8032 ed25519 test vector 1 (seed and public key), base64
OCTRA_SEED = "nWGxne/9WmC6hEr0kuwsxERJxWl7MmkZcDusAxyuf2A="
OCTRA_PUBLIC_KEY = "11qYAYKxCrfVS/7TyWQHOg7hcvPapiMlrwIaaPcHURo="
OCTRA_ADDRESS = "oct3HhGPB6ht33n51YFaocqBtGePb3xqT4VgnjYbd81eeZW"
OCTRA_CONTRACT = "octBUHw585BrAMPMLQvGuWx4vqEsybYH9N7a3WNj1WBwrDn"

CONTRACT = "0x" + "ab" * 20
ALICE = "0x" + "11" * 20
BOB = "0x" + "22" * 20

INTERFACE_DOC: dict[str, Any] = {
    "contract": CONTRACT,
    "methods": [
        {
            "name": "balance_of",
            "label": "Balance of an account",
            "mutability": "view",
            "parameters": [{"name": "owner", "type": "address"}],
            "returns": "uint64",
        },
        {
            "name": "get_name",
            "mutability": "view",
            "parameters": [],
            "returns": "string",
        },
        {
            "name": "get_info",
            "type": "view",
            "params": [],
        },
        {
            "name": "transfer",
            "label": "Transfer tokens",
            "mutability": "call",
            "parameters": [
                {"name": "to", "type": "address", "example": ALICE},
                {"name": "amount", "type": "number", "max": 1000000},
            ],
        },
        {
            "name": "batch_pay",
            "mutability": "call",
            "parameters": [
                {
                    "name": "payments",
                    "type": "tuple[]",
                    "components": [
                        {"name": "to", "type": "address"},
                        {"name": "amount", "type": "uint32"},
                    ],
                },
                {"name": "memo", "type": "bytes"},
                {"name": "urgent", "type": "bool"},
            ],
        },
    ],
}


class FakeEndpoint:
    """In-memory Endpoint recording every remote operation."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, Any]] = []
        self.query_results: dict[str, Any] = {}
        self.nonce = 1
        self.submit_responses: deque[Any] = deque()
        self.statuses: deque[Any] = deque()
        self.submitted: list[dict[str, Any]] = []
        self._tx_counter = 0

    # ---- Endpoint protocol ----

    def query(self, contract: str, method: str, params: list[Any], caller: str) -> Any:
        self.calls.append(("query", (contract, method, params, caller)))
        result = self.query_results.get(method)
        if isinstance(result, Exception):
            raise result
        return result

    def submit(self, transaction: dict[str, Any]) -> str:
        self.calls.append(("submit", transaction))
        self.submitted.append(copy.deepcopy(transaction))
        if self.submit_responses:
            response = self.submit_responses.popleft()
            if isinstance(response, Exception):
                raise response
            return response
        self._tx_counter += 1
        return f"tx{self._tx_counter:04d}"

    def get_status(self, tx_hash: str) -> TxStatus:
        self.calls.append(("get_status", tx_hash))
        if not self.statuses:
            return TxStatus(TxState.PENDING)
        status = self.statuses.popleft()
        if isinstance(status, Exception):
            raise status
        return status

    def get_nonce(self, address: str) -> int:
        self.calls.append(("get_nonce", address))
        nonce = self.nonce
        self.nonce += 1
        return nonce

    # ---- helpers ----

    def count(self, name: str) -> int:
        return sum(1 for call, _ in self.calls if call == name)

    @property
    def network_used(self) -> bool:
        return bool(self.calls)


class FakeClock:
    """Monotonic clock whose sleep just advances time."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


@pytest.fixture()
def interface_doc() -> dict[str, Any]:
    return copy.deepcopy(INTERFACE_DOC)


@pytest.fixture()
def schema(interface_doc: dict[str, Any]) -> InterfaceSchema:
    return InterfaceSchema.from_dict(interface_doc)


@pytest.fixture()
def keypair() -> Keypair:
    return Keypair.from_private_key(PRIVATE_KEY)


@pytest.fixture()
def endpoint() -> FakeEndpoint:
    return FakeEndpoint()


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


def rejection(message: str = "stale nonce", status_code: Optional[int] = 400) -> EndpointRejection:
    return EndpointRejection(message, status_code=status_code)


def network_down(message: str = "connection refused") -> EndpointError:
    return EndpointError(message)
