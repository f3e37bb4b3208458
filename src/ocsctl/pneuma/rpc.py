"""
HTTP client for an ocs01-style contract endpoint.

Lightweight: uses httpx for HTTP. Covers balance/nonce lookup, read-only
contract calls, transaction submission and status polling.

The rest of the package talks to the ``Endpoint`` protocol so tests can
substitute an in-memory implementation.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Protocol

import httpx

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 100.0


class EndpointError(RuntimeError):
    """Transport failure: the request may never have reached the remote."""


class EndpointRejection(RuntimeError):
    """The remote answered and explicitly refused the request."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class TxState(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    FAILED = "failed"


@dataclass(frozen=True)
class TxStatus:
    state: TxState
    reason: Optional[str] = None


@dataclass(frozen=True)
class AccountState:
    balance_raw: int
    nonce: int


class Endpoint(Protocol):
    def query(self, contract: str, method: str, params: list[Any], caller: str) -> Any:
        """Return the decoded JSON result of a read-only call.

        Raises EndpointRejection when the contract rejects the call.
        """
        ...

    def submit(self, transaction: dict[str, Any]) -> str:
        """Submit a signed transaction wire object; return its hash."""
        ...

    def get_status(self, tx_hash: str) -> TxStatus:
        ...

    def get_nonce(self, address: str) -> int:
        """Next nonce the account may use."""
        ...


class HttpEndpoint:
    """Endpoint speaking the ocs01 JSON API over HTTP."""

    FAILED_STATES = frozenset({"failed", "rejected", "error", "reverted"})

    def __init__(
        self,
        rpc_url: str,
        timeout: float = DEFAULT_TIMEOUT,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self.rpc_url = rpc_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    def _request(self, method: str, path: str, payload: Optional[dict[str, Any]] = None) -> Any:
        """
        Make an HTTP call and return the JSON body.

        Raises:
            EndpointError: Transport failure, HTTP 5xx or non-JSON body
            EndpointRejection: HTTP 4xx
        """
        url = f"{self.rpc_url}{path}"
        logger.debug("%s %s", method, url)
        try:
            with httpx.Client(timeout=self.timeout, transport=self._transport) as client:
                response = client.request(method, url, json=payload)
        except httpx.HTTPError as exc:
            raise EndpointError(f"{method} {path} failed: {exc}") from exc

        if response.status_code >= 500:
            # Gateway or server failure: the request may or may not have been applied.
            raise EndpointError(
                f"{method} {path} failed: HTTP {response.status_code} "
                f"{_error_message(response) or response.reason_phrase}".rstrip()
            )
        if response.status_code >= 400:
            raise EndpointRejection(
                _error_message(response) or f"HTTP {response.status_code}",
                status_code=response.status_code,
            )

        try:
            return response.json()
        except ValueError as exc:
            raise EndpointError(f"{method} {path} returned a non-JSON body") from exc

    # ---- account ----

    def get_account(self, address: str) -> AccountState:
        data = self._request("GET", f"/balance/{address}")
        try:
            return AccountState(balance_raw=int(data["balance_raw"]), nonce=int(data["nonce"]))
        except (KeyError, TypeError, ValueError) as exc:
            raise EndpointError(f"Malformed balance response: {data!r}") from exc

    def get_balance(self, address: str) -> int:
        return self.get_account(address).balance_raw

    def get_nonce(self, address: str) -> int:
        # The remote reports the last used nonce.
        return self.get_account(address).nonce + 1

    # ---- contract ----

    def query(self, contract: str, method: str, params: list[Any], caller: str) -> Any:
        data = self._request(
            "POST",
            "/contract/call-view",
            {"contract": contract, "method": method, "params": params, "caller": caller},
        )
        if not isinstance(data, dict):
            raise EndpointError(f"Malformed call-view response: {data!r}")
        if data.get("status") != "success":
            raise EndpointRejection(
                str(data.get("error") or data.get("message") or data.get("status") or "call rejected")
            )
        return data.get("result")

    def submit(self, transaction: dict[str, Any]) -> str:
        data = self._request("POST", "/call-contract", transaction)
        tx_hash = data.get("tx_hash") if isinstance(data, dict) else None
        if not tx_hash:
            raise EndpointRejection(f"No transaction hash in response: {data!r}")
        return str(tx_hash)

    def get_status(self, tx_hash: str) -> TxStatus:
        try:
            data = self._request("GET", f"/tx/{tx_hash}")
        except EndpointRejection as exc:
            if exc.status_code == 404:
                # Not indexed yet
                return TxStatus(TxState.PENDING)
            raise

        status = str(data.get("status", "")).lower() if isinstance(data, dict) else ""
        if status == "confirmed":
            return TxStatus(TxState.CONFIRMED)
        if status in self.FAILED_STATES:
            reason = data.get("error") or data.get("reason") or status
            return TxStatus(TxState.FAILED, str(reason))
        return TxStatus(TxState.PENDING)


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text.strip()
    if isinstance(body, dict):
        return str(body.get("error") or body.get("message") or body)
    return str(body)
