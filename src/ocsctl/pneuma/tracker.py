"""
Submission & Confirmation Tracker.

``submit`` sends a signed transaction once; a rejection is never retried
here because a retry needs a fresh nonce, which makes it a new transaction.

``await_confirmation`` polls at a fixed interval. Running out of time (or
being cancelled) leaves the transaction's fate unknown and is reported as
such, never as success or failure.
"""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from ..errors import (
    ConfirmationCancelledError,
    ConfirmationTimeoutError,
    RejectedError,
    SubmitNetworkError,
)
from .rpc import Endpoint, EndpointError, EndpointRejection, TxState
from .tx import SignedTransaction

logger = logging.getLogger(__name__)

DEFAULT_POLL_INTERVAL = 5.0
DEFAULT_CONFIRM_TIMEOUT = 100.0


class ConfirmationStatus(str, Enum):
    CONFIRMED = "confirmed"
    FAILED = "failed"


@dataclass(frozen=True)
class ConfirmationOutcome:
    tx_hash: str
    status: ConfirmationStatus
    reason: Optional[str] = None
    polls: int = 0

    @property
    def confirmed(self) -> bool:
        return self.status is ConfirmationStatus.CONFIRMED


class ConfirmationTracker:
    def __init__(
        self,
        endpoint: Endpoint,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        if poll_interval <= 0:
            raise ValueError("poll_interval must be positive")
        self.endpoint = endpoint
        self.poll_interval = poll_interval
        self._clock = clock
        self._sleep = sleep

    def submit(self, tx: SignedTransaction) -> str:
        """
        Send a signed transaction.

        Returns:
            Transaction hash (receipt id) to poll

        Raises:
            RejectedError: The remote refused it (stale nonce, balance...)
            SubmitNetworkError: Transport failure; acceptance is unknown
        """
        try:
            tx_hash = self.endpoint.submit(tx.to_wire())
        except EndpointRejection as exc:
            raise RejectedError(f"Transaction rejected: {exc}") from exc
        except EndpointError as exc:
            raise SubmitNetworkError(f"Submission failed: {exc}") from exc
        logger.info("submitted %s nonce=%d tx=%s", tx.draft.method, tx.draft.nonce, tx_hash)
        return tx_hash

    def await_confirmation(
        self,
        tx_hash: str,
        timeout: float = DEFAULT_CONFIRM_TIMEOUT,
        cancel: Optional[threading.Event] = None,
    ) -> ConfirmationOutcome:
        """
        Poll until the transaction is final, the timeout elapses or ``cancel`` is set.

        Returns:
            ConfirmationOutcome (confirmed, or failed with the ledger's reason)

        Raises:
            ConfirmationTimeoutError: Still pending when the timeout elapsed
            ConfirmationCancelledError: Operator aborted the wait
        """
        deadline = self._clock() + timeout
        polls = 0
        while True:
            if cancel is not None and cancel.is_set():
                raise ConfirmationCancelledError(
                    f"Stopped waiting for {tx_hash}; its outcome is unknown.", tx_hash=tx_hash
                )

            polls += 1
            try:
                status = self.endpoint.get_status(tx_hash)
            except (EndpointError, EndpointRejection) as exc:
                logger.warning("status poll for %s failed: %s", tx_hash, exc)
            else:
                if status.state is TxState.CONFIRMED:
                    logger.info("confirmed %s after %d poll(s)", tx_hash, polls)
                    return ConfirmationOutcome(tx_hash, ConfirmationStatus.CONFIRMED, polls=polls)
                if status.state is TxState.FAILED:
                    logger.info("failed %s: %s", tx_hash, status.reason)
                    return ConfirmationOutcome(
                        tx_hash, ConfirmationStatus.FAILED, reason=status.reason, polls=polls
                    )

            remaining = deadline - self._clock()
            if remaining <= 0:
                raise ConfirmationTimeoutError(
                    f"{tx_hash} not final within {timeout:g}s; it may still confirm later.",
                    tx_hash=tx_hash,
                )
            self._wait(min(self.poll_interval, remaining), cancel)

    def _wait(self, seconds: float, cancel: Optional[threading.Event]) -> None:
        if cancel is not None:
            cancel.wait(seconds)
        else:
            self._sleep(seconds)
