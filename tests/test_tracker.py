"""Tests for submission and confirmation tracking."""

from __future__ import annotations

import threading

import pytest

from conftest import ALICE, FakeClock, FakeEndpoint, network_down, rejection
from ocsctl.errors import (
    ConfirmationCancelledError,
    ConfirmationTimeoutError,
    RejectedError,
    SubmitNetworkError,
)
from ocsctl.pneuma.rpc import TxState, TxStatus
from ocsctl.pneuma.tracker import ConfirmationStatus, ConfirmationTracker
from ocsctl.pneuma.tx import SignedTransaction, TransactionBuilder
from ocsctl.schema.models import InterfaceSchema
from ocsctl.sigil.keys import Keypair


@pytest.fixture()
def tracker(endpoint: FakeEndpoint, clock: FakeClock) -> ConfirmationTracker:
    return ConfirmationTracker(endpoint, poll_interval=5.0, clock=clock, sleep=clock.sleep)


@pytest.fixture()
def signed(schema: InterfaceSchema, keypair: Keypair) -> SignedTransaction:
    method = schema.lookup("transfer")
    assert method is not None
    return TransactionBuilder(schema.contract).build_and_sign(method, [ALICE, "10"], keypair, 1)


class TestSubmit:
    def test_returns_receipt_id(self, tracker: ConfirmationTracker, endpoint: FakeEndpoint, signed: SignedTransaction) -> None:
        assert tracker.submit(signed) == "tx0001"
        assert endpoint.submitted[0]["signature"] == signed.signature

    def test_rejection_is_not_retried(self, tracker: ConfirmationTracker, endpoint: FakeEndpoint, signed: SignedTransaction) -> None:
        endpoint.submit_responses.append(rejection("stale nonce"))
        with pytest.raises(RejectedError, match="stale nonce"):
            tracker.submit(signed)
        assert endpoint.count("submit") == 1

    def test_transport_failure(self, tracker: ConfirmationTracker, endpoint: FakeEndpoint, signed: SignedTransaction) -> None:
        endpoint.submit_responses.append(network_down())
        with pytest.raises(SubmitNetworkError):
            tracker.submit(signed)


class TestAwaitConfirmation:
    def test_confirmed_after_pending(self, tracker: ConfirmationTracker, endpoint: FakeEndpoint, clock: FakeClock) -> None:
        endpoint.statuses.extend([TxStatus(TxState.PENDING), TxStatus(TxState.CONFIRMED)])
        outcome = tracker.await_confirmation("tx1", timeout=60)
        assert outcome.confirmed
        assert outcome.polls == 2
        assert clock.sleeps == [5.0]

    def test_execution_failure_is_an_outcome(self, tracker: ConfirmationTracker, endpoint: FakeEndpoint) -> None:
        endpoint.statuses.append(TxStatus(TxState.FAILED, "out of gas"))
        outcome = tracker.await_confirmation("tx1", timeout=60)
        assert outcome.status is ConfirmationStatus.FAILED
        assert outcome.reason == "out of gas"
        assert not outcome.confirmed

    def test_timeout_reports_unknown(self, tracker: ConfirmationTracker, endpoint: FakeEndpoint, clock: FakeClock) -> None:
        with pytest.raises(ConfirmationTimeoutError) as excinfo:
            tracker.await_confirmation("tx1", timeout=12)
        assert excinfo.value.tx_hash == "tx1"
        assert clock.sleeps == [5.0, 5.0, 2.0]
        assert endpoint.count("get_status") == 4

    def test_transient_poll_errors_are_tolerated(self, tracker: ConfirmationTracker, endpoint: FakeEndpoint) -> None:
        endpoint.statuses.extend([network_down(), TxStatus(TxState.CONFIRMED)])
        assert tracker.await_confirmation("tx1", timeout=60).confirmed

    def test_cancel_stops_polling(self, tracker: ConfirmationTracker, endpoint: FakeEndpoint) -> None:
        cancel = threading.Event()
        cancel.set()
        with pytest.raises(ConfirmationCancelledError):
            tracker.await_confirmation("tx1", timeout=60, cancel=cancel)
        assert endpoint.count("get_status") == 0

    def test_cancel_during_poll_interrupts_the_wait(
        self, tracker: ConfirmationTracker, endpoint: FakeEndpoint, clock: FakeClock, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        cancel = threading.Event()
        poll = endpoint.get_status

        def pending_then_abort(tx_hash: str) -> TxStatus:
            status = poll(tx_hash)
            cancel.set()
            return status

        monkeypatch.setattr(endpoint, "get_status", pending_then_abort)
        with pytest.raises(ConfirmationCancelledError) as excinfo:
            tracker.await_confirmation("tx1", timeout=60, cancel=cancel)

        assert excinfo.value.tx_hash == "tx1"
        assert endpoint.count("get_status") == 1
        # the interval wait goes through the event, never the injected sleep
        assert clock.sleeps == []

    def test_poll_interval_must_be_positive(self, endpoint: FakeEndpoint) -> None:
        with pytest.raises(ValueError):
            ConfirmationTracker(endpoint, poll_interval=0)
