from __future__ import annotations

import threading

import pytest
from fakes import FakeChannel, echo_accepted, silent

from ledctl.core.correlator import AwaitingReply, Idle, ResponseCorrelator, classify_reply
from ledctl.core.errors import CommandInFlightError, NotConnectedError, SerialWriteError
from ledctl.core.model import ReplyStatus


def _open_channel(**kwargs) -> FakeChannel:
    channel = FakeChannel(**kwargs)
    channel.connect()
    return channel


def test_classify_reply() -> None:
    assert classify_reply("ACCEPTED,ON") is ReplyStatus.ACCEPTED
    assert classify_reply("REJECT,FOO,unknown command") is ReplyStatus.REJECTED
    assert classify_reply("ACCEPTED") is None
    assert classify_reply("Ready") is None
    assert classify_reply("accepted,ON") is None


def test_accepted_reply_resolves() -> None:
    channel = _open_channel(responder=echo_accepted)
    correlator = ResponseCorrelator(channel, timeout_s=1.0)

    outcome = correlator.send_and_await("ON\n")

    assert outcome.status is ReplyStatus.ACCEPTED
    assert outcome.payload == "ACCEPTED,ON"
    assert channel.written == ["ON\n"]
    assert isinstance(correlator.state, Idle)


def test_rejected_reply_is_soft_outcome() -> None:
    channel = _open_channel(responder=lambda cmd: ["REJECT,FOO,unknown command"])
    outcome = ResponseCorrelator(channel, timeout_s=1.0).send_and_await("FOO\n")
    assert outcome.status is ReplyStatus.REJECTED
    assert outcome.payload == "REJECT,FOO,unknown command"


def test_non_protocol_lines_are_ignored() -> None:
    channel = _open_channel(responder=lambda cmd: ["Ready", "", "debug: led=1", "ACCEPTED,OFF"])
    outcome = ResponseCorrelator(channel, timeout_s=1.0).send_and_await("OFF\n")
    assert outcome.status is ReplyStatus.ACCEPTED
    assert outcome.payload == "ACCEPTED,OFF"


def test_timeout_is_not_an_error() -> None:
    channel = _open_channel(responder=silent)
    correlator = ResponseCorrelator(channel, timeout_s=0.05)

    outcome = correlator.send_and_await("ON\n")

    assert outcome.status is ReplyStatus.TIMED_OUT
    assert outcome.payload is None
    assert isinstance(correlator.state, Idle)


def test_second_command_after_timeout_succeeds() -> None:
    replies = iter([[], ["ACCEPTED,OFF"]])
    channel = _open_channel(responder=lambda cmd: next(replies))
    correlator = ResponseCorrelator(channel, timeout_s=0.05)

    first = correlator.send_and_await("ON\n")
    second = correlator.send_and_await("OFF\n")

    assert first.status is ReplyStatus.TIMED_OUT
    assert second.status is ReplyStatus.ACCEPTED
    assert second.payload == "ACCEPTED,OFF"


def test_second_command_after_accept_succeeds() -> None:
    channel = _open_channel(responder=echo_accepted)
    correlator = ResponseCorrelator(channel, timeout_s=1.0)
    assert correlator.send_and_await("ON\n").payload == "ACCEPTED,ON"
    assert correlator.send_and_await("OFF\n").payload == "ACCEPTED,OFF"


def test_stale_input_is_discarded_before_send() -> None:
    channel = _open_channel(replies=["ACCEPTED,ON"], responder=lambda cmd: ["ACCEPTED,OFF"])
    outcome = ResponseCorrelator(channel, timeout_s=1.0).send_and_await("OFF\n")
    assert outcome.payload == "ACCEPTED,OFF"
    assert channel.discards == 1


def test_not_connected_fails_immediately() -> None:
    channel = FakeChannel()
    with pytest.raises(NotConnectedError):
        ResponseCorrelator(channel).send_and_await("ON\n")
    assert channel.written == []


def test_write_failure_propagates_and_resets_state() -> None:
    channel = _open_channel(fail_write=True)
    correlator = ResponseCorrelator(channel, timeout_s=1.0)
    with pytest.raises(SerialWriteError):
        correlator.send_and_await("ON\n")
    assert isinstance(correlator.state, Idle)


def test_concurrent_send_fails_fast() -> None:
    started = threading.Event()
    release = threading.Event()

    class BlockingChannel(FakeChannel):
        def read_line(self, timeout_s: float) -> str | None:
            started.set()
            release.wait(1.0)
            return "ACCEPTED,ON"

    channel = BlockingChannel()
    channel.connect()
    correlator = ResponseCorrelator(channel, timeout_s=2.0)
    results = []
    worker = threading.Thread(target=lambda: results.append(correlator.send_and_await("ON\n")))
    worker.start()
    try:
        assert started.wait(1.0)
        assert isinstance(correlator.state, AwaitingReply)
        with pytest.raises(CommandInFlightError):
            correlator.send_and_await("OFF\n")
    finally:
        release.set()
        worker.join(2.0)

    assert results[0].status is ReplyStatus.ACCEPTED
    assert channel.written == ["ON\n"]


def test_non_positive_timeout_rejected() -> None:
    with pytest.raises(ValueError):
        ResponseCorrelator(FakeChannel(), timeout_s=0)
