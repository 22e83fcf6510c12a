from __future__ import annotations

import logging
import threading

import pytest

from acc_director.commands import (
    CallbackSink,
    CommandSink,
    LoggingSink,
    QueuedCommandSink,
    RequestHudPage,
    SetCamera,
    SetFocus,
    command_to_mapping,
)
from acc_director.director.settings import DirectorSettings


def test_command_mappings() -> None:
    assert command_to_mapping(SetFocus(4)) == {"command": "set_focus", "car_index": 4}
    assert command_to_mapping(SetCamera("set1", "cam2")) == {
        "command": "set_camera",
        "camera_set": "set1",
        "camera_name": "cam2",
    }
    assert command_to_mapping(RequestHudPage("Basic")) == {
        "command": "request_hud_page",
        "page": "Basic",
    }
    with pytest.raises(TypeError):
        command_to_mapping("set_focus")  # type: ignore[arg-type]


def test_sinks_satisfy_protocol() -> None:
    assert isinstance(CallbackSink(lambda command: None), CommandSink)
    assert isinstance(LoggingSink(), CommandSink)
    assert isinstance(QueuedCommandSink(lambda command: None), CommandSink)


def test_callback_sink_delivers_synchronously() -> None:
    received = []
    sink = CallbackSink(received.append)

    sink.submit(SetFocus(1))

    assert received == [SetFocus(1)]


def test_logging_sink_emits_structured_record(caplog: pytest.LogCaptureFixture) -> None:
    target = logging.getLogger("acc_director.tests.commands")
    sink = LoggingSink(target)

    with caplog.at_level(logging.INFO, logger=target.name):
        sink.submit(SetFocus(7))

    (record,) = caplog.records
    assert record.event == "commands.submit"
    assert record.context == {"command": "set_focus", "car_index": 7}


def test_queued_sink_delivers_in_order() -> None:
    delivered = []
    with QueuedCommandSink(delivered.append, max_size=8) as sink:
        for index in range(5):
            sink.submit(SetFocus(index))
        assert sink.flush(timeout=2.0)

    assert delivered == [SetFocus(index) for index in range(5)]
    assert sink.statistics == {"submitted": 5, "delivered": 5, "dropped": 0, "failed": 0}
    assert not sink.running


def test_queued_sink_drops_oldest_when_full(caplog: pytest.LogCaptureFixture) -> None:
    delivered = []
    sink = QueuedCommandSink(delivered.append, max_size=2)

    with caplog.at_level(logging.WARNING, logger="acc_director.commands"):
        for index in range(3):
            sink.submit(SetFocus(index))

    sink.start()
    try:
        assert sink.flush(timeout=2.0)
    finally:
        sink.close()

    assert delivered == [SetFocus(1), SetFocus(2)]
    assert sink.statistics["dropped"] == 1
    assert [record.event for record in caplog.records] == ["commands.dropped"]


def test_submit_does_not_wait_for_slow_transport() -> None:
    release = threading.Event()
    delivered = []

    def transport(command):
        release.wait(2.0)
        delivered.append(command)

    with QueuedCommandSink(transport, max_size=4) as sink:
        for index in range(3):
            sink.submit(SetFocus(index))
        assert delivered == []
        release.set()
        assert sink.flush(timeout=2.0)

    assert delivered == [SetFocus(0), SetFocus(1), SetFocus(2)]


def test_transport_failures_are_counted(caplog: pytest.LogCaptureFixture) -> None:
    delivered = []

    def transport(command):
        if command == SetFocus(13):
            raise ConnectionResetError("client disconnected")
        delivered.append(command)

    with caplog.at_level(logging.ERROR, logger="acc_director.commands"):
        with QueuedCommandSink(transport) as sink:
            for index in (12, 13, 14):
                sink.submit(SetFocus(index))
            assert sink.flush(timeout=2.0)

    assert delivered == [SetFocus(12), SetFocus(14)]
    assert sink.statistics["failed"] == 1
    assert any(record.event == "commands.failed" for record in caplog.records)


def test_commands_after_close_are_dropped() -> None:
    delivered = []
    sink = QueuedCommandSink(delivered.append)
    sink.start()
    sink.close()

    sink.submit(SetFocus(1))

    assert delivered == []
    assert sink.statistics["dropped"] == 1
    assert sink.statistics["submitted"] == 0


def test_queue_size_must_be_positive() -> None:
    with pytest.raises(ValueError):
        QueuedCommandSink(lambda command: None, max_size=0)


def test_queue_size_comes_from_director_settings() -> None:
    settings = DirectorSettings.from_config({"director": {"command_queue_size": 3}})
    sink = QueuedCommandSink.from_settings(lambda command: None, settings)

    assert sink.max_size == 3
    for index in range(5):
        sink.submit(SetFocus(index))
    assert sink.statistics["dropped"] == 2


def test_flush_without_worker_returns_immediately() -> None:
    sink = QueuedCommandSink(lambda command: None)

    assert sink.flush()
    sink.submit(SetFocus(1))
    assert sink.flush() is False


def test_timed_out_close_keeps_a_single_worker() -> None:
    release = threading.Event()
    delivered = []

    def transport(command):
        release.wait(2.0)
        delivered.append(command)

    sink = QueuedCommandSink(transport, name="slow-commands")
    sink.start()
    sink.submit(SetFocus(1))
    sink.submit(SetFocus(2))

    sink.close(timeout=0.01)
    assert sink.running
    sink.start()
    assert [thread.name for thread in threading.enumerate()].count("slow-commands") == 1

    release.set()
    sink.close(timeout=2.0)

    assert not sink.running
    assert delivered == [SetFocus(1), SetFocus(2)]
