import threading
import time

import pytest

from coopthread import preempt


@pytest.fixture(autouse=True)
def clean_preempt():
    yield
    preempt.stop()
    preempt.tick_handler = None


def _spin(seconds, done=lambda: False):
    deadline = time.process_time() + seconds
    wall_limit = time.monotonic() + 10
    while time.process_time() < deadline and time.monotonic() < wall_limit:
        if done():
            break


def _in_new_thread(body):
    thread = threading.Thread(target=body)
    thread.start()
    thread.join()


def test_start_false_leaves_inactive():
    preempt.start(False)
    assert preempt.is_active() is False


def test_start_and_stop_toggle_active():
    preempt.start(True)
    assert preempt.is_active() is True
    preempt.stop()
    assert preempt.is_active() is False


def test_stop_restores_previous_trace():
    previous = threading.gettrace()
    preempt.start(True)
    assert preempt.is_active() is True
    assert threading.gettrace() is not previous
    preempt.stop()
    assert preempt.is_active() is False
    assert threading.gettrace() is previous


def test_ticks_reach_handler_in_new_threads():
    ticks = []
    preempt.tick_handler = lambda: ticks.append(threading.get_ident())
    preempt.start(True)
    idents = []

    def body():
        idents.append(threading.get_ident())
        _spin(0.5, done=lambda: len(ticks) >= 2)

    _in_new_thread(body)
    assert preempt.is_active() is True
    assert len(ticks) >= 2
    assert set(ticks) == set(idents)


def test_disabled_ticks_are_held_until_enable():
    ticks = []
    preempt.tick_handler = lambda: ticks.append(1)
    preempt.start(True)
    counts = {}

    def body():
        preempt.disable()
        _spin(0.05)
        counts["held"] = len(ticks)
        preempt.enable()
        counts["released"] = len(ticks)

    _in_new_thread(body)
    assert preempt.is_active() is True
    assert counts["held"] == 0
    assert counts["released"] >= 1


def test_enable_without_pending_does_not_fire():
    ticks = []
    preempt.tick_handler = lambda: ticks.append(1)
    preempt.start(True)
    preempt.disable()
    preempt.enable()
    assert preempt.is_active() is True
    assert ticks == []


def test_no_ticks_after_stop():
    ticks = []
    preempt.tick_handler = lambda: ticks.append(1)
    preempt.start(True)
    preempt.stop()
    _in_new_thread(lambda: _spin(0.05))
    assert preempt.is_active() is False
    assert ticks == []


def test_inactive_enable_and_disable_are_ineffective():
    ticks = []
    preempt.tick_handler = lambda: ticks.append(1)
    preempt.disable()
    preempt.enable()
    assert preempt.is_active() is False
    assert ticks == []