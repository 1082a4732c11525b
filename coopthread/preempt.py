"""Timer-driven preemption of running contexts.

While preemption is active, code running in threads started after
:func:`start` is checked for elapsed processor time; every ``1 / HZ`` seconds
of it the :data:`tick_handler` is called, which is expected to yield.
Code of this package and of :mod:`threading` is never interrupted.
"""

from __future__ import annotations

import os
import threading
import time
from typing import Any, Callable, Optional

HZ = 100
INTERVAL = 1.0 / HZ

#: Called on every tick while preemption is active and enabled.
tick_handler: Optional[Callable[[], None]] = None

_PACKAGE_DIR = os.path.dirname(os.path.abspath(__file__)) + os.sep
_THREADING_FILE = os.path.abspath(threading.__file__)


def _untraced(filename: str) -> bool:
    path = os.path.abspath(filename) if filename else ""
    return path.startswith(_PACKAGE_DIR) or path == _THREADING_FILE


class _Timer:
    def __init__(self) -> None:
        self.active = False
        self.blocked = False
        self.pending = False
        self.next_tick = 0.0
        self.previous_trace: Any = None
        self.local = threading.local()

    def trace(self, frame: Any, event: str, arg: Any) -> Any:
        if event == "call" and _untraced(frame.f_code.co_filename):
            return None
        self.tick()
        return self.trace

    def tick(self) -> None:
        if not self.active or getattr(self.local, "busy", False):
            return
        now = time.process_time()
        if now < self.next_tick:
            return
        self.next_tick = now + INTERVAL
        if self.blocked:
            self.pending = True
            return
        self.fire()

    def fire(self) -> None:
        handler = tick_handler
        if handler is None:
            return
        self.local.busy = True
        try:
            handler()
        finally:
            self.local.busy = False


_timer = _Timer()


def start(preempt: bool) -> None:
    """Start preemption at ``HZ`` ticks per second; do nothing if ``preempt`` is false."""
    if not preempt:
        return
    if not _timer.active:
        _timer.previous_trace = threading.gettrace()
        threading.settrace(_timer.trace)
    _timer.active = True
    _timer.blocked = False
    _timer.pending = False
    _timer.next_tick = time.process_time() + INTERVAL


def stop() -> None:
    """Stop preemption and restore the previous thread trace function."""
    if not _timer.active:
        return
    threading.settrace(_timer.previous_trace)
    _timer.previous_trace = None
    _timer.active = False
    _timer.blocked = False
    _timer.pending = False


def enable() -> None:
    """Let ticks through again, delivering one that arrived while disabled."""
    if not _timer.active:
        return
    _timer.blocked = False
    if _timer.pending:
        _timer.pending = False
        _timer.fire()


def disable() -> None:
    """Hold back ticks until :func:`enable` is called."""
    if not _timer.active:
        return
    _timer.blocked = True


def is_active() -> bool:
    """Return whether preemption has been started and not stopped."""
    return _timer.active