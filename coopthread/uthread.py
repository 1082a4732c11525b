"""Cooperative user-level threads, optionally preempted by a timer.

:func:`run` turns the calling thread into the idle thread and schedules the
threads created with :func:`create` in first-in first-out order until none of
them can run any more.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any, Callable, List, NoReturn, Optional

from . import preempt as _preempt
from .context import Context, ContextError, switch
from .fifo import Queue


class UThreadError(RuntimeError):
    """Raised when a thread operation cannot be carried out."""


class ThreadState(enum.Enum):
    """Scheduling state of a thread."""

    RUNNING = 0
    READY = 1
    EXITED = 2
    BLOCKED = 3


@dataclass(eq=False)
class _TCB:
    """Thread control block."""

    ctx: Context
    state: ThreadState


@dataclass(eq=False)
class _Scheduler:
    ready: Queue = field(default_factory=Queue)
    idle: _TCB = field(default_factory=lambda: _TCB(Context(), ThreadState.RUNNING))
    current: Optional[_TCB] = None
    threads: List[_TCB] = field(default_factory=list)
    error: Optional[BaseException] = None

    def __post_init__(self) -> None:
        self.current = self.idle


_sched: Optional[_Scheduler] = None


def _require() -> _Scheduler:
    if _sched is None:
        raise UThreadError("no threads are running")
    return _sched


def _thread_main(payload: Any) -> None:
    func, arg = payload
    try:
        func(arg)
    except Exception as exc:  # a failing thread must not take the others down
        if _sched is not None and _sched.error is None:
            _sched.error = exc
    exit_()


def _schedule(sched: _Scheduler) -> None:
    """Hand the processor to the next ready thread.

    A thread that blocks or exits while no other thread is ready hands the
    processor back to the idle thread.
    """
    cur = sched.current
    assert cur is not None
    if len(sched.ready) > 0:
        nxt = sched.ready.dequeue()
    elif cur is sched.idle or cur.state is ThreadState.RUNNING:
        return
    else:
        nxt = sched.idle
    if cur.state is ThreadState.RUNNING:
        cur.state = ThreadState.READY
    if cur is not sched.idle and cur.state is ThreadState.READY:
        sched.ready.enqueue(cur)
    sched.current = nxt
    nxt.state = ThreadState.RUNNING
    switch(cur.ctx, nxt.ctx)


def current() -> Optional[_TCB]:
    """Return the running thread's control block, or ``None`` outside :func:`run`."""
    return None if _sched is None else _sched.current


def create(func: Callable[[Any], Any], arg: Any = None) -> None:
    """Create a thread that runs ``func(arg)`` and queue it as ready."""
    sched = _require()
    if func is None or not callable(func):
        raise UThreadError("thread function must be callable")
    try:
        ctx = Context(_thread_main, (func, arg))
    except ContextError as exc:
        raise UThreadError(str(exc)) from exc
    tcb = _TCB(ctx, ThreadState.READY)
    sched.threads.append(tcb)
    sched.ready.enqueue(tcb)


def yield_() -> None:
    """Let the next ready thread run; do nothing if none is ready."""
    sched = _sched
    if sched is None:
        return
    _schedule(sched)


def exit_() -> NoReturn:
    """Finish the running thread. Never returns."""
    sched = _require()
    cur = sched.current
    if cur is sched.idle or cur is None:
        raise UThreadError("the idle thread cannot exit")
    cur.state = ThreadState.EXITED
    sched.threads.remove(cur)
    cur.ctx.release()
    _schedule(sched)
    raise UThreadError("exited thread was resumed")


def block() -> None:
    """Block the running thread until :func:`unblock` is called on it."""
    sched = _require()
    cur = sched.current
    if cur is sched.idle or cur is None:
        raise UThreadError("the idle thread cannot block")
    cur.state = ThreadState.BLOCKED
    _schedule(sched)


def unblock(tcb: Optional[_TCB]) -> None:
    """Make a blocked thread ready again; ``None`` is ignored."""
    if tcb is None:
        return
    sched = _require()
    if tcb.state is not ThreadState.BLOCKED:
        raise UThreadError(f"cannot unblock a thread that is {tcb.state.name.lower()}")
    tcb.state = ThreadState.READY
    sched.ready.enqueue(tcb)


def run(preempt: bool, func: Callable[[Any], Any], arg: Any = None) -> None:
    """Run ``func(arg)`` as the first thread and return when no thread can run.

    With ``preempt`` true, running threads are forced to yield on every timer
    tick. Threads still blocked at the end are discarded. The first exception
    raised by a thread is raised again once scheduling is over.
    """
    global _sched
    if func is None or not callable(func):
        raise UThreadError("thread function must be callable")
    if _sched is not None:
        raise UThreadError("threads are already running")
    sched = _sched = _Scheduler()
    _preempt.tick_handler = yield_
    _preempt.start(preempt)
    try:
        create(func, arg)
        while len(sched.ready) > 0:
            yield_()
    finally:
        _preempt.stop()
        _preempt.tick_handler = None
        leftovers, sched.threads = sched.threads, []
        for tcb in leftovers:
            tcb.state = ThreadState.EXITED
            tcb.ctx.release()
        if len(sched.ready) == 0:
            sched.ready.destroy()
        _sched = None
    if sched.error is not None:
        raise sched.error