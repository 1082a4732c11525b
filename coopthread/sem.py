"""Counting semaphores for threads scheduled by :mod:`coopthread.uthread`."""

from __future__ import annotations

from . import uthread
from .fifo import Queue
from .uthread import ThreadState, UThreadError


class SemaphoreError(RuntimeError):
    """Raised when a semaphore operation cannot be carried out."""


class Semaphore:
    """A counting semaphore whose waiters are woken oldest first."""

    def __init__(self, count: int = 0) -> None:
        if isinstance(count, bool) or not isinstance(count, int):
            raise SemaphoreError("semaphore count must be an integer")
        if count < 0:
            raise SemaphoreError("semaphore count cannot be negative")
        self._count = count
        self._waiting = Queue()
        self._destroyed = False

    @property
    def count(self) -> int:
        """Number of resources currently available."""
        return self._count

    @property
    def waiting(self) -> int:
        """Number of threads queued on the semaphore."""
        return len(self._waiting)

    def _check_alive(self) -> None:
        if self._destroyed:
            raise SemaphoreError("semaphore has been destroyed")

    def down(self) -> None:
        """Take a resource, blocking the running thread until one is available."""
        self._check_alive()
        while self._count == 0:
            tcb = uthread.current()
            if tcb is None:
                raise SemaphoreError("cannot wait on a semaphore outside of a running thread")
            self._waiting.enqueue(tcb)
            try:
                uthread.block()
            except UThreadError as exc:
                self._waiting.delete(tcb)
                raise SemaphoreError(str(exc)) from exc
        self._count -= 1

    def up(self) -> None:
        """Release a resource and wake the oldest waiting thread, if any."""
        self._check_alive()
        self._count += 1
        while len(self._waiting) > 0:
            tcb = self._waiting.dequeue()
            if tcb.state is ThreadState.BLOCKED:
                uthread.unblock(tcb)
                break

    def destroy(self) -> None:
        """Retire the semaphore; no thread may be waiting on it."""
        self._check_alive()
        if len(self._waiting) > 0:
            raise SemaphoreError("threads are still waiting on the semaphore")
        self._waiting.destroy()
        self._destroyed = True