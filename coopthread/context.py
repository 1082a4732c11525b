"""Execution contexts that pass a single flow of control between them.

Exactly one context runs at a time. :func:`switch` saves the running context
and resumes another one, starting it on first use.
"""

from __future__ import annotations

import threading
from typing import Any, Callable, Optional

from . import preempt


class ContextError(RuntimeError):
    """Raised when a context cannot be created or switched to."""


class _Unwind(BaseException):
    """Unwinds the stack of a released context."""


class Context:
    """An execution context.

    With a function, the context runs ``func(arg)`` on its own stack the first
    time it is switched to. Without one, it stands for whatever flow of
    control switches away from it, such as the program's original thread.

    If ``func`` returns or raises, control goes back to the context that first
    started it (or the nearest live one up that chain), and an exception is
    raised again there.
    """

    def __init__(self, func: Optional[Callable[[Any], Any]] = None, arg: Any = None) -> None:
        if func is not None and not callable(func):
            raise ContextError("context function must be callable")
        self._func = func
        self._arg = arg
        self._wakeup = threading.Semaphore(0)
        self._thread: Optional[threading.Thread] = None
        self._saved = False
        self._starter: Optional[Context] = None
        self._handoff: Optional[Context] = None
        self._pending: Optional[BaseException] = None
        self._released = False
        self._finished = False

    @property
    def finished(self) -> bool:
        """Whether the context's function has come to an end."""
        return self._finished

    @property
    def released(self) -> bool:
        """Whether the context's stack has been released."""
        return self._released

    def release(self) -> None:
        """Release the context's stack.

        Released by the running context itself, the stack unwinds at the next
        :func:`switch` away from it. A suspended context unwinds at once.
        """
        if self._func is None:
            raise ContextError("a context without a function has no stack to release")
        if self._released:
            return
        self._released = True
        thread = self._thread
        if thread is None or self._finished or thread is threading.current_thread():
            return
        self._wakeup.release()
        thread.join()

    def _resume(self) -> None:
        if self._func is not None and self._thread is None:
            self._thread = threading.Thread(
                target=self._bootstrap, daemon=True, name="coopthread-context"
            )
            self._thread.start()
        else:
            self._wakeup.release()

    def _suspend(self) -> None:
        self._wakeup.acquire()
        if self._released:
            raise _Unwind
        error, self._pending = self._pending, None
        if error is not None:
            raise error

    def _bootstrap(self) -> None:
        error: Optional[BaseException] = None
        try:
            preempt.enable()
            self._func(self._arg)
        except _Unwind:
            self._finished = True
            handoff, self._handoff = self._handoff, None
            if handoff is not None:
                handoff._resume()
            return
        except BaseException as exc:
            error = exc
        self._finished = True
        target = self._starter
        while target is not None and (target._finished or target._released):
            target = target._starter
        if target is None:
            return
        target._pending = error
        target._resume()


def switch(prev: Context, nxt: Context) -> None:
    """Save the running context into ``prev`` and resume ``nxt``."""
    if nxt is prev:
        return
    if nxt._released or nxt._finished:
        raise ContextError("cannot switch to a finished or released context")
    if nxt._func is None and not nxt._saved:
        raise ContextError("cannot switch to a context that was never saved")
    prev._saved = True
    if nxt._thread is None and nxt._func is not None:
        nxt._starter = prev
    if prev._released and prev._thread is threading.current_thread():
        prev._handoff = nxt
        raise _Unwind
    nxt._resume()
    prev._suspend()