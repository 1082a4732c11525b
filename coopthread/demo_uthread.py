"""Small programs that show thread creation and yielding."""

from __future__ import annotations

import argparse
from typing import Any, List, Optional, Sequence

from . import uthread


def run_hello() -> List[str]:
    """Run a single thread that greets the world; return the lines it wrote."""
    lines: List[str] = []

    def hello(_arg: Any) -> None:
        lines.append("Hello world!")

    uthread.run(False, hello, None)
    return lines


def run_yield() -> List[str]:
    """Run three threads that create each other and yield; return their lines.

    A parent thread is returned to before its child runs, so the lines come
    out as ``thread1``, ``thread2``, ``thread3``.
    """
    lines: List[str] = []

    def thread3(_arg: Any) -> None:
        uthread.yield_()
        lines.append("thread3")

    def thread2(_arg: Any) -> None:
        uthread.create(thread3, None)
        uthread.yield_()
        lines.append("thread2")

    def thread1(_arg: Any) -> None:
        uthread.create(thread2, None)
        uthread.yield_()
        lines.append("thread1")
        uthread.yield_()

    uthread.run(False, thread1, None)
    return lines


_PROGRAMS = {
    "hello": run_hello,
    "yield": run_yield,
}


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run one of the thread demonstrations and print what it wrote."""
    parser = argparse.ArgumentParser(
        prog="coopthread-demo-uthread",
        description="Demonstrate user-level thread creation and yielding.",
    )
    parser.add_argument("program", choices=sorted(_PROGRAMS), help="demonstration to run")
    args = parser.parse_args(argv)
    for line in _PROGRAMS[args.program]():
        print(line)
    return 0