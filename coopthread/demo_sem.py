"""Small programs that show threads synchronising through semaphores."""

from __future__ import annotations

import argparse
from dataclasses import dataclass, field
from typing import Any, List, Optional, Sequence, Tuple

from . import uthread
from .sem import Semaphore, SemaphoreError

BUFFER_SIZE = 16
DEFAULT_COUNT = 20
DEFAULT_BUFFER_COUNT = 1000
DEFAULT_MAXPRIME = 1000

_UINT_MASK = 0xFFFFFFFF
_SIZE_MASK = 0xFFFFFFFFFFFFFFFF


def rand_r(seed: int) -> Tuple[int, int]:
    """Reentrant pseudo-random generator.

    Returns ``(value, next_seed)``; ``value`` lies in ``[0, 2**31)`` and the
    seed is a 32-bit unsigned integer.
    """
    nxt = seed & _UINT_MASK

    def step(state: int) -> int:
        return (state * 1103515245 + 12345) & _UINT_MASK

    nxt = step(nxt)
    result = (nxt // 65536) % 2048
    nxt = step(nxt)
    result = (result << 10) ^ ((nxt // 65536) % 1024)
    nxt = step(nxt)
    result = (result << 10) ^ ((nxt // 65536) % 1024)
    return result, nxt


def _destroy_quietly(*sems: Semaphore) -> None:
    for sem in sems:
        try:
            sem.destroy()
        except SemaphoreError:
            pass


def _check_count(name: str, value: int) -> None:
    if value < 0:
        raise ValueError(f"{name} must not be negative")


def run_simple() -> List[str]:
    """Three threads print in an order imposed by semaphores; return the lines."""
    lines: List[str] = []
    sem1, sem2, sem3 = Semaphore(0), Semaphore(0), Semaphore(0)

    def thread3(_arg: Any) -> None:
        sem3.down()
        lines.append("thread3")
        sem2.up()

    def thread2(_arg: Any) -> None:
        sem2.down()
        lines.append("thread2")
        sem1.up()

    def thread1(_arg: Any) -> None:
        uthread.create(thread2, None)
        uthread.create(thread3, None)
        sem3.up()
        sem1.down()
        lines.append("thread1")

    try:
        uthread.run(False, thread1, None)
    finally:
        _destroy_quietly(sem1, sem2, sem3)
    return lines


@dataclass
class _Counter:
    maxcount: int
    x: int = 0
    sem1: Semaphore = field(default_factory=Semaphore)
    sem2: Semaphore = field(default_factory=Semaphore)
    lines: List[str] = field(default_factory=list)


def run_count(maxcount: int = DEFAULT_COUNT) -> List[str]:
    """Two threads take turns counting from 0 to ``maxcount - 1``; return the lines."""
    _check_count("maxcount", maxcount)
    t = _Counter(maxcount)

    def thread2(_arg: Any) -> None:
        while t.x < t.maxcount:
            t.lines.append(f"thread 2, x = {t.x}")
            t.x += 1
            t.sem1.up()
            t.sem2.down()

    def thread1(_arg: Any) -> None:
        uthread.create(thread2, None)
        while t.x < t.maxcount:
            t.sem1.down()
            t.lines.append(f"thread 1, x = {t.x}")
            t.x += 1
            t.sem2.up()

    try:
        uthread.run(False, thread1, None)
    finally:
        _destroy_quietly(t.sem1, t.sem2)
    return t.lines


@dataclass
class _Buffer:
    maxcount: int
    cons_seed: int
    prod_seed: int
    empty: Semaphore = field(default_factory=lambda: Semaphore(0))
    full: Semaphore = field(default_factory=lambda: Semaphore(BUFFER_SIZE))
    mutex: Semaphore = field(default_factory=lambda: Semaphore(1))
    slots: List[int] = field(default_factory=lambda: [0] * BUFFER_SIZE)
    size: int = 0
    head: int = 0
    tail: int = 0
    lines: List[str] = field(default_factory=list)


def run_buffer(
    maxcount: int = DEFAULT_BUFFER_COUNT, cons_seed: int = 1, prod_seed: int = 2
) -> List[str]:
    """A producer and a consumer share a bounded buffer; return the lines they write.

    The producer puts the values ``0`` to ``maxcount - 1`` into the buffer in
    batches of random size, and the consumer takes them out in batches of
    other random sizes.
    """
    _check_count("maxcount", maxcount)
    t = _Buffer(maxcount, cons_seed & _UINT_MASK, prod_seed & _UINT_MASK)

    def consumer(_arg: Any) -> None:
        out = 0
        while out < (t.maxcount - 1) & _SIZE_MASK:
            value, t.cons_seed = rand_r(t.cons_seed)
            wanted = min(value % BUFFER_SIZE + 1, (t.maxcount - out - 1) & _SIZE_MASK)
            t.lines.append(f"Consumer wants to get {wanted} items out of buffer...")
            for _ in range(wanted):
                t.empty.down()
                out = t.slots[t.tail]
                t.lines.append(f"Consumer is taking {out} out of buffer")
                t.tail = (t.tail + 1) % BUFFER_SIZE
                t.mutex.down()
                t.size -= 1
                t.mutex.up()
                t.full.up()

    def producer(_arg: Any) -> None:
        uthread.create(consumer, None)
        count = 0
        while count < t.maxcount:
            value, t.prod_seed = rand_r(t.prod_seed)
            wanted = min(value % BUFFER_SIZE + 1, t.maxcount - count)
            t.lines.append(f"Producer wants to put {wanted} items into buffer...")
            for _ in range(wanted):
                t.full.down()
                t.lines.append(f"Producer is putting {count} into buffer")
                t.slots[t.head] = count
                count += 1
                t.head = (t.head + 1) % BUFFER_SIZE
                t.mutex.down()
                t.size += 1
                t.mutex.up()
                t.empty.up()

    try:
        uthread.run(False, producer, None)
    finally:
        _destroy_quietly(t.empty, t.full, t.mutex)
    return t.lines


@dataclass(eq=False)
class _Channel:
    value: int = 0
    produce: Semaphore = field(default_factory=Semaphore)
    consume: Semaphore = field(default_factory=Semaphore)


@dataclass(eq=False)
class _Filter:
    left: _Channel
    right: _Channel
    prime: int


_DONE = -1


def run_prime(maxprime: int = DEFAULT_MAXPRIME) -> List[str]:
    """Find the primes up to ``maxprime`` with a pipeline of filter threads.

    Returns one ``"<n> is prime."`` line per prime, in increasing order.
    """
    _check_count("maxprime", maxprime)
    lines: List[str] = []

    def source(chan: _Channel) -> None:
        for number in range(2, maxprime + 1):
            chan.value = number
            chan.consume.up()
            chan.produce.down()
        chan.value = _DONE
        chan.consume.up()
        chan.produce.down()

    def sieve(flt: _Filter) -> None:
        while True:
            flt.left.consume.down()
            value = flt.left.value
            flt.left.produce.up()
            if value == _DONE or value % flt.prime != 0:
                flt.right.value = value
                flt.right.consume.up()
                flt.right.produce.down()
            if value == _DONE:
                break
        _destroy_quietly(flt.left.produce, flt.left.consume)

    def sink(_arg: Any) -> None:
        chan = _Channel()
        uthread.create(source, chan)
        while True:
            chan.consume.down()
            value = chan.value
            chan.produce.up()
            if value == _DONE:
                break
            lines.append(f"{value} is prime.")
            right = _Channel()
            uthread.create(sieve, _Filter(chan, right, value))
            chan = right
        _destroy_quietly(chan.produce, chan.consume)

    uthread.run(False, sink, None)
    return lines


def _c_number(text: str) -> int:
    try:
        value = int(text.strip(), 0)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid number: {text!r}") from None
    if value < 0:
        raise argparse.ArgumentTypeError(f"number must not be negative: {text!r}")
    return value


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run one of the semaphore demonstrations and print what it wrote."""
    parser = argparse.ArgumentParser(
        prog="coopthread-demo-sem",
        description="Demonstrate threads synchronising through semaphores.",
    )
    sub = parser.add_subparsers(dest="program", required=True)
    sub.add_parser("simple", help="three threads printing in a fixed order")
    count = sub.add_parser("count", help="two threads counting in turns")
    count.add_argument("maxcount", nargs="?", type=_c_number, default=DEFAULT_COUNT)
    buffer = sub.add_parser("buffer", help="producer and consumer sharing a buffer")
    buffer.add_argument("maxcount", nargs="?", type=_c_number, default=DEFAULT_BUFFER_COUNT)
    buffer.add_argument("cons_seed", nargs="?", type=_c_number, default=1)
    buffer.add_argument("prod_seed", nargs="?", type=_c_number, default=2)
    prime = sub.add_parser("prime", help="prime sieve built from filter threads")
    prime.add_argument("maxprime", nargs="?", type=_c_number, default=DEFAULT_MAXPRIME)
    args = parser.parse_args(argv)

    if args.program == "simple":
        lines = run_simple()
    elif args.program == "count":
        lines = run_count(args.maxcount)
    elif args.program == "buffer":
        lines = run_buffer(args.maxcount, args.cons_seed, args.prod_seed)
    else:
        lines = run_prime(args.maxprime)
    for line in lines:
        print(line)
    return 0