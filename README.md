# coopthread

A small user-level threading library. A single scheduler inside your process
runs threads one at a time in first-in, first-out order; a thread keeps the
processor until it yields, blocks on a semaphore or finishes. Optional
timer-driven preemption forces running threads to yield.

## What is in the package

- `coopthread.fifo` – `Queue`, a FIFO queue. `enqueue(data)`, `dequeue()`,
  `delete(data)` (returns whether an item was removed), `iterate(func)`
  (calls `func(queue, item)` oldest first; items removed during the walk are
  skipped), `destroy()` (the queue must be empty), `len()` and iteration.
  Items are matched by identity and `None` cannot be stored. Misuse, such as
  dequeuing from an empty queue, raises `QueueError`.
- `coopthread.uthread` – the scheduler: `run(preempt, func, arg)`,
  `create(func, arg)`, `yield_()`, `exit_()`, `current()`, `block()` and
  `unblock(tcb)`. `ThreadState` gives a thread's state (`RUNNING`, `READY`,
  `EXITED`, `BLOCKED`). Failures raise `UThreadError`.
- `coopthread.sem` – `Semaphore(count)`, a counting semaphore with `down()`,
  `up()` and `destroy()` and the read-only `count` and `waiting`. Waiting
  threads are woken oldest first. Misuse raises `SemaphoreError`.
- `coopthread.context` – `Context` and `switch(prev, nxt)`, the execution
  contexts the scheduler passes control between; `ContextError` on failure.
- `coopthread.preempt` – `start(preempt)`, `stop()`, `enable()`, `disable()`
  and `is_active()`, with a tick rate of `HZ` (100) per second of processor
  time.

## Usage

`run(preempt, func, arg)` calls `func(arg)` as the first thread and returns
once no thread can run any more. Threads still blocked at that point are
discarded. If a thread raised an exception, the first one is raised again
from `run` after scheduling is over. Only one `run` may be active at a time.

```python
from coopthread import uthread
from coopthread.sem import Semaphore

ready = Semaphore(0)

def worker(name):
    ready.down()
    print(f"{name} got the signal")

def main_thread(arg):
    uthread.create(worker, "worker")
    uthread.yield_()
    print("main signals")
    ready.up()

uthread.run(False, main_thread, None)
```

Output:

```
main signals
worker got the signal
```

The queue can be used on its own:

```python
from coopthread.fifo import Queue

q = Queue()
q.enqueue("a")
q.enqueue("b")
assert q.dequeue() == "a"
assert len(q) == 1
```

## Demonstrations

Two commands run the bundled example programs and print what they wrote.

```
coopthread-demo-uthread hello
coopthread-demo-uthread yield
```

`hello` runs one thread that prints `Hello world!`; `yield` runs three threads
that create each other and yield, printing `thread1`, `thread2`, `thread3`.

```
coopthread-demo-sem simple
coopthread-demo-sem count [MAXCOUNT]
coopthread-demo-sem buffer [MAXCOUNT [CONS_SEED [PROD_SEED]]]
coopthread-demo-sem prime [MAXPRIME]
```

- `simple` – three threads print in an order imposed by semaphores.
- `count` – two threads take turns counting from 0 to `MAXCOUNT - 1`
  (default 20).
- `buffer` – a producer and a consumer share a 16-slot buffer, moving
  `MAXCOUNT` values (default 1000) in batches of pseudo-random size drawn with
  the given seeds (defaults 1 and 2).
- `prime` – a prime sieve built from a pipeline of filter threads, listing
  the primes up to `MAXPRIME` (default 1000).

Numbers may be written in decimal, or with a `0x`, `0o` or `0b` prefix.

From Python the same programs are `coopthread.demo_uthread.run_hello()` and
`run_yield()`, and `coopthread.demo_sem.run_simple()`, `run_count(maxcount)`,
`run_buffer(maxcount, cons_seed, prod_seed)` and `run_prime(maxprime)`; each
returns the lines as a list instead of printing them.

## Limits

- Each user-level thread is carried by an operating-system thread that waits
  while it is not scheduled; only one of them runs at a time.
- Preemption is not signal-driven. It checks elapsed processor time at Python
  trace events in threads started after preemption begins, so code inside C
  extensions, in this package or in `threading` is never interrupted.

## Tests

```
pip install .[test]
pytest
```