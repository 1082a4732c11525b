"""Cooperative user-level threads with FIFO queues, semaphores and optional preemption."""

__version__ = "0.1.0"
__all__ = ["context", "demo_sem", "demo_uthread", "fifo", "preempt", "sem", "uthread"]