import pytest

from coopthread.fifo import Queue, QueueError


class Item:
    def __init__(self, value):
        self.value = value


def test_create_is_empty():
    q = Queue()
    assert len(q) == 0
    assert list(q) == []


def test_queue_simple_returns_same_object():
    data = Item(3)
    q = Queue()
    q.enqueue(data)
    assert q.dequeue() is data
    assert len(q) == 0


def test_fifo_order():
    items = [Item(i) for i in range(5)]
    q = Queue()
    for item in items:
        q.enqueue(item)
    assert len(q) == len(items)
    assert [q.dequeue() for _ in items] == items


def test_dequeue_empty_raises():
    q = Queue()
    with pytest.raises(QueueError):
        q.dequeue()


def test_enqueue_none_raises():
    q = Queue()
    with pytest.raises(QueueError):
        q.enqueue(None)
    assert len(q) == 0


def test_delete_matches_identity_not_equality():
    a = [1]
    b = [1]
    q = Queue()
    q.enqueue(a)
    q.enqueue(b)
    assert q.delete(b) is True
    remaining = list(q)
    assert len(remaining) == 1
    assert remaining[0] is a


def test_delete_only_oldest_occurrence():
    a, b = Item("a"), Item("b")
    q = Queue()
    for item in (a, b, a):
        q.enqueue(item)
    assert q.delete(a) is True
    assert list(q) == [b, a]


def test_delete_missing_returns_false():
    q = Queue()
    q.enqueue(Item(1))
    assert q.delete(Item(1)) is False
    assert len(q) == 1


def test_delete_none_raises():
    q = Queue()
    with pytest.raises(QueueError):
        q.delete(None)


def test_delete_tail_then_enqueue_keeps_order():
    a, b, c = Item("a"), Item("b"), Item("c")
    q = Queue()
    q.enqueue(a)
    q.enqueue(b)
    q.delete(b)
    q.enqueue(c)
    assert [q.dequeue(), q.dequeue()] == [a, c]


def test_iterate_passes_queue_and_items():
    items = [Item(i) for i in range(3)]
    q = Queue()
    for item in items:
        q.enqueue(item)
    seen = []
    q.iterate(lambda queue, data: seen.append((queue, data)))
    assert seen == [(q, item) for item in items]


def test_iterate_survives_deleting_current_item():
    items = [Item(i) for i in range(4)]
    q = Queue()
    for item in items:
        q.enqueue(item)
    visited = []

    def drop(queue, data):
        visited.append(data)
        queue.delete(data)

    q.iterate(drop)
    assert visited == items
    assert len(q) == 0


def test_iterate_skips_items_deleted_ahead():
    a, b, c = Item("a"), Item("b"), Item("c")
    q = Queue()
    for item in (a, b, c):
        q.enqueue(item)
    visited = []

    def drop_next(queue, data):
        visited.append(data)
        if data is a:
            queue.delete(b)

    q.iterate(drop_next)
    assert visited == [a, c]
    assert len(q) == 2
    assert list(q) == [a, c]


def test_iterate_requires_callable():
    q = Queue()
    with pytest.raises(QueueError):
        q.iterate(None)


def test_destroy_non_empty_raises():
    q = Queue()
    q.enqueue(Item(1))
    with pytest.raises(QueueError):
        q.destroy()
    assert len(q) == 1


def test_destroyed_queue_rejects_use():
    q = Queue()
    q.destroy()
    with pytest.raises(QueueError):
        q.enqueue(Item(1))
    with pytest.raises(QueueError):
        q.dequeue()


def test_iter_is_snapshot():
    a, b = Item("a"), Item("b")
    q = Queue()
    q.enqueue(a)
    seen = []
    for data in q:
        seen.append(data)
        q.enqueue(b)
    assert seen == [a]
    assert list(q) == [a, b]