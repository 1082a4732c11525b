import pytest

from coopthread.context import Context, ContextError, switch


def test_new_context_runs_function_with_argument():
    root = Context()
    received = []
    ctx = Context(received.append, "payload")
    switch(root, ctx)
    assert received == ["payload"]
    assert ctx.finished is True


def test_context_switches_back_to_root():
    root = Context()
    log = []

    def body(_):
        log.append("in")
        switch(ctx, root)
        log.append("again")

    ctx = Context(body, None)
    switch(root, ctx)
    assert log == ["in"]
    assert ctx.finished is False
    switch(root, ctx)
    assert log == ["in", "again"]
    assert ctx.finished is True


def test_ping_pong_ordering():
    root = Context()
    log = []

    def body_a(_):
        log.append("a1")
        switch(a, b)
        log.append("a2")
        switch(a, b)
        log.append("a3")

    def body_b(_):
        log.append("b1")
        switch(b, a)
        log.append("b2")

    a = Context(body_a, None)
    b = Context(body_b, None)
    switch(root, a)
    assert log == ["a1", "b1", "a2", "b2", "a3"]
    assert a.finished and b.finished


def test_exception_reraised_in_starter():
    root = Context()

    def body(_):
        raise ValueError("boom")

    ctx = Context(body, None)
    with pytest.raises(ValueError, match="boom"):
        switch(root, ctx)
    assert ctx.finished is True


def test_switch_to_finished_context_raises():
    root = Context()
    ctx = Context(lambda _: None, None)
    switch(root, ctx)
    with pytest.raises(ContextError):
        switch(root, ctx)


def test_switch_to_unsaved_root_raises():
    first = Context()
    second = Context()
    with pytest.raises(ContextError):
        switch(first, second)


def test_non_callable_function_rejected():
    with pytest.raises(ContextError):
        Context("not callable", None)


def test_release_root_raises():
    with pytest.raises(ContextError):
        Context().release()


def test_self_release_unwinds_before_next_runs():
    root = Context()
    log = []

    def body(_):
        try:
            ctx.release()
            switch(ctx, root)
            log.append("unreachable")
        finally:
            log.append("cleanup")

    ctx = Context(body, None)
    switch(root, ctx)
    assert log == ["cleanup"]
    assert ctx.released and ctx.finished


def test_release_suspended_context_unwinds_it():
    root = Context()
    log = []

    def body(_):
        try:
            switch(ctx, root)
            log.append("resumed")
        finally:
            log.append("cleanup")

    ctx = Context(body, None)
    switch(root, ctx)
    ctx.release()
    assert log == ["cleanup"]
    assert ctx.finished is True
    with pytest.raises(ContextError):
        switch(root, ctx)


def test_release_unstarted_context_prevents_switch():
    root = Context()
    ran = []
    ctx = Context(ran.append, 1)
    ctx.release()
    with pytest.raises(ContextError):
        switch(root, ctx)
    assert ran == []


def test_switch_to_self_is_noop():
    root = Context()
    log = []
    ctx = Context(log.append, "x")
    switch(root, root)
    switch(root, ctx)
    assert log == ["x"]