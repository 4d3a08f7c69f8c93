import pytest


def test_memoized():
    from ..deferred import Deferred

    calls = []

    def yielder(a, b=0):
        calls.append((a, b))
        return a + b

    target = Deferred(yielder, 1, b=2)
    assert not target.resolved
    assert target() == 3
    assert target() == 3
    assert target.resolved
    assert calls == [(1, 2)]


def test_failures_are_retried():
    from ..deferred import Deferred

    attempts = []

    def yielder():
        attempts.append(None)
        if len(attempts) < 2:
            raise LookupError("not yet")
        return "ok"

    target = Deferred(yielder)
    with pytest.raises(LookupError):
        target()
    assert not target.resolved
    assert target() == "ok"
    assert target() == "ok"
    assert len(attempts) == 2


def test_resolved_with():
    from ..deferred import Deferred

    target = Deferred.resolved_with(None)
    assert target.resolved
    assert target() is None
