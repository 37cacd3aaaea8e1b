"""Tests for build_snapshot, wrap_values and Subscriptions."""

import pytest

from fluxbridge import (
    InvalidStateShape,
    Observable,
    ObservableDict,
    Subscriptions,
    autorun,
    build_snapshot,
    wrap_values,
)


class _Source:
    """Minimal subscribable: emits on subscribe, keeps the callback."""

    def __init__(self, value):
        self.value = value
        self.callbacks = []

    def subscribe(self, cb):
        self.callbacks.append(cb)
        cb(self.value)

    def emit(self, value):
        self.value = value
        for cb in self.callbacks:
            cb(value)


class TestBuildSnapshot:
    def test_subscribes_to_subscribable_state(self):
        source = _Source(5)
        snapshot = build_snapshot({"foo": source})
        assert len(source.callbacks) == 1
        assert snapshot == {"foo": 5}

    def test_deeply_nested_state(self):
        order = []

        class Counted:
            def subscribe(self, cb):
                order.append(True)
                cb(len(order))

        tree = {"foo": Counted(), "bar": {"baz": Counted(), "qux": Counted()}}
        snapshot = build_snapshot(tree)
        assert len(order) == 3
        assert snapshot == {"foo": 1, "bar": {"baz": 2, "qux": 3}}

    def test_keeps_state_up_to_date(self):
        source = _Source(5)
        snapshot = build_snapshot({"foo": source})
        source.emit(10)
        assert snapshot["foo"] == 10

    def test_static_values_copied(self):
        tree = {"foo": "bar", "baz": {"a": 1, "b": False}, "qux": [1, True], "none": None}
        assert build_snapshot(tree) == tree

    def test_key_set_mirrors_tree(self):
        tree = {"a": Observable(1), "b": {"c": Observable(2), "d": 3}}
        snapshot = build_snapshot(tree)
        assert set(snapshot) == {"a", "b"}
        assert set(snapshot["b"]) == {"c", "d"}

    @pytest.mark.parametrize("tree", [None, [], ["a"], "state", 5])
    def test_rejects_non_mapping(self, tree):
        with pytest.raises(InvalidStateShape):
            build_snapshot(tree)

    def test_shape_checked_before_observe(self):
        calls = []
        with pytest.raises(InvalidStateShape):
            build_snapshot([1], observe=lambda values: calls.append(values) or values)
        assert calls == []

    def test_writes_go_through_observed_container(self):
        num = Observable(0)
        snapshot = build_snapshot({"num": num}, observe=ObservableDict)
        log = []
        autorun(lambda: log.append(snapshot["num"]))
        num.set(1)
        assert isinstance(snapshot, ObservableDict)
        assert log == [0, 1]

    def test_nested_containers_use_observe(self):
        snapshot = build_snapshot({"a": {"b": 1}}, observe=ObservableDict)
        assert isinstance(snapshot["a"], ObservableDict)


class TestSubscriptions:
    def test_collects_and_releases_handles(self):
        num = Observable(0)
        subs = Subscriptions()
        snapshot = build_snapshot({"num": num, "nested": {"n": num}}, subscriptions=subs)
        assert len(subs) == 2
        subs.release()
        num.set(1)
        assert snapshot == {"num": 0, "nested": {"n": 0}}
        assert subs.released

    def test_release_handle_kinds(self):
        released = []

        class Disposable:
            def dispose(self):
                released.append("dispose")

        class Unsubscribable:
            def unsubscribe(self):
                released.append("unsubscribe")

        subs = Subscriptions()
        subs.add(Disposable())
        subs.add(Unsubscribable())
        subs.add(lambda: released.append("callable"))
        subs.add(None)
        assert len(subs) == 3
        subs.release()
        subs.release()
        assert released == ["dispose", "unsubscribe", "callable"]

    def test_raising_handle_does_not_block_others(self):
        released = []

        def broken():
            raise RuntimeError("stuck")

        subs = Subscriptions()
        subs.add(broken)
        subs.add(lambda: released.append("second"))
        with pytest.raises(RuntimeError, match="stuck"):
            subs.release()
        subs.release()
        assert released == ["second"]
        assert len(subs) == 0

    def test_several_failures_grouped(self):
        def broken():
            raise RuntimeError("stuck")

        subs = Subscriptions()
        subs.add(broken)
        subs.add(broken)
        with pytest.raises(ExceptionGroup) as excinfo:
            subs.release()
        assert len(excinfo.value.exceptions) == 2

    def test_extend_moves_handles(self):
        a, b = Subscriptions(), Subscriptions()
        b.add(lambda: None)
        a.extend(b)
        assert (len(a), len(b)) == (1, 0)


class TestWrapValues:
    def test_wraps_values_in_accessors(self):
        wrapped = wrap_values({"foo": 1})
        assert list(wrapped) == ["foo"]
        assert wrapped["foo"]() == 1

    def test_accessors_read_live_values(self):
        source = _Source("a")
        wrapped = wrap_values(build_snapshot({"foo": source}))
        source.emit("b")
        assert wrapped["foo"]() == "b"
