"""Tests for Observable and ObservableDict."""

from fluxbridge import Observable, ObservableDict, autorun


class TestObservable:
    def test_get_set(self):
        o = Observable(42)
        assert o.get() == 42
        o.set(100)
        assert o.get() == 100

    def test_dedup(self):
        """Setting the same value should not trigger observers."""
        o = Observable(42)
        log = []
        autorun(lambda: log.append(o.get()))
        o.set(42)
        assert log == [42]

    def test_update(self):
        o = Observable(1)
        o.update(lambda v: v + 1)
        assert o.get() == 2

    def test_value_property(self):
        o = Observable(None)
        o.value = (o.value or 0) + 1
        assert o.value == 1

    def test_subscribe_emits_current_value(self):
        o = Observable("a")
        received = []
        o.subscribe(received.append)
        assert received == ["a"]

    def test_subscribe_follows_changes(self):
        o = Observable("a")
        received = []
        o.subscribe(received.append)
        o.set("b")
        o.set("b")
        o.set("c")
        assert received == ["a", "b", "c"]

    def test_subscription_dispose(self):
        o = Observable(0)
        received = []
        handle = o.subscribe(received.append)
        handle.dispose()
        o.set(1)
        assert received == [0]
        assert handle.disposed

    def test_repr(self):
        assert "Observable(5)" in repr(Observable(5))


class TestObservableDict:
    def test_basic_operations(self):
        d = ObservableDict({"a": 1, "b": 2})
        assert d["a"] == 1
        assert d.get("c", 99) == 99
        assert "a" in d
        assert len(d) == 2
        assert set(d) == {"a", "b"}

    def test_per_key_reads_are_tracked(self):
        d = ObservableDict({"a": 1})
        log = []
        autorun(lambda: log.append(d["a"]))
        d["a"] = 2
        assert log == [1, 2]

    def test_delete_notifies(self):
        d = ObservableDict({"a": 1, "b": 2})
        log = []
        autorun(lambda: log.append(sorted(d.keys())))
        del d["b"]
        assert log == [["a", "b"], ["a"]]

    def test_equality_with_plain_dict(self):
        d = ObservableDict({"a": 1, "b": ObservableDict({"c": 2})})
        assert d == {"a": 1, "b": {"c": 2}}
        assert {"a": 1, "b": {"c": 2}} == d

    def test_to_dict(self):
        d = ObservableDict({"a": ObservableDict({"b": [1]})})
        plain = d.to_dict()
        assert plain == {"a": {"b": [1]}}
        assert type(plain["a"]) is dict

    def test_keys_values_items(self):
        d = ObservableDict({"a": 1, "b": 2})
        assert set(d.keys()) == {"a", "b"}
        assert set(d.values()) == {1, 2}
        assert set(d.items()) == {("a", 1), ("b", 2)}
