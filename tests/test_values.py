"""Tests for wren._internal.values: value kind tagging."""

from wren._internal.values import ValueKind, as_object, kind_of
from wren.http.forms import FormData


class TestKindOf:
    def test_null(self) -> None:
        assert kind_of(None) is ValueKind.NULL

    def test_array(self) -> None:
        assert kind_of([1, 2]) is ValueKind.ARRAY
        assert kind_of((1,)) is ValueKind.ARRAY

    def test_object(self) -> None:
        assert kind_of({"a": 1}) is ValueKind.OBJECT
        assert kind_of(FormData({"a": ["1"]})) is ValueKind.OBJECT

    def test_primitives(self) -> None:
        for value in ("text", b"bytes", 0, 1.5, True):
            assert kind_of(value) is ValueKind.PRIMITIVE


class TestAsObject:
    def test_copies_mapping(self) -> None:
        source = {"a": 1}
        result = as_object(source)
        assert result == source
        assert result is not source

    def test_non_object_is_empty(self) -> None:
        assert as_object(None) == {}
        assert as_object([("a", 1)]) == {}
        assert as_object("a=1") == {}
