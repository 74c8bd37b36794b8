"""Tests for sources — constant, custom and cell-bound."""

import pytest

from formx import Cell, CellSource, ConstantSource, CustomSource, Source


def _collect(source):
    received = []
    source.changes.subscribe(received.append)
    return received


class TestConstantSource:
    def test_nothing_before_reset(self):
        src = ConstantSource("x")
        received = _collect(src)
        assert received == []

    def test_reset_publishes_once(self):
        src = ConstantSource("x")
        received = _collect(src)
        src.reset()
        assert received == ["x"]
        src.reset()
        assert received == ["x", "x"]

    def test_destroy_makes_inert(self):
        src = ConstantSource("x")
        received = _collect(src)
        src.destroy()
        src.reset()
        assert received == []
        assert src.destroyed


class TestCustomSource:
    def test_reset_reads_getter(self):
        data = {"value": "a"}
        src = CustomSource(lambda: data["value"])
        received = _collect(src)
        src.reset()
        data["value"] = "b"
        src.notify()
        assert received == ["a", "b"]

    def test_raw_value_unchanged(self):
        value = object()
        src = CustomSource(lambda: value)
        received = _collect(src)
        src.reset()
        assert received[0] is value

    def test_destroy_drops_getter(self):
        src = CustomSource(lambda: "a")
        received = _collect(src)
        src.destroy()
        src.reset()
        src.notify()
        assert received == []
        assert src._getter is None


class TestCellSource:
    def test_forwards_changes(self):
        cell = Cell("a")
        src = CellSource(cell)
        received = _collect(src)
        cell.set("b")
        assert received == ["b"]

    def test_reset_publishes_current(self):
        cell = Cell("a")
        src = CellSource(cell)
        received = _collect(src)
        src.reset()
        assert received == ["a"]

    def test_destroy_detaches_from_cell(self):
        cell = Cell("a")
        src = CellSource(cell)
        received = _collect(src)
        src.destroy()
        cell.set("b")
        src.reset()
        assert received == []
        assert len(cell._changes) == 0


class TestBaseSource:
    def test_abstract_reset_raises(self):
        with pytest.raises(NotImplementedError):
            Source().reset()

    def test_abstract_destroy_raises(self):
        with pytest.raises(NotImplementedError):
            Source().destroy()
