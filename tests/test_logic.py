"""Tests for AND / OR / NOT combinators."""

import pytest

from formx import (
    Cell,
    CellSource,
    ConfigurationError,
    ConstantSource,
    and_,
    false,
    function,
    not_,
    or_,
    true,
)


def _flag(initial):
    """A predicate driven by a Cell holding a bool."""
    cell = Cell(initial)
    return cell, function(lambda values: values[0] is True, CellSource(cell))


class TestAnd:
    def test_all_true(self):
        p = and_(true(), true())
        p.reset()
        assert p.get_state() is True

    def test_one_false(self):
        p = and_(true(), false())
        p.reset()
        assert p.get_state() is False

    def test_flip_one_child(self):
        a_cell, a = _flag(True)
        b_cell, b = _flag(True)
        p = and_(a, b)
        p.reset()
        assert p.get_state() is True
        b_cell.set(False)
        assert p.get_state() is False
        b_cell.set(True)
        assert p.get_state() is True

    def test_notifies_once_per_transition(self):
        a_cell, a = _flag(False)
        b_cell, b = _flag(False)
        p = and_(a, b)
        log = []
        p.state_changes.subscribe(lambda state, node: log.append(state))
        p.reset()
        a_cell.set(True)  # still False overall
        b_cell.set(True)
        assert log == [False, True]

    def test_empty_is_true(self):
        p = and_()
        p.reset()
        assert p.get_state() is True

    def test_children_as_list(self):
        p = and_([true(), true()], true())
        p.reset()
        assert p.get_state() is True
        assert len(p.dependencies) == 3

    def test_rejects_sources(self):
        with pytest.raises(ConfigurationError):
            and_(ConstantSource(True))


class TestOr:
    def test_one_true(self):
        p = or_(false(), true())
        p.reset()
        assert p.get_state() is True

    def test_none_true(self):
        p = or_(false(), false())
        p.reset()
        assert p.get_state() is False

    def test_empty_is_false(self):
        p = or_()
        p.reset()
        assert p.get_state() is False

    def test_follows_children(self):
        a_cell, a = _flag(False)
        p = or_(a, false())
        p.reset()
        assert p.get_state() is False
        a_cell.set(True)
        assert p.get_state() is True


class TestNot:
    def test_inverts(self):
        cell, child = _flag(True)
        p = not_(child)
        p.reset()
        assert p.get_state() is (not child.get_state())
        cell.set(False)
        assert p.get_state() is True
        assert child.get_state() is False

    def test_arity(self):
        with pytest.raises(ConfigurationError):
            not_()
        with pytest.raises(ConfigurationError):
            not_(true(), false())


class TestNesting:
    def test_destroy_cascades(self):
        cell, leaf = _flag(True)
        inner = not_(leaf)
        outer = and_(inner, true())
        outer.reset()
        outer.destroy()
        assert len(inner.state_changes) == 0
        assert len(leaf.state_changes) == 0
        assert leaf.dependencies == []
        cell.set(False)
        assert outer.get_state() is False  # frozen at last state
        assert inner.get_state() is False
