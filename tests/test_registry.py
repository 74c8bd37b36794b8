"""Tests for Registry and the expression builder."""

import logging

import pytest

from formx import (
    Cell,
    ConfigurationError,
    Connector,
    Debouncer,
    bound,
    build,
    default_registry,
    from_string,
    parse,
)


class TestRegistry:
    def test_resolve_dotted(self):
        reg = default_registry()
        assert reg.resolve("regex.email").search("a@example.com")
        assert reg.resolve(("predicate", "range")) is reg["range"]

    def test_unknown_name(self):
        with pytest.raises(ConfigurationError, match="nope"):
            default_registry().resolve("nope")
        with pytest.raises(ConfigurationError, match="regex.nope"):
            default_registry().resolve("regex.nope")

    def test_extend_shadows_without_mutating(self):
        base = default_registry()
        extended = base.extend({"x": 1}, constant="shadowed")
        assert extended["x"] == 1
        assert extended["constant"] == "shadowed"
        assert "x" not in base
        assert base["constant"] != "shadowed"


class TestBuild:
    def test_validator_from_text(self):
        age = Cell("")
        log = []
        form = build(
            "validator(range(18, 120, age), show)",
            default_registry().extend(age=bound(age), show=log.append),
        )
        assert isinstance(form, Connector)
        form.reset()
        age.set("30")
        age.set("3")
        assert log == [False, True, False]

    def test_nested_logic_and_lists(self):
        user = Cell("bob")
        log = []
        form = from_string(
            'validator([not(exclude(["root", "admin"], user)), TRUE()], all([out, alt(out)]))',
            user=bound(user),
            out=log.append,
        )
        form.reset()
        # not(exclude(...)) is False for "bob"
        assert log == [False, True]
        user.set("ADMIN")
        assert log == [False, True, True, False]

    def test_stock_pattern(self):
        email = Cell("someone@example.com")
        log = []
        form = from_string(
            "validator(pattern(regex.email, email), out)", email=bound(email), out=log.append
        )
        form.reset()
        assert log == [True]

    def test_debounce_in_milliseconds(self):
        action = build("debounce(250, func(out))", default_registry().extend(out=print))
        assert isinstance(action, Debouncer)
        assert action.delay == 0.25

    def test_accepts_parsed_tree(self):
        node = parse("constant(1)")
        src = build(node)
        received = []
        src.changes.subscribe(received.append)
        src.reset()
        assert received == [1]

    def test_namespaced_constructors(self):
        p = build("predicate.equal(source.constant(1), constant(1))")
        p.reset()
        assert p.get_state() is True

    def test_unknown_function(self):
        with pytest.raises(ConfigurationError):
            build("nope(1)")

    def test_not_callable(self):
        with pytest.raises(ConfigurationError, match="not callable"):
            build("regex(1)")

    def test_wrong_arity_is_configuration_error(self):
        with pytest.raises(ConfigurationError):
            build("not(TRUE(), FALSE())")
        with pytest.raises(ConfigurationError):
            build("alt()")

    def test_bad_arguments_fail_at_build(self):
        with pytest.raises(ConfigurationError):
            build('pattern(5, constant("x"))')
        with pytest.raises(ConfigurationError):
            build("validator(TRUE(), 'print')")
        with pytest.raises(ConfigurationError):
            build("alt(1)")

    def test_no_code_execution(self):
        with pytest.raises(ConfigurationError):
            build("__import__('os')")

    def test_logs_build(self, caplog):
        with caplog.at_level(logging.DEBUG, logger="formx.registry"):
            build("TRUE()")
        assert "Built" in caplog.text
