"""Tests for the declarative expression parser."""

import pytest

from formx import ParseError, parse
from formx.expression import Call, ListExpr, Literal, Name


class TestLiterals:
    def test_numbers(self):
        assert parse("42") == Literal(42)
        assert parse("-1.5") == Literal(-1.5)

    def test_strings(self):
        assert parse('"a b"') == Literal("a b")
        assert parse("'single'") == Literal("single")

    def test_escapes(self):
        assert parse(r'"^\\d+$"') == Literal("^\\d+$")
        assert parse(r'"say \"hi\""') == Literal('say "hi"')
        assert parse(r'"tab\there"') == Literal("tab\there")

    def test_keywords(self):
        assert parse("true") == Literal(True)
        assert parse("false") == Literal(False)
        assert parse("null") == Literal(None)


class TestStructure:
    def test_name(self):
        assert parse("regex.email") == Name(("regex", "email"))

    def test_call(self):
        assert parse("range(1, 10, constant('5'))") == Call(
            Name(("range",)),
            (Literal(1), Literal(10), Call(Name(("constant",)), (Literal("5"),))),
        )

    def test_empty_call(self):
        assert parse("TRUE()") == Call(Name(("TRUE",)), ())

    def test_list(self):
        assert parse('["root", "admin"]') == ListExpr((Literal("root"), Literal("admin")))

    def test_trailing_comma(self):
        assert parse("all(a, b,)") == Call(Name(("all",)), (Name(("a",)), Name(("b",))))

    def test_multiline_with_comments(self):
        text = """
        validator(
            # the email field
            pattern(regex.email, email),
            submit
        )
        """
        node = parse(text)
        assert isinstance(node, Call)
        assert node.name.dotted == "validator"
        assert len(node.args) == 2

    def test_hash_inside_string(self):
        assert parse('element("#email")') == Call(Name(("element",)), (Literal("#email"),))


class TestErrors:
    @pytest.mark.parametrize(
        "text",
        [
            "",
            "validator(",
            "a b",
            "f(a b)",
            "[1, 2",
            '"unterminated',
            "f(@)",
            "regex.",
            "1.2.3",
        ],
    )
    def test_malformed(self, text):
        with pytest.raises(ParseError):
            parse(text)

    def test_position_reported(self):
        with pytest.raises(ParseError) as exc:
            parse("f(@)")
        assert exc.value.position == 2
        assert "position 2" in str(exc.value)

    def test_is_value_error(self):
        with pytest.raises(ValueError):
            parse(")")
