"""Tests for ExprFrontend — tree-sitter parse of sum text to Expr trees."""

import pytest

from exprc import constants
from exprc.errors import UnsupportedSyntaxError
from exprc.expr import Const, Sum, Var, depth, evaluate
from exprc.frontend import ExprFrontend, parse_expr
from exprc.parser import Parser, ParserFactory, TreeSitterParserFactory
from tests.unit.conftest import acceptance_expr, chain_source


class TestParserFactory:
    def test_default_factory_is_tree_sitter(self):
        assert isinstance(Parser()._factory, TreeSitterParserFactory)

    def test_custom_factory_is_used(self):
        calls = []

        class RecordingFactory(ParserFactory):
            def get_parser(self, grammar):
                calls.append(grammar)
                return TreeSitterParserFactory().get_parser(grammar)

        parse_expr("1 + 2", Parser(RecordingFactory()))
        assert calls == ["python"]


class TestLowering:
    def test_integer_literal(self):
        assert parse_expr("42") == Const(42)

    def test_identifier(self):
        assert parse_expr("x") == Var("x")

    def test_sum(self):
        assert parse_expr("x + 1") == Sum(Var("x"), Const(1))

    def test_left_associative(self):
        assert parse_expr("a + b + c") == Sum(Sum(Var("a"), Var("b")), Var("c"))

    def test_parentheses_group(self):
        assert parse_expr("a + (b + c)") == Sum(Var("a"), Sum(Var("b"), Var("c")))

    def test_redundant_parentheses(self):
        assert parse_expr("((x))") == Var("x")

    def test_acceptance_expression(self):
        assert parse_expr("(x + 3) + (x + (y + 2))") == acceptance_expr()

    def test_round_trip_through_str(self):
        expr = acceptance_expr()
        assert parse_expr(str(expr)) == expr

    def test_hex_and_underscore_literals(self):
        assert parse_expr("0x10 + 1_000") == Sum(Const(16), Const(1000))

    def test_trailing_comment(self):
        assert parse_expr("x + 1  # trailing\n") == Sum(Var("x"), Const(1))

    def test_frontend_is_reusable(self):
        frontend = ExprFrontend()
        assert frontend.lower("1") == Const(1)
        assert frontend.lower("y") == Var("y")


class TestRejection:
    @pytest.mark.parametrize(
        "source",
        ["x * 2", "x - 1", "-3", "3.5", "f(x)", "x = 1", "True", "'s'", "x[0]"],
    )
    def test_unsupported_constructs(self, source):
        with pytest.raises(UnsupportedSyntaxError):
            parse_expr(source)

    def test_empty_source(self):
        with pytest.raises(UnsupportedSyntaxError, match="exactly one expression"):
            parse_expr("")

    def test_multiple_statements(self):
        with pytest.raises(UnsupportedSyntaxError, match="found 2"):
            parse_expr("x\ny")

    def test_syntax_error_reports_location(self):
        with pytest.raises(UnsupportedSyntaxError) as exc_info:
            parse_expr("(x + ")
        assert exc_info.value.location

    def test_operator_named_in_message(self):
        with pytest.raises(UnsupportedSyntaxError, match=r"\*"):
            parse_expr("x * 2")

    def test_is_value_error(self):
        with pytest.raises(ValueError):
            parse_expr("x * 2")


class TestNestingLimit:
    def test_long_chain_rejected(self):
        with pytest.raises(UnsupportedSyntaxError, match="nested deeper than") as exc_info:
            parse_expr(chain_source(2000))
        assert exc_info.value.location

    def test_deep_parentheses_rejected(self):
        levels = constants.MAX_NESTING_DEPTH + 10
        with pytest.raises(UnsupportedSyntaxError, match="nested deeper than"):
            parse_expr("(" * levels + "x" + ")" * levels)

    def test_chain_within_limit_accepted(self):
        expr = parse_expr(chain_source(200))
        assert depth(expr) == 199
        assert evaluate(expr, {}) == 200

    def test_frontend_reusable_after_rejection(self):
        frontend = ExprFrontend()
        with pytest.raises(UnsupportedSyntaxError):
            frontend.lower(chain_source(2000))
        assert frontend.lower("1 + 2") == Sum(Const(1), Const(2))
