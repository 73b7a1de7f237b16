"""Tests for the postfix tokenizer and evaluator."""

import os
import sys
import unittest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from postfix_sheet.addressing import Coordinate
from postfix_sheet.cells import CellValue
from postfix_sheet.errors import BadExpression, DivisionByZero, ErrorKind
from postfix_sheet.postfix import (
    Invalid,
    Literal,
    Operator,
    Reference,
    evaluate,
    evaluate_cell,
    format_tokens,
    tokenize,
)


class TestTokenize(unittest.TestCase):
    def test_mixed(self):
        tokens = tokenize("A0 3 *")
        self.assertEqual(tokens, [
            Reference("A0", Coordinate(0, 0)),
            Literal(3),
            Operator("*"),
        ])

    def test_signed_literals(self):
        self.assertEqual(tokenize("-3 +4"), [Literal(-3), Literal(4)])

    def test_bare_sign_is_operator(self):
        self.assertEqual(tokenize("- +"), [Operator("-"), Operator("+")])

    def test_invalid(self):
        self.assertEqual(tokenize("1 x A0B"), [Literal(1), Invalid("x"), Invalid("A0B")])

    def test_whitespace(self):
        self.assertEqual(tokenize("  1\t2   + "), [Literal(1), Literal(2), Operator("+")])
        self.assertEqual(tokenize(""), [])

    def test_format(self):
        self.assertEqual(format_tokens(tokenize("B2  B2 *")), "B2 B2 *")


class TestEvaluate(unittest.TestCase):
    def test_addition(self):
        self.assertEqual(evaluate("3 4 +"), 7)

    def test_operand_order(self):
        self.assertEqual(evaluate("10 2 /"), 5)
        self.assertEqual(evaluate("7 2 -"), 5)
        self.assertEqual(evaluate("2 7 -"), -5)

    def test_longer_expressions(self):
        self.assertEqual(evaluate("2 3 4 * +"), 14)
        self.assertEqual(evaluate("5 1 2 + 4 * + 3 -"), 14)

    def test_single_literal(self):
        self.assertEqual(evaluate("42"), 42)
        self.assertEqual(evaluate("-8"), -8)
        self.assertEqual(evaluate("+4"), 4)

    def test_division_truncates_toward_zero(self):
        self.assertEqual(evaluate("7 2 /"), 3)
        self.assertEqual(evaluate("-7 2 /"), -3)
        self.assertEqual(evaluate("7 -2 /"), -3)
        self.assertEqual(evaluate("-7 -2 /"), 3)
        self.assertEqual(evaluate("0 5 /"), 0)

    def test_division_by_zero(self):
        with self.assertRaises(DivisionByZero):
            evaluate("5 0 /")
        with self.assertRaises(DivisionByZero):
            evaluate("5 1 1 - /")

    def test_leftover_operands(self):
        with self.assertRaises(BadExpression):
            evaluate("1 2")

    def test_missing_operands(self):
        with self.assertRaises(BadExpression):
            evaluate("+")
        with self.assertRaises(BadExpression):
            evaluate("1 +")

    def test_empty(self):
        with self.assertRaises(BadExpression):
            evaluate("")

    def test_bad_token(self):
        for expr in ("1 x +", "3.5", "1 2 %", "1 2 ^"):
            with self.subTest(expr=expr):
                with self.assertRaises(BadExpression):
                    evaluate(expr)

    def test_unresolved_reference(self):
        with self.assertRaises(BadExpression):
            evaluate("A0 1 +")

    def test_token_sequence(self):
        self.assertEqual(evaluate([Literal(6), Literal(7), Operator("*")]), 42)


class TestEvaluateCell(unittest.TestCase):
    def test_value(self):
        self.assertEqual(evaluate_cell("3 4 +"), CellValue.integer(7))

    def test_error_kinds(self):
        self.assertEqual(evaluate_cell("5 0 /").error_kind, ErrorKind.DIVISION_BY_ZERO)
        self.assertEqual(evaluate_cell("1 2").error_kind, ErrorKind.BAD_EXPRESSION)
        self.assertTrue(evaluate_cell("+").is_error)

    def test_errors_compare_equal(self):
        self.assertEqual(evaluate_cell("5 0 /"), evaluate_cell("+"))
        self.assertEqual(evaluate_cell("+"), CellValue.error())


if __name__ == "__main__":
    unittest.main()
