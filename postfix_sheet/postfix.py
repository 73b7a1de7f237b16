"""
Postfix Evaluator
=================
Tokenizes and evaluates whitespace-separated postfix (RPN) integer
expressions such as ``"3 4 + 2 *"``.

Formulas are kept as token sequences rather than text: a reference token is
replaced by a :class:`Literal` during resolution and the sequence is then
evaluated directly, with no round trip through decimal text.
"""

import operator
import re
from dataclasses import dataclass
from typing import Iterable, List, Sequence, Union

from .addressing import Coordinate, decode, is_address
from .cells import CellValue
from .errors import BadExpression, DivisionByZero, SheetError

_INTEGER_REGEX = re.compile(r'^[+-]?[0-9]+$')


@dataclass(frozen=True)
class Operator:
    symbol: str

    def __str__(self):
        return self.symbol


@dataclass(frozen=True)
class Literal:
    value: int

    def __str__(self):
        return str(self.value)


@dataclass(frozen=True)
class Reference:
    address: str
    coord: Coordinate

    def __str__(self):
        return self.address


@dataclass(frozen=True)
class Invalid:
    """A token that is neither operator, integer nor address."""
    text: str

    def __str__(self):
        return self.text


Token = Union[Operator, Literal, Reference, Invalid]


def _divide(left: int, right: int) -> int:
    if right == 0:
        raise DivisionByZero(f"Division of {left} by zero")
    quotient = abs(left) // abs(right)
    return quotient if (left < 0) == (right < 0) else -quotient


OPERATORS = {
    '+': operator.add,
    '-': operator.sub,
    '*': operator.mul,
    '/': _divide,
}


def classify_token(text: str) -> Token:
    """Turn one whitespace-delimited piece of text into a :class:`Token`."""
    if text in OPERATORS:
        return Operator(text)
    if _INTEGER_REGEX.match(text):
        return Literal(int(text))
    if is_address(text):
        return Reference(text, decode(text))
    return Invalid(text)


def tokenize(expression: str) -> List[Token]:
    return [classify_token(piece) for piece in expression.split()]


def format_tokens(tokens: Iterable[Token]) -> str:
    return " ".join(str(t) for t in tokens)


def evaluate(expression: Union[str, Sequence[Token]]) -> int:
    """Evaluate a postfix expression and return its integer result.

    The first operand popped is the right-hand side, so ``"10 2 /"`` is
    ``10 / 2``. Division truncates toward zero.

    Raises:
        BadExpression: operator without two operands, a token that is not an
            operator or integer, or anything other than exactly one value
            left on the stack at the end.
        DivisionByZero: ``/`` with a zero right-hand operand.
    """
    tokens = tokenize(expression) if isinstance(expression, str) else expression
    stack: List[int] = []
    for token in tokens:
        if isinstance(token, Operator):
            if len(stack) < 2:
                raise BadExpression(f"Operator '{token}' needs two operands")
            right = stack.pop()
            left = stack.pop()
            stack.append(OPERATORS[token.symbol](left, right))
        elif isinstance(token, Literal):
            stack.append(token.value)
        else:
            raise BadExpression(f"Unexpected token '{token}'")
    if len(stack) != 1:
        raise BadExpression(f"Expression left {len(stack)} operands on the stack")
    return stack[0]


def evaluate_cell(expression: Union[str, Sequence[Token]]) -> CellValue:
    """Evaluate *expression*, folding any failure into an error cell."""
    try:
        return CellValue.integer(evaluate(expression))
    except SheetError as e:
        return CellValue.error(e.kind)
