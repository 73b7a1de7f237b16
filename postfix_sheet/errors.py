"""
Error Taxonomy
==============
Every failure inside the evaluation core is one of five kinds. All of them
surface to callers as the single ``Error`` cell state; the kinds exist so
that logs and tests can tell them apart.
"""

from enum import Enum


class ErrorKind(Enum):
    MALFORMED_ADDRESS = "malformed_address"
    CYCLIC_REFERENCE = "cyclic_reference"
    UNDEFINED_REFERENCE = "undefined_reference"
    BAD_EXPRESSION = "bad_expression"
    DIVISION_BY_ZERO = "division_by_zero"


class SheetError(Exception):
    """Base class for evaluation failures of a single cell."""
    kind: ErrorKind = None


class MalformedAddress(SheetError, ValueError):
    kind = ErrorKind.MALFORMED_ADDRESS


class CyclicReference(SheetError):
    kind = ErrorKind.CYCLIC_REFERENCE


class UndefinedReference(SheetError):
    kind = ErrorKind.UNDEFINED_REFERENCE


class BadExpression(SheetError):
    kind = ErrorKind.BAD_EXPRESSION


class DivisionByZero(SheetError, ZeroDivisionError):
    kind = ErrorKind.DIVISION_BY_ZERO
