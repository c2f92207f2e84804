from __future__ import annotations

from enum import Enum


class ErrorKind(Enum):
    """Kinds of evaluation failure, as carried by an ErrorAtom."""

    NON_EVALUABLE = "NonEvaluable"
    NOT_A_FUNCTION = "NotAFunction"
    INVALID_USAGE = "InvalidUsage"
    NOT_A_SYMBOL = "NotASymbol"
    RECURSION_LIMIT = "RecursionLimit"


class NlispError(Exception):
    """ Base class for all nlisp errors"""
    pass


# -------------------------------
# Evaluation errors
# -------------------------------
class VmError(NlispError):
    """ Raised when a form cannot be evaluated"""
    kind: ErrorKind


class NonEvaluable(VmError):
    """ Raised when an empty list is evaluated"""
    kind = ErrorKind.NON_EVALUABLE


class NotAFunction(VmError):
    """ Raised when the head of a list does not resolve to a callable"""
    kind = ErrorKind.NOT_A_FUNCTION


class InvalidUsage(VmError):
    """ Raised when a primitive receives missing or malformed arguments"""
    kind = ErrorKind.INVALID_USAGE


class NotASymbol(VmError):
    """ Raised when a primitive needs a symbol and gets something else"""
    kind = ErrorKind.NOT_A_SYMBOL


class RecursionLimitExceeded(VmError):
    """ Raised when nested evaluation goes deeper than the VM allows"""
    kind = ErrorKind.RECURSION_LIMIT


# -------------------------------
# Parse errors
# -------------------------------
class ParseError(NlispError):
    """ Raised when source text is not a valid sequence of atoms"""


class InvalidCharacter(ParseError):
    """ Raised on a character that cannot start or continue the current token"""

    def __init__(self, position: int, char: str | None = None):
        detail = f" {char!r}" if char is not None else ""
        super().__init__(f"Invalid character{detail} at {position}")
        self.position = position


class NumberError(ParseError):
    """ Raised when a numeric token cannot be converted to a number"""

    def __init__(self, cause: Exception, position: int):
        super().__init__(f"Invalid number at {position}: {cause}")
        self.cause = cause
        self.position = position


class IncompleteString(ParseError):
    """ Raised when the input ends inside a string literal"""


class IncompleteList(ParseError):
    """ Raised when the input ends before a list is closed"""


class NestingTooDeep(ParseError):
    """ Raised when lists are nested deeper than the reader allows"""

    def __init__(self, position: int, limit: int):
        super().__init__(f"List at {position} nested deeper than {limit} levels")
        self.position = position
        self.limit = limit
