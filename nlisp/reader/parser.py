"""
  nlisp reader

A single-pass state machine over character positions. Each character either
extends the token being read or closes it:

    - symbols  -> Symbol
    - numbers  -> numpy.float32
    - strings  -> str (no escape processing)
    - lists    -> tuple, built by re-reading the interior of the parentheses

A list is first skipped over as a whole (tracking nesting depth, and whether
we are inside a string so that parentheses there are ignored); once its
closing parenthesis is found the interior is parsed recursively. The
recursive pass reads the same text between bounds, so error positions are
offsets into the original source. Each recursive pass is one nesting level;
lists nested deeper than the configured limit raise NestingTooDeep.
"""

from __future__ import annotations

from enum import Enum, auto
from string import punctuation

from nlisp import AtomList
from nlisp.errors import (
    IncompleteList,
    IncompleteString,
    InvalidCharacter,
    NestingTooDeep,
    NumberError,
)
from nlisp.config import get_max_nesting
from nlisp.logging_config import get_logger
from nlisp.types.atom import number
from nlisp.types.symbol import Symbol

logger = get_logger(__name__)

_PUNCTUATION = frozenset(punctuation) - {"(", ")"}
# `"` opens a string and `.` a number, but both may appear inside a symbol
_SYMBOL_START = _PUNCTUATION - {'"', "."}


class ReadingState(Enum):
    NONE = auto()  # looking for the next atom
    SYMBOL = auto()  # looking for whitespace
    NUMBER = auto()  # looking for whitespace
    STRING = auto()  # looking for the closing "
    LIST = auto()  # looking for the matching )


def _is_symbol_start(c: str) -> bool:
    return c.isalpha() or c in _SYMBOL_START


def _is_symbol_char(c: str) -> bool:
    return c.isalnum() or c in _PUNCTUATION


def _is_number_char(c: str) -> bool:
    return c.isnumeric() or c == "."


def _read_number(text: str, start: int, end: int, pos: int):
    try:
        return number(float(text[start:end]))
    except (ValueError, OverflowError) as e:
        raise NumberError(e, pos) from e


def _parse(text: str, begin: int, end: int, level: int, max_nesting: int) -> AtomList:
    atoms = []
    state = ReadingState.NONE
    start = 0
    # List bookkeeping: count of unclosed nested parens, and string toggle
    depth = 0
    in_string = False

    for pos in range(begin, end):
        c = text[pos]

        if state is ReadingState.NONE:
            if c == '"':
                state, start = ReadingState.STRING, pos
            elif _is_symbol_start(c):
                state, start = ReadingState.SYMBOL, pos
            elif _is_number_char(c):
                state, start = ReadingState.NUMBER, pos
            elif c == "(":
                state, start, depth, in_string = ReadingState.LIST, pos, 0, False
            elif c.isspace():
                pass
            else:
                raise InvalidCharacter(pos, c)

        elif state is ReadingState.SYMBOL:
            if c.isspace():
                atoms.append(Symbol(text[start:pos]))
                state = ReadingState.NONE
            elif not _is_symbol_char(c):
                raise InvalidCharacter(pos, c)

        elif state is ReadingState.NUMBER:
            if c.isspace():
                atoms.append(_read_number(text, start, pos, pos))
                state = ReadingState.NONE
            elif not _is_number_char(c):
                raise InvalidCharacter(pos, c)

        elif state is ReadingState.STRING:
            if c == '"':
                atoms.append(text[start + 1:pos])
                state = ReadingState.NONE

        else:
            if c == '"':
                in_string = not in_string
            elif in_string:
                pass
            elif c == "(":
                depth += 1
            elif c == ")":
                if depth == 0:
                    if level >= max_nesting:
                        raise NestingTooDeep(start, max_nesting)
                    atoms.append(_parse(text, start + 1, pos, level + 1, max_nesting))
                    state = ReadingState.NONE
                else:
                    depth -= 1

    # Flush the trailing token, if any
    if state is ReadingState.SYMBOL:
        atoms.append(Symbol(text[start:end]))
    elif state is ReadingState.NUMBER:
        atoms.append(_read_number(text, start, end, end))
    elif state is ReadingState.STRING:
        raise IncompleteString(f"Unterminated string starting at {start}")
    elif state is ReadingState.LIST:
        raise IncompleteList(f"Unclosed list starting at {start}")

    return tuple(atoms)


def parse(text: str) -> AtomList:
    """Parse source text into the tuple of its top-level atoms.

    Raises a ParseError subclass (InvalidCharacter, NumberError,
    IncompleteString, IncompleteList, NestingTooDeep) on malformed input.
    """
    logger.debug("Parsing %d characters", len(text))
    atoms = _parse(text, 0, len(text), 0, get_max_nesting())
    logger.debug("Parsed %d top-level atoms", len(atoms))
    return atoms
