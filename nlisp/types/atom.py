"""Atom helpers: numbers, reified errors, native functions, equality and rendering.

Atoms form a closed set of Python values:

    Symbol          -> nlisp.types.symbol.Symbol
    Number          -> numpy.float32
    String          -> str
    List            -> tuple of atoms
    Bool            -> bool
    Nil             -> nlisp.types.nil.Nil
    Error           -> ErrorAtom
    UpvalueRef      -> nlisp.types.closure.UpvalueRef
    Closure         -> nlisp.types.closure.Closure
    NativeFunction  -> NativeFunction
"""

from __future__ import annotations

from dataclasses import dataclass
from io import StringIO

import numpy as np

from nlisp import Atom, NativeFn
from nlisp.errors import ErrorKind, VmError
from nlisp.types.nil import NilType
from nlisp.types.symbol import Symbol


def number(value) -> np.float32:
    """Build a Number atom (single precision)."""
    return np.float32(value)


def is_number(atom: Atom) -> bool:
    return isinstance(atom, np.float32)


@dataclass(frozen=True)
class ErrorAtom:
    """An evaluation error captured as a value (see the `eval` primitive)."""

    kind: ErrorKind

    @classmethod
    def from_error(cls, err: VmError) -> ErrorAtom:
        return cls(err.kind)

    def __repr__(self) -> str:
        return f"Error({self.kind.value})"


class NativeFunction:
    """A builtin callable invoked with (vm, context, params).

    Equality contract: every NativeFunction equals every other NativeFunction,
    whatever Python function it wraps. `=` relies on this.
    """

    __slots__ = ("name", "fn")

    def __init__(self, name: str, fn: NativeFn):
        self.name = name
        self.fn = fn

    def __call__(self, vm, context, params):
        return self.fn(vm, context, params)

    def __eq__(self, other: object) -> bool:
        return isinstance(other, NativeFunction)

    def __hash__(self) -> int:
        return hash(NativeFunction)

    def __repr__(self) -> str:
        return f"NativeFunction({self.name})"


def is_equal(a: Atom, b: Atom) -> bool:
    """Structural equality: same variant, equal payload, lists element-wise."""
    if a is b:
        # identity short-cut, but NaN is never equal to itself
        return not (is_number(a) and np.isnan(a))
    if type(a) is not type(b):
        return False
    if isinstance(a, tuple):
        if len(a) != len(b):
            return False
        return all(is_equal(x, y) for x, y in zip(a, b))
    return bool(a == b)


def type_name(atom: Atom) -> str:
    """Name of the atom's variant, as returned by the `type` primitive."""
    from nlisp.types.closure import Closure, UpvalueRef

    if isinstance(atom, Symbol):
        return "Symbol"
    if is_number(atom):
        return "Number"
    if isinstance(atom, str):
        return "String"
    if isinstance(atom, tuple):
        return "List"
    if isinstance(atom, bool):
        return "Bool"
    if isinstance(atom, NilType):
        return "Nil"
    if isinstance(atom, UpvalueRef):
        return "Upvalue"
    if isinstance(atom, Closure):
        return "Closure"
    if isinstance(atom, NativeFunction):
        return "NativeFunction"
    if isinstance(atom, ErrorAtom):
        return f"Error:{atom.kind.value}"
    raise TypeError(f"Not an atom: {atom!r}")


def _write_atom(buffer: StringIO, atom: Atom) -> None:
    from nlisp.types.closure import Closure, UpvalueRef

    if isinstance(atom, tuple):
        buffer.write("(")
        for i, item in enumerate(atom):
            if i:
                buffer.write(" ")
            _write_atom(buffer, item)
        buffer.write(")")
    elif isinstance(atom, str):
        buffer.write(f'"{atom}"')
    elif isinstance(atom, bool):
        buffer.write("true" if atom else "false")
    elif isinstance(atom, UpvalueRef):
        buffer.write(f"#<upvalue {atom.index} {atom.name}>")
    elif isinstance(atom, Closure):
        buffer.write("#<closure ")
        _write_atom(buffer, atom.upvalues if atom.upvalues is not None else ())
        buffer.write(" ")
        _write_atom(buffer, atom.code)
        buffer.write(">")
    elif isinstance(atom, NativeFunction):
        buffer.write(f"#<native {atom.name}>")
    elif isinstance(atom, ErrorAtom):
        buffer.write(f"#<error {atom.kind.value}>")
    else:
        # Symbol, Number, Nil
        buffer.write(str(atom) if not isinstance(atom, NilType) else "nil")


def format_atom(atom: Atom) -> str:
    """Lisp-style text for an atom."""
    with StringIO() as buffer:
        _write_atom(buffer, atom)
        return buffer.getvalue()
