"""Closures and upvalue references.

A closure pairs a code body with positional upvalue slots. Compiling a body
rewrites every symbol naming a parameter into an UpvalueRef(index, name), so
that at call time arguments are found by position instead of by name.

Closures are immutable: calling one goes through `bind`, which returns a new
closure holding that call's arguments. A closure stored in the global table
can be invoked any number of times without cloning it first.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

from nlisp import Atom, AtomList
from nlisp.types.atom import is_equal
from nlisp.types.nil import Nil
from nlisp.types.symbol import Symbol


@dataclass(frozen=True)
class UpvalueRef:
    """Position `index` in the owning closure's upvalue slots."""

    index: int
    name: str

    def __repr__(self) -> str:
        return f"UpvalueRef({self.index}, {self.name!r})"


def upvalueize_symbols(code: AtomList, upvalue_names: Sequence[str]) -> AtomList:
    """Replace each symbol naming an upvalue with its UpvalueRef, in every nested list."""
    # First declaration wins on duplicated names
    indexes: dict[str, int] = {}
    for i, name in enumerate(upvalue_names):
        indexes.setdefault(name, i)

    def rewrite(atoms: AtomList) -> AtomList:
        out = []
        for atom in atoms:
            if isinstance(atom, Symbol) and atom.name in indexes:
                out.append(UpvalueRef(indexes[atom.name], atom.name))
            elif isinstance(atom, tuple):
                out.append(rewrite(atom))
            else:
                out.append(atom)
        return tuple(out)

    return rewrite(code)


class Closure:
    """A code body plus optional upvalue slots (None for a thin closure)."""

    __slots__ = ("upvalues", "code")

    def __init__(self, upvalues: Optional[AtomList], code: AtomList):
        self.upvalues: Optional[AtomList] = upvalues
        self.code: AtomList = code

    @classmethod
    def compile(cls, code: AtomList, upvalue_names: Sequence[str]) -> Closure:
        """Build a Closure from a code list and the names of its upvalues."""
        if not upvalue_names:
            return cls.compile_thin(code)

        # Slots hold their own names until a call binds them
        placeholders = tuple(Symbol(name) for name in upvalue_names)
        return cls(placeholders, upvalueize_symbols(tuple(code), upvalue_names))

    @classmethod
    def compile_thin(cls, code: AtomList) -> Closure:
        """Create a thin Closure with no upvalue."""
        return cls(None, tuple(code))

    def resolve(self, atom: Atom) -> Atom:
        """Substitute an UpvalueRef with its slot value; other atoms pass through."""
        if isinstance(atom, UpvalueRef):
            return self.resolve_ref(atom)
        return atom

    def resolve_ref(self, ref: UpvalueRef) -> Atom:
        if self.upvalues is not None and 0 <= ref.index < len(self.upvalues):
            return self.upvalues[ref.index]
        return Nil

    def bind(self, params: AtomList) -> Closure:
        """Return a per-call closure whose slots hold `params`, positionally.

        Slots without a matching parameter keep their current value. The
        receiver is left untouched.
        """
        if self.upvalues is None:
            return self
        slots = tuple(
            params[i] if i < len(params) else upvalue
            for i, upvalue in enumerate(self.upvalues)
        )
        return Closure(slots, self.code)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Closure):
            return False
        if (self.upvalues is None) != (other.upvalues is None):
            return False
        if self.upvalues is not None and not is_equal(self.upvalues, other.upvalues):
            return False
        return is_equal(self.code, other.code)

    __hash__ = None

    def __repr__(self) -> str:
        return f"Closure(upvalues={self.upvalues!r}, code={self.code!r})"
