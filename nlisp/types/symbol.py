from __future__ import annotations
import sys
from weakref import WeakValueDictionary


class Symbol:
    """A name atom.

    There is one live Symbol per name, so the reader, closure placeholders
    and upvalue rewriting all share instances and compare by identity first.
    """

    __slots__ = ("name", "__weakref__")

    _table: WeakValueDictionary = WeakValueDictionary()

    def __new__(cls, name: str) -> Symbol:
        symbol = cls._table.get(name)
        if symbol is None:
            symbol = super().__new__(cls)
            # Interned: symbols never keep a reference to the source text
            symbol.name = sys.intern(name)
            cls._table[symbol.name] = symbol
        return symbol

    def __eq__(self, other: object) -> bool:
        return self is other or (isinstance(other, Symbol) and self.name == other.name)

    def __hash__(self) -> int:
        return hash(self.name)

    def __reduce__(self):
        return Symbol, (self.name,)

    def __repr__(self):
        return f"Symbol({self.name!r})"

    def __str__(self):
        return self.name
