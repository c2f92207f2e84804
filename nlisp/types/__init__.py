from nlisp.types.symbol import Symbol
from nlisp.types.nil import Nil, NilType
from nlisp.types.atom import (
    ErrorAtom,
    NativeFunction,
    format_atom,
    is_equal,
    is_number,
    number,
    type_name,
)
from nlisp.types.closure import Closure, UpvalueRef

__all__ = [
    "Symbol",
    "Nil",
    "NilType",
    "ErrorAtom",
    "NativeFunction",
    "format_atom",
    "is_equal",
    "is_number",
    "number",
    "type_name",
    "Closure",
    "UpvalueRef",
]
