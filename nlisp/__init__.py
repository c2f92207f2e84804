# Core type aliases for the nlisp data model.
# Atoms are plain Python values (numpy.float32, str, tuple, bool) plus a few
# small classes from nlisp.types (Symbol, Nil, ErrorAtom, UpvalueRef, Closure,
# NativeFunction). The same values represent syntax and runtime data.
#
# Naming guidance:
# - Atom:     any single value, parsed or computed.
# - AtomList: an immutable list of atoms (a Python tuple).
# - NativeFn: signature of a primitive: (vm, context, params) -> Atom.

from typing import Any, Callable, Tuple

Atom = Any
AtomList = Tuple[Atom, ...]

NativeFn = Callable[..., Atom]
