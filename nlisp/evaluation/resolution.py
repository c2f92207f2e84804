"""Argument-resolution policies shared by the primitives.

The VM passes parameters to a callee unevaluated. Each primitive then picks
how much work to do on them:

- resolve_upvalues: only substitute upvalue references (used by `lambda` to
  capture the enclosing closure's arguments).
- resolve_arguments: substitute upvalues and global symbols, and optionally
  evaluate nested lists (strict primitives such as `+`).
- evaluate_atom: evaluate a single parameter (used by `if`, `global`, `neg`).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from nlisp import Atom, AtomList
from nlisp.types.closure import Closure, UpvalueRef
from nlisp.types.symbol import Symbol

if TYPE_CHECKING:
    from nlisp.evaluation.vm import Vm


def resolve_upvalues(context: Closure, atoms: AtomList) -> AtomList:
    """Replace every UpvalueRef, in every nested list, with its value in `context`."""
    return tuple(
        resolve_upvalues(context, atom) if isinstance(atom, tuple) else context.resolve(atom)
        for atom in atoms
    )


def resolve_arguments(
    vm: Vm, context: Closure, params: AtomList, evaluate_each: bool
) -> AtomList:
    """Resolve each parameter.

    - upvalues are read from `context`
    - symbols are looked up in the VM globals (unbound symbols stay symbols)
    - lists are resolved recursively then evaluated when `evaluate_each` is
      set, and left untouched otherwise

    Evaluation errors propagate.
    """
    resolved = []
    for atom in params:
        if isinstance(atom, tuple):
            if evaluate_each:
                atom = vm.evaluate(context, resolve_arguments(vm, context, atom, True))
        elif isinstance(atom, UpvalueRef):
            atom = context.resolve_ref(atom)
        elif isinstance(atom, Symbol):
            atom = vm.resolve_symbol(atom)
        resolved.append(atom)
    return tuple(resolved)


def evaluate_atom(vm: Vm, context: Closure, atom: Atom) -> Atom:
    """Resolve or evaluate one atom, depending on its type.

    - a list is shallow-resolved then evaluated as a call
    - a symbol or an upvalue is resolved
    - anything else is returned as-is
    """
    if isinstance(atom, tuple):
        return vm.evaluate(context, resolve_arguments(vm, context, atom, False))
    if isinstance(atom, Symbol):
        return vm.resolve_symbol(atom)
    if isinstance(atom, UpvalueRef):
        return context.resolve_ref(atom)
    return atom
